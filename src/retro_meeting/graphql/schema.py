"""
GraphQL schema
"""
import logging
from typing import List, Optional

import strawberry
from graphql import GraphQLError
from strawberry.extensions import MaskErrors
from strawberry.types import ExecutionContext

from ..config import config
from ..exceptions import AppError
from ..logging_config import get_request_id
from .mutations import Mutation
from .queries import Query

logger = logging.getLogger(__name__)


def should_mask_error(error: GraphQLError) -> bool:
    """Hide unexpected failures outside dev; application errors are meant for the client"""
    if config.is_dev:
        return False
    original = error.original_error
    return original is not None and not isinstance(original, AppError)


class MaskUnexpectedErrors(MaskErrors):
    """MaskErrors wired to should_mask_error, built fresh for every operation"""

    def __init__(self):
        super().__init__(should_mask_error=should_mask_error)


class RetroSchema(strawberry.Schema):
    """Schema that logs resolver failures the way the REST handlers do"""

    def process_errors(self, errors: List[GraphQLError],
                       execution_context: Optional[ExecutionContext] = None) -> None:
        request_id = get_request_id()
        for error in errors:
            original = error.original_error
            if original is None:
                logger.warning(f"GraphQL request error: {error.message}", extra={"request_id": request_id})
            elif isinstance(original, AppError):
                logger.warning(
                    f"{original.code} in {error.path}: {original.message}",
                    extra={"request_id": request_id}
                )
            else:
                logger.error(
                    f"Unhandled exception in {error.path}: {original}",
                    exc_info=original,
                    extra={"request_id": request_id}
                )


schema = RetroSchema(
    query=Query,
    mutation=Mutation,
    extensions=[MaskUnexpectedErrors],
)
