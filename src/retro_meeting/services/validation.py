"""
Input validation for mutations

Schemas are pydantic models. Failures are collected per field and raised as
a single ValidationError so the client can show every message at once.
"""
import logging
import mimetypes
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ValidationError as PydanticValidationError, field_validator
from pydantic_core import PydanticCustomError

from ..config import config
from ..exceptions import ValidationError, handle_schema_errors

logger = logging.getLogger(__name__)

ORG_NAME_MIN = 2
ORG_NAME_MAX = 100
TEAM_NAME_MIN = 2
TEAM_NAME_MAX = 50


def _check_org_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise PydanticCustomError("org_name", "Your new org needs a name!")
    if len(value) < ORG_NAME_MIN:
        raise PydanticCustomError("org_name", "C’mon, you call that an organization name?")
    if len(value) > ORG_NAME_MAX:
        raise PydanticCustomError("org_name", "That isn’t a very memorable name, now is it?")
    return value


class UpdateOrgSchema(BaseModel):
    """The updated org: the id and at least one other field"""
    id: str
    name: Optional[str] = None
    picture: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_org_name(value)

    @field_validator("picture")
    @classmethod
    def check_picture(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        parsed = urlparse(value.strip())
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise PydanticCustomError("picture", "That picture url doesn’t look quite right")
        return value.strip()


class NewOrgSchema(BaseModel):
    org_name: str
    team_name: str

    @field_validator("org_name")
    @classmethod
    def check_org_name(cls, value: str) -> str:
        return _check_org_name(value)

    @field_validator("team_name")
    @classmethod
    def check_team_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError("team_name", "Your new team needs a name!")
        if len(value) < TEAM_NAME_MIN:
            raise PydanticCustomError("team_name", "C’mon, you call that a team name?")
        if len(value) > TEAM_NAME_MAX:
            raise PydanticCustomError("team_name", "That isn’t a very memorable name, now is it?")
        return value


def _field_errors(exc: PydanticValidationError) -> Dict[str, str]:
    errors = {}
    for err in exc.errors():
        field_name = ".".join(str(part) for part in err["loc"]) or "_error"
        errors.setdefault(field_name, err["msg"])
    return errors


def validate_update_org(updated_org: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate an org update

    Returns:
        The cleaned fields, including ``id``, with unset fields dropped
    """
    try:
        schema = UpdateOrgSchema(**updated_org)
    except PydanticValidationError as e:
        handle_schema_errors(_field_errors(e))

    data = schema.model_dump(exclude_none=True)
    if len(data) < 2:
        raise ValidationError("Nothing to update", details={"errors": {"_error": "Nothing to update"}})
    return data


def validate_new_org(org_name: str, team_name: str) -> NewOrgSchema:
    try:
        return NewOrgSchema(org_name=org_name, team_name=team_name)
    except PydanticValidationError as e:
        handle_schema_errors(_field_errors(e))


def validate_avatar_upload(content_type: Optional[str], content_length: int) -> str:
    """
    Check an avatar upload request

    Returns:
        The file extension (without the dot) for the content type
    """
    if not isinstance(content_type, str) or not content_type.startswith("image/"):
        raise ValidationError("file must be an image")

    extension = mimetypes.guess_extension(content_type)
    if not extension:
        raise ValidationError(f"unable to determine extension for {content_type}")

    if content_length <= 0:
        raise ValidationError("avatar image is empty")
    if content_length > config.MAX_AVATAR_FILE_SIZE:
        raise ValidationError("avatar image is too large")

    return extension.lstrip(".")
