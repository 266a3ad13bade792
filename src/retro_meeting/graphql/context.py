"""
Per-request GraphQL context
"""
from typing import List, Optional, Sequence

from fastapi import Depends
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection
from starlette.websockets import WebSocket
from strawberry.dataloader import DataLoader
from strawberry.fastapi import BaseContext

from ..auth import AuthToken, get_auth_token
from ..db import get_db
from ..db.models import RetroPhaseItem
from ..dependencies import get_gateway, get_storage
from ..logging_config import set_viewer_id
from ..services.billing_gateway import BillingGateway
from ..services.storage_provider import StorageProvider
from ..services.template_service import load_phase_items_by_team_ids


class Context(BaseContext):
    """Everything a resolver needs: the session, the viewer, providers and loaders"""

    def __init__(self, db: Session, auth_token: Optional[AuthToken],
                 gateway: BillingGateway, storage: StorageProvider):
        super().__init__()
        self.db = db
        self.auth_token = auth_token
        self.gateway = gateway
        self.storage = storage
        self.custom_phase_items_by_team_id: DataLoader[str, List[RetroPhaseItem]] = DataLoader(
            load_fn=self._load_phase_items
        )

    async def _load_phase_items(self, team_ids: Sequence[str]) -> List[List[RetroPhaseItem]]:
        return load_phase_items_by_team_ids(self.db, team_ids)

    @property
    def via_websocket(self) -> bool:
        return isinstance(self.request, WebSocket)


async def get_context(
    connection: HTTPConnection,
    db: Session = Depends(get_db),
    gateway: BillingGateway = Depends(get_gateway),
    storage: StorageProvider = Depends(get_storage),
) -> Context:
    auth_token = get_auth_token(connection)
    set_viewer_id(auth_token.user_id if auth_token else None)
    return Context(db=db, auth_token=auth_token, gateway=gateway, storage=storage)
