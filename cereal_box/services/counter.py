from typing import Optional

from cereal_box.database import DatabaseGateway
from cereal_box.schemas import VisitorSnapshot


class VisitorCounterService:
    """Service for visitor counter operations."""

    def __init__(self, gateway: DatabaseGateway):
        self.gateway = gateway

    async def record_visit(self) -> Optional[VisitorSnapshot]:
        """Count one visit. Returns None while the database is unavailable."""
        if not self.gateway.connected:
            return None
        return await self.gateway.increment_and_fetch()
