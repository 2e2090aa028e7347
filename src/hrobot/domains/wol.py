"""
Hetzner Robot Client - Wake on LAN Domain
"""

from typing import Optional

from ..core import RobotClient
from ..core.models import ProviderModel
from ..shared.constants import API_WOL


class WOLResult(ProviderModel):
    server_ip: Optional[str] = None
    server_ipv6_net: Optional[str] = None
    server_number: int = 0


class _WOLEnvelope(ProviderModel):
    # "wol" is not one of the shared envelope keys
    wol: WOLResult


class WOLService:
    """Wake on LAN operations."""

    def __init__(self, client: RobotClient):
        self.client = client

    async def send(self, server_id: int) -> Optional[WOLResult]:
        """Send a Wake on LAN packet to the server."""
        envelope = await self.client.post(
            f"{API_WOL}/{server_id}", target=_WOLEnvelope, operation="wol_send"
        )
        return envelope.wol if envelope else None
