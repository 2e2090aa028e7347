"""
Hetzner Robot Client - Failover IP Domain

Failover addresses can be routed to any server of the account. Routing is
switched with ``update`` and removed with ``delete``.
"""

from typing import List, Optional
from urllib.parse import quote

from ..core import RobotClient
from ..core.models import ProviderModel
from ..shared.constants import API_FAILOVER


class Failover(ProviderModel):
    ip: str
    netmask: str = ""
    server_ip: Optional[str] = None
    server_ipv6_net: Optional[str] = None
    server_number: int = 0
    # None while the address is unrouted
    active_server_ip: Optional[str] = None


def _failover_path(ip: str) -> str:
    return f"{API_FAILOVER}/{quote(ip, safe='')}"


class FailoverService:
    """Failover IP operations."""

    def __init__(self, client: RobotClient):
        self.client = client

    async def list(self) -> List[Failover]:
        entries = await self.client.get_wrapped_list(
            API_FAILOVER, "failover", List[Failover], operation="failover_list"
        )
        return entries or []

    async def get(self, ip: str) -> Failover:
        return await self.client.get(_failover_path(ip), Failover, operation="failover_get")

    async def update(self, ip: str, active_server_ip: str) -> Failover:
        """Route the failover address to the server owning ``active_server_ip``."""
        return await self.client.post(
            _failover_path(ip),
            {"active_server_ip": active_server_ip},
            Failover,
            operation="failover_update",
        )

    async def delete(self, ip: str) -> None:
        await self.client.delete(_failover_path(ip), operation="failover_delete")
