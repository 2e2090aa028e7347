"""
Hetzner Robot Client - Reverse DNS Domain
"""

from typing import List, Optional
from urllib.parse import quote, urlencode

from ..core import RobotClient
from ..core.models import ProviderModel
from ..shared.constants import API_RDNS


class RDNS(ProviderModel):
    ip: str
    ptr: str = ""


def _rdns_path(ip: str) -> str:
    return f"{API_RDNS}/{quote(ip, safe='')}"


class RDNSService:
    """Reverse DNS operations."""

    def __init__(self, client: RobotClient):
        self.client = client

    async def list(self, server_ip: Optional[str] = None) -> List[RDNS]:
        """List PTR records, optionally only those of one server."""
        path = API_RDNS
        if server_ip:
            path += "?" + urlencode({"server_ip": server_ip})
        entries = await self.client.get_wrapped_list(path, "rdns", List[RDNS], operation="rdns_list")
        return entries or []

    async def get(self, ip: str) -> RDNS:
        return await self.client.get(_rdns_path(ip), RDNS, operation="rdns_get")

    async def create(self, ip: str, ptr: str) -> RDNS:
        return await self.client.put(_rdns_path(ip), {"ptr": ptr}, RDNS, operation="rdns_create")

    async def update(self, ip: str, ptr: str) -> RDNS:
        return await self.client.post(_rdns_path(ip), {"ptr": ptr}, RDNS, operation="rdns_update")

    async def delete(self, ip: str) -> None:
        await self.client.delete(_rdns_path(ip), operation="rdns_delete")
