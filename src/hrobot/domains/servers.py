"""
Hetzner Robot Client - Server Domain

Listing dedicated servers and renaming them.
"""

from typing import List, Optional

from pydantic import field_validator

from ..core import RobotClient
from ..core.models import ProviderModel, TrafficSize
from ..shared.constants import API_SERVER


class Subnet(ProviderModel):
    ip: str
    mask: str


class Server(ProviderModel):
    """A dedicated server as listed by the webservice."""

    server_ip: Optional[str] = None
    server_ipv6_net: Optional[str] = None
    server_number: int
    server_name: str = ""
    product: str = ""
    dc: str = ""
    traffic: Optional[TrafficSize] = None
    status: str = ""
    cancelled: bool = False
    paid_until: str = ""
    ip: List[str] = []
    subnet: List[Subnet] = []

    @field_validator("traffic", mode="before")
    @classmethod
    def parse_traffic(cls, v):
        if v is None:
            return None
        return TrafficSize.from_provider(v)

    @field_validator("ip", "subnet", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return v or []


class ServerService:
    """Server operations."""

    def __init__(self, client: RobotClient):
        self.client = client

    async def list(self) -> List[Server]:
        servers = await self.client.get_wrapped_list(
            API_SERVER, "server", List[Server], operation="server_list"
        )
        return servers or []

    async def get(self, server_id: int) -> Server:
        return await self.client.get(f"{API_SERVER}/{server_id}", Server, operation="server_get")

    async def set_name(self, server_id: int, name: str) -> Server:
        return await self.client.post(
            f"{API_SERVER}/{server_id}",
            {"server_name": name},
            Server,
            operation="server_set_name",
        )
