"""
Hetzner Robot Client - Reset Domain
"""

from enum import Enum
from typing import List, Optional, Union

from ..core import RobotClient
from ..core.models import ProviderModel
from ..shared.constants import API_RESET


class ResetType(str, Enum):
    SOFTWARE = "sw"
    HARDWARE = "hw"
    POWER = "power"
    POWER_LONG = "power_long"
    MANUAL = "man"


class Reset(ProviderModel):
    server_ip: Optional[str] = None
    server_ipv6_net: Optional[str] = None
    server_number: int = 0
    # Available reset types on GET, the executed type after POST
    type: Union[List[str], str] = []
    operating_status: Optional[str] = None


class ResetService:
    """Server reset operations."""

    def __init__(self, client: RobotClient):
        self.client = client

    async def get(self, server_id: int) -> Reset:
        return await self.client.get(f"{API_RESET}/{server_id}", Reset, operation="reset_get")

    async def execute(self, server_id: int, reset_type: Union[ResetType, str]) -> Reset:
        value = reset_type.value if isinstance(reset_type, ResetType) else reset_type
        return await self.client.post(
            f"{API_RESET}/{server_id}", {"type": value}, Reset, operation="reset_execute"
        )
