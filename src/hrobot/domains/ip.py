"""
Hetzner Robot Client - IP Address Domain

Single IP addresses assigned to servers: details, traffic warning limits and
cancellation of additional addresses.
"""

from typing import List, Optional
from urllib.parse import quote

from ..core import RobotClient
from ..core.models import ProviderModel
from ..shared.constants import API_IP, API_IP_CANCELLATION


class IPAddress(ProviderModel):
    ip: str
    server_ip: Optional[str] = None
    server_number: int = 0
    locked: bool = False
    separate_mac: Optional[str] = None
    traffic_warnings: bool = False
    traffic_hourly: int = 0
    traffic_daily: int = 0
    traffic_monthly: int = 0


def _ip_path(ip: str) -> str:
    return f"{API_IP}/{quote(ip, safe='')}"


class IPService:
    """IP address operations."""

    def __init__(self, client: RobotClient):
        self.client = client

    async def list(self) -> List[IPAddress]:
        ips = await self.client.get_wrapped_list(API_IP, "ip", List[IPAddress], operation="ip_list")
        return ips or []

    async def get(self, ip: str) -> IPAddress:
        return await self.client.get(_ip_path(ip), IPAddress, operation="ip_get")

    async def set_traffic_warnings(self, ip: str, enabled: bool) -> IPAddress:
        return await self.client.post(
            _ip_path(ip),
            {"traffic_warnings": enabled},
            IPAddress,
            operation="ip_traffic_warnings",
        )

    async def cancel(self, ip: str, cancellation_date: str = "now") -> None:
        """Cancel an additional IP, immediately or at ``cancellation_date`` (YYYY-MM-DD)."""
        await self.client.post(
            API_IP_CANCELLATION.format(ip=quote(ip, safe="")),
            {"cancellation_date": cancellation_date},
            operation="ip_cancel",
        )

    async def withdraw_cancellation(self, ip: str) -> None:
        await self.client.delete(
            API_IP_CANCELLATION.format(ip=quote(ip, safe="")), operation="ip_withdraw_cancellation"
        )
