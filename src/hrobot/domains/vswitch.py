"""
Hetzner Robot Client - vSwitch Domain

vSwitch management. Adding or removing servers is processed asynchronously
by the webservice; ``wait_until_ready`` blocks until every attached server
reports ``ready``.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from pydantic import field_validator

from ..core import ConditionPoller, RobotClient, encode_bracket_list
from ..core.models import ProviderModel
from ..core.poller import PollResult
from ..shared.constants import API_VSWITCH, API_VSWITCH_SERVER, STATUS_READY

logger = logging.getLogger("hrobot")


class VSwitchServer(ProviderModel):
    server_ip: Optional[str] = None
    server_ipv6_net: Optional[str] = None
    server_number: int = 0
    status: str = ""


class VSwitchSubnet(ProviderModel):
    ip: str
    mask: int
    gateway: str = ""


class CloudNetwork(ProviderModel):
    id: int
    ip: str
    mask: int
    gateway: str = ""


class VSwitchSummary(ProviderModel):
    id: int
    name: str = ""
    vlan: int = 0
    cancelled: bool = False


class VSwitch(VSwitchSummary):
    server: List[VSwitchServer] = []
    subnet: List[VSwitchSubnet] = []
    cloud_network: List[CloudNetwork] = []

    @field_validator("server", "subnet", "cloud_network", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return v or []


class VSwitchService:
    """vSwitch operations."""

    def __init__(self, client: RobotClient, poller: Optional[ConditionPoller] = None):
        self.client = client
        self.poller = poller or ConditionPoller()

    async def list(self) -> List[VSwitchSummary]:
        vswitches = await self.client.get(API_VSWITCH, List[VSwitchSummary], operation="vswitch_list")
        return vswitches or []

    async def get(self, vswitch_id: int) -> VSwitch:
        return await self.client.get(f"{API_VSWITCH}/{vswitch_id}", VSwitch, operation="vswitch_get")

    async def create(self, name: str, vlan: int) -> VSwitch:
        return await self.client.post(
            API_VSWITCH, {"name": name, "vlan": vlan}, VSwitch, operation="vswitch_create"
        )

    async def update(self, vswitch_id: int, name: str, vlan: int) -> None:
        await self.client.post(
            f"{API_VSWITCH}/{vswitch_id}", {"name": name, "vlan": vlan}, operation="vswitch_update"
        )

    async def cancel(self, vswitch_id: int, cancellation_date: str = "now") -> None:
        """Cancel a vSwitch, immediately or at ``cancellation_date`` (YYYY-MM-DD)."""
        await self.client.delete_with_body(
            f"{API_VSWITCH}/{vswitch_id}",
            {"cancellation_date": cancellation_date},
            operation="vswitch_cancel",
        )

    async def add_servers(self, vswitch_id: int, servers: Sequence[str]) -> None:
        """Attach servers given by IP address or server number."""
        await self.client.post_raw(
            API_VSWITCH_SERVER.format(vswitch_id=vswitch_id),
            encode_bracket_list("server", servers),
            operation="vswitch_add_servers",
        )

    async def remove_servers(self, vswitch_id: int, servers: Sequence[str]) -> None:
        await self.client.delete_with_body(
            API_VSWITCH_SERVER.format(vswitch_id=vswitch_id),
            form=encode_bracket_list("server", servers),
            operation="vswitch_remove_servers",
        )

    async def wait_until_ready(
        self, vswitch_id: int, cancel_event: Optional[asyncio.Event] = None
    ) -> PollResult:
        """Poll until every server attached to the vSwitch is ``ready``."""
        logger.info(f"Waiting for vSwitch {vswitch_id} servers to become {STATUS_READY}")

        async def ready() -> bool:
            vswitch = await self.get(vswitch_id)
            return all(server.status == STATUS_READY for server in vswitch.server)

        return await self.poller.wait(
            ready, cancel_event=cancel_event, description=f"vswitch {vswitch_id}"
        )
