"""
Hetzner Robot Client - Boot Domain

Boot configuration, the rescue system and the Linux and VNC installers.
Option fields such as ``os`` and ``arch`` hold the active value when a
configuration is active and the list of choices when it is not.
"""

from typing import Any, List, Optional, Sequence

from pydantic import field_validator

from ..core import RobotClient
from ..core.models import ProviderModel
from ..shared.constants import (
    API_BOOT,
    API_BOOT_LINUX,
    API_BOOT_RESCUE,
    API_BOOT_RESCUE_LAST,
    API_BOOT_VNC,
)


class RescueConfig(ProviderModel):
    server_ip: Optional[str] = None
    server_ipv6_net: Optional[str] = None
    server_number: int = 0
    active: bool = False
    os: Any = None
    arch: Any = None
    authorized_key: List[Any] = []
    host_key: List[Any] = []
    password: Optional[str] = None

    @field_validator("authorized_key", "host_key", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return v or []


class LinuxConfig(ProviderModel):
    server_ip: Optional[str] = None
    server_ipv6_net: Optional[str] = None
    server_number: int = 0
    active: bool = False
    dist: Any = None
    arch: Any = None
    lang: Any = None
    hostname: Optional[str] = None
    password: Optional[str] = None
    authorized_key: List[Any] = []
    host_key: List[Any] = []

    @field_validator("authorized_key", "host_key", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return v or []


class VNCConfig(ProviderModel):
    server_ip: Optional[str] = None
    server_ipv6_net: Optional[str] = None
    server_number: int = 0
    active: bool = False
    dist: Any = None
    arch: Any = None
    lang: Any = None
    password: Optional[str] = None


class BootConfig(ProviderModel):
    rescue: Optional[RescueConfig] = None
    linux: Optional[LinuxConfig] = None
    vnc: Optional[VNCConfig] = None


class BootService:
    """Boot configuration operations."""

    def __init__(self, client: RobotClient):
        self.client = client

    async def get(self, server_id: int) -> BootConfig:
        # The body is {"boot": {"rescue": ..., "linux": ...}}; only the outer key is stripped
        return await self.client.get(f"{API_BOOT}/{server_id}", BootConfig, operation="boot_get")

    async def activate_rescue(
        self,
        server_id: int,
        os: str,
        arch: Optional[int] = None,
        authorized_keys: Sequence[str] = (),
    ) -> RescueConfig:
        """Activate the rescue system for the next boot.

        Args:
            server_id: Server number
            os: Rescue operating system, e.g. "linux"
            arch: Architecture (64 or 32); omitted when None
            authorized_keys: Fingerprints of SSH keys to install
        """
        data: List[tuple] = [("os", os)]
        if arch is not None:
            data.append(("arch", arch))
        data.extend(("authorized_key[]", key) for key in authorized_keys)
        return await self.client.post(
            API_BOOT_RESCUE.format(server_id=server_id),
            data,
            RescueConfig,
            operation="boot_rescue_activate",
        )

    async def deactivate_rescue(self, server_id: int) -> None:
        await self.client.delete(
            API_BOOT_RESCUE.format(server_id=server_id), operation="boot_rescue_deactivate"
        )

    async def get_last_rescue(self, server_id: int) -> RescueConfig:
        """Rescue data of the last activation, including the generated password."""
        return await self.client.get(
            API_BOOT_RESCUE_LAST.format(server_id=server_id),
            RescueConfig,
            operation="boot_rescue_last",
        )

    async def activate_linux(
        self,
        server_id: int,
        dist: str,
        lang: str,
        arch: Optional[int] = None,
        authorized_keys: Sequence[str] = (),
    ) -> Optional[LinuxConfig]:
        """Schedule an automatic Linux installation for the next boot.

        The reply is wrapped under ``linux``, which is not a shared envelope
        key, so it is decoded through ``BootConfig``.
        """
        data: List[tuple] = [("dist", dist)]
        if arch is not None:
            data.append(("arch", arch))
        data.append(("lang", lang))
        data.extend(("authorized_key[]", key) for key in authorized_keys)
        config = await self.client.post(
            API_BOOT_LINUX.format(server_id=server_id),
            data,
            BootConfig,
            operation="boot_linux_activate",
        )
        return config.linux if config else None

    async def deactivate_linux(self, server_id: int) -> None:
        await self.client.delete(
            API_BOOT_LINUX.format(server_id=server_id), operation="boot_linux_deactivate"
        )

    async def activate_vnc(
        self, server_id: int, dist: str, lang: str, arch: Optional[int] = None
    ) -> Optional[VNCConfig]:
        """Schedule a VNC-driven installation for the next boot."""
        data: List[tuple] = [("dist", dist)]
        if arch is not None:
            data.append(("arch", arch))
        data.append(("lang", lang))
        config = await self.client.post(
            API_BOOT_VNC.format(server_id=server_id),
            data,
            BootConfig,
            operation="boot_vnc_activate",
        )
        return config.vnc if config else None

    async def deactivate_vnc(self, server_id: int) -> None:
        await self.client.delete(API_BOOT_VNC.format(server_id=server_id), operation="boot_vnc_deactivate")
