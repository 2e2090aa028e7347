"""
Hetzner Robot Client - SSH Key Domain

Managing the SSH public keys stored in the Robot account.
"""

from datetime import datetime
from typing import List, Optional
from urllib.parse import quote

from pydantic import ValidationInfo, field_validator

from ..core import RobotClient
from ..core.models import ProviderModel, parse_provider_timestamp
from ..shared.constants import API_KEY


class SSHKey(ProviderModel):
    name: str
    fingerprint: str
    type: str = ""
    size: int = 0
    data: str = ""
    created_at: Optional[datetime] = None

    @field_validator("created_at", mode="before")
    @classmethod
    def parse_created_at(cls, v, info: ValidationInfo):
        if not v:
            return None
        if isinstance(v, datetime):
            return v
        return parse_provider_timestamp(v, cls.context_timezone(info))


def _key_path(fingerprint: str) -> str:
    return f"{API_KEY}/{quote(fingerprint, safe='')}"


class KeyService:
    """SSH key operations."""

    def __init__(self, client: RobotClient):
        self.client = client

    async def list(self) -> List[SSHKey]:
        keys = await self.client.get_wrapped_list(API_KEY, "key", List[SSHKey], operation="key_list")
        return keys or []

    async def get(self, fingerprint: str) -> SSHKey:
        return await self.client.get(_key_path(fingerprint), SSHKey, operation="key_get")

    async def create(self, name: str, data: str) -> SSHKey:
        return await self.client.post(
            API_KEY, {"name": name, "data": data}, SSHKey, operation="key_create"
        )

    async def rename(self, fingerprint: str, name: str) -> SSHKey:
        return await self.client.post(
            _key_path(fingerprint), {"name": name}, SSHKey, operation="key_rename"
        )

    async def delete(self, fingerprint: str) -> None:
        await self.client.delete(_key_path(fingerprint), operation="key_delete")
