"""
Hetzner Robot Client - Firewall Domain

Firewall configuration and templates. Rule lists are sent with the
hierarchical form encoder because the webservice needs literal brackets in
keys such as ``rules[input][0][action]``.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator

from ..core import ConditionPoller, EncodedForm, FirewallRuleEncoder, RobotClient
from ..core.models import ProviderModel
from ..core.poller import PollResult
from ..shared.constants import API_FIREWALL, API_FIREWALL_TEMPLATE, STATUS_IN_PROCESS

logger = logging.getLogger("hrobot")

FIREWALL_STATUS_ACTIVE = "active"
FIREWALL_STATUS_DISABLED = "disabled"

# Rule attributes in the order they are sent
RULE_FIELDS = (
    "name",
    "ip_version",
    "action",
    "protocol",
    "src_ip",
    "dst_ip",
    "src_port",
    "dst_port",
    "tcp_flags",
)


class FirewallRule(ProviderModel):
    name: Optional[str] = None
    ip_version: Optional[str] = None
    action: str
    protocol: Optional[str] = None
    src_ip: Optional[str] = None
    dst_ip: Optional[str] = None
    src_port: Optional[str] = None
    dst_port: Optional[str] = None
    tcp_flags: Optional[str] = None

    def form_fields(self) -> Dict[str, str]:
        """Non-empty attributes in form order; ``action`` is always sent."""
        fields = {}
        for field in RULE_FIELDS:
            value = getattr(self, field)
            if value or field == "action":
                fields[field] = value
        return fields


class FirewallRules(ProviderModel):
    input: List[FirewallRule] = []
    output: List[FirewallRule] = []

    @field_validator("input", "output", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return v or []

    def encoder(self) -> FirewallRuleEncoder:
        encoder = FirewallRuleEncoder()
        for rule in self.input:
            encoder.add_input_rule(rule.form_fields())
        for rule in self.output:
            encoder.add_output_rule(rule.form_fields())
        return encoder


class FirewallConfig(ProviderModel):
    server_ip: Optional[str] = None
    server_number: int = 0
    status: str = ""
    filter_ipv6: bool = False
    whitelist_hos: bool = False
    port: str = ""
    rules: FirewallRules = FirewallRules()


class FirewallTemplate(ProviderModel):
    id: int
    name: str = ""
    filter_ipv6: bool = False
    whitelist_hos: bool = False
    is_default: bool = False
    rules: FirewallRules = FirewallRules()


class FirewallUpdate(BaseModel):
    """Desired firewall state for ``FirewallService.update``."""

    status: str = FIREWALL_STATUS_ACTIVE
    whitelist_hos: bool = False
    filter_ipv6: Optional[bool] = None
    rules: FirewallRules = FirewallRules()

    def encode(self) -> EncodedForm:
        fields: Dict[str, Any] = {"status": self.status, "whitelist_hos": self.whitelist_hos}
        if self.filter_ipv6 is not None:
            fields["filter_ipv6"] = self.filter_ipv6
        return self.rules.encoder().encode_with(fields)


class TemplateConfig(BaseModel):
    """Template definition for create/update."""

    name: str
    filter_ipv6: bool = False
    whitelist_hos: bool = False
    is_default: bool = False
    rules: FirewallRules = FirewallRules()

    def encode(self) -> EncodedForm:
        return self.rules.encoder().encode_with({
            "name": self.name,
            "filter_ipv6": self.filter_ipv6,
            "whitelist_hos": self.whitelist_hos,
            "is_default": self.is_default,
        })


class FirewallService:
    """Firewall operations."""

    def __init__(self, client: RobotClient, poller: Optional[ConditionPoller] = None):
        self.client = client
        self.poller = poller or ConditionPoller()

    async def get(self, server_id: int) -> FirewallConfig:
        return await self.client.get(
            f"{API_FIREWALL}/{server_id}", FirewallConfig, operation="firewall_get"
        )

    async def update(self, server_id: int, update: FirewallUpdate) -> FirewallConfig:
        return await self.client.post_raw(
            f"{API_FIREWALL}/{server_id}",
            update.encode(),
            FirewallConfig,
            operation="firewall_update",
        )

    async def _set_status(self, server_id: int, status: str) -> FirewallConfig:
        return await self.client.post(
            f"{API_FIREWALL}/{server_id}",
            {"status": status},
            FirewallConfig,
            operation=f"firewall_set_{status}",
        )

    async def activate(self, server_id: int) -> FirewallConfig:
        return await self._set_status(server_id, FIREWALL_STATUS_ACTIVE)

    async def disable(self, server_id: int) -> FirewallConfig:
        return await self._set_status(server_id, FIREWALL_STATUS_DISABLED)

    async def delete(self, server_id: int) -> None:
        """Remove all rules, resetting the firewall to an empty configuration."""
        await self.client.delete(f"{API_FIREWALL}/{server_id}", operation="firewall_delete")

    async def apply_template(self, server_id: int, template_id: int) -> FirewallConfig:
        """Apply a template; ``whitelist_hos`` comes from the template itself."""
        return await self.client.post(
            f"{API_FIREWALL}/{server_id}",
            {"template_id": template_id},
            FirewallConfig,
            operation="firewall_apply_template",
        )

    async def wait_until_ready(
        self, server_id: int, cancel_event: Optional[asyncio.Event] = None
    ) -> PollResult:
        """Poll until the firewall is no longer ``in process``."""

        logger.info(f"Waiting for firewall of server {server_id} to leave '{STATUS_IN_PROCESS}'")

        async def ready() -> bool:
            config = await self.get(server_id)
            return config.status != STATUS_IN_PROCESS

        return await self.poller.wait(
            ready, cancel_event=cancel_event, description=f"firewall {server_id}"
        )

    async def list_templates(self) -> List[FirewallTemplate]:
        templates = await self.client.get(
            API_FIREWALL_TEMPLATE, List[FirewallTemplate], operation="firewall_template_list"
        )
        return templates or []

    async def get_template(self, template_id: int) -> FirewallTemplate:
        return await self.client.get(
            f"{API_FIREWALL_TEMPLATE}/{template_id}",
            FirewallTemplate,
            operation="firewall_template_get",
        )

    async def create_template(self, config: TemplateConfig) -> FirewallTemplate:
        return await self.client.post_raw(
            API_FIREWALL_TEMPLATE,
            config.encode(),
            FirewallTemplate,
            operation="firewall_template_create",
        )

    async def update_template(self, template_id: int, config: TemplateConfig) -> FirewallTemplate:
        return await self.client.post_raw(
            f"{API_FIREWALL_TEMPLATE}/{template_id}",
            config.encode(),
            FirewallTemplate,
            operation="firewall_template_update",
        )

    async def delete_template(self, template_id: int) -> None:
        await self.client.delete(
            f"{API_FIREWALL_TEMPLATE}/{template_id}", operation="firewall_template_delete"
        )
