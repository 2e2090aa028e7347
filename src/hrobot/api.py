"""
Hetzner Robot Client - Service Facade

``Robot`` wires one transport and one poller into every resource service.
"""

from typing import Optional

import httpx

from .core import ConditionPoller, PollConfig, RobotClient, RobotConfig
from .domains import (
    BootService,
    FailoverService,
    FirewallService,
    IPService,
    KeyService,
    RDNSService,
    ResetService,
    ServerService,
    TrafficService,
    VSwitchService,
    WOLService,
)


class Robot:
    """Entry point bundling all resource services.

    Example:
        async with Robot(RobotConfig(username="#ws+abc", password="...")) as robot:
            servers = await robot.servers.list()
    """

    def __init__(self, config: RobotConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.client = RobotClient(config, transport=transport)
        self.poller = ConditionPoller(
            PollConfig(
                initial_delay=config.poll_initial_delay,
                max_delay=config.poll_max_delay,
                max_attempts=config.poll_max_attempts,
            )
        )

        self.servers = ServerService(self.client)
        self.firewall = FirewallService(self.client, self.poller)
        self.keys = KeyService(self.client)
        self.reset = ResetService(self.client)
        self.boot = BootService(self.client)
        self.rdns = RDNSService(self.client)
        self.ip = IPService(self.client)
        self.failover = FailoverService(self.client)
        self.traffic = TrafficService(self.client)
        self.wol = WOLService(self.client)
        self.vswitch = VSwitchService(self.client, self.poller)

    async def close(self):
        await self.client.close()

    async def __aenter__(self) -> "Robot":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
