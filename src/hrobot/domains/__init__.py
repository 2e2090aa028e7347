"""
Hetzner Robot Client - Resource Services

Thin callers of the core transport, one module per webservice area.
"""

from .boot import BootConfig, BootService, LinuxConfig, RescueConfig, VNCConfig
from .failover import Failover, FailoverService
from .firewall import (
    FirewallConfig,
    FirewallRule,
    FirewallRules,
    FirewallService,
    FirewallTemplate,
    FirewallUpdate,
    TemplateConfig,
)
from .ip import IPAddress, IPService
from .keys import KeyService, SSHKey
from .rdns import RDNS, RDNSService
from .reset import Reset, ResetService, ResetType
from .servers import Server, ServerService
from .traffic import TrafficData, TrafficService, TrafficStats, TrafficType
from .vswitch import VSwitch, VSwitchService, VSwitchSummary
from .wol import WOLResult, WOLService

__all__ = [
    "BootConfig",
    "BootService",
    "LinuxConfig",
    "RescueConfig",
    "VNCConfig",
    "Failover",
    "FailoverService",
    "IPAddress",
    "IPService",
    "FirewallConfig",
    "FirewallRule",
    "FirewallRules",
    "FirewallService",
    "FirewallTemplate",
    "FirewallUpdate",
    "TemplateConfig",
    "KeyService",
    "SSHKey",
    "RDNS",
    "RDNSService",
    "Reset",
    "ResetService",
    "ResetType",
    "Server",
    "ServerService",
    "TrafficData",
    "TrafficService",
    "TrafficStats",
    "TrafficType",
    "VSwitch",
    "VSwitchService",
    "VSwitchSummary",
    "WOLResult",
    "WOLService",
]
