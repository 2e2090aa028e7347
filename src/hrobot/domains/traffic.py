"""
Hetzner Robot Client - Traffic Domain
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from pydantic import Field

from ..core import RobotClient
from ..core.models import ProviderModel
from ..shared.constants import API_TRAFFIC


class TrafficType(str, Enum):
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


class TrafficStats(ProviderModel):
    """Traffic of one period in GB."""

    incoming: float = Field(alias="in")
    outgoing: float = Field(alias="out")
    sum: float


class TrafficData(ProviderModel):
    type: str = ""
    from_: str = Field(default="", alias="from")
    to: str = ""
    # Per IP: one total, or per-period values when single_values was requested
    data: Dict[str, Union[TrafficStats, Dict[str, TrafficStats]]] = {}


class TrafficService:
    """Traffic statistics. The webservice expects a POST for queries."""

    def __init__(self, client: RobotClient):
        self.client = client

    async def get(
        self,
        traffic_type: Union[TrafficType, str],
        from_date: str,
        to_date: str,
        ip: Optional[str] = None,
        single_values: bool = False,
    ) -> TrafficData:
        """Query traffic statistics.

        Args:
            traffic_type: Granularity (day, month, year)
            from_date: Start of the range; format depends on ``traffic_type``
            to_date: End of the range
            ip: Restrict to one server IP
            single_values: Return one value per period instead of a total
        """
        kind = traffic_type.value if isinstance(traffic_type, TrafficType) else traffic_type
        data: List[Tuple[str, object]] = [("type", kind), ("from", from_date), ("to", to_date)]
        if ip:
            data.append(("ip", ip))
        if single_values:
            data.append(("single_values", True))
        return await self.client.post(API_TRAFFIC, data, TrafficData, operation="traffic_get")
