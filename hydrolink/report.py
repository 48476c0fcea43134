"""
Status change reporting for link elements.
"""

import logging
import typing

from hydrolink.elements import Link, Pipe, Pump
from hydrolink.types import HydraulicOptions, LinkStatus
from hydrolink.units import US, UnitSystem, from_internal

logger = logging.getLogger(__name__)

__all__ = ["snapshot_statuses", "StatusChangeReport", "describe_link"]


def snapshot_statuses(links: typing.Iterable[Link]) -> typing.Dict[str, LinkStatus]:
    """Current status of each link keyed by name."""
    return {link.name: LinkStatus(link.status) for link in links}


class StatusChangeReport:
    """
    Collects status change lines of links between two points of a run.

    Each line is also sent to the module logger so that it reaches whatever
    report handler the application has attached.
    """

    def __init__(self, enabled: bool = True) -> None:
        """
        :param enabled: Whether changes are recorded at all
        """
        self.enabled = enabled
        self.lines: typing.List[str] = []

    @classmethod
    def from_options(cls, options: HydraulicOptions) -> "StatusChangeReport":
        """Report that is enabled when the options ask for status reporting."""
        return cls(enabled=options.status_report)

    def record(
        self,
        links: typing.Iterable[Link],
        previous: typing.Mapping[str, LinkStatus],
    ) -> typing.List[str]:
        """
        Record a line for every link whose status differs from `previous`.

        :param links: Links to inspect
        :param previous: Statuses taken earlier with `snapshot_statuses`
        :return: Lines recorded by this call
        """
        if not self.enabled:
            return []

        recorded = []
        for link in links:
            old_status = previous.get(link.name)
            if old_status is None or old_status == link.status:
                continue
            line = link.write_status_change(old_status)
            logger.info(line)
            recorded.append(line)

        self.lines.extend(recorded)
        return recorded

    def clear(self) -> None:
        self.lines.clear()

    def __len__(self) -> int:
        return len(self.lines)


def describe_link(link: Link, unit_system: UnitSystem = US) -> str:
    """
    One-line summary of a link's hydraulic state in display units.

    :param link: Link to describe
    :param unit_system: Unit system for flow and head values
    """
    flow_unit = unit_system["flow_rate"]
    head_unit = unit_system["head"]
    flow = from_internal(link.flow, "flow_rate", unit_system).magnitude
    h_loss = from_internal(link.h_loss, "head", unit_system).magnitude
    text = (
        f"{link.type_str()} {link.name}: {LinkStatus(link.status).name}, "
        f"flow {flow:.3f} {flow_unit}, head loss {h_loss:.3f} {head_unit}"
    )
    if isinstance(link, Pipe):
        text += f", unit head loss {link.get_unit_head_loss():.3f} per 1000"
    elif isinstance(link, Pump):
        power_unit = unit_system["power"]
        power = from_internal(link.get_power(), "power", unit_system).magnitude
        text += f", power {power:.2f} {power_unit}"
    return text
