"""
Base link element: a pipe, pump or valve connecting two nodes.
"""

import abc
import logging
import typing

from hydrolink.elements.element import Element
from hydrolink.mempool import MemPool
from hydrolink.types import LinkStatus, LinkType

logger = logging.getLogger(__name__)

__all__ = ["Link", "ZERO_FLOW", "RE_THRESH", "MIN_THRESH", "HIGH_RESISTANCE"]

ZERO_FLOW: typing.Final = 1.0e-6
"""Flow carried by a closed link (cfs)"""
RE_THRESH: typing.Final = 200.0
"""Reynolds number below which head loss is linearized"""
MIN_THRESH: typing.Final = 1.0e-6
"""Smallest flow threshold (cfs)"""
HIGH_RESISTANCE: typing.Final = 1.0e8
"""Resistance of a closed link"""

_STATUS_CHANGED_FROM: typing.Final = " status changed from "
_STATUS_CHANGED_TO: typing.Final = " to "
_REPORT_INDENT: typing.Final = " " * 10


class Link(Element, abc.ABC):
    """
    Abstract link between two network nodes.

    The link holds the state a hydraulic solver reads and writes on every
    iteration. Concrete variants supply the initial flow estimate, the head
    loss law and a type label.
    """

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.rpt_flag = False
        """Whether the link's time series is kept for output"""
        self.from_node: typing.Any = None
        """Upstream node reference, owned by the network"""
        self.to_node: typing.Any = None
        """Downstream node reference, owned by the network"""

        self.init_status = LinkStatus.OPEN
        self.init_setting = 1.0
        self.diameter = 0.0
        """Diameter (ft)"""
        self.loss_coeff = 0.0
        """Minor loss coefficient"""

        self.status = LinkStatus.CLOSED
        self.setting = 0.0
        self.flow_thresh0 = 0.0
        """Nominal flow threshold of the current step (cfs)"""
        self.flow_thresh = 0.0
        """Working flow threshold, never above `flow_thresh0` (cfs)"""
        self.flow = 0.0
        """Signed flow rate (cfs)"""
        self.leakage = 0.0
        self.h_loss = 0.0
        """Head loss (ft)"""
        self.h_grad = 0.0
        """Derivative of head loss with respect to flow (ft/cfs)"""
        self.quality = 0.0

    @staticmethod
    def factory(
        link_type: typing.Union[LinkType, int], name: str, pool: MemPool
    ) -> typing.Optional["Link"]:
        """
        Construct a link of the requested variant inside `pool`.

        :param link_type: Variant discriminant
        :param name: Name of the new link
        :param pool: Pool that will own the link
        :return: The new link, or None for an unknown discriminant
        """
        from hydrolink.elements.pipe import Pipe
        from hydrolink.elements.pump import Pump
        from hydrolink.elements.valve import Valve

        variants: typing.Dict[int, typing.Type[Link]] = {
            LinkType.PIPE: Pipe,
            LinkType.PUMP: Pump,
            LinkType.VALVE: Valve,
        }
        cls = variants.get(link_type)
        if cls is None:
            logger.debug(f"No link variant for type {link_type!r}")
            return None

        handle = pool.alloc(cls)
        link = pool.place(handle, cls(name))
        link.index = handle
        logger.debug(f"Created {link.type_str()} {name!r} in slot {handle}")
        return link

    @abc.abstractmethod
    def type_str(self) -> str:
        """Label of the link variant used in reports."""
        raise NotImplementedError

    @abc.abstractmethod
    def set_init_flow(self) -> None:
        """Set `flow` to an initial estimate for an open link."""
        raise NotImplementedError

    @abc.abstractmethod
    def find_head_loss(self, flow: float, viscosity: float) -> None:
        """
        Compute `h_loss` and `h_grad` for `flow` at the current status and setting.

        :param flow: Signed flow rate (cfs)
        :param viscosity: Kinematic viscosity of the fluid (ft^2/s)
        """
        raise NotImplementedError

    def get_re(self, flow: float, viscosity: float) -> float:
        """Reynolds number at `flow`, 0.0 for links without a flow section."""
        return 0.0

    def is_closed(self) -> bool:
        return self.status in (LinkStatus.CLOSED, LinkStatus.TEMP_CLOSED)

    def initialize(self, re_init_flow: bool) -> None:
        """
        Reset status and setting to their initial values.

        :param re_init_flow: Also re-estimate the flow
        """
        self.status = self.init_status
        self.setting = self.init_setting
        if re_init_flow:
            if self.status == LinkStatus.CLOSED:
                self.flow = ZERO_FLOW
            else:
                self.set_init_flow()
        self.leakage = 0.0
        logger.debug(f"Initialized {self.type_str()} {self.name!r} as {self.status!s}")

    def set_flow_threshold(self, viscosity: float) -> None:
        """
        Set the flow below which head loss is linear in flow, from the flow
        at which the Reynolds number reaches `RE_THRESH`.

        :param viscosity: Kinematic viscosity of the fluid (ft^2/s)
        """
        re1 = self.get_re(1.0, viscosity)
        q_thresh = 0.0
        if re1 > 0.0:
            q_thresh = RE_THRESH / re1
        self.flow_thresh = max(q_thresh, MIN_THRESH)
        self.flow_thresh0 = self.flow_thresh

    def reduce_flow_threshold(self) -> bool:
        """
        Shrink the working flow threshold below the current flow.

        :return: True if the threshold was reduced
        """
        if self.status != LinkStatus.OPEN or self.flow_thresh <= MIN_THRESH:
            return False
        if abs(self.flow) < self.flow_thresh:
            self.flow_thresh = max(abs(self.flow) / 2.0, MIN_THRESH)
            logger.debug(
                f"{self.type_str()} {self.name!r} flow threshold reduced to "
                f"{self.flow_thresh:.3e}"
            )
            return True
        return False

    def get_unit_head_loss(self) -> float:
        return self.h_loss

    def write_status_change(self, old_status: typing.Union[LinkStatus, int]) -> str:
        """Report line for a change from `old_status` to the current status."""
        return (
            f"{_REPORT_INDENT}{self.type_str()} {self.name}"
            f"{_STATUS_CHANGED_FROM}{LinkStatus(old_status).name}"
            f"{_STATUS_CHANGED_TO}{LinkStatus(self.status).name}"
        )

    def _set_closed_head_loss(self, flow: float) -> None:
        self.h_grad = HIGH_RESISTANCE
        self.h_loss = HIGH_RESISTANCE * flow
