"""
Pump link: head gain from a pump curve scaled by relative speed.
"""

import typing

from hydrolink.elements.curve import HP_HEAD_FACTOR, PumpCurve
from hydrolink.elements.link import MIN_THRESH, Link
from hydrolink.properties import MIN_GRADIENT
from hydrolink.types import PumpCurveType

__all__ = ["Pump"]


class Pump(Link):
    """
    Pump whose setting is its relative speed.

    Head loss is the negative of the head the pump delivers. Speeds scale the
    full-speed curve by the affinity laws: flow with speed, head with speed
    squared.

    A pump does not pass reverse flow: a negative flow is evaluated at its
    magnitude so the law stays continuous through zero, and the solver
    stops reverse flow by setting the pump TEMP_CLOSED.
    """

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.curve: typing.Optional[PumpCurve] = None

    def type_str(self) -> str:
        return "Pump"

    def set_init_flow(self) -> None:
        design_flow = self.curve.design_flow if self.curve is not None else 1.0
        self.flow = design_flow * self.setting

    def find_head_loss(self, flow: float, viscosity: float) -> None:
        speed = self.setting
        if self.is_closed() or speed <= 0 or self.curve is None:
            self._set_closed_head_loss(flow)
            return

        # Curve is only defined for forward flow, reverse flow mirrors it
        q = max(abs(flow), self.flow_thresh, MIN_THRESH)
        curve = self.curve
        if curve.curve_type is PumpCurveType.CONSTANT_HP:
            head, slope = curve.head_and_slope(q)
            head *= speed**3
            slope *= speed**3
        else:
            head, slope = curve.head_and_slope(q / speed)
            head *= speed**2
            slope *= speed

        self.h_loss = -head
        self.h_grad = max(-slope, MIN_GRADIENT)

    def get_power(self) -> float:
        """Water power (hp) delivered at the current flow and head."""
        if self.h_loss >= 0:
            return 0.0
        return abs(self.flow) * -self.h_loss / HP_HEAD_FACTOR
