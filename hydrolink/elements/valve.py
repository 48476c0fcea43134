"""
Valve link: head loss governed by the valve type and its setting.
"""

import typing

from hydrolink.elements.link import HIGH_RESISTANCE, Link
from hydrolink.properties import (
    MIN_GRADIENT,
    compute_minor_loss_coefficient,
    compute_reynolds_number,
    cross_sectional_area,
    linearize_head_loss,
)
from hydrolink.types import LinkStatus, ValveType

__all__ = ["Valve"]


class Valve(Link):
    """
    Flow control device.

    The meaning of the setting depends on the valve type:

    - PRV/PSV: pressure setting (ft), enforced by the solver through node heads
    - FCV: flow setting (cfs)
    - TCV: minor loss coefficient of the partially closed valve
    - PBV: head loss across the valve (ft)
    """

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.valve_type = ValveType.TCV

    def type_str(self) -> str:
        return "Valve"

    def get_re(self, flow: float, viscosity: float) -> float:
        return compute_reynolds_number(flow, self.diameter, viscosity)

    def set_init_flow(self) -> None:
        if self.valve_type is ValveType.FCV and self.status == LinkStatus.ACTIVE:
            self.flow = self.setting
            return
        # Flow at a velocity of 1 ft/s
        self.flow = cross_sectional_area(self.diameter)

    def find_head_loss(self, flow: float, viscosity: float) -> None:
        if self.is_closed():
            self._set_closed_head_loss(flow)
            return

        if self.status == LinkStatus.ACTIVE:
            if self.valve_type is ValveType.FCV:
                # Pins flow to the setting
                self.h_grad = HIGH_RESISTANCE
                self.h_loss = HIGH_RESISTANCE * (flow - self.setting)
                return
            if self.valve_type is ValveType.PBV:
                self.h_grad = MIN_GRADIENT
                self.h_loss = self.setting + MIN_GRADIENT * flow
                return
            if self.valve_type is ValveType.TCV:
                self._set_minor_head_loss(flow, self.setting)
                return

        self._set_minor_head_loss(flow, self.loss_coeff)

    def _set_minor_head_loss(self, flow: float, loss_coeff: float) -> None:
        k = compute_minor_loss_coefficient(loss_coeff, self.diameter)

        def _law(q: float) -> typing.Tuple[float, float]:
            return k * q * q, 2.0 * k * q

        self.h_loss, self.h_grad = linearize_head_loss(flow, self.flow_thresh, _law)
