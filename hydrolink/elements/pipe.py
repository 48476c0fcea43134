"""
Pipe link: friction head loss plus minor losses.
"""

import logging
import typing

from hydrolink.elements.link import Link
from hydrolink.properties import (
    compute_darcy_weisbach_friction_factor,
    compute_darcy_weisbach_friction_factor_slope,
    compute_minor_loss_coefficient,
    compute_pipe_resistance,
    compute_reynolds_number,
    cross_sectional_area,
    flow_exponent,
    linearize_head_loss,
)
from hydrolink.types import HeadLossFormula

logger = logging.getLogger(__name__)

__all__ = ["Pipe"]


class Pipe(Link):
    """Conduit whose head loss follows a friction formula."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.length = 0.0
        """Length (ft)"""
        self.roughness = 0.0
        """C-factor (H-W), absolute roughness in ft (D-W) or Manning's n (C-M)"""
        self.formula = HeadLossFormula.HAZEN_WILLIAMS
        self.resistance = 0.0
        """Friction resistance coefficient, see `compute_pipe_resistance`"""
        self.minor_loss = 0.0
        """Minor loss head coefficient, see `compute_minor_loss_coefficient`"""

    def type_str(self) -> str:
        return "Pipe"

    def set_resistance(
        self, formula: typing.Optional[HeadLossFormula] = None
    ) -> None:
        """
        Compute the friction and minor loss coefficients from the pipe geometry.

        :param formula: Head loss formula to switch to, keeps the current one if None
        """
        if formula is not None:
            self.formula = HeadLossFormula(formula)
        if self.length <= 0 or self.diameter <= 0:
            raise ValueError(f"Pipe {self.name!r} needs a positive length and diameter")
        # D-W accepts a smooth pipe, the power laws divide by roughness
        if self.roughness < 0 or (
            self.roughness == 0 and self.formula is not HeadLossFormula.DARCY_WEISBACH
        ):
            raise ValueError(
                f"Pipe {self.name!r} roughness {self.roughness} is invalid for {self.formula}"
            )
        self.resistance = compute_pipe_resistance(
            self.formula, self.length, self.diameter, self.roughness
        )
        self.minor_loss = compute_minor_loss_coefficient(self.loss_coeff, self.diameter)
        logger.debug(
            f"Pipe {self.name!r} resistance {self.resistance:.4e} ({self.formula})"
        )

    def get_re(self, flow: float, viscosity: float) -> float:
        return compute_reynolds_number(flow, self.diameter, viscosity)

    def get_velocity(self, flow: typing.Optional[float] = None) -> float:
        """Mean velocity (ft/s) at `flow`, or at the current flow if None."""
        q = self.flow if flow is None else flow
        return abs(q) / cross_sectional_area(self.diameter)

    def set_init_flow(self) -> None:
        # Flow at a velocity of 1 ft/s
        self.flow = cross_sectional_area(self.diameter)

    def get_unit_head_loss(self) -> float:
        """Head loss per 1000 ft of pipe."""
        if self.length <= 0:
            return 0.0
        return abs(self.h_loss) * 1000.0 / self.length

    def find_head_loss(self, flow: float, viscosity: float) -> None:
        if self.is_closed():
            self._set_closed_head_loss(flow)
            return

        if self.formula is HeadLossFormula.DARCY_WEISBACH:
            friction_law = self._darcy_weisbach_law(viscosity)
        else:
            friction_law = self._power_law

        self.h_loss, self.h_grad = linearize_head_loss(
            flow, self.flow_thresh, friction_law
        )

    def _power_law(self, q: float) -> typing.Tuple[float, float]:
        n = flow_exponent(self.formula)
        h_loss = self.resistance * q**n + self.minor_loss * q * q
        h_grad = n * self.resistance * q ** (n - 1.0) + 2.0 * self.minor_loss * q
        return h_loss, h_grad

    def _darcy_weisbach_law(
        self, viscosity: float
    ) -> typing.Callable[[float], typing.Tuple[float, float]]:
        relative_roughness = self.roughness / self.diameter

        def _law(q: float) -> typing.Tuple[float, float]:
            reynolds_number = self.get_re(q, viscosity)
            if reynolds_number <= 0:
                return self._power_law(q)
            f = compute_darcy_weisbach_friction_factor(
                reynolds_number, relative_roughness
            )
            # Re is proportional to q, so df/dq = df/dRe * Re / q
            df_dq = (
                compute_darcy_weisbach_friction_factor_slope(
                    reynolds_number, relative_roughness
                )
                * reynolds_number
                / q
            )
            k = f * self.resistance + self.minor_loss
            h_grad = 2.0 * k * q + self.resistance * q * q * df_dq
            return k * q * q, h_grad

        return _law
