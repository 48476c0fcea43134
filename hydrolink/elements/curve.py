"""
Pump head curves.
"""

import math
import typing

import attrs
import numpy as np

from hydrolink.types import PumpCurveType

__all__ = ["PumpCurve", "HP_HEAD_FACTOR"]

HP_HEAD_FACTOR: typing.Final = 8.814
"""Head (ft) times flow (cfs) delivered by one horsepower of water power"""


@attrs.define(slots=True, frozen=True)
class PumpCurve:
    """
    Head delivered by a pump at full speed as a function of flow.

    Flows are in cfs and heads in ft.
    """

    curve_type: PumpCurveType
    """Shape of the curve"""
    shutoff_head: float = 0.0
    """Head at zero flow (power function curves)"""
    resistance: float = 0.0
    """Coefficient `r` of h = h0 - r * q^n (power function curves)"""
    exponent: float = 1.0
    """Exponent `n` of h = h0 - r * q^n (power function curves)"""
    horsepower: float = 0.0
    """Power of a constant horsepower pump"""
    flows: np.ndarray = attrs.field(factory=lambda: np.zeros(0), eq=False)
    """Flows of a custom curve, increasing"""
    heads: np.ndarray = attrs.field(factory=lambda: np.zeros(0), eq=False)
    """Heads of a custom curve, decreasing"""
    design_flow: float = 1.0
    """Flow used as the initial estimate at full speed"""

    @classmethod
    def constant_hp(cls, horsepower: float) -> "PumpCurve":
        if horsepower <= 0:
            raise ValueError("Pump horsepower must be positive")
        return cls(PumpCurveType.CONSTANT_HP, horsepower=horsepower)

    @classmethod
    def power_function(
        cls, points: typing.Sequence[typing.Tuple[float, float]]
    ) -> "PumpCurve":
        """
        Fit h = h0 - r * q^n through one design point or three points.

        A single design point (q, h) gives a shutoff head of 4/3 h and a
        maximum flow of 2 q. Three points are (0, h0), (q1, h1), (q2, h2).

        :param points: (flow, head) pairs
        """
        if len(points) == 1:
            q1, h1 = points[0]
            h0 = 4.0 * h1 / 3.0
            q2, h2 = 2.0 * q1, 0.0
        elif len(points) == 3:
            (_, h0), (q1, h1), (q2, h2) = points
        else:
            raise ValueError(
                f"Power function curve needs 1 or 3 points, got {len(points)}"
            )

        if not (h0 > h1 > h2 >= 0 and 0 < q1 < q2):
            raise ValueError(f"Invalid pump curve points {list(points)}")

        h4 = h0 - h1
        h5 = h0 - h2
        n = math.log(h5 / h4) / math.log(q2 / q1)
        if n <= 0 or n > 20:
            raise ValueError(f"Pump curve exponent {n:.3f} is out of range")
        r = h4 / q1**n
        return cls(
            PumpCurveType.POWER_FUNCTION,
            shutoff_head=h0,
            resistance=r,
            exponent=n,
            design_flow=q1,
        )

    @classmethod
    def custom(cls, points: typing.Sequence[typing.Tuple[float, float]]) -> "PumpCurve":
        """
        Piecewise linear curve through (flow, head) points.

        :param points: At least two points with increasing flow and decreasing head
        """
        if len(points) < 2:
            raise ValueError("Custom pump curve needs at least two points")
        flows = np.array([p[0] for p in points], dtype=float)
        heads = np.array([p[1] for p in points], dtype=float)
        if np.any(np.diff(flows) <= 0) or np.any(np.diff(heads) > 0):
            raise ValueError(
                "Custom pump curve flows must increase and heads must not increase"
            )
        middle = len(flows) // 2
        return cls(
            PumpCurveType.CUSTOM,
            flows=flows,
            heads=heads,
            design_flow=float(flows[middle]),
        )

    def head_and_slope(self, flow: float) -> typing.Tuple[float, float]:
        """
        Head delivered at full speed and its derivative with respect to flow.

        :param flow: Non-negative flow (cfs)
        """
        if self.curve_type is PumpCurveType.POWER_FUNCTION:
            head = self.shutoff_head - self.resistance * flow**self.exponent
            slope = -self.exponent * self.resistance * flow ** (self.exponent - 1.0)
            return head, slope

        if self.curve_type is PumpCurveType.CUSTOM:
            # Segment index, extrapolating the end segments
            i = int(np.searchsorted(self.flows, flow, side="right")) - 1
            i = min(max(i, 0), len(self.flows) - 2)
            slope = float(
                (self.heads[i + 1] - self.heads[i])
                / (self.flows[i + 1] - self.flows[i])
            )
            head = float(self.heads[i] + slope * (flow - self.flows[i]))
            return head, slope

        head = HP_HEAD_FACTOR * self.horsepower / flow
        return head, -head / flow
