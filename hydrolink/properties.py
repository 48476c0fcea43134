"""
Physical relations used by the link elements.

All functions work on plain floats in the internal unit system
(feet, cubic feet per second, square feet per second).
"""

import math
import typing

from hydrolink.types import HeadLossFormula

GRAVITY: typing.Final = 32.2
"""Acceleration due to gravity (ft/s^2)"""
HW_EXPONENT: typing.Final = 1.852
"""Flow exponent of the Hazen-Williams formula"""
HW_COEFFICIENT: typing.Final = 4.727
"""Hazen-Williams resistance coefficient for ft and cfs"""
CM_COEFFICIENT: typing.Final = 4.66
"""Chezy-Manning resistance coefficient for ft and cfs"""
MINOR_LOSS_COEFFICIENT: typing.Final = 0.02517
"""Converts a minor loss K into a head loss coefficient, 8 / (g * pi^2)"""
LAMINAR_REYNOLDS: typing.Final = 2000.0
TURBULENT_REYNOLDS: typing.Final = 4000.0
MIN_GRADIENT: typing.Final = 1.0e-6
"""Smallest head loss gradient handed to the solver"""


def flow_exponent(formula: HeadLossFormula) -> float:
    """Exponent of flow in the friction head loss law of `formula`."""
    if formula is HeadLossFormula.HAZEN_WILLIAMS:
        return HW_EXPONENT
    return 2.0


def cross_sectional_area(diameter: float) -> float:
    """Cross-sectional area (ft^2) of a circular conduit of `diameter` (ft)."""
    return math.pi * diameter**2 / 4.0


def compute_reynolds_number(flow: float, diameter: float, viscosity: float) -> float:
    """
    Calculate the Reynolds number for flow in a circular conduit.

    :param flow: Volumetric flow rate (cfs). The sign is ignored.
    :param diameter: Internal diameter (ft).
    :param viscosity: Kinematic viscosity (ft^2/s).
    :return: Dimensionless Reynolds number, 0.0 for degenerate inputs.
    """
    if diameter <= 0 or viscosity <= 0:
        return 0.0
    velocity = abs(flow) / cross_sectional_area(diameter)
    return velocity * diameter / viscosity


def _swamee_jain_friction_factor(
    reynolds_number: float, relative_roughness: float
) -> float:
    y = relative_roughness / 3.7 + 5.74 / reynolds_number**0.9
    return 0.25 / math.log10(y) ** 2


def compute_darcy_weisbach_friction_factor(
    reynolds_number: float, relative_roughness: float = 0.0
) -> float:
    """
    Calculate the Darcy-Weisbach friction factor for flow in a pipe.

    The calculation uses different correlations depending on the flow regime:
    - Laminar flow (Re < 2000): f = 64 / Re
    - Turbulent flow (Re > 4000): Swamee-Jain approximation of Colebrook-White
    - Transitional flow: linear interpolation between the two limits

    :param reynolds_number: Reynolds number of the flow (dimensionless).
    :param relative_roughness: Pipe relative roughness (epsilon / D).
    :return: Darcy-Weisbach friction factor (dimensionless).
    """
    if reynolds_number <= 0:
        raise ValueError("Reynolds number must be positive")

    if reynolds_number < LAMINAR_REYNOLDS:
        return 64.0 / reynolds_number

    if reynolds_number > TURBULENT_REYNOLDS:
        return _swamee_jain_friction_factor(reynolds_number, relative_roughness)

    f_laminar = 64.0 / LAMINAR_REYNOLDS
    f_turbulent = _swamee_jain_friction_factor(TURBULENT_REYNOLDS, relative_roughness)
    fraction = (reynolds_number - LAMINAR_REYNOLDS) / (
        TURBULENT_REYNOLDS - LAMINAR_REYNOLDS
    )
    return f_laminar + fraction * (f_turbulent - f_laminar)


def compute_darcy_weisbach_friction_factor_slope(
    reynolds_number: float, relative_roughness: float = 0.0
) -> float:
    """
    Derivative of the Darcy-Weisbach friction factor with respect to the
    Reynolds number, for the same regimes as `compute_darcy_weisbach_friction_factor`.

    :param reynolds_number: Reynolds number of the flow (dimensionless).
    :param relative_roughness: Pipe relative roughness (epsilon / D).
    :return: df/dRe
    """
    if reynolds_number <= 0:
        raise ValueError("Reynolds number must be positive")

    if reynolds_number < LAMINAR_REYNOLDS:
        return -64.0 / reynolds_number**2

    if reynolds_number > TURBULENT_REYNOLDS:
        y = relative_roughness / 3.7 + 5.74 / reynolds_number**0.9
        dy_dre = -0.9 * 5.74 / reynolds_number**1.9
        log_y = math.log10(y)
        df_dy = -0.5 / (log_y**3 * y * math.log(10.0))
        return df_dy * dy_dre

    f_laminar = 64.0 / LAMINAR_REYNOLDS
    f_turbulent = _swamee_jain_friction_factor(TURBULENT_REYNOLDS, relative_roughness)
    return (f_turbulent - f_laminar) / (TURBULENT_REYNOLDS - LAMINAR_REYNOLDS)


def compute_pipe_resistance(
    formula: HeadLossFormula, length: float, diameter: float, roughness: float
) -> float:
    """
    Calculate the friction resistance coefficient `r` of a pipe so that
    head loss is `r * |q|^n` (with `n` from `flow_exponent`).

    For Darcy-Weisbach the returned value excludes the friction factor,
    which depends on flow and must be multiplied in by the caller.

    :param formula: Head loss formula
    :param length: Pipe length (ft)
    :param diameter: Internal diameter (ft)
    :param roughness: H-W C-factor, D-W absolute roughness (ft) or Manning's n
    :return: Resistance coefficient
    """
    if formula is HeadLossFormula.HAZEN_WILLIAMS:
        return HW_COEFFICIENT * length / (roughness**HW_EXPONENT * diameter**4.871)
    if formula is HeadLossFormula.DARCY_WEISBACH:
        return 8.0 * length / (GRAVITY * math.pi**2 * diameter**5)
    return CM_COEFFICIENT * roughness**2 * length / diameter**5.33


def compute_minor_loss_coefficient(loss_coeff: float, diameter: float) -> float:
    """
    Head loss coefficient `k` of a fitting so that head loss is `k * q|q|`.

    :param loss_coeff: Dimensionless minor loss coefficient K
    :param diameter: Diameter the velocity head refers to (ft)
    """
    if diameter <= 0:
        return 0.0
    return MINOR_LOSS_COEFFICIENT * loss_coeff / diameter**4


def linearize_head_loss(
    flow: float,
    flow_threshold: float,
    nonlinear: typing.Callable[[float], typing.Tuple[float, float]],
) -> typing.Tuple[float, float]:
    """
    Evaluate a head loss law that is replaced by a straight line through the
    origin for flows below `flow_threshold`.

    :param flow: Signed flow rate (cfs)
    :param flow_threshold: Flow magnitude below which the linear law applies
    :param nonlinear: Maps a positive flow to `(head_loss, gradient)`
    :return: Signed `(head_loss, gradient)` with a strictly usable slope
    """
    q = abs(flow)
    if q < flow_threshold:
        h_thresh, _ = nonlinear(flow_threshold)
        gradient = max(h_thresh / flow_threshold, MIN_GRADIENT)
        return gradient * flow, gradient

    h_loss, gradient = nonlinear(q)
    return math.copysign(h_loss, flow), max(gradient, MIN_GRADIENT)
