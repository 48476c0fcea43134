import typing
from pint import UnitRegistry
from pint.facets.plain import PlainQuantity
from collections import defaultdict
import attrs

__all__ = [
    "QuantityUnit",
    "UnitSystem",
    "INTERNAL",
    "US",
    "SI",
    "ureg",
    "Quantity",
    "Unit",
    "to_internal",
    "from_internal",
]

ureg = UnitRegistry()
ureg.define("cfs = foot**3 / second = CFS")  # cubic feet per second
ureg.define("gpm = gallon / minute = GPM")
ureg.define("mgd = 1000000 * gallon / day = MGD")  # million gallons per day
ureg.define("lps = liter / second = LPS")
Quantity = ureg.Quantity  # type: ignore[assignment]
Unit = ureg.Unit


@attrs.define(frozen=True, slots=True)
class QuantityUnit:
    """How one quantity is expressed in a unit system."""

    unit: Unit = attrs.field(converter=Unit)
    """Pint unit values of the quantity are given in"""
    display: typing.Optional[str] = attrs.field(default=None)
    """Label used in reports, the pint unit name if None"""
    default: typing.Optional[float] = attrs.field(default=None)
    """Typical value, e.g. the viscosity of water"""

    def __str__(self) -> str:
        return self.display or str(self.unit)


def _dimensionless() -> QuantityUnit:
    return QuantityUnit(unit="dimensionless")


class UnitSystem(defaultdict):
    """
    Maps quantity names ("length", "flow_rate", ...) to the unit a network
    file or report uses for them.

    Unknown quantities resolve to a dimensionless unit and are not stored.
    """

    def __init__(
        self, name: str, units: typing.Optional[typing.Mapping[str, QuantityUnit]] = None
    ) -> None:
        super().__init__(_dimensionless, units or {})
        self.name = name

    def __missing__(self, key: str) -> QuantityUnit:
        return self.default_factory()  # type: ignore[misc]

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r}, {dict(self)!r})"


INTERNAL = UnitSystem(
    "internal",
    {
        "length": QuantityUnit(unit="ft", display="ft"),
        "diameter": QuantityUnit(unit="ft", display="ft"),
        "head": QuantityUnit(unit="ft", display="ft"),
        "flow_rate": QuantityUnit(unit="cfs", display="ft³/s"),
        "velocity": QuantityUnit(unit="ft/s", display="ft/s"),
        "viscosity": QuantityUnit(unit="ft^2/s", display="ft²/s"),
        "power": QuantityUnit(unit="hp", display="hp"),
    },
)
"""Units the link elements compute in."""

US = UnitSystem(
    "us",
    {
        "length": QuantityUnit(unit="ft", display="ft"),
        "diameter": QuantityUnit(unit="inch", display="in"),
        "head": QuantityUnit(unit="ft", display="ft"),
        "flow_rate": QuantityUnit(unit="gpm", display="gpm"),
        "velocity": QuantityUnit(unit="ft/s", display="ft/s"),
        "viscosity": QuantityUnit(
            unit="ft^2/s", display="ft²/s", default=1.1e-5
        ),  # Water at 20°C
        "power": QuantityUnit(unit="hp", display="hp"),
    },
)

SI = UnitSystem(
    "si",
    {
        "length": QuantityUnit(unit="m", display="m"),
        "diameter": QuantityUnit(unit="mm", display="mm"),
        "head": QuantityUnit(unit="m", display="m"),
        "flow_rate": QuantityUnit(unit="lps", display="L/s"),
        "velocity": QuantityUnit(unit="m/s", display="m/s"),
        "viscosity": QuantityUnit(
            unit="m^2/s", display="m²/s", default=1.0e-6
        ),  # Water at 20°C
        "power": QuantityUnit(unit="kW", display="kW"),
    },
)


def to_internal(
    value: typing.Union[float, PlainQuantity[float]],
    quantity: str,
    unit_system: UnitSystem = US,
) -> float:
    """
    Convert a configuration value into the internal unit of a quantity.

    Bare numbers are taken to be expressed in the unit the `unit_system`
    assigns to `quantity`.

    :param value: Plain number or pint quantity
    :param quantity: Quantity name, e.g. "diameter" or "flow_rate"
    :param unit_system: Unit system bare numbers are expressed in
    :return: Magnitude in the internal unit
    """
    if not isinstance(value, PlainQuantity):
        value = Quantity(value, unit_system[quantity].unit)
    return value.to(INTERNAL[quantity].unit).magnitude


def from_internal(
    value: float, quantity: str, unit_system: UnitSystem = US
) -> PlainQuantity[float]:
    """
    Express an internal magnitude in the display unit of `unit_system`.

    :param value: Magnitude in the internal unit of `quantity`
    :param quantity: Quantity name, e.g. "head" or "flow_rate"
    :param unit_system: Target unit system
    :return: Quantity in the target unit
    """
    return Quantity(value, INTERNAL[quantity].unit).to(unit_system[quantity].unit)
