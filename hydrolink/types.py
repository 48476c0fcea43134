import enum
import typing
import attrs
import cattrs
from pint.facets.plain import PlainQuantity

from hydrolink.units import Quantity, UnitSystem, QuantityUnit, US, SI


def structure_quantity(obj: typing.Any, _) -> PlainQuantity:
    """Convert a dict with 'magnitude' and 'units' to a Pint Quantity."""
    if isinstance(obj, PlainQuantity):
        return Quantity(obj.magnitude, obj.units)
    if isinstance(obj, dict) and "magnitude" in obj and "units" in obj:
        return Quantity(obj["magnitude"], obj["units"])
    raise ValueError(f"Cannot structure {obj} as PlainQuantity")


def unstructure_quantity(obj: PlainQuantity) -> dict:
    """Convert a Pint Quantity to a dict with 'magnitude' and 'units'."""
    return {"magnitude": obj.magnitude, "units": str(obj.units)}


def structure_unit_system(obj: typing.Any, _: typing.Type[UnitSystem]) -> UnitSystem:
    """Convert a name or dict to a UnitSystem."""
    if isinstance(obj, UnitSystem):
        return obj
    if isinstance(obj, str):
        try:
            return UNIT_SYSTEMS[obj.lower()]
        except KeyError:
            raise ValueError(f"Unknown unit system {obj!r}") from None
    if isinstance(obj, dict):
        return UnitSystem(
            obj.get("name", "custom").lower(),
            {
                k: QuantityUnit(
                    unit=v["unit"], display=v.get("display"), default=v.get("default")
                )
                for k, v in obj.get("quantities", {}).items()
            },
        )
    raise ValueError(f"Cannot structure {obj} as UnitSystem")


def unstructure_unit_system(obj: UnitSystem) -> dict:
    """Convert a UnitSystem to a dict."""
    return {
        "name": obj.name.lower(),
        "quantities": {
            k: {"unit": str(v.unit), "display": v.display, "default": v.default}
            for k, v in obj.items()
        },
    }


UNIT_SYSTEMS: typing.Dict[str, UnitSystem] = {"us": US, "si": SI}


class LinkStatus(enum.IntEnum):
    """Operating status of a link."""

    CLOSED = 0
    """Link carries no flow"""
    OPEN = 1
    """Link conducts flow according to its physical model"""
    ACTIVE = 2
    """Control device is actively regulating (valves)"""
    TEMP_CLOSED = 3
    """Link is closed for the current time step only"""

    def __str__(self) -> str:
        return self.name


def structure_link_status(obj: typing.Any, _: typing.Type[LinkStatus]) -> LinkStatus:
    """Convert a status name (e.g. "closed") or code to a LinkStatus."""
    if isinstance(obj, str) and not obj.isdigit():
        try:
            return LinkStatus[obj.upper()]
        except KeyError:
            raise ValueError(f"Unknown link status {obj!r}") from None
    return LinkStatus(int(obj))


class LinkType(enum.IntEnum):
    """Discriminant of the concrete link variants."""

    PIPE = 0
    PUMP = 1
    VALVE = 2

    def __str__(self) -> str:
        return self.name.lower()


class HeadLossFormula(str, enum.Enum):
    """Enumeration of supported pipe friction head loss formulas."""

    HAZEN_WILLIAMS = "H-W"
    DARCY_WEISBACH = "D-W"
    CHEZY_MANNING = "C-M"

    def __str__(self) -> str:
        return self.value


class ValveType(str, enum.Enum):
    """Enumeration of flow control valve types."""

    PRV = "PRV"
    """Pressure reducing valve"""
    PSV = "PSV"
    """Pressure sustaining valve"""
    FCV = "FCV"
    """Flow control valve"""
    TCV = "TCV"
    """Throttle control valve"""
    PBV = "PBV"
    """Pressure breaker valve"""

    def __str__(self) -> str:
        return self.value


class PumpCurveType(str, enum.Enum):
    """Enumeration of pump head curve shapes."""

    CONSTANT_HP = "constant_hp"
    """Constant horsepower, head inversely proportional to flow"""
    POWER_FUNCTION = "power_function"
    """h = h0 - r * q^n"""
    CUSTOM = "custom"
    """Piecewise linear through the curve points"""

    def __str__(self) -> str:
        return self.value


def _positive(instance: typing.Any, attribute: attrs.Attribute, value: PlainQuantity):
    if value.magnitude <= 0:
        raise ValueError(f"{attribute.name} must be positive")


@attrs.define(slots=True, frozen=True)
class LinkConfig:
    """Configuration shared by all link elements."""

    name: str
    """Unique name of the link within the network"""
    from_node: str
    """Name of the upstream node"""
    to_node: str
    """Name of the downstream node"""
    initial_status: LinkStatus = attrs.field(
        default=LinkStatus.OPEN,
        converter=lambda v: structure_link_status(v, LinkStatus),
    )
    """Status the link takes at the start of a run"""
    initial_setting: float = 1.0
    """Control setting the link takes at the start of a run"""
    report: bool = False
    """Whether the link's time series is kept for output"""


@attrs.define(slots=True, frozen=True)
class PipeConfig(LinkConfig):
    """Configuration for a pipe."""

    length: Quantity = attrs.field(
        factory=lambda: Quantity(1000.0, "ft"), validator=_positive
    )  # type: ignore
    """Length of the pipe"""
    diameter: Quantity = attrs.field(
        factory=lambda: Quantity(12.0, "inch"), validator=_positive
    )  # type: ignore
    """Internal diameter of the pipe"""
    roughness: float = attrs.field(
        default=100.0, validator=attrs.validators.gt(0)
    )
    """Roughness coefficient in the units of the head loss formula
    (C-factor for H-W, millifeet or mm for D-W, Manning's n for C-M)"""
    loss_coeff: float = attrs.field(default=0.0, validator=attrs.validators.ge(0))
    """Minor loss coefficient"""


@attrs.define(slots=True, frozen=True)
class PumpConfig(LinkConfig):
    """Configuration for a pump."""

    curve_type: PumpCurveType = attrs.field(
        default=PumpCurveType.POWER_FUNCTION, converter=PumpCurveType
    )
    """Shape of the pump head curve"""
    curve: typing.List[typing.Tuple[float, float]] = attrs.field(factory=list)
    """(flow, head) points of the pump curve in the configured unit system"""
    horsepower: float = attrs.field(default=0.0, validator=attrs.validators.ge(0))
    """Pump power for constant horsepower pumps"""

    def __attrs_post_init__(self):
        if self.curve_type is PumpCurveType.CONSTANT_HP:
            if self.horsepower <= 0:
                raise ValueError("Constant horsepower pump requires positive power")
        elif not self.curve:
            raise ValueError(f"Pump {self.name!r} requires curve points")


@attrs.define(slots=True, frozen=True)
class ValveConfig(LinkConfig):
    """Configuration for a valve."""

    valve_type: ValveType = attrs.field(default=ValveType.TCV, converter=ValveType)
    """Type of control valve"""
    diameter: Quantity = attrs.field(
        factory=lambda: Quantity(12.0, "inch"), validator=_positive
    )  # type: ignore
    """Diameter of the valve"""
    loss_coeff: float = attrs.field(default=0.0, validator=attrs.validators.ge(0))
    """Minor loss coefficient when fully open"""


@attrs.define(slots=True, frozen=True)
class HydraulicOptions:
    """Hydraulic options the link elements depend on."""

    unit_system: UnitSystem = attrs.field(
        factory=lambda: US, converter=lambda v: structure_unit_system(v, UnitSystem)
    )
    """Unit system bare configuration numbers are expressed in"""
    head_loss_formula: HeadLossFormula = attrs.field(
        default=HeadLossFormula.HAZEN_WILLIAMS, converter=HeadLossFormula
    )
    """Friction head loss formula used by pipes"""
    viscosity: Quantity = attrs.field(
        factory=lambda: Quantity(1.1e-5, "ft^2/s"), validator=_positive
    )  # type: ignore
    """Kinematic viscosity of the fluid"""
    status_report: bool = True
    """Whether status changes are written to the report log"""


@attrs.define(slots=True, frozen=True)
class NetworkConfig:
    """Link elements of a network together with the hydraulic options."""

    options: HydraulicOptions = attrs.field(factory=HydraulicOptions)
    """Hydraulic options"""
    pipes: typing.List[PipeConfig] = attrs.field(factory=list)
    """Pipe configurations"""
    pumps: typing.List[PumpConfig] = attrs.field(factory=list)
    """Pump configurations"""
    valves: typing.List[ValveConfig] = attrs.field(factory=list)
    """Valve configurations"""


converter = cattrs.Converter()
converter.register_structure_hook(PlainQuantity, structure_quantity)
converter.register_unstructure_hook(PlainQuantity, unstructure_quantity)
converter.register_structure_hook(UnitSystem, structure_unit_system)
converter.register_unstructure_hook(UnitSystem, unstructure_unit_system)
converter.register_structure_hook(LinkStatus, structure_link_status)
converter.register_unstructure_hook(LinkStatus, lambda status: status.name)
