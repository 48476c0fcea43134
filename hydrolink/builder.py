"""
Construction of link elements from configuration.
"""

import logging
import typing

from hydrolink.elements import Link, Pipe, Pump, PumpCurve, Valve
from hydrolink.mempool import MemPool
from hydrolink.types import (
    HeadLossFormula,
    HydraulicOptions,
    LinkConfig,
    LinkType,
    NetworkConfig,
    PipeConfig,
    PumpConfig,
    PumpCurveType,
    ValveConfig,
)
from hydrolink.units import Quantity, to_internal

logger = logging.getLogger(__name__)

__all__ = ["NetworkBuildError", "build_link", "build_links"]


class NetworkBuildError(Exception):
    """Exception raised when the link elements of a network cannot be built."""

    pass


def _create(link_type: LinkType, config: LinkConfig, pool: MemPool) -> Link:
    link = Link.factory(link_type, config.name, pool)
    if link is None:
        raise NetworkBuildError(
            f"Cannot create link {config.name!r} of unknown type {link_type!r}"
        )
    link.from_node = config.from_node
    link.to_node = config.to_node
    link.init_status = config.initial_status
    link.init_setting = config.initial_setting
    link.rpt_flag = config.report
    return link


def _pipe_roughness(config: PipeConfig, options: HydraulicOptions) -> float:
    if options.head_loss_formula is not HeadLossFormula.DARCY_WEISBACH:
        return config.roughness
    # D-W roughness is given in millifeet (US) or millimeters (SI)
    length_unit = options.unit_system["length"].unit
    return to_internal(Quantity(config.roughness * 1.0e-3, length_unit), "length")


def _pump_curve(config: PumpConfig, options: HydraulicOptions) -> PumpCurve:
    unit_system = options.unit_system
    if config.curve_type is PumpCurveType.CONSTANT_HP:
        return PumpCurve.constant_hp(
            to_internal(config.horsepower, "power", unit_system)
        )

    points = [
        (
            to_internal(flow, "flow_rate", unit_system),
            to_internal(head, "head", unit_system),
        )
        for flow, head in config.curve
    ]
    if config.curve_type is PumpCurveType.CUSTOM:
        return PumpCurve.custom(points)
    return PumpCurve.power_function(points)


def build_link(
    config: typing.Union[PipeConfig, PumpConfig, ValveConfig],
    pool: MemPool,
    options: typing.Optional[HydraulicOptions] = None,
) -> Link:
    """
    Create a link in `pool` and apply its configuration.

    :param config: Pipe, pump or valve configuration
    :param pool: Pool that will own the link
    :param options: Hydraulic options, defaults are used if None
    :return: The configured link
    :raises NetworkBuildError: if the configuration does not describe a known link type
    """
    options = options or HydraulicOptions()

    if isinstance(config, PipeConfig):
        pipe = typing.cast(Pipe, _create(LinkType.PIPE, config, pool))
        pipe.length = to_internal(config.length, "length")
        pipe.diameter = to_internal(config.diameter, "diameter")
        pipe.roughness = _pipe_roughness(config, options)
        pipe.loss_coeff = config.loss_coeff
        pipe.set_resistance(options.head_loss_formula)
        return pipe

    if isinstance(config, PumpConfig):
        pump = typing.cast(Pump, _create(LinkType.PUMP, config, pool))
        pump.curve = _pump_curve(config, options)
        return pump

    if isinstance(config, ValveConfig):
        valve = typing.cast(Valve, _create(LinkType.VALVE, config, pool))
        valve.valve_type = config.valve_type
        valve.diameter = to_internal(config.diameter, "diameter")
        valve.loss_coeff = config.loss_coeff
        return valve

    raise NetworkBuildError(f"Unsupported link configuration {type(config).__name__}")


def build_links(
    config: NetworkConfig, pool: typing.Optional[MemPool] = None
) -> typing.Dict[str, Link]:
    """
    Build every link of a network configuration.

    :param config: Network configuration
    :param pool: Pool that will own the links, a new one is created if None
    :return: Links keyed by name, in configuration order
    :raises NetworkBuildError: on duplicate link names or invalid link data
    """
    pool = pool if pool is not None else MemPool()
    links: typing.Dict[str, Link] = {}
    viscosity = to_internal(config.options.viscosity, "viscosity")

    for link_config in [*config.pipes, *config.pumps, *config.valves]:
        if link_config.name in links:
            raise NetworkBuildError(f"Duplicate link name {link_config.name!r}")
        try:
            link = build_link(link_config, pool, config.options)
        except ValueError as exc:
            raise NetworkBuildError(
                f"Invalid data for link {link_config.name!r}: {exc}"
            ) from exc
        link.set_flow_threshold(viscosity)
        links[link.name] = link

    logger.info(f"Built {len(links)} link(s) in {pool!r}")
    return links
