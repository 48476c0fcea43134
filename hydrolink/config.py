"""
Network configuration loading and updating.
"""

import logging
import typing

import attrs
import orjson
from typing_extensions import Self

from hydrolink.types import NetworkConfig, converter

logger = logging.getLogger(__name__)

__all__ = ["ConfigurationState", "load_config", "dump_config"]


@attrs.define(slots=True, frozen=True)
class ConfigurationState:
    """Immutable holder of a network configuration with dotted-path access."""

    network: NetworkConfig = attrs.field(factory=NetworkConfig)
    """Link elements and hydraulic options"""
    version: str = "1.0"
    """Configuration schema version"""

    def get(self, path: str, /) -> typing.Any:
        """Get nested configuration using dot notation (e.g., 'network.options.viscosity')"""
        obj = self
        for part in path.split("."):
            if not hasattr(obj, part):
                raise ValueError(f"Invalid configuration path: {path}")
            obj = getattr(obj, part)
        return obj

    def update(self, path: str, /, **kwargs: typing.Any) -> Self:
        """
        Update nested configuration using dot notation (e.g., 'network.options')

        Returns a new `ConfigurationState` instance with the updated values.
        """
        if path == ".":
            return attrs.evolve(self, **kwargs)

        parts = path.split(".")
        obj = self.get(path)
        if not attrs.has(type(obj)):
            raise ValueError(f"Configuration path {path!r} is not a section")

        new_obj = attrs.evolve(obj, **kwargs)
        # Rebuild every parent section up to the root
        for depth in range(len(parts) - 1, -1, -1):
            parent = self.get(".".join(parts[:depth])) if depth else self
            new_obj = attrs.evolve(parent, **{parts[depth]: new_obj})
        return typing.cast(Self, new_obj)


def load_config(data: typing.Union[bytes, str]) -> ConfigurationState:
    """
    Load a configuration state from JSON.

    :param data: JSON document
    :return: Structured configuration state
    """
    raw = orjson.loads(data)
    state = converter.structure(raw, ConfigurationState)
    network = state.network
    logger.debug(
        f"Loaded configuration v{state.version} with {len(network.pipes)} pipe(s), "
        f"{len(network.pumps)} pump(s) and {len(network.valves)} valve(s)"
    )
    return state


def dump_config(state: ConfigurationState) -> bytes:
    """Serialize a configuration state to JSON."""
    return orjson.dumps(converter.unstructure(state), option=orjson.OPT_INDENT_2)
