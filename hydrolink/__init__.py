"""
Link elements (pipes, pumps and valves) of a piped flow network.
"""

from .types import LinkStatus, LinkType, HeadLossFormula, ValveType  # noqa
from .mempool import MemPool  # noqa
from .elements import Link, Pipe, Pump, Valve  # noqa
from .builder import NetworkBuildError, build_link, build_links  # noqa
from .config import ConfigurationState, load_config, dump_config  # noqa
