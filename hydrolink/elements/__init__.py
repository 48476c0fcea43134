from .element import Element  # noqa
from .link import Link, ZERO_FLOW, RE_THRESH, MIN_THRESH, HIGH_RESISTANCE  # noqa
from .curve import PumpCurve  # noqa
from .pipe import Pipe  # noqa
from .pump import Pump  # noqa
from .valve import Valve  # noqa
