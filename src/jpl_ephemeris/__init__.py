"""JPL DE-series ephemeris descriptor loader and Julian date conversions.

This package reads the two text descriptors that accompany a binary DE
ephemeris:
- Initial_data.dat: the body roster (name, active flag) and nominal years
- the ASCII header: NCOEFF, the Julian date span, EMRAT, and per-body pointers

and derives each body's coefficient block length, the layout a Chebyshev
interpolation engine needs to index into the binary records. Calendar and
Julian date conversion lives in time_utils.
"""

from jpl_ephemeris.descriptor import (
    CelestialBody,
    EphemerisDescriptor,
    EphemerisMetadata,
    NullPositionEngine,
    Position,
    PositionEngine,
)
from jpl_ephemeris.errors import (
    BodyNotFoundError,
    ConfigError,
    DescriptorParseError,
    EphemerisError,
    InactiveBodyError,
    InvalidDateError,
    JplEphemerisError,
    LayoutError,
    OutOfRangeError,
    ResourceReadError,
)
from jpl_ephemeris.time_utils import (
    CalendarDate,
    JulianDate,
    calendar_to_julian,
    julian_to_calendar,
)

__all__: list[str] = [
    'BodyNotFoundError',
    'CalendarDate',
    'CelestialBody',
    'ConfigError',
    'DescriptorParseError',
    'EphemerisDescriptor',
    'EphemerisError',
    'EphemerisMetadata',
    'InactiveBodyError',
    'InvalidDateError',
    'JplEphemerisError',
    'JulianDate',
    'LayoutError',
    'NullPositionEngine',
    'OutOfRangeError',
    'Position',
    'PositionEngine',
    'ResourceReadError',
    'calendar_to_julian',
    'julian_to_calendar',
]
