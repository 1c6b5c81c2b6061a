"""Fixed constants: descriptor grammar markers, header group codes, time units.

From the DE-series ASCII header and Initial_data.dat layouts.
"""

# Initial data markers (whole-line equality, case-sensitive)
BODIES_MARKER = 'BODIES:'
DATE_MARKER = 'DATE:'
START_YEAR_PREFIX = 'Start_year'
END_YEAR_PREFIX = 'End_year'

# Header record keys
NCOEFF_KEY = 'NCOEFF='
GROUP_KEY = 'GROUP'

# Header group codes
GROUP_DATES = '1030'  # julian start, julian end, interval days
GROUP_CONST_NAMES = '1040'  # count, then constant names
GROUP_CONST_VALUES = '1041'  # constant values, same order as 1040
GROUP_POINTERS = '1050'  # three rows of per-body pointers

EMRAT_NAME = 'EMRAT'

# Pointer triplet: start offset, coefficients per component, subintervals
POINTER_WIDTH = 3

# FORTRAN exponent field: marker, sign, two digits (e.g. "D+02")
EXPONENT_FIELD_WIDTH = 4
EXPONENT_MARKERS = 'DdEe'

# Boolean tokens accepted in the roster
TRUE_TOKEN = 'true'
FALSE_TOKEN = 'false'

# Time
SECONDS_PER_MINUTE = 60.0
SECONDS_PER_HOUR = 3600.0
SECONDS_PER_DAY = 86400.0
MINUTES_PER_HOUR = 60.0
HOURS_PER_DAY = 24.0
SECOND_DECIMALS = 4  # calendar seconds are resolved to 0.1 ms
