from splineiges.version import __version__

# Record layout
card_width = 80
start_section_col_width = 72
global_section_col_width = 72
data_section_col_width = 64
fixed_field_width = 8
pointer_field_width = 7

line_terminator = "\n"
parameter_delimiter = ","
record_delimiter = ";"

# Section letter codes
START_LETTER = "S"
GLOBAL_LETTER = "G"
DIR_ENTRY_LETTER = "D"
PARAM_DATA_LETTER = "P"
TERMINATE_LETTER = "T"

system_id = f"splineiges {__version__}"

# Numeric characteristics written to the global section
G_INT_BITS = 32
G_INT_MIN = -2147483647
G_INT_MAX = 2147483647

G_FLOAT_EXP = 38
G_FLOAT_DIGITS = 6
G_FLOAT_MIN = 1.0e-38
G_FLOAT_MAX = 1.0e38

G_DOUBLE_EXP = 38
G_DOUBLE_DIGITS = 15
G_DOUBLE_MIN = 1.0e-38
G_DOUBLE_MAX = 1.0e38

G_POINTER_MIN = -9999999
G_POINTER_MAX = 9999999

VERSION_FLAG = 11  # IGES 5.3
DRAFTING_STANDARD_NONE = 0

ETYPE_B_SPLINE_SURFACE = 128
