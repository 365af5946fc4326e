# rotation_rtpc/rotation_rtpc/constants.py
"""
Constants for the rotation RTPC library.
Includes default polling cadence, trigger thresholds, angle domains used by
the mappers and the format of the tabular randomization data.
"""

# Polling cadence (seconds of accumulated host time between two samples)
DEFAULT_UPDATE_INTERVAL = 0.1

# Hysteresis thresholds (degrees of change per poll)
DEFAULT_ROTATION_THRESHOLD = 1.0

# Axis names as they appear in configuration files
AXIS_YAW = "yaw"      # rotation about the vertical axis
AXIS_ROLL = "roll"    # rotation about the forward axis
AXIS_PITCH = "pitch"  # rotation about the lateral axis

AXIS_NAMES = (AXIS_YAW, AXIS_ROLL, AXIS_PITCH)

# Angle domains (degrees)
FULL_TURN_DEGREES = 360.0
ROTATION_DOMAIN = (0.0, FULL_TURN_DEGREES)   # wrapped absolute angle
PANORAMA_HORIZONTAL_DOMAIN = (-180.0, 180.0)  # yaw / roll panning
PANORAMA_VERTICAL_DOMAIN = (-90.0, 90.0)      # pitch panning

# Default shared output range for panorama channels
DEFAULT_MIN_PAN_VALUE = -3600.0
DEFAULT_MAX_PAN_VALUE = 3600.0

# Tabular randomization data
TABULAR_FIELD_COUNT = 5
TABULAR_DELIMITER = ","
TABULAR_VALUE_PRECISION = 6
TABULAR_ZERO_LITERAL = "0.000000"  # stored as 0, never forwarded

# Tabular column indices
TABULAR_COL_CATEGORY = 0
TABULAR_COL_PARAMETER = 1
TABULAR_COL_VALUE = 2
TABULAR_COL_MIN_OFFSET = 3
TABULAR_COL_MAX_OFFSET = 4

# Trigger kinds emitted by the samplers
TRIGGER_START = "start"
TRIGGER_STOP = "stop"
TRIGGER_WINDOW = "window"
