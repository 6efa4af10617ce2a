"""Centralized configuration for the pace fixer."""

import os
from datetime import datetime, timezone

# Distance units
METERS_PER_KILOMETER = 1000.0
METERS_PER_MILE = 1609.34

# Auto-lap settings
AUTO_LAP_DISTANCE = float(os.environ.get("PACEFIX_AUTO_LAP_DISTANCE", "1000"))

# Pace entry defaults
DEFAULT_DISTANCE_UNIT = os.environ.get("PACEFIX_DEFAULT_UNIT", "km")

# Output naming
OUTPUT_SUFFIX = os.environ.get("PACEFIX_OUTPUT_SUFFIX", "_adjusted")

# Logging
LOG_LEVEL = os.environ.get("PACEFIX_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# FIT protocol constants
FIT_EPOCH = datetime(1989, 12, 31, 0, 0, 0, tzinfo=timezone.utc)
SEMICIRCLES_TO_DEGREES = 180.0 / 2147483648.0
