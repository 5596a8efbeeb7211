"""Centralized constants for the night simulation."""

# Night timing
FIRST_NIGHT = 1
NIGHT_LENGTH_MINUTES = 360  # 12:00 AM -> 6:00 AM
MINUTE_STEP = 1             # In-game minutes per clock tick

# Driver cadences (simulated milliseconds between ticks)
MINUTE_INTERVAL_MS = 100
POWER_INTERVAL_MS = 1000
MOVEMENT_INTERVAL_MS = 1000
THREAT_INTERVAL_MS = 1000
MAX_TICKS_PER_UPDATE = 50  # Catch-up cap per driver per update

# Power
MAX_POWER = 100
BASE_POWER_USAGE = 1
CAMERA_USAGE = 1
DOOR_USAGE = 2
LIGHT_USAGE = 1

# Agent movement
MOVE_COOLDOWN_MS = 5000
BASE_RATE = 0.001    # Per point of aggressiveness per night
TIME_RATE = 0.0001   # Per elapsed in-game minute

# Threat
LOSS_PROBABILITY = 0.3

# Reference building layout
SHOW_STAGE = "show-stage"
DINING_AREA = "dining-area"
PIRATE_COVE = "pirate-cove"
BACKSTAGE = "backstage"
SUPPLY_CLOSET = "supply-closet"
EAST_HALL = "east-hall"
WEST_HALL = "west-hall"
EAST_HALL_CORNER = "east-hall-corner"
WEST_HALL_CORNER = "west-hall-corner"

# Fixed route for the scripted agent
SCRIPTED_ROUTE = (PIRATE_COVE, WEST_HALL, WEST_HALL_CORNER)

# History
POWER_HISTORY_LIMIT = 1000
