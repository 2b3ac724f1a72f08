from __future__ import annotations

# Baseline rates restored by every full recalculation
INITIAL_POINTS: int = 0
INITIAL_POINTS_PER_CLICK: int = 1
INITIAL_POINTS_PER_SECOND: int = 0

# Upper bound for points and rates (signed 64-bit)
MAX_POINTS: int = 2**63 - 1

# Returned by cost lookups on unknown ids
MAX_COST: int = MAX_POINTS

# Idle generation cadence (seconds)
AUTO_GENERATION_INTERVAL: float = 1.0

# Persistence
SAVE_DATA_KEY: str = "pointforge_save"
AUTO_SAVE_INTERVAL: float = 5.0
SCHEMA_VERSION: str = "1"

DEFAULT_COST_MULTIPLIER: float = 1.15

# Prestige
MIN_PRESTIGE_POINTS: int = 1_000_000
PRESTIGE_POINT_RATIO: float = 0.001
PRESTIGE_LEVEL_BONUS: float = 0.1

# Offline rewards
DEFAULT_MAX_OFFLINE_HOURS: float = 24.0
DEFAULT_OFFLINE_EFFICIENCY: float = 0.5
MIN_OFFLINE_SECONDS: float = 60.0

# Number formatting
BIG_NUMBER_THRESHOLD: int = 1000
