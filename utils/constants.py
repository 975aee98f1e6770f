import json
from config.paths import CONSTANTS_PATH

"""
Loads studio constants from config/constants.json and exposes them as module-level variables.
Edit constants.json to change values; import from utils.constants to use in code.
"""

with open(CONSTANTS_PATH, "r", encoding="utf-8") as f:
    _constants = json.load(f)

# Studios and week
LOCATIONS = _constants["LOCATIONS"]
DAYS_OF_WEEK = _constants["DAYS_OF_WEEK"]
WEEKEND_DAYS = _constants["WEEKEND_DAYS"]
STUDIO_CAPACITIES = _constants["STUDIO_CAPACITIES"]
DEFAULT_STUDIO_CAPACITY = _constants["DEFAULT_STUDIO_CAPACITY"]
LOCATION_FORMAT_RULES = _constants["LOCATION_FORMAT_RULES"]
SUNDAY_CLASS_LIMITS = _constants["SUNDAY_CLASS_LIMITS"]
DEFAULT_SUNDAY_CLASS_LIMIT = _constants["DEFAULT_SUNDAY_CLASS_LIMIT"]

# Time grid
GRID_START = _constants["GRID_START"]
GRID_END = _constants["GRID_END"]
GRID_STEP_MINUTES = _constants["GRID_STEP_MINUTES"]
MORNING_SHIFT = tuple(_constants["MORNING_SHIFT"])
EVENING_SHIFT = tuple(_constants["EVENING_SHIFT"])
WEEKDAY_RESTRICTED_HOURS = tuple(_constants["WEEKDAY_RESTRICTED_HOURS"])
WEEKEND_RESTRICTED_HOURS = tuple(_constants["WEEKEND_RESTRICTED_HOURS"])

# Trainer limits
MAX_CONSECUTIVE_CLASSES = _constants["MAX_CONSECUTIVE_CLASSES"]
CONSECUTIVE_GAP_MINUTES = _constants["CONSECUTIVE_GAP_MINUTES"]
MAX_DAILY_CLASSES = _constants["MAX_DAILY_CLASSES"]
MAX_DAILY_HOURS = _constants["MAX_DAILY_HOURS"]
MAX_WEEKLY_HOURS = _constants["MAX_WEEKLY_HOURS"]
NEW_TRAINER_MAX_WEEKLY_HOURS = _constants["NEW_TRAINER_MAX_WEEKLY_HOURS"]
WEEKLY_HOURS_WARNING_MARGIN = _constants["WEEKLY_HOURS_WARNING_MARGIN"]

# Scoring thresholds
MIN_FILL_CHECKED_IN = _constants["MIN_FILL_CHECKED_IN"]
MIN_QUOTA_CHECKED_IN = _constants["MIN_QUOTA_CHECKED_IN"]
TOP_PERFORMER_THRESHOLD = _constants["TOP_PERFORMER_THRESHOLD"]
MIN_SPECIALTY_CHECKED_IN = _constants["MIN_SPECIALTY_CHECKED_IN"]

# Format markers and class mix
BARRE_FORMAT = _constants["BARRE_FORMAT"]
BARRE_MARKER = _constants["BARRE_MARKER"]
EXPRESS_MARKER = _constants["EXPRESS_MARKER"]
RECOVERY_MARKER = _constants["RECOVERY_MARKER"]
HOSTED_MARKER = _constants["HOSTED_MARKER"]
QUALIFIER_SEPARATOR = _constants["QUALIFIER_SEPARATOR"]
BARRE_QUOTA_PER_SHIFT = _constants["BARRE_QUOTA_PER_SHIFT"]
MIN_BARRE_PER_DAY = _constants["MIN_BARRE_PER_DAY"]
MAX_SAME_FORMAT_PER_DAY = _constants["MAX_SAME_FORMAT_PER_DAY"]
MAX_VARIETY_ADDITIONS = _constants["MAX_VARIETY_ADDITIONS"]
RECOVERY_BLOCKED_DAYS = _constants["RECOVERY_BLOCKED_DAYS"]

# Candidate slot lists
QUOTA_SLOTS = _constants["QUOTA_SLOTS"]
EXPRESS_SLOTS = _constants["EXPRESS_SLOTS"]
GAP_FILL_WINDOWS = _constants["GAP_FILL_WINDOWS"]

# Durations
CLASS_DURATIONS = [tuple(entry) for entry in _constants["CLASS_DURATIONS"]]
DEFAULT_CLASS_DURATION = _constants["DEFAULT_CLASS_DURATION"]

# Format groups
NEW_TRAINER_FORMATS = _constants["NEW_TRAINER_FORMATS"]
VARIETY_FORMATS = _constants["VARIETY_FORMATS"]
PRIORITY_CLASS_FORMATS = _constants["PRIORITY_CLASS_FORMATS"]

VARIATION_BUCKETS = _constants["VARIATION_BUCKETS"]
MAX_SUGGESTIONS = _constants["MAX_SUGGESTIONS"]
