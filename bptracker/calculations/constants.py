"""
Calculation Constants for BPTracker

Centralized location for every threshold used by the statistics and insight code.
Tunable defaults are imported from Config; behavioral thresholds are fixed here so
they can be audited and tested independently of the logic that uses them.
"""

from bptracker.config import Config

# Statistical Constants
DEFAULT_CONFIDENCE_LEVEL = Config.DEFAULT_CONFIDENCE_LEVEL  # 95% confidence interval
SIGNIFICANCE_ALPHA = 0.05  # p-value below which a t-test is significant
OUTLIER_IQR_MULTIPLIER = Config.OUTLIER_IQR_MULTIPLIER  # Tukey fence multiplier
DEFAULT_EMA_ALPHA = Config.EMA_ALPHA  # Exponential smoothing factor
MIN_OUTLIER_SAMPLE = 4  # Fewer values than this = no outlier bounds
MIN_P_VALUE = 1e-300  # Floor so p-values stay in (0, 1]

# Effect size (Cohen's d) thresholds on |d|
EFFECT_SIZE_SMALL = 0.2
EFFECT_SIZE_MEDIUM = 0.5
EFFECT_SIZE_LARGE = 0.8

# Minimum sample sizes for insight generation
MIN_COMMON_DAYS = 3  # Days present in both series
MIN_BP_READINGS = 5  # Readings needed for any BP correlation or trend
MIN_EXERCISE_ENTRIES = 3
MIN_DIET_ENTRIES = 5
MIN_MEDICATION_DOSES = 5
MIN_GROUP_DAYS = 2  # Days per side for group comparisons (rest days, meal types)
MIN_GROUP_READINGS = 2  # Readings per side for post-exercise comparison

# Blood pressure difference thresholds (mmHg)
SIGNIFICANT_BP_DIFFERENCE = 5.0
LARGE_BP_DIFFERENCE = 10.0

# Correlation strength thresholds on |r|
MODERATE_CORRELATION = 0.3
STRONG_CORRELATION = 0.6
DIET_CORRELATION_THRESHOLD = 0.25

# Medication adherence
LOW_ADHERENCE_PERCENT = 80.0

# Exercise timing
POST_EXERCISE_WINDOW_HOURS = 4
MORNING_START_HOUR = 5
AFTERNOON_START_HOUR = 12
EVENING_START_HOUR = 17

# Diet timing and sodium
EVENING_MEAL_HOUR = 17  # Meals at or after this hour count as evening meals
HIGH_SODIUM_MG = 2300.0  # Daily recommended upper limit
HIGH_SODIUM_KEYWORDS = (
    "salt",
    "salty",
    "soy sauce",
    "pizza",
    "bacon",
    "ham",
    "sausage",
    "hot dog",
    "pickle",
    "chips",
    "fries",
    "fast food",
    "canned soup",
    "ramen",
    "deli",
    "cheese",
    "jerky",
)

# Trend classification
TREND_STABLE_BAND = 2.0  # |weekly change| at or below this = stable (mmHg/week)
TREND_HIGH_R_SQUARED = 0.7
TREND_MEDIUM_R_SQUARED = 0.4
TREND_HIGH_MIN_READINGS = 14
TREND_MEDIUM_MIN_READINGS = 7
DAYS_PER_WEEK = 7
PROJECTION_DAYS = 30

# Predictive insights
SKIP_EXERCISE_MULTIPLIER = 1.5  # Week without exercise vs observed rest-day effect
MORNING_DOSE_CUTOFF_HOUR = 12  # Doses scheduled before this hour are morning doses

# Blood pressure classification (mmHg)
CRISIS_SYSTOLIC = 180
CRISIS_DIASTOLIC = 120
STAGE_2_SYSTOLIC = 140
STAGE_2_DIASTOLIC = 90
STAGE_1_SYSTOLIC = 130
STAGE_1_DIASTOLIC = 80
ELEVATED_SYSTOLIC = 120

# Data quality
DATA_QUALITY_WINDOW_DAYS = Config.DATA_QUALITY_WINDOW_DAYS
TARGET_MEALS_PER_DAY = 3
MIN_CONTEXT_NOTE_LENGTH = 10
BP_LOGGING_TARGET_PERCENT = 70
EXERCISE_LOGGING_TARGET_PERCENT = 50
DIET_LOGGING_TARGET_PERCENT = 50
CONTEXT_NOTES_TARGET_PERCENT = 90
MISSING_CONTEXT_DAY_RATIO = 0.3
QUALITY_WEIGHTS = {
    "bp_logging": 0.3,
    "exercise_logging": 0.2,
    "diet_logging": 0.2,
    "medication_adherence": 0.2,
    "bp_context_notes": 0.1,
}

# Streaks
STREAK_MILESTONES = (3, 7, 14, 21, 30, 60, 90, 180, 365)

# Score bounds
MAX_PERCENTAGE = 100.0
