"""
Constants for ChefIQ cooking-action inference.

Keyword cue lists, plausibility windows and scoring weights used by the
extractors, the classifier and the analyzer.
"""

# ---------------------------------------------------------------------------
# Plausibility windows (inclusive). Values outside are discarded, not clamped.
# ---------------------------------------------------------------------------
OVEN_TEMP_F = (150, 550)
OVEN_TEMP_C = (65, 290)

INSTRUCTION_MINUTES = (1, 480)

AIR_FRY_TEMP_F = (300, 450)
AIR_FRY_MINUTES = (3, 120)
ROAST_TEMP_F = (325, 500)
ROAST_MINUTES = (15, 240)
BROIL_MINUTES = (1, 30)
STEAM_MINUTES = (2, 90)
SEAR_SAUTE_MINUTES = (1, 45)
SOUS_VIDE_TEMP_F = (110, 200)
SOUS_VIDE_MINUTES = (30, 4320)
TOAST_MINUTES = (1, 15)
DEHYDRATE_TEMP_F = (95, 165)
DEHYDRATE_MINUTES = (120, 4320)
PRESSURE_COOK_MINUTES = (1, 240)
SLOW_COOK_MINUTES = (30, 1440)

# ---------------------------------------------------------------------------
# Classifier weights
# ---------------------------------------------------------------------------
BAKE_INCREASE_BOOST = 5
DEHYDRATE_HIGH_TEMP_PENALTY = 3
DEHYDRATE_MAX_PLAUSIBLE_F = 200
CONFIDENCE_BASE = 0.4
CONFIDENCE_PER_MATCH = 0.3
GRILL_SUBSTITUTION_CONFIDENCE = 0.8
GRILL_BAKE_MIN_COOK_MINUTES = 20

# ---------------------------------------------------------------------------
# Description lines dropped before analysis (storage notes trigger "steam",
# "freeze"... false positives)
# ---------------------------------------------------------------------------
STORAGE_LINE_KEYWORDS = ["storage", "store in", "refrigerat", "freezer"]

# ---------------------------------------------------------------------------
# Stovetop-only cues. "over medium/high heat" is left out: that is Sear/Sauté
# territory on the iQ Cooker.
# ---------------------------------------------------------------------------
STOVETOP_KEYWORDS = [
    "in a saucepan", "in a pot", "in a skillet", "in a frying pan",
    "stove top", "stovetop", "on the stove", "on the burner",
    "over low heat", "bring to a boil", "bring to boil",
]

# ---------------------------------------------------------------------------
# Grilling substitution
# ---------------------------------------------------------------------------
GRILL_KEYWORDS = ["grill", "grilled", "outdoor grill", "preheated grill", "barbecue", "bbq"]
GRILL_PROTEIN_KEYWORDS = [
    "pork", "chicken", "beef", "lamb", "fish", "salmon", "turkey", "steak", "chops",
]
CRISPY_KEYWORDS = ["crispy", "crunchy"]
BROWNING_KEYWORDS = ["char", "sear", "brown"]
TEMPERATURE_CHECK_KEYWORDS = ["degrees", "thermometer", "internal temperature"]

# ---------------------------------------------------------------------------
# Probe and carryover cooking
# ---------------------------------------------------------------------------
PROBE_KEYWORDS = [
    "internal temperature", "probe", "thermometer", "until cooked through",
    "meat thermometer", "doneness", "internal temp", "reaches temperature",
    "cook until", "temp probe", "temperature probe",
]

REMOVE_TEMP_KEYWORDS = [
    "remove at", "pull at", "take out at", "remove from heat at",
    "pull from", "rest", "resting", "carryover", "carry over",
    "let rest", "allow to rest", "remove when",
]

CARRYOVER_PROTEINS = [
    "steak", "beef", "roast", "prime rib", "brisket", "pork loin",
    "pork chop", "lamb", "turkey", "whole chicken", "chicken breast",
    "duck breast", "venison", "tenderloin",
]

# Proteins missing from the temperature guide
FALLBACK_PROTEIN_TEMPERATURES = {
    "salmon": 145,
    "tuna": 145,
    "venison": 145,
    "game": 165,
    "duck": 165,
}

DEFAULT_PROBE_TEMP_F = 145
MIN_REMOVE_TEMP_F = 100
MAX_CARRYOVER_F = 15
CARRYOVER_OFFSET_LOW = 5
CARRYOVER_OFFSET_HIGH = 10
CARRYOVER_HIGH_TARGET_F = 160

# ---------------------------------------------------------------------------
# Multi-stage bake
# ---------------------------------------------------------------------------
SECOND_STAGE_TIME_FRACTION = 3
SECONDARY_METHOD_MIN_SCORE = 1
MAX_SECONDARY_METHODS = 2

# ---------------------------------------------------------------------------
# LLM retry policy (seconds, multiplied by attempt + 1)
# ---------------------------------------------------------------------------
LLM_MAX_RETRIES = 2
LLM_UNAVAILABLE_BACKOFF = 5
LLM_RATE_LIMIT_BACKOFF = 3
LLM_CONFIDENCE = 0.9
