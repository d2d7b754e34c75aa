"""Matching thresholds and constants."""
from typing import Dict

# Match types, in decreasing precedence
MATCH_EXACT = "exact"
MATCH_HIGH = "high"
MATCH_CONTEXTUAL = "contextual"

MATCH_TYPES = (MATCH_EXACT, MATCH_HIGH, MATCH_CONTEXTUAL)

MATCH_PRECEDENCE: Dict[str, int] = {
    MATCH_EXACT: 3,
    MATCH_HIGH: 2,
    MATCH_CONTEXTUAL: 1,
}

# Score assigned to exact (normalized) name or alias hits
EXACT_SCORE = 1.0

# Default acceptance threshold for a suggestion
DEFAULT_THRESHOLD = 0.6

# Similarity tier: minimum similarity for a "high" match
HIGH_SIMILARITY_MIN = 0.8

# Contextual tier is only tried while the best score is below this
CONTEXTUAL_GATE = 0.7

# Words of this length or shorter are ignored by the contextual matcher
# ("de", "da", "a", "o", ...)
MIN_TOKEN_LENGTH = 3

# Cap on folded header/name length fed to the distance computation
MAX_NAME_LENGTH = 256

# Word separators for contextual matching
TOKEN_SPLIT_PATTERN = r'[\s_-]+'
