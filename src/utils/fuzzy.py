"""Fuzzy header matching utilities."""
import re
from typing import List
from rapidfuzz.distance import Levenshtein

from src.matching.rules import MAX_NAME_LENGTH, MIN_TOKEN_LENGTH, TOKEN_SPLIT_PATTERN
from src.utils.text import fold


def levenshtein_distance(a: str, b: str) -> int:
    """
    Compute the edit distance between two strings.

    Unit cost insertions, deletions and substitutions. No normalization
    is applied; case and diacritics must already be handled by the caller.

    Args:
        a: First string
        b: Second string

    Returns:
        Minimum number of single-character edits turning a into b
    """
    return Levenshtein.distance(a, b)


def calculate_similarity(str1: str, str2: str) -> float:
    """
    Similarity between two names, normalized by the longer one.

    Args:
        str1: First name
        str2: Second name

    Returns:
        Score in [0, 1]; 1.0 only when both fold to the same string
    """
    s1 = fold(str1, MAX_NAME_LENGTH)
    s2 = fold(str2, MAX_NAME_LENGTH)

    if s1 == s2:
        return 1.0

    if not s1 or not s2:
        return 0.0

    distance = levenshtein_distance(s1, s2)
    max_length = max(len(s1), len(s2))
    return 1 - distance / max_length


def tokenize(text: str) -> List[str]:
    """
    Split folded text into significant words.

    Args:
        text: Raw text

    Returns:
        Words of at least MIN_TOKEN_LENGTH characters
    """
    words = re.split(TOKEN_SPLIT_PATTERN, fold(text, MAX_NAME_LENGTH))
    return [w for w in words if len(w) >= MIN_TOKEN_LENGTH]


def has_contextual_match(header: str, target_name: str) -> bool:
    """
    Check whether any word of the header and any word of the target
    contain one another ("tel" / "telefone", "data_criacao" / "criacao").

    Args:
        header: CSV header
        target_name: Field name or alias

    Returns:
        True if at least one word pair overlaps
    """
    header_words = tokenize(header)
    target_words = tokenize(target_name)

    for word in header_words:
        for target_word in target_words:
            if word in target_word or target_word in word:
                return True

    return False
