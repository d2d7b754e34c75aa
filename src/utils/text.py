"""Text normalization utilities."""
import re
import unicodedata
from typing import Optional


def normalize(text: Optional[str]) -> str:
    """
    Strip diacritics and fold whitespace.

    Case is preserved; callers lower-case when they need case-insensitive
    comparisons. Applying the function twice yields the same string.

    Args:
        text: Raw text (a CSV header, a field name or alias)

    Returns:
        Normalized text, "" for None or blank input
    """
    if not text:
        return ""

    decomposed = unicodedata.normalize("NFD", str(text))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))

    # Recompose whatever survived (e.g. ligatures, CJK) so output is stable
    stripped = unicodedata.normalize("NFC", stripped)

    return re.sub(r'\s+', ' ', stripped).strip()


def fold(text: Optional[str], max_length: Optional[int] = None) -> str:
    """
    Normalize and lower-case text for comparisons.

    Args:
        text: Raw text
        max_length: Optional cap on the folded length

    Returns:
        Folded text
    """
    folded = normalize(text).lower()
    if max_length is not None:
        folded = folded[:max_length]
    return folded
