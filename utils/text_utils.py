"""
Text utilities for handling Spanish text with accents.

Used for search filters and report labels.
"""

import unicodedata
from typing import Optional


def normalize_search_text(text: Optional[str]) -> str:
    """
    Normalize text for accent- and case-insensitive matching.

    Handles Spanish accents and special characters:
    - "Guadalajara Centro" → "guadalajara centro"
    - "Ubicación Av. Juárez" → "ubicacion av. juarez"
    - "  Mérida  " → "merida"

    Args:
        text: Original text (may have accents, mixed case)

    Returns:
        Lowercase ASCII-folded string, "" for empty input
    """
    if not text:
        return ""

    # Strip whitespace
    text = text.strip()

    # Normalize unicode (NFD decomposition separates base chars from accents)
    normalized = unicodedata.normalize('NFD', text)

    # Remove accent marks (combining characters in Unicode category 'Mn')
    ascii_text = ''.join(
        c for c in normalized
        if unicodedata.category(c) != 'Mn'
    )

    # casefold for consistent comparison
    return ascii_text.casefold()


def clean_label(value: Optional[str]) -> Optional[str]:
    """
    Clean a display label (preserves accents).

    - Strips whitespace
    - Returns None for empty/whitespace-only strings

    Args:
        value: Raw label from a record field

    Returns:
        Cleaned label or None
    """
    if value is None:
        return None

    value = str(value).strip()

    if not value:
        return None

    return value
