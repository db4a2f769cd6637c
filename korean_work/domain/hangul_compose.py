from __future__ import annotations

"""Hangul composition helpers (domain layer).

Pure functions for composing and decomposing precomposed Hangul syllables from
compatibility jamo.

Primary API:
- compose(initial, medial, final=None)
- decompose(char)
- is_valid_initial / is_valid_medial / is_valid_final

Invalid input is signalled with ``None``; nothing here raises for bad glyphs.
"""

from dataclasses import dataclass
from typing import Final

from korean_work.domain.jamo_tables import (
    FINAL_COUNT,
    FINALS,
    HANGUL_BASE,
    HANGUL_LAST,
    INITIALS,
    MEDIAL_COUNT,
    MEDIALS,
)


@dataclass(frozen=True)
class SyllableParts:
    initial: str
    medial: str
    final: str = ""


# -----------------------------------------------------------------------------
# Internal lookup maps
# -----------------------------------------------------------------------------

_INITIAL_MAP: Final[dict[str, int]] = {j: i for i, j in enumerate(INITIALS)}
_MEDIAL_MAP: Final[dict[str, int]] = {j: i for i, j in enumerate(MEDIALS)}
_FINAL_MAP: Final[dict[str, int]] = {j: i for i, j in enumerate(FINALS)}


# -----------------------------------------------------------------------------
# Domain logic
# -----------------------------------------------------------------------------

def compose(initial: str, medial: str, final: str | None = None) -> str | None:
    """Compose a Hangul syllable from compatibility jamo.

    Args:
        initial: choseong (e.g., "ㄱ")
        medial: jungseong (e.g., "ㅏ")
        final: jongseong (e.g., "ㄴ"); None or "" for no final

    Returns:
        A composed Hangul syllable (e.g., "간") or None if any glyph is invalid.

    Notes:
        SBase + (LIndex * VCount + VIndex) * TCount + TIndex
    """
    li = _INITIAL_MAP.get(initial)
    vi = _MEDIAL_MAP.get(medial)
    ti = _FINAL_MAP.get(final) if final else 0

    if li is None or vi is None or ti is None:
        return None

    return chr(HANGUL_BASE + (li * MEDIAL_COUNT + vi) * FINAL_COUNT + ti)


def decompose(char: str) -> SyllableParts | None:
    """Split a precomposed syllable into its (initial, medial, final) jamo.

    Returns None for the empty string or when the first code point is not in the
    Hangul syllable block (U+AC00..U+D7A3).
    """
    if not char:
        return None
    code = ord(char[0])
    if code < HANGUL_BASE or code > HANGUL_LAST:
        return None

    offset = code - HANGUL_BASE
    final_index = offset % FINAL_COUNT
    medial_index = (offset // FINAL_COUNT) % MEDIAL_COUNT
    initial_index = offset // (MEDIAL_COUNT * FINAL_COUNT)

    return SyllableParts(
        initial=INITIALS[initial_index],
        medial=MEDIALS[medial_index],
        final=FINALS[final_index],
    )


def is_valid_initial(glyph: str) -> bool:
    return glyph in _INITIAL_MAP


def is_valid_medial(glyph: str) -> bool:
    return glyph in _MEDIAL_MAP


def is_valid_final(glyph: str) -> bool:
    """True for any of the 28 finals, including "" (no final)."""
    return glyph in _FINAL_MAP
