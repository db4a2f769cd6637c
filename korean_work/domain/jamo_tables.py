from __future__ import annotations

"""Hangul jamo tables (domain layer).

The three positional tables are in standard Unicode Hangul order; composition and
decomposition depend on these exact index positions, so they are constants rather
than configurable data.

The restricted BASIC_* / COMMON_FINALS subsets are the pools the composition quiz
draws from.
"""

from typing import Final


# -----------------------------------------------------------------------------
# Unicode block constants
# -----------------------------------------------------------------------------

HANGUL_BASE: Final[int] = 0xAC00
HANGUL_LAST: Final[int] = 0xD7A3

INITIAL_COUNT: Final[int] = 19
MEDIAL_COUNT: Final[int] = 21
FINAL_COUNT: Final[int] = 28


# -----------------------------------------------------------------------------
# Positional tables
# -----------------------------------------------------------------------------

# Leading consonants (Choseong)
INITIALS: Final[tuple[str, ...]] = (
    "ㄱ", "ㄲ", "ㄴ", "ㄷ", "ㄸ", "ㄹ", "ㅁ", "ㅂ", "ㅃ",
    "ㅅ", "ㅆ", "ㅇ", "ㅈ", "ㅉ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
)

# Vowels (Jungseong)
MEDIALS: Final[tuple[str, ...]] = (
    "ㅏ", "ㅐ", "ㅑ", "ㅒ", "ㅓ", "ㅔ", "ㅕ", "ㅖ",
    "ㅗ", "ㅘ", "ㅙ", "ㅚ", "ㅛ",
    "ㅜ", "ㅝ", "ㅞ", "ㅟ", "ㅠ",
    "ㅡ", "ㅢ", "ㅣ",
)

# Trailing consonants (Jongseong). Index 0 is "no final".
FINALS: Final[tuple[str, ...]] = (
    "",
    "ㄱ", "ㄲ", "ㄳ",
    "ㄴ", "ㄵ", "ㄶ",
    "ㄷ",
    "ㄹ", "ㄺ", "ㄻ", "ㄼ", "ㄽ", "ㄾ", "ㄿ", "ㅀ",
    "ㅁ",
    "ㅂ", "ㅄ",
    "ㅅ", "ㅆ",
    "ㅇ",
    "ㅈ", "ㅊ",
    "ㅋ",
    "ㅌ",
    "ㅍ",
    "ㅎ",
)

NO_FINAL: Final[str] = FINALS[0]


# -----------------------------------------------------------------------------
# Quiz pools
# -----------------------------------------------------------------------------

# Initials without the tense/double consonants
BASIC_INITIALS: Final[tuple[str, ...]] = (
    "ㄱ", "ㄴ", "ㄷ", "ㄹ", "ㅁ", "ㅂ", "ㅅ",
    "ㅇ", "ㅈ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
)

# The "basic 10" vowels (no compound vowels)
BASIC_MEDIALS: Final[tuple[str, ...]] = (
    "ㅏ", "ㅑ", "ㅓ", "ㅕ", "ㅗ", "ㅛ", "ㅜ", "ㅠ", "ㅡ", "ㅣ",
)

# Easy finals used at level 3
COMMON_FINALS: Final[tuple[str, ...]] = (
    "ㄱ", "ㄴ", "ㄷ", "ㄹ", "ㅁ", "ㅂ", "ㅇ",
)
