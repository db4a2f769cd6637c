from __future__ import annotations

"""Text to hand to a Korean TTS voice.

A lone jamo glyph is read by its letter name (ㄱ -> 기역); everything else,
syllables and words included, is spoken as written.
"""

from typing import Final

JAMO_READINGS: Final[dict[str, str]] = {
    # Vowels
    "ㅏ": "아", "ㅑ": "야", "ㅓ": "어", "ㅕ": "여", "ㅗ": "오",
    "ㅛ": "요", "ㅜ": "우", "ㅠ": "유", "ㅡ": "으", "ㅣ": "이",
    "ㅐ": "애", "ㅔ": "에", "ㅒ": "얘", "ㅖ": "예",
    "ㅘ": "와", "ㅙ": "왜", "ㅚ": "외", "ㅝ": "워", "ㅞ": "웨", "ㅟ": "위", "ㅢ": "의",
    # Basic consonants
    "ㄱ": "기역", "ㄴ": "니은", "ㄷ": "디귿", "ㄹ": "리을", "ㅁ": "미음",
    "ㅂ": "비읍", "ㅅ": "시옷", "ㅇ": "이응", "ㅈ": "지읒", "ㅊ": "치읓",
    "ㅋ": "키읔", "ㅌ": "티읕", "ㅍ": "피읖", "ㅎ": "히읗",
    # Double consonants
    "ㄲ": "쌍기역", "ㄸ": "쌍디귿", "ㅃ": "쌍비읍", "ㅆ": "쌍시옷", "ㅉ": "쌍지읒",
}


def speak_text(text: str | None) -> str:
    if not text:
        return ""
    return JAMO_READINGS.get(text, text)
