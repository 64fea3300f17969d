from typing import Optional
import math
import re

from rapidfuzz.distance import Levenshtein


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values"""
    return int(math.floor(value + 0.5))


def string_similarity(s1: Optional[str], s2: Optional[str]) -> int:
    """Edit-distance similarity of two strings on a 0-100 scale"""
    if not s1 or not s2:
        return 0

    s1 = s1.lower().strip()
    s2 = s2.lower().strip()
    if s1 == s2:
        return 100

    max_len = max(len(s1), len(s2))
    if max_len == 0:
        return 100

    distance = Levenshtein.distance(s1, s2)
    return round_half_up((1 - distance / max_len) * 100)


def normalize_whitespace(text: str) -> str:
    """Normalize all whitespace to single spaces"""
    if not text:
        return ""
    return " ".join(text.split())


def lower_trim(text: Optional[str]) -> str:
    if not text:
        return ""
    return text.lower().strip()


def extract_email_domain(email: Optional[str]) -> str:
    """Return the lower-cased part after the first '@', or '' if there is none"""
    if not email:
        return ""
    parts = email.lower().split("@")
    return parts[1] if len(parts) > 1 else ""


def count_digits(text: str) -> int:
    if not text:
        return 0
    return len(re.findall(r"\d", text))
