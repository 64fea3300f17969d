import re

from .. import settings
from ..utils.string import normalize_whitespace


class NameProcessor:
    def __init__(self, honorifics=settings.NAME_HONORIFICS):
        self.honorifics = set(honorifics)
        self._honorific_pattern = re.compile(
            r"\b(" + "|".join(sorted(self.honorifics)) + r")\b\.?",
            flags=re.IGNORECASE,
        )
        self.name_cache = {}

    def normalize_name(self, name: str) -> str:
        """Lower-case a name and strip honorifics, punctuation and extra spaces"""
        if not name:
            return ""

        if name in self.name_cache:
            return self.name_cache[name]

        normalized = name.lower()
        normalized = self._honorific_pattern.sub("", normalized)
        normalized = re.sub(r"[^a-z\s]", "", normalized)
        normalized = normalize_whitespace(normalized.strip())

        self.name_cache[name] = normalized
        return normalized

    def looks_like_initials(self, normalized_name: str) -> bool:
        """Short names such as 'jd' are probably initials of a longer name"""
        return len(normalized_name) <= settings.INITIALS_MAX_LENGTH or "." in normalized_name
