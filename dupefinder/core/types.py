from typing import List, Dict
from enum import Enum


class Confidence(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]


_CONFIDENCE_RANK = {Confidence.LOW: 1, Confidence.MEDIUM: 2, Confidence.HIGH: 3}


class ContactDataError(ValueError):
    """Raised when contact input cannot be turned into usable records"""


class SimilarityScore:
    """Per-field similarity of two contacts plus the weighted overall score"""

    def __init__(self, email=0, phone=0, name=0, company=0, overall=0):
        self.email = email
        self.phone = phone
        self.name = name
        self.company = company
        self.overall = overall

    def to_dict(self) -> Dict[str, int]:
        return {
            "email": self.email,
            "phone": self.phone,
            "name": self.name,
            "company": self.company,
            "overall": self.overall,
        }

    def __eq__(self, other):
        if not isinstance(other, SimilarityScore):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        fields = ", ".join(f"{k}={v}" for k, v in self.to_dict().items())
        return f"SimilarityScore({fields})"


class MatchResult:
    """Outcome of deciding that two contacts are duplicates"""

    def __init__(self, confidence: Confidence, reasons: List[str], score: int):
        self.confidence = confidence
        self.reasons = reasons
        self.score = score

    def __repr__(self):
        return (
            f"MatchResult(confidence={self.confidence.value}, "
            f"reasons={self.reasons}, score={self.score})"
        )


class DuplicateGroup:
    """Contacts believed to be the same person, anchored on the first one"""

    def __init__(self, contacts: List, confidence: Confidence, match_reasons: List[str], score: int):
        self.contacts = contacts
        self.confidence = confidence
        self.match_reasons = match_reasons
        self.score = score

    @property
    def contact_ids(self) -> List[str]:
        return [contact.id for contact in self.contacts]

    def __len__(self):
        return len(self.contacts)

    def __repr__(self):
        return (
            f"DuplicateGroup(ids={self.contact_ids}, confidence={self.confidence.value}, "
            f"score={self.score})"
        )


ValidationResults = Dict[str, List[str]]
ValidationIssue = Dict[str, str]
