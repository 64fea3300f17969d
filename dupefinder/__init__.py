from .core.matcher import ContactMatcher, calculate_similarity, find_duplicate_groups
from .core.dismissals import dismiss_group, dismiss_pair
from .core.types import Confidence, DuplicateGroup, SimilarityScore

__all__ = [
    "ContactMatcher",
    "Confidence",
    "DuplicateGroup",
    "SimilarityScore",
    "calculate_similarity",
    "dismiss_group",
    "dismiss_pair",
    "find_duplicate_groups",
]
