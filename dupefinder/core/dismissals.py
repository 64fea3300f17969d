"""
Helpers for the set of contact pairs a user marked as "not a duplicate".

A pair is stored under both directed keys ("a-b" and "b-a") so lookups do not
depend on the order the contacts come in. The functions here never modify the
set they are given; storing the result is up to the caller.
"""

from typing import Iterable, List, Optional, Set, Tuple


def pair_key(id1, id2) -> str:
    return f"{id1}-{id2}"


def pair_keys(id1, id2) -> Tuple[str, str]:
    """Both directed keys for an unordered pair of contact ids"""
    return pair_key(id1, id2), pair_key(id2, id1)


def is_dismissed(id1, id2, dismissed_pairs: Set[str]) -> bool:
    key1, key2 = pair_keys(id1, id2)
    return key1 in dismissed_pairs or key2 in dismissed_pairs


def dismiss_pair(id1, id2, dismissed_pairs: Optional[Set[str]] = None) -> Set[str]:
    """Return a copy of the dismissal set with the pair added"""
    updated = set(dismissed_pairs or ())
    updated.update(pair_keys(id1, id2))
    return updated


def dismiss_group(group, dismissed_pairs: Optional[Set[str]] = None) -> Set[str]:
    """Return a copy of the dismissal set with every pair of the group added.

    ``group`` is a DuplicateGroup or a plain list of contacts.
    """
    contacts = getattr(group, "contacts", group)
    ids = [contact.id for contact in contacts]

    updated = set(dismissed_pairs or ())
    for i in range(len(ids)):
        for j in range(i + 1, len(ids)):
            updated.update(pair_keys(ids[i], ids[j]))
    return updated


def load_dismissed_pairs(items: Optional[Iterable]) -> Set[str]:
    """Build a dismissal set from its serialized list form"""
    if items is None:
        return set()
    return {str(item) for item in items}


def dump_dismissed_pairs(dismissed_pairs: Set[str]) -> List[str]:
    """Serialize a dismissal set as a sorted list of keys"""
    return sorted(dismissed_pairs)
