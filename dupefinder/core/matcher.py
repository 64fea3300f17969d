import logging
from typing import List, Dict, Optional, Iterable, Set, Union

from .. import settings
from .contact import Contact
from .types import Confidence, DuplicateGroup, MatchResult, SimilarityScore
from .dismissals import is_dismissed
from ..processors.name import NameProcessor
from ..processors.phone import PhoneProcessor
from ..utils.string import extract_email_domain, lower_trim, round_half_up, string_similarity

logger = logging.getLogger(__name__)

FIELD_WEIGHTS = {
    "email": settings.EMAIL_WEIGHT,
    "phone": settings.PHONE_WEIGHT,
    "name": settings.NAME_WEIGHT,
    "company": settings.COMPANY_WEIGHT,
}


def weighted_overall(scores: Dict[str, int], weights: Dict[str, float] = FIELD_WEIGHTS) -> int:
    """Weighted mean of the fields that scored above zero"""
    total = 0.0
    weight_sum = 0.0
    for field, weight in weights.items():
        score = scores.get(field, 0)
        if score > 0:
            total += score * weight
            weight_sum += weight

    return round_half_up(total / weight_sum) if weight_sum > 0 else 0


class ContactMatcher:
    def __init__(self, name_processor: NameProcessor = None, phone_processor: PhoneProcessor = None):
        self.name_processor = name_processor or NameProcessor()
        self.phone_processor = phone_processor or PhoneProcessor()

    def calculate_similarity(self, contact1: Contact, contact2: Contact) -> SimilarityScore:
        """Compare two contacts field by field"""
        # Email and phone are exact-or-nothing, near misses are usually different people
        email_score = 0
        if contact1.email and contact2.email and contact1.email.lower() == contact2.email.lower():
            email_score = 100

        phone_score = 100 if self.phone_processor.are_phones_matching(contact1.phone, contact2.phone) else 0

        name_score = string_similarity(
            self.name_processor.normalize_name(contact1.name),
            self.name_processor.normalize_name(contact2.name),
        )

        company1 = lower_trim(contact1.company)
        company2 = lower_trim(contact2.company)
        company_score = string_similarity(company1, company2) if company1 and company2 else 0

        scores = {
            "email": email_score,
            "phone": phone_score,
            "name": name_score,
            "company": company_score,
        }
        return SimilarityScore(overall=weighted_overall(scores), **scores)

    def is_duplicate(
        self, contact1: Contact, contact2: Contact, dismissed_pairs: Optional[Set[str]] = None
    ) -> Optional[MatchResult]:
        """Decide whether two contacts are duplicates.

        Dismissed pairs are rejected before any scoring. Otherwise the first
        rule that holds fixes the confidence, reason and reported score.
        Returns None when the contacts are not considered duplicates.
        """
        if dismissed_pairs and is_dismissed(contact1.id, contact2.id, dismissed_pairs):
            logger.debug(f"Skipping dismissed pair {contact1.id}-{contact2.id}")
            return None

        similarity = self.calculate_similarity(contact1, contact2)
        result = self._apply_rules(contact1, contact2, similarity)

        if result:
            logger.debug(
                f"Match {contact1.id}-{contact2.id}: {result.reasons[0]} "
                f"({result.confidence.value}, {result.score}) {similarity}"
            )
        return result

    def _apply_rules(self, contact1: Contact, contact2: Contact, similarity: SimilarityScore) -> Optional[MatchResult]:
        name = similarity.name
        company = similarity.company

        # High confidence: exact matches on key fields
        if similarity.email == 100:
            return self._match(Confidence.HIGH, "Same email address", settings.EXACT_MATCH_SCORE)

        if similarity.phone == 100:
            return self._match(Confidence.HIGH, "Same phone number", settings.EXACT_MATCH_SCORE)

        if name >= settings.SAME_NAME_COMPANY_THRESHOLD and company >= settings.SAME_NAME_COMPANY_THRESHOLD:
            return self._match(Confidence.HIGH, "Same name and company", settings.SAME_NAME_COMPANY_SCORE)

        if name >= settings.PHONE_SIMILAR_NAME_THRESHOLD and similarity.phone == 100:
            return self._match(
                Confidence.HIGH, "Same phone with similar name", settings.PHONE_SIMILAR_NAME_SCORE
            )

        if (
            name >= settings.EMAIL_DOMAIN_NAME_THRESHOLD
            and contact1.email
            and contact2.email
            and extract_email_domain(contact1.email) == extract_email_domain(contact2.email)
        ):
            return self._match(
                Confidence.HIGH, "Similar name with same email domain", settings.EMAIL_DOMAIN_NAME_SCORE
            )

        # Medium confidence: fuzzy name with supporting details
        if name >= settings.SIMILAR_NAME_THRESHOLD and company >= settings.SIMILAR_NAME_COMPANY_THRESHOLD:
            return self._match(Confidence.MEDIUM, "Similar name and company", settings.SIMILAR_NAME_COMPANY_SCORE)

        if name >= settings.VERY_SIMILAR_NAME_THRESHOLD and company >= settings.LOOSE_COMPANY_THRESHOLD:
            return self._match(
                Confidence.MEDIUM, "Very similar name with company match", settings.VERY_SIMILAR_NAME_COMPANY_SCORE
            )

        name1 = self.name_processor.normalize_name(contact1.name)
        name2 = self.name_processor.normalize_name(contact2.name)
        has_initials = self.name_processor.looks_like_initials(name1) or self.name_processor.looks_like_initials(name2)

        if (
            has_initials
            and name >= settings.INITIALS_NAME_THRESHOLD
            and (similarity.phone == 100 or company >= settings.INITIALS_COMPANY_THRESHOLD)
        ):
            return self._match(
                Confidence.MEDIUM, "Name variation (initials) with matching details", settings.INITIALS_SCORE
            )

        # Low confidence: the name alone
        if name >= settings.NAME_ONLY_THRESHOLD:
            return self._match(Confidence.LOW, "Very similar or same name", settings.NAME_ONLY_SCORE)

        return None

    @staticmethod
    def _match(confidence: Confidence, reason: str, score: int) -> MatchResult:
        return MatchResult(confidence, [reason], score)

    def find_duplicates(
        self, contacts: List[Contact], dismissed_pairs: Optional[Set[str]] = None
    ) -> List[DuplicateGroup]:
        """Group duplicate contacts around the first contact of each group.

        Every candidate is compared with the group's anchor only, so two
        members of a group need not match each other. A contact joins at most
        one group. Groups come back strongest first.
        """
        if dismissed_pairs is None:
            dismissed_pairs = set()

        processed = set()
        groups = []

        for i, anchor in enumerate(contacts):
            if anchor.id in processed:
                continue

            group = [anchor]
            match_reasons = []
            best = None

            for other in contacts[i + 1:]:
                if other.id in processed:
                    continue

                match = self.is_duplicate(anchor, other, dismissed_pairs)
                if not match:
                    continue

                group.append(other)
                processed.add(other.id)

                if best is None or (match.confidence.rank, match.score) > (best.confidence.rank, best.score):
                    best = match

                for reason in match.reasons:
                    if reason not in match_reasons:
                        match_reasons.append(reason)

            if len(group) > 1:
                processed.add(anchor.id)
                groups.append(DuplicateGroup(group, best.confidence, match_reasons, best.score))

        groups.sort(key=lambda g: (g.confidence.rank, g.score), reverse=True)
        logger.info(f"Found {len(groups)} duplicate groups among {len(contacts)} contacts")
        return groups


ContactLike = Union[Contact, Dict]


def _as_contacts(contacts: Iterable[ContactLike]) -> List[Contact]:
    return [c if isinstance(c, Contact) else Contact.from_dict(c) for c in contacts]


def calculate_similarity(contact1: ContactLike, contact2: ContactLike) -> SimilarityScore:
    """Similarity of two contacts, given as Contact objects or plain dicts"""
    contact1, contact2 = _as_contacts([contact1, contact2])
    return ContactMatcher().calculate_similarity(contact1, contact2)


def find_duplicate_groups(
    contacts: Iterable[ContactLike], dismissed_pairs: Optional[Iterable[str]] = None
) -> List[DuplicateGroup]:
    """Find disjoint duplicate groups, skipping pairs the user dismissed"""
    dismissed = set(dismissed_pairs) if dismissed_pairs else set()
    return ContactMatcher().find_duplicates(_as_contacts(contacts), dismissed)
