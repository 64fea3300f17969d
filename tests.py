import csv
import json
import logging
from pathlib import Path

import pytest

import main
from dupefinder import calculate_similarity, find_duplicate_groups
from dupefinder.core.contact import Contact
from dupefinder.core.dismissals import (
    dismiss_group,
    dismiss_pair,
    dump_dismissed_pairs,
    is_dismissed,
    load_dismissed_pairs,
    pair_keys,
)
from dupefinder.core.matcher import ContactMatcher, weighted_overall
from dupefinder.core.merger import ContactMerger
from dupefinder.core.types import Confidence, ContactDataError
from dupefinder.io.csv import CSVHandler
from dupefinder.io.snapshot import load_contacts, load_dismissed, save_dismissed
from dupefinder.processors.name import NameProcessor
from dupefinder.processors.phone import PhoneProcessor
from dupefinder.utils.string import string_similarity
from dupefinder.utils.validation import validate_contact_data, validate_email, validate_name, validate_phone

# --- Logging Configuration ---
output_dir = Path("output")
output_dir.mkdir(exist_ok=True)
log_file = output_dir / "test_results.log"

file_handler = logging.FileHandler(log_file)
file_handler.setLevel(logging.DEBUG)
file_handler.setFormatter(
    logging.Formatter(
        "%(asctime)s - [%(levelname)s] - %(filename)s:%(lineno)d - %(funcName)s()\n    %(message)s"
    )
)

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
logger.handlers = []
logger.addHandler(file_handler)
logger.propagate = False


def make_contact(id, name, **fields):
    return Contact(id=id, name=name, **fields)


# --- Test Cases ---
def generate_test_cases():
    """Pairs of contacts with the rule that should decide them"""
    test_pairs = [
        {
            "pair": (
                {"name": "John Smith", "email": "john@acme.com"},
                {"name": "Jon Smith", "email": "JOHN@acme.com"},
            ),
            "expected": (Confidence.HIGH, "Same email address", 100),
            "reason": "Exact email, case insensitive",
        },
        {
            "pair": (
                {"name": "Alice", "phone": "555-123-4567"},
                {"name": "Bob", "phone": "(555) 123 4567"},
            ),
            "expected": (Confidence.HIGH, "Same phone number", 100),
            "reason": "Phone number normalization",
        },
        {
            "pair": (
                {"name": "Jane Doe", "company": "Acme Corp"},
                {"name": "Dr. Jane Doe", "company": "Acme Corp."},
            ),
            "expected": (Confidence.HIGH, "Same name and company", 95),
            "reason": "Honorific and punctuation differences",
        },
        {
            "pair": (
                {"name": "Robert Brown", "email": "bob@acme.com"},
                {"name": "Robert Browne", "email": "rb@ACME.com"},
            ),
            "expected": (Confidence.HIGH, "Similar name with same email domain", 88),
            "reason": "Similar name at the same domain",
        },
        {
            "pair": (
                {"name": "Jon Smith", "company": "Initech"},
                {"name": "John Smyth", "company": "Initech"},
            ),
            "expected": (Confidence.MEDIUM, "Similar name and company", 75),
            "reason": "Spelling variants at the same company",
        },
        {
            "pair": (
                {"name": "Katherine Lee", "company": "Globex"},
                {"name": "Catherine Lee", "company": "Globex Inc"},
            ),
            "expected": (Confidence.MEDIUM, "Very similar name with company match", 72),
            "reason": "Company with legal suffix",
        },
        {
            "pair": (
                {"name": "JD", "company": "Acme"},
                {"name": "JDS", "company": "Acme"},
            ),
            "expected": (Confidence.MEDIUM, "Name variation (initials) with matching details", 68),
            "reason": "Initials at the same company",
        },
        {
            "pair": (
                {"name": "Michael Johnson"},
                {"name": "Michael Jonson"},
            ),
            "expected": (Confidence.LOW, "Very similar or same name", 60),
            "reason": "Name only",
        },
        {
            "pair": (
                {"name": "Alice Walker", "company": "Acme"},
                {"name": "Bob Stone", "company": "Acme"},
            ),
            "expected": None,
            "reason": "Different people at the same company",
        },
    ]
    return test_pairs


class TestFailureException(Exception):
    """Custom exception for test failures"""

    __test__ = False


# --- Similarity Engine ---
def test_string_similarity():
    logger.info("TEST SUITE: STRING SIMILARITY")
    cases = [
        ("kitten", "sitting", 57),
        ("Acme", " acme ", 100),
        ("abcdefgh", "abcdefgx", 88),
        ("", "acme", 0),
        (None, "acme", 0),
        ("acme corp", "acme corporation", 56),
    ]
    for s1, s2, expected in cases:
        result = string_similarity(s1, s2)
        logger.info(f"\t{s1!r} vs {s2!r}: {result}")
        if result != expected:
            raise TestFailureException(f"Similarity of {s1!r} and {s2!r}: expected {expected}, got {result}")


def test_normalize_phone():
    processor = PhoneProcessor()
    cases = [
        ("(415) 555-0123", "4155550123"),
        ("+1 (415) 555-0123", "+14155550123"),
        ("1-415-555-0123", "4155550123"),
        ("555-0123", "5550123"),
        ("", ""),
        (None, ""),
    ]
    for phone, expected in cases:
        assert processor.normalize_phone(phone) == expected, phone

    assert processor.are_phones_matching("1-415-555-0123", "(415) 555 0123")
    assert not processor.are_phones_matching("", "")
    assert not processor.are_phones_matching("+1 415 555 0123", "415 555 0123")


def test_normalize_name():
    processor = NameProcessor()
    cases = [
        ("Dr. John Smith Jr.", "john smith"),
        ("Mrs. Jane O'Neil", "jane oneil"),
        ("William Gates III", "william gates"),
        ("J.D.", "jd"),
        ("  Anna   Maria  ", "anna maria"),
        ("Mr", ""),
        ("", ""),
    ]
    for name, expected in cases:
        assert processor.normalize_name(name) == expected, name

    # Honorifics only count as whole words
    assert processor.normalize_name("Drake Srinivasan") == "drake srinivasan"


def test_calculate_similarity_fields():
    score = calculate_similarity(
        {"id": 1, "name": "John Smith", "email": "john@acme.com"},
        {"id": 2, "name": "Jon Smith", "email": "JOHN@acme.com"},
    )
    assert score.email == 100
    assert score.phone == 0
    assert score.name == 90
    assert score.company == 0
    # (100 * 2 + 90 * 1.5) / 3.5
    assert score.overall == 96


def test_weighted_overall_ignores_missing_fields():
    assert weighted_overall({"email": 0, "phone": 0, "name": 0, "company": 0}) == 0
    assert weighted_overall({"name": 80}) == 80
    assert weighted_overall({"name": 80, "company": 50}) == 68


def test_similarity_symmetry_and_identity():
    contacts = [
        make_contact(1, "John Smith", email="john@acme.com", phone="415-555-0123", company="Acme"),
        make_contact(2, "Jon Smyth", company="ACME Inc"),
        make_contact(3, "J.D.", phone="+1 415 555 0123"),
        make_contact(4, "Dr. Maria Garcia"),
    ]
    matcher = ContactMatcher()
    for a in contacts:
        assert matcher.calculate_similarity(a, a).overall == 100
        for b in contacts:
            assert matcher.calculate_similarity(a, b) == matcher.calculate_similarity(b, a)


# --- Pairwise Decisions ---
def test_pair_decisions():
    logger.info("TEST SUITE: PAIR DECISIONS")
    matcher = ContactMatcher()
    test_cases = generate_test_cases()
    for number, case in enumerate(test_cases, start=1):
        data1, data2 = case["pair"]
        contact1 = make_contact(1, **data1)
        contact2 = make_contact(2, **data2)
        logger.info(f"\tTEST {number}/{len(test_cases)}: {case['reason']}")

        result = matcher.is_duplicate(contact1, contact2, set())
        actual = (result.confidence, result.reasons[0], result.score) if result else None
        logger.info(f"\tResult: {actual}")
        if actual != case["expected"]:
            raise TestFailureException(f"{case['reason']}: expected {case['expected']}, got {actual}")

        # Decisions do not depend on argument order
        reverse = matcher.is_duplicate(contact2, contact1, set())
        assert (reverse is None) == (result is None)


def test_email_rule_wins_over_lower_rules():
    matcher = ContactMatcher()
    contact1 = make_contact(1, "Jane Doe", email="jane@acme.com", phone="555-123-4567", company="Acme")
    contact2 = make_contact(2, "Jane Doe", email="Jane@Acme.com", phone="555-123-4567", company="Acme")

    result = matcher.is_duplicate(contact1, contact2)
    assert result.confidence == Confidence.HIGH
    assert result.reasons == ["Same email address"]
    assert result.score == 100


def test_initials_with_same_phone_match_on_phone():
    # The phone rule comes before the initials rule
    matcher = ContactMatcher()
    result = matcher.is_duplicate(
        make_contact(1, "J.D.", phone="415-555-0123"),
        make_contact(2, "J.D", phone="(415) 555-0123"),
    )
    assert result.confidence == Confidence.HIGH
    assert result.reasons == ["Same phone number"]


def test_company_abbreviation_alone_is_name_only_match():
    # "acme corp" vs "acme corporation" only scores 56
    matcher = ContactMatcher()
    result = matcher.is_duplicate(
        make_contact(1, "Jane Doe", company="Acme Corp"),
        make_contact(2, "Jane Doe", company="Acme Corporation"),
    )
    assert result.confidence == Confidence.LOW
    assert result.reasons == ["Very similar or same name"]


def test_dismissed_pair_is_never_a_match():
    matcher = ContactMatcher()
    contact1 = make_contact(1, "John Smith", email="john@acme.com")
    contact2 = make_contact(2, "John Smith", email="john@acme.com")

    assert matcher.is_duplicate(contact1, contact2, {"2-1"}) is None
    assert matcher.is_duplicate(contact1, contact2, {"1-2"}) is None
    assert matcher.is_duplicate(contact1, contact2, {"1-3"}) is not None


# --- Grouping ---
def test_find_duplicate_groups_email_match():
    groups = find_duplicate_groups(
        [
            {"id": "1", "name": "John Smith", "email": "john@acme.com"},
            {"id": "2", "name": "Jon Smith", "email": "john@acme.com"},
        ]
    )
    assert len(groups) == 1
    assert groups[0].contact_ids == ["1", "2"]
    assert groups[0].confidence == Confidence.HIGH
    assert "Same email address" in groups[0].match_reasons
    assert groups[0].score == 100


def test_dismissing_group_removes_it():
    contacts = [
        make_contact(1, "John Smith", email="john@acme.com"),
        make_contact(2, "Jon Smith", email="john@acme.com"),
    ]
    groups = find_duplicate_groups(contacts)
    dismissed = dismiss_group(groups[0], set())

    assert find_duplicate_groups(contacts, dismissed) == []


def test_star_clustering_joins_matches_of_the_anchor():
    anchor = make_contact("a", "Alice Anders", email="alice@example.com", phone="111-222-3333")
    by_email = make_contact("b", "Zed Quinn", email="alice@example.com")
    by_phone = make_contact("c", "Yuri Petrov", phone="(111) 222-3333")

    matcher = ContactMatcher()
    assert matcher.is_duplicate(by_email, by_phone) is None

    groups = matcher.find_duplicates([anchor, by_email, by_phone])
    assert len(groups) == 1
    assert groups[0].contact_ids == ["a", "b", "c"]
    assert groups[0].confidence == Confidence.HIGH
    assert groups[0].match_reasons == ["Same email address", "Same phone number"]
    assert groups[0].score == 100


def test_grouping_is_not_transitive():
    # b matches a, a matches c, but b is the anchor and does not match c
    b = make_contact("b", "Zed Quinn", email="shared@example.com")
    a = make_contact("a", "Alice Anders", email="shared@example.com", phone="111-222-3333")
    c = make_contact("c", "Yuri Petrov", phone="111-222-3333")

    groups = find_duplicate_groups([b, a, c])
    assert len(groups) == 1
    assert groups[0].contact_ids == ["b", "a"]


def test_dismissed_pair_inside_group():
    a = make_contact("a", "Alice Anders", email="alice@example.com")
    b = make_contact("b", "Alice Anders", email="alice@example.com")
    c = make_contact("c", "Alicia Anders", email="alice@example.com")

    groups = find_duplicate_groups([a, b, c], dismiss_pair("a", "b"))
    assert [g.contact_ids for g in groups] == [["a", "c"]]


def test_group_takes_strongest_match():
    anchor = make_contact(1, "Michael Johnson", company="Acme")
    name_only = make_contact(2, "Michael Jonson")
    same_company = make_contact(3, "Michael Johnsen", company="Acme")

    groups = find_duplicate_groups([anchor, name_only, same_company])
    assert len(groups) == 1
    assert groups[0].confidence == Confidence.HIGH
    assert groups[0].score == 95
    assert groups[0].match_reasons == ["Very similar or same name", "Same name and company"]


def test_groups_sorted_by_confidence_then_score():
    contacts = [
        make_contact(10, "Michael Johnson"),
        make_contact(11, "Michael Jonson"),
        make_contact(20, "Jon Smith", company="Initech"),
        make_contact(21, "John Smyth", company="Initech"),
        make_contact(30, "Zed Quinn", email="zed@quinn.io"),
        make_contact(31, "Other Person", email="ZED@quinn.io"),
    ]
    groups = find_duplicate_groups(contacts)
    assert [g.confidence for g in groups] == [Confidence.HIGH, Confidence.MEDIUM, Confidence.LOW]
    assert [g.contact_ids for g in groups] == [["30", "31"], ["20", "21"], ["10", "11"]]


def test_groups_are_disjoint_without_singletons():
    contacts = [
        make_contact(1, "John Smith", email="john@acme.com", phone="415-555-0123"),
        make_contact(2, "Johnny Smith", email="john@acme.com"),
        make_contact(3, "J. Smith", phone="415 555 0123"),
        make_contact(4, "Maria Garcia", company="Umbrella"),
        make_contact(5, "Maria Garcia", company="Umbrella Corp"),
        make_contact(6, "Maria Garcia"),
        make_contact(7, "Unrelated Person"),
    ]
    groups = find_duplicate_groups(contacts)

    seen = []
    for group in groups:
        assert len(group) >= 2
        seen.extend(group.contact_ids)
    assert len(seen) == len(set(seen))
    assert "7" not in seen


def test_degenerate_inputs():
    assert find_duplicate_groups([]) == []
    assert find_duplicate_groups([{"id": 1, "name": "Solo"}]) == []


# --- Dismissals ---
def test_dismissal_helpers():
    assert pair_keys(1, 2) == ("1-2", "2-1")

    original = {"x-y", "y-x"}
    updated = dismiss_pair("a", "b", original)
    assert original == {"x-y", "y-x"}
    assert updated == {"x-y", "y-x", "a-b", "b-a"}
    assert is_dismissed("b", "a", updated)

    group = [make_contact(1, "A"), make_contact(2, "B"), make_contact(3, "C")]
    assert dismiss_group(group) == {"1-2", "2-1", "1-3", "3-1", "2-3", "3-2"}

    assert load_dismissed_pairs(None) == set()
    assert load_dismissed_pairs(["1-2", 3]) == {"1-2", "3"}
    assert dump_dismissed_pairs({"b-a", "a-b"}) == ["a-b", "b-a"]


# --- Merging ---
def test_merge_group_defaults_and_selections():
    contacts = [
        make_contact(1, "Jon Smith", email="jon@acme.com", tags=["client", "vip"], context_notes="Met at expo"),
        make_contact(2, "John Smith", phone="415-555-0123", company="Acme", tags=["vip", "2024"]),
        make_contact(3, "John Smith", email="john@acme.com", context_notes="Follow up in May"),
    ]
    plan = ContactMerger().merge_group(contacts, {"name": "2", "email": "3"})

    assert plan.keep_id == "1"
    assert plan.delete_ids == ["2", "3"]
    assert plan.merged["name"] == "John Smith"
    assert plan.merged["email"] == "john@acme.com"
    assert plan.merged["phone"] == "415-555-0123"
    assert plan.merged["company"] == "Acme"
    assert plan.merged["title"] is None
    assert plan.merged["tags"] == ["2024", "client", "vip"]
    assert plan.merged["context_notes"] == "Met at expo\n\n---\n\nFollow up in May"


def test_merge_group_rejects_bad_input():
    merger = ContactMerger()
    with pytest.raises(ContactDataError):
        merger.merge_group([make_contact(1, "Solo")])
    with pytest.raises(ContactDataError):
        merger.merge_group([make_contact(1, "A"), make_contact(2, "B")], {"name": "9"})


# --- Validation ---
def test_contact_validation():
    assert validate_name("")[0]["issue"] == "Name is required"
    assert validate_name("A")[0]["severity"] == "error"
    assert validate_name("JOHN SMITH")[0]["severity"] == "warning"
    assert validate_name("Agent 47")[0]["issue"] == "Name contains numbers"
    assert validate_name("John Smith") == []

    assert validate_email("") == []
    assert validate_email("not-an-email")[0]["severity"] == "error"
    assert validate_email("john@gmail.con")[0]["severity"] == "warning"
    assert validate_email("john@acme.com") == []

    assert validate_phone("12345")[0]["severity"] == "error"
    assert validate_phone("call me")[0]["issue"] == "Phone number contains invalid characters"
    assert validate_phone("415-555-0123")[0]["severity"] == "warning"
    assert validate_phone("+1 415 555 0123") == []

    results = validate_contact_data({"name": "John Smith"})
    assert results["errors"] == []
    assert results["warnings"] == ["contact: No email or phone number provided"]

    contact = make_contact(1, "", email="bad")
    assert not contact.is_valid


# --- Input / Output ---
def test_snapshot_round_trip(tmp_path):
    contacts_path = tmp_path / "contacts.json"
    contacts_path.write_text(
        json.dumps({"contacts": [{"id": 1, "name": "John Smith", "extra": "ignored"}]}),
        encoding="utf-8",
    )
    contacts = load_contacts(contacts_path)
    assert [c.id for c in contacts] == ["1"]

    dismissed_path = tmp_path / "state" / "dismissed.json"
    assert load_dismissed(dismissed_path) == set()
    save_dismissed({"2-1", "1-2"}, dismissed_path)
    assert json.loads(dismissed_path.read_text(encoding="utf-8")) == ["1-2", "2-1"]
    assert load_dismissed(dismissed_path) == {"1-2", "2-1"}


def test_snapshot_rejects_bad_data(tmp_path):
    path = tmp_path / "contacts.json"
    path.write_text(json.dumps([{"name": "No Id"}]), encoding="utf-8")
    with pytest.raises(ContactDataError):
        load_contacts(path)

    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ContactDataError):
        load_contacts(path)


def test_csv_report(tmp_path):
    groups = find_duplicate_groups(
        [
            make_contact(1, "John Smith", email="john@acme.com"),
            make_contact(2, "Jon Smith", email="john@acme.com"),
        ]
    )
    path = tmp_path / "duplicates.csv"
    CSVHandler().write_groups(groups, str(path))

    with open(path, encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert [row["Contact ID"] for row in rows] == ["1", "2"]
    assert rows[0]["Group"] == "1"
    assert rows[0]["Confidence"] == "high"
    assert rows[0]["Reasons"] == "Same email address"


def test_main_dismisses_group(tmp_path):
    input_path = tmp_path / "contacts.json"
    input_path.write_text(
        json.dumps(
            [
                {"id": "1", "name": "John Smith", "email": "john@acme.com"},
                {"id": "2", "name": "Jon Smith", "email": "john@acme.com"},
                {"id": "3", "name": "Maria Garcia"},
            ]
        ),
        encoding="utf-8",
    )
    out_dir = tmp_path / "out"
    dismissed_path = tmp_path / "dismissed.json"

    groups = main.main(input_path, out_dir, dismissed_path)
    assert len(groups) == 1
    assert (out_dir / "duplicates.csv").exists()

    assert main.main(input_path, out_dir, dismissed_path, dismiss_group_number=1) == []
    assert load_dismissed(dismissed_path) == {"1-2", "2-1"}
    assert main.main(input_path, out_dir, dismissed_path) == []

    with pytest.raises(ContactDataError):
        main.main(input_path, out_dir, dismissed_path, dismiss_group_number=5)


def run_tests():
    """Run the test suites without pytest"""
    try:
        logger.info("STARTING TEST SUITES")
        test_string_similarity()
        test_pair_decisions()
        logger.info("ALL TEST SUITES COMPLETED")
        return True
    except TestFailureException:
        logger.error("Test suite failed", exc_info=True)
        return False
