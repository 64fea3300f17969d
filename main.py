#!/usr/bin/env python3

import argparse
import logging
import sys
from typing import List, Optional, Set
from pathlib import Path

from dupefinder import settings
from dupefinder.core.contact import Contact
from dupefinder.core.dismissals import dismiss_group
from dupefinder.core.matcher import ContactMatcher
from dupefinder.core.types import ContactDataError, DuplicateGroup
from dupefinder.io.csv import CSVHandler
from dupefinder.io.snapshot import load_contacts, load_dismissed, save_dismissed


def save_report(groups: List[DuplicateGroup], output_dir: Path) -> Path:
    """Write the duplicate report"""
    output_dir.mkdir(parents=True, exist_ok=True)
    report_path = output_dir / "duplicates.csv"
    CSVHandler().write_groups(groups, str(report_path))
    logging.debug(f"Saved duplicate report to: {report_path}")
    return report_path


def log_summary(contacts: List[Contact], groups: List[DuplicateGroup]) -> None:
    by_confidence = {}
    for group in groups:
        by_confidence[group.confidence.value] = by_confidence.get(group.confidence.value, 0) + 1

    logging.info(
        f"{len(groups)} duplicate groups in {len(contacts)} contacts "
        f"(high: {by_confidence.get('high', 0)}, medium: {by_confidence.get('medium', 0)}, "
        f"low: {by_confidence.get('low', 0)})"
    )
    for number, group in enumerate(groups, start=1):
        names = ", ".join(contact.name for contact in group.contacts)
        logging.info(
            f"  #{number} [{group.confidence.value} {group.score}] {names} - {'; '.join(group.match_reasons)}"
        )


def main(
    input_path: Path,
    output_dir: Path,
    dismissed_path: Path,
    dismiss_group_number: Optional[int] = None,
) -> List[DuplicateGroup]:
    try:
        contacts = load_contacts(input_path)
        dismissed: Set[str] = load_dismissed(dismissed_path)

        matcher = ContactMatcher()
        groups = matcher.find_duplicates(contacts, dismissed)
        log_summary(contacts, groups)

        if dismiss_group_number is not None:
            if not 1 <= dismiss_group_number <= len(groups):
                raise ContactDataError(
                    f"Group {dismiss_group_number} does not exist ({len(groups)} groups found)"
                )
            group = groups[dismiss_group_number - 1]
            save_dismissed(dismiss_group(group, dismissed), dismissed_path)
            logging.info(f"Dismissed group #{dismiss_group_number}: {', '.join(group.contact_ids)}")
            groups = [g for g in groups if g is not group]

        report_path = save_report(groups, output_dir)
        logging.info(f"Duplicate report written to {report_path}")
        return groups

    except Exception as e:
        logging.error(f"Error finding duplicates: {e}")
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Find duplicate contacts in a contact snapshot."
    )
    parser.add_argument(
        "input",
        help="JSON file with the contacts to check",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        default=settings.OUTPUT_DIR,
        help="Output directory for the duplicate report",
    )
    parser.add_argument(
        "--dismissed",
        "-d",
        default=settings.DISMISSED_FILE,
        help="JSON file with the pairs marked as not duplicates",
    )
    parser.add_argument(
        "--dismiss-group",
        type=int,
        help="Mark every pair in group N (as numbered in the report) as not duplicates",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    try:
        main(Path(args.input), Path(args.output_dir), Path(args.dismissed), args.dismiss_group)
    except (ContactDataError, OSError):
        sys.exit(1)
