import csv
from typing import List, Dict, Optional

from .. import settings
from ..core.types import DuplicateGroup


class CSVHandler:
    """Writes duplicate groups as a CSV report"""

    DEFAULT_FIELDS = [
        "Group",
        "Confidence",
        "Score",
        "Reasons",
        "Contact ID",
        "Name",
        "Email",
        "Phone",
        "Company",
    ]

    def __init__(self, fieldnames: Optional[List[str]] = None):
        self.fieldnames = fieldnames or self.DEFAULT_FIELDS

    def group_rows(self, groups: List[DuplicateGroup]) -> List[Dict]:
        """One row per contact, numbered by group"""
        rows = []
        for number, group in enumerate(groups, start=1):
            for contact in group.contacts:
                rows.append(
                    {
                        "Group": number,
                        "Confidence": group.confidence.value,
                        "Score": group.score,
                        "Reasons": "; ".join(group.match_reasons),
                        "Contact ID": contact.id,
                        "Name": contact.name,
                        "Email": contact.email or "",
                        "Phone": contact.phone or "",
                        "Company": contact.company or "",
                    }
                )
        return rows

    def write_groups(self, groups: List[DuplicateGroup], filepath: str) -> None:
        """Write duplicate groups to a CSV file

        Args:
            groups: Duplicate groups in report order
            filepath: Output file path
        """
        with open(filepath, "w", encoding=settings.DEFAULT_ENCODING, newline="") as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=self.fieldnames, extrasaction="ignore")
            writer.writeheader()
            for row in self.group_rows(groups):
                writer.writerow(row)
