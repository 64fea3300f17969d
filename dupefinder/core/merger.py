import logging
from typing import List, Dict, Optional

from .. import settings
from .contact import Contact
from .types import ContactDataError

logger = logging.getLogger(__name__)


class MergePlan:
    """What to write back after merging a duplicate group.

    The first contact of the group survives and is updated with ``merged``;
    the others are deleted.
    """

    def __init__(self, keep_id: str, delete_ids: List[str], merged: Dict):
        self.keep_id = keep_id
        self.delete_ids = delete_ids
        self.merged = merged

    def __repr__(self):
        return f"MergePlan(keep_id={self.keep_id!r}, delete_ids={self.delete_ids!r})"


class ContactMerger:
    # Fields where the user picks one contact's value
    SELECTABLE_FIELDS = (
        "name",
        "email",
        "phone",
        "company",
        "title",
        "meeting_location",
        "meeting_date",
        "avatar_url",
    )

    def __init__(self, notes_separator: str = settings.NOTES_SEPARATOR):
        self.notes_separator = notes_separator

    def merge_group(self, contacts: List[Contact], selections: Optional[Dict[str, str]] = None) -> MergePlan:
        """Merge a group of duplicate contacts into one record.

        ``selections`` maps a field name to the id of the contact whose value
        should be kept. Fields without a selection take the first non-empty
        value. Tags are combined and notes are concatenated.
        """
        contacts = list(getattr(contacts, "contacts", contacts))
        if len(contacts) < 2:
            raise ContactDataError("A merge needs at least two contacts")

        selections = selections or {}
        by_id = {contact.id: contact for contact in contacts}
        for field, contact_id in selections.items():
            if str(contact_id) not in by_id:
                raise ContactDataError(f"Selected contact {contact_id} for '{field}' is not part of the group")

        merged = {}
        for field in self.SELECTABLE_FIELDS:
            value = self._selected_value(contacts, by_id, field, selections.get(field))
            merged[field] = value if value or field == "name" else None

        merged["tags"] = sorted({tag for contact in contacts for tag in contact.tags})
        merged["context_notes"] = self.notes_separator.join(
            contact.context_notes for contact in contacts if contact.context_notes
        )

        plan = MergePlan(contacts[0].id, [contact.id for contact in contacts[1:]], merged)
        logger.info(f"Merging {len(contacts)} contacts into {plan.keep_id}")
        return plan

    @staticmethod
    def _selected_value(contacts: List[Contact], by_id: Dict[str, Contact], field: str, selected_id) -> str:
        if selected_id is not None:
            return getattr(by_id[str(selected_id)], field) or ""

        for contact in contacts:
            value = getattr(contact, field)
            if value:
                return value
        return ""
