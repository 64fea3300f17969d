from typing import List, Dict, Optional
from .types import ContactDataError, ValidationResults


class Contact:
    """A contact record as handed over by the contact store.

    Only ``id``, ``name``, ``email``, ``phone`` and ``company`` take part in
    duplicate detection. The remaining fields are carried along so a merge can
    combine them.
    """

    FIELDS = (
        "id",
        "name",
        "email",
        "phone",
        "company",
        "title",
        "tags",
        "context_notes",
        "meeting_location",
        "meeting_date",
        "source",
        "avatar_url",
        "created_at",
    )

    def __init__(self, id, name="", email=None, phone=None, company=None, title=None, tags=None,
                 context_notes=None, meeting_location=None, meeting_date=None, source=None,
                 avatar_url=None, created_at=None):
        self.id = str(id)
        self.name = name or ""
        self.email = email or None
        self.phone = phone or None
        self.company = company or None
        self.title = title or None
        self.tags: List[str] = list(tags) if tags else []
        self.context_notes = context_notes or None
        self.meeting_location = meeting_location or None
        self.meeting_date = meeting_date or None
        self.source = source or None
        self.avatar_url = avatar_url or None
        self.created_at = created_at or None
        self._validation_results: Optional[ValidationResults] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "Contact":
        """Create a Contact from a dictionary, ignoring unknown keys"""
        if not isinstance(data, dict):
            raise ContactDataError(f"Expected a contact object, got {type(data).__name__}")
        if data.get("id") in (None, ""):
            raise ContactDataError(f"Contact without id: {data.get('name', '<unnamed>')!r}")

        tags = data.get("tags")
        if isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]

        kwargs = {field: data.get(field) for field in cls.FIELDS if field != "tags"}
        return cls(tags=tags, **kwargs)

    def to_dict(self) -> Dict:
        """Convert contact to a dictionary with the store's field names"""
        return {field: getattr(self, field) for field in self.FIELDS}

    @property
    def validation_results(self) -> ValidationResults:
        if self._validation_results is None:
            from ..utils.validation import validate_contact_data
            self._validation_results = validate_contact_data(self.to_dict())
        return self._validation_results

    @property
    def is_valid(self) -> bool:
        """Check if contact has any validation errors"""
        return len(self.validation_results["errors"]) == 0

    def __repr__(self):
        return f"Contact(id={self.id!r}, name={self.name!r})"
