import json
import logging
from pathlib import Path
from typing import List, Set, Union

from .. import settings
from ..core.contact import Contact
from ..core.dismissals import dump_dismissed_pairs, load_dismissed_pairs
from ..core.types import ContactDataError
from ..utils.validation import log_validation_results

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_json(path: Path):
    with open(path, "r", encoding=settings.DEFAULT_ENCODING) as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ContactDataError(f"{path} is not valid JSON: {e}") from e


def load_contacts(path: PathLike) -> List[Contact]:
    """Load a contact snapshot: a JSON list of contacts or {"contacts": [...]}"""
    path = Path(path)
    data = _read_json(path)

    if isinstance(data, dict):
        data = data.get("contacts")
    if not isinstance(data, list):
        raise ContactDataError(f"{path} does not contain a list of contacts")

    contacts = [Contact.from_dict(item) for item in data]
    for contact in contacts:
        if not contact.is_valid:
            logger.warning(f"Contact {contact.id} has invalid data")
            log_validation_results(contact.validation_results, logger)
    logger.info(f"Loaded {len(contacts)} contacts from {path}")
    return contacts


def load_dismissed(path: PathLike) -> Set[str]:
    """Load dismissed pair keys; a missing file means nothing was dismissed"""
    path = Path(path)
    if not path.exists():
        logger.debug(f"No dismissed pairs file at {path}")
        return set()

    data = _read_json(path)
    if not isinstance(data, list):
        raise ContactDataError(f"{path} does not contain a list of dismissed pairs")

    dismissed = load_dismissed_pairs(data)
    logger.debug(f"Loaded {len(dismissed)} dismissed pair keys from {path}")
    return dismissed


def save_dismissed(dismissed_pairs: Set[str], path: PathLike) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding=settings.DEFAULT_ENCODING) as f:
        json.dump(dump_dismissed_pairs(dismissed_pairs), f, indent=2)
    logger.info(f"Saved {len(dismissed_pairs)} dismissed pair keys to {path}")
