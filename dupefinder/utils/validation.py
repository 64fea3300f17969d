from typing import Dict, List, Any, Optional
import re
import logging

from .. import settings
from ..core.types import ValidationIssue, ValidationResults
from .string import count_digits

# RFC 5322, simplified
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
PHONE_PATTERN = re.compile(r"^[\d\s\-+().]+$")


def _issue(field: str, issue: str, severity: str = "error") -> ValidationIssue:
    return {"field": field, "issue": issue, "severity": severity}


def validate_name(name: Optional[str]) -> List[ValidationIssue]:
    if not name or not name.strip():
        return [_issue("name", "Name is required")]

    name = name.strip()
    if len(name) < settings.NAME_MIN_LENGTH:
        return [_issue("name", f"Name is too short (minimum {settings.NAME_MIN_LENGTH} characters)")]
    if len(name) > settings.NAME_MAX_LENGTH:
        return [_issue("name", f"Name is too long (maximum {settings.NAME_MAX_LENGTH} characters)")]
    if re.search(r"\d", name):
        return [_issue("name", "Name contains numbers", "warning")]
    if name == name.upper() and len(name) > 3:
        return [_issue("name", "Name is in all caps - consider proper casing", "warning")]
    return []


def validate_email(email: Optional[str]) -> List[ValidationIssue]:
    """Validate email format"""
    if not email or not email.strip():
        return []

    email = email.strip()
    if len(email) > settings.EMAIL_MAX_LENGTH:
        return [_issue("email", f"Email address is too long (max {settings.EMAIL_MAX_LENGTH} characters)")]
    if not EMAIL_PATTERN.match(email):
        return [_issue("email", "Invalid email format")]
    if any(typo in email for typo in settings.EMAIL_TYPOS):
        return [_issue("email", "Email may contain a typo (e.g., .con instead of .com)", "warning")]
    return []


def validate_phone(phone: Optional[str]) -> List[ValidationIssue]:
    """Validate phone number format"""
    if not phone or not phone.strip():
        return []

    phone = phone.strip()
    if not PHONE_PATTERN.match(phone):
        return [_issue("phone", "Phone number contains invalid characters")]

    digits = count_digits(phone)
    if digits < settings.PHONE_MIN_DIGITS:
        return [_issue("phone", f"Phone number is too short (minimum {settings.PHONE_MIN_DIGITS} digits)")]
    if digits > settings.PHONE_MAX_DIGITS:
        return [_issue("phone", f"Phone number is too long (maximum {settings.PHONE_MAX_DIGITS} digits)")]
    if not phone.startswith("+") and digits >= 10:
        return [_issue("phone", "Phone number may be missing country code (e.g., +1)", "warning")]
    return []


def _validate_max_length(field: str, label: str, value: Optional[str], limit: int) -> List[ValidationIssue]:
    if value and len(value.strip()) > limit:
        return [_issue(field, f"{label} too long (maximum {limit} characters)", "warning")]
    return []


def validate_contact_issues(data: Dict[str, Any]) -> List[ValidationIssue]:
    """Collect all validation issues for a contact dictionary"""
    issues = []
    issues.extend(validate_name(data.get("name")))
    issues.extend(validate_email(data.get("email")))
    issues.extend(validate_phone(data.get("phone")))
    issues.extend(_validate_max_length("company", "Company name is", data.get("company"), settings.COMPANY_MAX_LENGTH))
    issues.extend(_validate_max_length("title", "Job title is", data.get("title"), settings.TITLE_MAX_LENGTH))
    issues.extend(_validate_max_length("notes", "Notes are", data.get("context_notes"), settings.NOTES_MAX_LENGTH))

    if not data.get("email") and not data.get("phone"):
        issues.append(_issue("contact", "No email or phone number provided", "warning"))

    return issues


def validate_contact_data(data: Dict[str, Any]) -> ValidationResults:
    """Validate contact data structure and content"""
    validation_results = {"errors": [], "warnings": []}

    if not data:
        validation_results["errors"].append("Empty contact data")
        return validation_results

    for issue in validate_contact_issues(data):
        key = "errors" if issue["severity"] == "error" else "warnings"
        validation_results[key].append(f"{issue['field']}: {issue['issue']}")

    return validation_results


def log_validation_results(
    results: ValidationResults, logger: Optional[logging.Logger] = None
) -> None:
    """Log validation results with appropriate severity"""
    if logger is None:
        logger = logging.getLogger(__name__)

    for error in results["errors"]:
        logger.error(f"Validation error: {error}")

    for warning in results["warnings"]:
        logger.warning(f"Validation warning: {warning}")
