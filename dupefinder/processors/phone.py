import re

from .. import settings


class PhoneProcessor:
    """Handles phone number normalization for comparison"""

    def __init__(self, significant_digits: int = settings.PHONE_SIGNIFICANT_DIGITS):
        self.significant_digits = significant_digits

    def normalize_phone(self, phone) -> str:
        """Keep digits and '+'; local numbers are cut down to their last digits"""
        if not phone:
            return ""

        cleaned = re.sub(r"[^\d+]", "", str(phone))

        # Numbers without a country code compare on the subscriber part only
        if len(cleaned) >= self.significant_digits and not cleaned.startswith("+"):
            return cleaned[-self.significant_digits:]
        return cleaned

    def are_phones_matching(self, phone1, phone2) -> bool:
        """Check if two phone numbers match"""
        norm1 = self.normalize_phone(phone1)
        norm2 = self.normalize_phone(phone2)

        if not norm1 or not norm2:
            return False

        return norm1 == norm2
