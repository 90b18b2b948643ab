import re
from typing import Dict, Optional

from email_validator import validate_email, EmailNotValidError


class ValidationUtils:
    """
    Validation utilities for data integrity

    Features:
    - Email validation and normalisation
    - Password rules
    - Catalog value rules (prices, stock, URLs)
    - Input sanitization
    """

    PATTERNS = {
        'url': re.compile(r'^https?://[^\s<>"{}|\\^`[\]]+$'),  # Basic URL validation
    }

    MIN_PASSWORD_LENGTH = 8
    MAX_PASSWORD_BYTES = 72  # bcrypt input limit
    MAX_TEXT_LENGTH = 2000
    MAX_NAME_LENGTH = 200
    MIN_PRICE_CENTS = 1
    MAX_PRICE_CENTS = 99999999  # $999,999.99

    @classmethod
    def normalize_email(cls, email: str) -> str:
        """Normalize email address for consistent storage"""
        try:
            validated = validate_email(email, check_deliverability=False)
            return validated.normalized.lower()
        except EmailNotValidError:
            raise ValueError(f"Invalid email address: {email}")

    @classmethod
    def validate_password(cls, password: str) -> Dict[str, bool]:
        """
        Password validation

        Returns dict with validation results for each rule
        """
        results = {
            'min_length': len(password) >= cls.MIN_PASSWORD_LENGTH,
            'max_length': len(password.encode("utf-8")) <= cls.MAX_PASSWORD_BYTES,
            'not_blank': bool(password.strip()),
        }

        results['is_valid'] = all(results.values())
        return results

    @classmethod
    def validate_price_cents(cls, price_cents: int) -> bool:
        """Validate price in cents"""
        return cls.MIN_PRICE_CENTS <= price_cents <= cls.MAX_PRICE_CENTS

    @classmethod
    def validate_url(cls, url: str) -> bool:
        return cls.PATTERNS['url'].match(url) is not None

    @classmethod
    def sanitize_text(cls, text: str, max_length: Optional[int] = None) -> str:
        """Collapse whitespace and strip control characters"""
        cleaned = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)
        cleaned = re.sub(r'\s+', ' ', cleaned).strip()
        if max_length is not None:
            cleaned = cleaned[:max_length]
        return cleaned
