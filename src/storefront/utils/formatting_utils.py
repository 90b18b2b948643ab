from typing import Optional, Dict, Any
from datetime import datetime, timezone
from decimal import Decimal


class FormattingUtils:
    """
    Data formatting utilities for consistent display and API responses

    Features:
    - Money formatting (USD, integer cents)
    - Response envelopes shared by every blueprint
    """

    @classmethod
    def format_money(cls, amount_cents: int) -> str:
        """
        Format an amount in cents for display

        Examples:
            format_money(1299) -> "$12.99"
            format_money(123456789) -> "$1,234,567.89"
        """
        amount = Decimal(amount_cents) / 100
        return f"${amount:,.2f}"

    @classmethod
    def format_api_response(cls, data: Any, message: Optional[str] = None) -> Dict[str, Any]:
        """Consistent success response envelope"""
        response = {
            "success": True,
            "data": data,
            "timestamp": cls._get_current_iso_timestamp(),
        }
        if message:
            response["message"] = message
        return response

    @classmethod
    def format_error_response(cls, error: Dict[str, Any]) -> Dict[str, Any]:
        """Stamp an exception's to_dict() payload with a timestamp"""
        response = dict(error)
        response["timestamp"] = cls._get_current_iso_timestamp()
        return response

    @classmethod
    def _get_current_iso_timestamp(cls) -> str:
        return datetime.now(timezone.utc).isoformat()
