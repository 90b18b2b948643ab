from datetime import datetime, timezone
from typing import Optional, Union

from dateutil import parser as date_parser


class DateUtils:
    """
    Date/time helpers shared by repositories and serializers.

    Database drivers disagree on timestamps: PostgreSQL hands back aware
    datetimes while SQLite returns "YYYY-MM-DD HH:MM:SS" strings. Everything
    is normalised to timezone-aware UTC datetimes on the way in.
    """

    UTC = timezone.utc

    @classmethod
    def now_utc(cls) -> datetime:
        """Get current UTC datetime - always use this for database storage"""
        return datetime.now(cls.UTC)

    @classmethod
    def to_utc(cls, dt: datetime) -> datetime:
        """Convert datetime to UTC, treating naive values as UTC"""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=cls.UTC)
        return dt.astimezone(cls.UTC)

    @classmethod
    def parse_iso_string(cls, date_string: str) -> datetime:
        """
        Parse ISO 8601 date string to datetime

        Handles various formats:
        - 2026-01-03T10:30:00Z
        - 2026-01-03T10:30:00+00:00
        - 2026-01-03 10:30:00
        """
        try:
            parsed_dt = date_parser.isoparse(date_string)
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid date format: {date_string}") from e
        return cls.to_utc(parsed_dt)

    @classmethod
    def parse_db_timestamp(cls, value: Union[datetime, str, None]) -> Optional[datetime]:
        """Normalise a timestamp column value from any supported driver"""
        if value is None:
            return None
        if isinstance(value, datetime):
            return cls.to_utc(value)
        return cls.parse_iso_string(str(value))

    @classmethod
    def to_iso_string(cls, dt: Optional[datetime]) -> Optional[str]:
        """Convert datetime to ISO 8601 string"""
        if dt is None:
            return None
        return cls.to_utc(dt).isoformat()
