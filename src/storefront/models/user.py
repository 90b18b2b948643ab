from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from datetime import datetime

from storefront.utils.date_utils import DateUtils


@dataclass
class User:
    """Represents a registered customer"""
    id: int
    email: str
    hashed_password: str = field(repr=False)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self, include_sensitive: bool = False) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        data = {
            "user_id": self.id,
            "email": self.email,
            "created_at": DateUtils.to_iso_string(self.created_at),
            "updated_at": DateUtils.to_iso_string(self.updated_at),
        }
        if include_sensitive:
            data["hashed_password"] = self.hashed_password
        return data
