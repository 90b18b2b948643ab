from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from storefront.core.config import SecurityConfig
from storefront.core.exceptions import UnauthorizedError


class PasswordHasher:
    """One-way password hashing backed by bcrypt"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            return False


class TokenService:
    """Issues and verifies signed identity tokens (JWT)"""

    def __init__(self, config: SecurityConfig):
        self.secret_key = config.jwt_secret_key
        self.algorithm = config.jwt_algorithm
        self.expiration = timedelta(hours=config.jwt_expiration_hours)

    def issue(self, user_id: int) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + self.expiration,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """Return the user id carried by a valid token"""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Token has expired")
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid token")

        try:
            user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise UnauthorizedError("Invalid token")
        if user_id <= 0:
            raise UnauthorizedError("Invalid token")
        return user_id
