from typing import Tuple
from storefront.repositories.user_repository import UserRepository
from storefront.models.user import User
from storefront.schemas.user_schemas import RegisterRequest, LoginRequest, UserUpdateRequest
from storefront.core.security import PasswordHasher, TokenService
from storefront.core.exceptions import (
    ConflictError, ForbiddenError, NotFoundError, UnauthorizedError, ValidationError,
    IntegrityViolation,
)
import logging

logger = logging.getLogger(__name__)


class UserService:
    """
    Accounts and authentication

    Responsibilities:
    - Registration and login, issuing identity tokens
    - Resolving a token back to a user id
    - Self-service profile read, update and deletion
    """

    def __init__(self, user_repository: UserRepository, hasher: PasswordHasher, tokens: TokenService):
        self.user_repo = user_repository
        self.hasher = hasher
        self.tokens = tokens

    def register(self, request: RegisterRequest) -> Tuple[User, str]:
        """
        Create an account and return it with a fresh token

        Business Rules:
        - Email is unique (compared after normalisation)
        - Only the bcrypt hash of the password is stored
        """
        if self.user_repo.get_by_email(request.email) is not None:
            logger.warning(f"Registration rejected, email already in use: {request.email}")
            raise ConflictError("User already exists with this email", conflict_field="email")

        hashed = self.hasher.hash(request.password)
        try:
            user_id = self.user_repo.create(request.email, hashed)
        except IntegrityViolation:
            raise ConflictError("User already exists with this email", conflict_field="email")

        logger.info(f"Registered user {user_id}")
        user = self.user_repo.get_by_id(user_id)
        return user, self.tokens.issue(user.id)

    def login(self, request: LoginRequest) -> Tuple[User, str]:
        user = self.user_repo.get_by_email(request.email)
        if user is None or not self.hasher.verify(request.password, user.hashed_password):
            logger.warning("Login failed: invalid credentials")
            raise UnauthorizedError("Invalid credentials")

        logger.info(f"User {user.id} logged in")
        return user, self.tokens.issue(user.id)

    def authenticate_token(self, token: str) -> int:
        """Resolve a bearer token to the id of an existing user"""
        user_id = self.tokens.verify(token)
        if not self.user_repo.exists(user_id):
            raise UnauthorizedError("Invalid token")
        return user_id

    def get_profile(self, actor_id: int, user_id: int) -> User:
        self._ensure_self(actor_id, user_id)
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def update_profile(self, actor_id: int, user_id: int, request: UserUpdateRequest) -> User:
        """
        Change email and/or password of the caller's own account

        Business Rules:
        - At least one of email, password
        - A new email must not belong to another user
        """
        self._ensure_self(actor_id, user_id)

        changes = request.changes()
        if not changes:
            raise ValidationError("No valid fields to update")

        updates = {}
        if "email" in changes:
            owner = self.user_repo.get_by_email(changes["email"])
            if owner is not None and owner.id != user_id:
                raise ConflictError("Email is already in use", conflict_field="email")
            updates["email"] = changes["email"]
        if "password" in changes:
            updates["hashed_password"] = self.hasher.hash(changes["password"])

        try:
            affected = self.user_repo.update(user_id, updates)
        except IntegrityViolation:
            raise ConflictError("Email is already in use", conflict_field="email")
        if affected == 0:
            raise NotFoundError("User", user_id)

        logger.info(f"Updated user {user_id}: {sorted(changes)}")
        return self.user_repo.get_by_id(user_id)

    def delete_account(self, actor_id: int, user_id: int) -> None:
        """Delete the caller's account; cart and orders are removed with it"""
        self._ensure_self(actor_id, user_id)
        if self.user_repo.delete(user_id) == 0:
            raise NotFoundError("User", user_id)
        logger.info(f"Deleted user {user_id}")

    def _ensure_self(self, actor_id: int, user_id: int) -> None:
        if actor_id != user_id:
            logger.warning(f"User {actor_id} attempted to access account {user_id}")
            raise ForbiddenError("You can only access your own account")
