from datetime import timedelta

import jwt
import pytest

from storefront.core.config import Config, SecurityConfig
from storefront.core.exceptions import (
    EmptyCartError, ProductMissingError, StorageError, UnauthorizedError
)
from storefront.core.security import PasswordHasher, TokenService
from storefront.models.order import OrderStatus
from storefront.utils.formatting_utils import FormattingUtils


def test_config_from_mapping():
    config = Config({"DATABASE_URL": "sqlite://", "CART_CLEAR_ATTEMPTS": "5", "DB_AUTO_CREATE": "false"})

    assert config.database.is_sqlite
    assert config.database.auto_create is False
    assert config.api.cart_clear_attempts == 5
    assert config.is_development


def test_config_rejects_default_secret_in_production():
    config = Config({"ENVIRONMENT": "production", "DATABASE_URL": "sqlite://"})

    with pytest.raises(ValueError):
        config.validate()


def test_config_rejects_zero_clear_attempts():
    with pytest.raises(ValueError):
        Config({"DATABASE_URL": "sqlite://", "CART_CLEAR_ATTEMPTS": "0"}).validate()


def test_password_hasher_round_trip():
    hasher = PasswordHasher(rounds=4)
    hashed = hasher.hash("s3cret-pass")

    assert hasher.verify("s3cret-pass", hashed)
    assert not hasher.verify("other-pass", hashed)
    assert not hasher.verify("s3cret-pass", "plaintext")
    assert not hasher.verify("s3cret-pass", "")


def test_token_service_rejects_tampered_and_expired_tokens():
    tokens = TokenService(SecurityConfig(jwt_secret_key="k1"))
    other = TokenService(SecurityConfig(jwt_secret_key="k2"))
    expired = TokenService(SecurityConfig(jwt_secret_key="k1"))
    expired.expiration = timedelta(seconds=-1)

    assert tokens.verify(tokens.issue(7)) == 7
    with pytest.raises(UnauthorizedError):
        tokens.verify(other.issue(7))
    with pytest.raises(UnauthorizedError) as exc:
        tokens.verify(expired.issue(7))
    assert exc.value.message == "Token has expired"


def test_token_service_rejects_bad_subject():
    tokens = TokenService(SecurityConfig(jwt_secret_key="k1"))
    token = jwt.encode({"sub": "abc"}, "k1", algorithm="HS256")

    with pytest.raises(UnauthorizedError):
        tokens.verify(token)


def test_order_status_transitions():
    assert OrderStatus.PENDING.can_transition_to(OrderStatus.SHIPPED)
    assert OrderStatus.PENDING.can_transition_to(OrderStatus.COMPLETED)
    assert OrderStatus.SHIPPED.can_transition_to(OrderStatus.COMPLETED)
    assert not OrderStatus.SHIPPED.can_transition_to(OrderStatus.PENDING)
    assert OrderStatus.COMPLETED.allowed_transitions == frozenset()


def test_error_payloads():
    assert EmptyCartError(3).to_dict()["error"]["code"] == "EMPTY_CART"

    missing = ProductMissingError(12)
    assert missing.status_code == 404
    assert missing.to_dict()["error"]["details"]["product_id"] == 12

    storage = StorageError("syntax error at or near SELEC", "SELECT")
    assert "SELEC" not in storage.message
    assert "SELEC" in storage.internal_message


@pytest.mark.parametrize("cents, expected", [
    (0, "$0.00"),
    (1299, "$12.99"),
    (123456789, "$1,234,567.89"),
])
def test_format_money(cents, expected):
    assert FormattingUtils.format_money(cents) == expected
