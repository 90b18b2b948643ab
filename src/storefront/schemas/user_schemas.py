from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from storefront.utils.validators import ValidationUtils


def _check_password(v: str) -> str:
    if not ValidationUtils.validate_password(v)["is_valid"]:
        raise ValueError(
            f"Password must be at least {ValidationUtils.MIN_PASSWORD_LENGTH} characters, "
            f"at most {ValidationUtils.MAX_PASSWORD_BYTES} bytes and not blank"
        )
    return v


class RegisterRequest(BaseModel):
    """Request to create an account"""
    email: str = Field(max_length=255)
    password: str

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "email": "alice@mail.com",
                "password": "correct horse battery"
            }
        },
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return ValidationUtils.normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class LoginRequest(BaseModel):
    email: str = Field(max_length=255)
    password: str = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return v.strip().lower()


class UserUpdateRequest(BaseModel):
    """Profile update; only email and password can change"""
    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return ValidationUtils.normalize_email(v) if v is not None else v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v) if v is not None else v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)
