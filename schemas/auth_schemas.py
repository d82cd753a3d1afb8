from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
import phonenumbers
import re

# Phone numbers without a country code are read as Tunisian
DEFAULT_PHONE_REGION = "TN"


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str


class CreateUserRequest(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=50)
    password: str
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value):
        return value.lower().strip()

    @field_validator('username')
    @classmethod
    def validate_username(cls, value):
        value = value.strip()
        if not re.fullmatch(r'[A-Za-z0-9_.-]+', value):
            raise ValueError('Username may only contain letters, digits, ".", "_" and "-"')
        return value

    @field_validator('password')
    @classmethod
    def validate_password(cls, value):
        """
        At least 8 characters with at least one letter and one digit.
        """
        if len(value) < 8:
            raise ValueError('Password must be at least 8 characters')

        if not re.search(r'[A-Za-z]', value) or not re.search(r'\d', value):
            raise ValueError('Password must contain at least one letter and one digit')

        return value

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, value):
        if value is None or not value.strip():
            return None
        try:
            parsed = phonenumbers.parse(value, DEFAULT_PHONE_REGION)
        except phonenumbers.NumberParseException:
            raise ValueError('Invalid phone number')

        if not phonenumbers.is_valid_number(parsed):
            raise ValueError('Invalid phone number')

        return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


class RefreshTokenRequest(BaseModel):
    refresh_token: str

    @field_validator('refresh_token')
    @classmethod
    def validate_token(cls, value):
        if not value or not value.strip():
            raise ValueError('Refresh token cannot be empty')
        return value


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
