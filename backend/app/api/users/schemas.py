from datetime import datetime

from pydantic import EmailStr, Field, model_validator

from app.api.users.models import UserRoles
from app.core.response.base_model import CustomBaseModel

PHONE_PATTERN = r"^\d{10}$"


class Token(CustomBaseModel):
    token_type: str
    access_token: str
    refresh_token: str


class RefreshRequest(CustomBaseModel):
    refresh_token: str


class NGOProfileMin(CustomBaseModel):
    id: int
    name: str


class UserBase(CustomBaseModel):
    full_name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr = Field(...)
    phone: str | None = Field(None, pattern=PHONE_PATTERN)


class UserRegister(UserBase):
    password: str = Field(..., max_length=100)
    confirm_password: str = Field(...)
    # Validated by the service so an unknown role gets a field error, not a 422
    role: str = Field(...)

    organization_name: str | None = Field(None, max_length=200)
    organization_mission: str | None = Field(None, max_length=1000)
    organization_contact_email: EmailStr | None = Field(None)
    organization_contact_phone: str | None = Field(None, pattern=PHONE_PATTERN)
    organization_address: str | None = Field(None, max_length=500)
    organization_description: str | None = Field(None, max_length=1000)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("The password and confirmation password do not match.")
        return self


class UserProfileUpdate(CustomBaseModel):
    full_name: str = Field(..., min_length=2, max_length=200)
    phone: str | None = Field(None, pattern=PHONE_PATTERN)


class UserPublic(UserBase):
    id: int = Field(...)
    role: UserRoles = Field(...)
    is_active: bool = Field(...)
    last_login_at: datetime | None = Field(None)
    created_at: datetime = Field(...)
    ngo_profile: NGOProfileMin | None = Field(None)


class AuthResponse(CustomBaseModel):
    user: UserPublic
    token: Token
    redirect_to: str


class LogoutResponse(CustomBaseModel):
    message: str
