from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, constr

from pactweb.schemas.common import FORM_CONFIG, BackendRecord

EmailStrLite = constr(min_length=5, max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
NameStr = constr(min_length=2, max_length=100)
PhoneStr = constr(min_length=10, max_length=20)


class User(BackendRecord):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    email: str
    name: str
    phone: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserCreate(BaseModel):
    model_config = FORM_CONFIG

    name: NameStr
    email: EmailStrLite
    phone: PhoneStr


class LoginResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    user: User
    redirect_to: str = "/pacts"


class SignupFieldOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    name: str
    label: str
    type: str
    placeholder: str
    autocomplete: str
    min_length: int


class LoginPageOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    title: str = "Create Your Account"
    subtitle: str = "Sign up to join pacts and commit to your goals"
    action: str = "/login"
    method: str = "POST"
    submit_label: str = "Create Account"
    fields: list[SignupFieldOut]
