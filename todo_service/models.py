"""Todo Service — request/response models."""

from typing import Annotated, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints

EMAIL_PATTERN = r"^\w+([\.-]?\w+)*@\w+([\.-]?\w+)*(\.\w{2,3})+$"


def _lowercase(value):
    return value.lower() if isinstance(value, str) else value


def _stringify_id(value):
    return str(value) if value is not None else value


LowerStr = Annotated[str, BeforeValidator(_lowercase)]
Email = Annotated[str, StringConstraints(pattern=EMAIL_PATTERN), BeforeValidator(_lowercase)]
ObjectIdStr = Annotated[str, BeforeValidator(_stringify_id)]


# ── Todos ─────────────────────────────────────────────────────────────────────

class TodoCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    severity: str = Field(min_length=1)
    is_complete: bool = Field(default=False, alias="isComplete")


class TodoReplace(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    severity: str = Field(min_length=1)
    is_complete: Optional[bool] = Field(default=None, alias="isComplete")


class TodoComplete(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_complete: bool = Field(alias="isComplete")


class TodoOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: ObjectIdStr = Field(alias="_id")
    title: str
    description: str
    severity: str
    is_complete: bool = Field(alias="isComplete")


# ── Users ─────────────────────────────────────────────────────────────────────

class UserRegister(BaseModel):
    username: str = Field(min_length=1)
    email: Email
    password: str = Field(min_length=1)


class UserLogin(BaseModel):
    email: LowerStr
    password: str


class UserDetails(BaseModel):
    """Fields a caller may change through account-details; anything else is dropped."""

    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = Field(default=None, min_length=1)
    email: Optional[Email] = None


class UserDetailsUpdate(BaseModel):
    id: str
    data: UserDetails


class PasswordUpdate(BaseModel):
    id: str
    password: str = Field(min_length=1)


class UserOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: ObjectIdStr = Field(alias="_id")
    username: str
    email: str


class LoginUser(BaseModel):
    username: str
    email: str
    id: str


# ── Responses ─────────────────────────────────────────────────────────────────

class MessageResponse(BaseModel):
    message: str


class RegisterResponse(BaseModel):
    user: UserOut
    message: str
    token: str


class LoginResponse(BaseModel):
    message: str
    token: str
    user: LoginUser


class UserResponse(BaseModel):
    message: str
    user: UserOut


class HealthResponse(BaseModel):
    status: str
    service: str


TodoList = List[TodoOut]
