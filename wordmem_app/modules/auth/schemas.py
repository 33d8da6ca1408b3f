from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegisterPayload(BaseModel):
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)

    username: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=1)

    @field_validator('email')
    @classmethod
    def email_must_look_valid(cls, value: str) -> str:
        if '@' not in value:
            raise ValueError('Email address is invalid')
        return value.lower()


class LoginPayload(BaseModel):
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)

    # Username or email
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


@dataclass
class UserDTO:
    id: int
    username: str
    email: str
    created_at: Optional[str] = None


@dataclass
class AuthResponseDTO:
    token: str
    user: UserDTO
