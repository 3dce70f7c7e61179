from typing import Optional

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from library_api.errors import ValidationError
from library_api.models import Role

# ids are stored as 32 bit signed integers
MAX_ID = 2**31 - 1


class BaseModel(PydanticBaseModel):
    model_config = ConfigDict(from_attributes=True)


class RequestModel(PydanticBaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


def parse_body(schema, data):
    """Validate a JSON body against ``schema``; anything unparseable is a 400."""
    if not isinstance(data, dict):
        raise ValidationError("Cannot parse JSON body")
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(schema.describe_error(e)) from None


# requests


class SignUpRequest(RequestModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1)
    role: Role

    @field_validator("email")
    def lower_email(cls, value):
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value.lower()

    @classmethod
    def describe_error(cls, error):
        if any(err["loc"] == ("role",) and err["type"] == "enum" for err in error.errors()):
            return "Invalid role. Must be 'librarian', 'student', or 'general'"
        return "Name, Email, Password, and Role are required"


class SignInRequest(RequestModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    def lower_email(cls, value):
        return value.lower()

    @classmethod
    def describe_error(cls, error):
        return "Email and password are required"


class CreateBookRequest(RequestModel):
    title: str = Field(min_length=1, max_length=255)
    author: str = Field(min_length=1, max_length=255)
    number: str = Field(min_length=1, max_length=64)
    genre: str = Field(min_length=1, max_length=100)

    @classmethod
    def describe_error(cls, error):
        return "Title, Author, Number, and Genre are required"


class DonateBookRequest(CreateBookRequest):
    donated_by_id: int = Field(gt=0, le=MAX_ID)

    @classmethod
    def describe_error(cls, error):
        return "Title, Author, Number, Genre, and DonatedByID are required for donation"


class BorrowBookRequest(RequestModel):
    book_id: int = Field(gt=0, le=MAX_ID)
    user_id: int = Field(gt=0, le=MAX_ID)

    @classmethod
    def describe_error(cls, error):
        return "BookID and UserID are required"


# responses


class UserSummarySchema(BaseModel):
    id: int
    name: str
    email: str
    role: Role


class BookSchema(BaseModel):
    id: int
    title: str
    author: str
    number: str
    genre: str
    donated_by_id: Optional[int] = None
    available: bool

