"""User model definitions.

The session user is a tagged union over ``AdminUser`` and ``StudentUser``
discriminated by ``role``. Student-only fields exist on ``StudentUser`` alone,
so callers narrow with ``isinstance`` before touching them.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

ADMIN_ROLE = "admin"
STUDENT_ROLE = "student"


class AdminUser(BaseModel):
    """The configured administrator. Never stored as a student record."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    role: Literal["admin"] = ADMIN_ROLE


class StudentUser(BaseModel):
    """A student's public profile, as held in the session."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    name: str
    email: str
    role: Literal["student"] = STUDENT_ROLE
    reg_no: str = Field(alias="regNo")
    department: str
    level: str


class StudentRecord(StudentUser):
    """A stored student, password included.

    Unknown keys from older stored data are kept so that writing the
    collection back does not drop them.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    password: str

    def public_profile(self) -> StudentUser:
        return StudentUser.model_validate(self.model_dump(by_alias=True, exclude={'password'}))


class StudentRegistration(BaseModel):
    """What a student fills in to register."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    password: str
    reg_no: str = Field(alias="regNo")
    department: str
    level: str


SessionUser = Annotated[Union[AdminUser, StudentUser], Field(discriminator="role")]

session_user_adapter = TypeAdapter(SessionUser)


def dump_user(user: BaseModel) -> dict:
    """Serialize any user model in the stored camelCase shape."""
    return user.model_dump(by_alias=True)
