"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
router handlers and tests. JSON keys are camelCase (`groupName`,
`participationDate`); Python attributes stay snake_case and either form
is accepted on input.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# --- authentication -------------------------------------------------------

class LoginIn(CamelModel):
    """Payload for the admin login endpoint."""
    username: str
    password: str


class UserLoginIn(CamelModel):
    """Payload for the person login endpoint; `username` is accepted for `name`."""
    name: str = Field(validation_alias=AliasChoices("name", "username"))
    password: str


class LoginOut(CamelModel):
    """Authentication response containing a signed token."""
    token: str
    id: int
    username: str
    name: str


class PasswordChangeIn(CamelModel):
    current_password: str
    new_password: str


# --- people ---------------------------------------------------------------

class AdminIn(CamelModel):
    """Create/update payload for admins. Omitted fields are left unchanged on update."""
    username: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None
    type: Optional[str] = None


class AdminOut(CamelModel):
    id: int
    username: str
    name: str
    type: str
    is_deleted: bool
    created_at: datetime
    updated_at: datetime


class PersonIn(CamelModel):
    name: Optional[str] = None
    password: Optional[str] = None


class PersonOut(CamelModel):
    id: int
    name: str


class GroupIn(CamelModel):
    group_name: Optional[str] = None


class GroupOut(CamelModel):
    id: int
    group_name: str


# --- semesters and books --------------------------------------------------

class BookIn(CamelModel):
    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None


class BookOut(CamelModel):
    id: int
    title: str
    author: str
    description: Optional[str] = None


class SemesterIn(CamelModel):
    name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_break: Optional[bool] = None


class SemesterOut(CamelModel):
    id: int
    name: str
    start_date: date
    end_date: date
    is_break: bool


class AssignmentIn(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    assigned_date: Optional[date] = None


class AssignmentOut(CamelModel):
    id: int
    semester_id: int
    title: str
    description: Optional[str] = None
    assigned_date: date


class SemesterUserBookIn(CamelModel):
    status: Optional[str] = None
    record_date: Optional[date] = Field(default=None, alias="date")


class SemesterUserBookOut(CamelModel):
    id: int
    semester: SemesterOut
    person: PersonOut
    book: BookOut
    status: str
    record_date: date = Field(alias="date")


# --- participation --------------------------------------------------------

class WeeklyRecordIn(CamelModel):
    """Weekly record fields. All are optional so the same shape serves
    create (required fields checked by the service) and partial update."""
    week_number: Optional[int] = None
    service1: Optional[str] = None
    service2: Optional[str] = None
    summary1: Optional[bool] = None
    summary2: Optional[bool] = None
    qt: Optional[int] = None
    reading: Optional[int] = None
    pray: Optional[int] = None
    memorize: Optional[int] = None
    submitted_date: Optional[date] = None


class WeeklyRecordOut(CamelModel):
    id: int
    participation_id: int
    week_number: int
    service1: str
    service2: str
    summary1: bool
    summary2: bool
    qt: int
    reading: int
    pray: int
    memorize: int
    submitted_date: Optional[date] = None


class ParticipationIn(CamelModel):
    status: Optional[str] = None
    participation_date: Optional[date] = None


class ParticipationOut(CamelModel):
    id: int
    semester_id: int
    group_id: int
    person_id: int
    semester: SemesterOut
    group: GroupOut
    person: PersonOut
    status: str
    participation_date: date
    weekly_record: Optional[WeeklyRecordOut] = None


class ParticipationPage(CamelModel):
    """Standard page envelope for participation searches."""
    content: List[ParticipationOut]
    total_elements: int
    total_pages: int
    number: int
    size: int
