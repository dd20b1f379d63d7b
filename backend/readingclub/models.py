"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Many-to-many relations (group members, semester groups, semester books)
are explicit link tables addressed by id through the repositories; ORM
relationships are only used for participations and semester book records.
"""

from typing import Optional
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, date, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Person(SQLModel, table=True):
    """A group member.

    Fields:
    - `name`: unique display/login name
    - `password_hash`: hashed password string (never store plaintext)
    """
    __tablename__ = "person"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, nullable=False, unique=True)
    password_hash: str


class Admin(SQLModel, table=True):
    """An administrator account with a soft-delete flag."""
    __tablename__ = "admin"
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, nullable=False, unique=True)
    name: str
    password_hash: str
    type: str = Field(default="admin", index=True)
    is_deleted: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Group(SQLModel, table=True):
    """A reading group. `group_name` is unique."""
    __tablename__ = "reading_group"
    id: Optional[int] = Field(default=None, primary_key=True)
    group_name: str = Field(index=True, nullable=False, unique=True)


class Book(SQLModel, table=True):
    __tablename__ = "book"
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    author: str = Field(index=True)
    description: Optional[str] = None


class Semester(SQLModel, table=True):
    """A semester (or break) spanning `start_date`..`end_date` inclusive."""
    __tablename__ = "semester"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    start_date: date
    end_date: date
    is_break: bool = False


class GroupMember(SQLModel, table=True):
    """Link row: `person_id` is a member of `group_id`."""
    __tablename__ = "group_member"
    group_id: int = Field(foreign_key="reading_group.id", primary_key=True, ondelete="CASCADE")
    person_id: int = Field(foreign_key="person.id", primary_key=True, ondelete="CASCADE")


class SemesterGroup(SQLModel, table=True):
    """Link row: `group_id` meets during `semester_id`."""
    __tablename__ = "semester_group"
    semester_id: int = Field(foreign_key="semester.id", primary_key=True, ondelete="CASCADE")
    group_id: int = Field(foreign_key="reading_group.id", primary_key=True, ondelete="CASCADE")


class SemesterBook(SQLModel, table=True):
    """Link row: `book_id` is read during `semester_id`."""
    __tablename__ = "semester_book"
    semester_id: int = Field(foreign_key="semester.id", primary_key=True, ondelete="CASCADE")
    book_id: int = Field(foreign_key="book.id", primary_key=True, ondelete="CASCADE")


class Participation(SQLModel, table=True):
    """A person's attendance in a group for a semester on a given date.

    The optional `weekly_record` is owned by the participation: removing
    the participation removes the record as well.
    """
    __tablename__ = "participation"
    id: Optional[int] = Field(default=None, primary_key=True)
    semester_id: int = Field(foreign_key="semester.id", index=True)
    group_id: int = Field(foreign_key="reading_group.id", index=True)
    person_id: int = Field(foreign_key="person.id", index=True)
    status: str
    participation_date: date = Field(index=True)
    semester: Optional[Semester] = Relationship()
    group: Optional[Group] = Relationship()
    person: Optional[Person] = Relationship()
    weekly_record: Optional["WeeklyRecord"] = Relationship(
        back_populates="participation",
        sa_relationship_kwargs={"uselist": False, "cascade": "all, delete-orphan"},
    )


class WeeklyRecord(SQLModel, table=True):
    """Per-week self report bound one-to-one to a `Participation`."""
    __tablename__ = "weekly_record"
    id: Optional[int] = Field(default=None, primary_key=True)
    participation_id: int = Field(foreign_key="participation.id", unique=True, ondelete="CASCADE")
    week_number: int
    service1: str
    service2: str
    summary1: bool = False
    summary2: bool = False
    qt: int
    reading: int
    pray: int
    memorize: int
    submitted_date: Optional[date] = None
    participation: Optional[Participation] = Relationship(back_populates="weekly_record")


class SemesterUserBook(SQLModel, table=True):
    """A person's reading status for a book within a semester."""
    __tablename__ = "semester_user_book"
    id: Optional[int] = Field(default=None, primary_key=True)
    semester_id: int = Field(foreign_key="semester.id", index=True)
    person_id: int = Field(foreign_key="person.id", index=True)
    book_id: int = Field(foreign_key="book.id", index=True)
    status: str
    record_date: date = Field(sa_column_kwargs={"name": "date"})
    semester: Optional[Semester] = Relationship()
    person: Optional[Person] = Relationship()
    book: Optional[Book] = Relationship()


class ReadingAssignment(SQLModel, table=True):
    """A semester-scoped reading task."""
    __tablename__ = "reading_assignment"
    id: Optional[int] = Field(default=None, primary_key=True)
    semester_id: int = Field(foreign_key="semester.id", index=True, ondelete="CASCADE")
    title: str
    description: Optional[str] = None
    assigned_date: date
