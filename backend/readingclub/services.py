"""Business logic services used by HTTP routers.

This module holds small service classes that coordinate repositories.
Services are intentionally thin: they perform validation, resolve related
entities by id and persist aggregates via repositories. Failures are
raised as `readingclub.errors` exceptions; routers never see raw
database errors for the cases handled here.
"""

import logging
import math
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import jwt
from passlib.context import CryptContext
from sqlmodel import Session

from . import models, repositories
from .config import settings
from .errors import ForbiddenError, InvalidArgumentError, NotFoundError, UnauthorizedError

logger = logging.getLogger("readingclub.services")

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ATTENDANCE_STATUSES = ("ontime", "late", "absent")
ADMIN_TYPES = ("superadmin", "admin", "moderator", "viewer")

# inclusive bounds for the weekly record counters
RECORD_BOUNDS = {
    "qt": ("QT", 0, 6),
    "reading": ("Reading", 0, 35),
    "pray": ("Pray", 0, 7),
    "memorize": ("Memorize", 0, 4),
}
RECORD_REQUIRED = ("week_number", "service1", "service2", "qt", "reading", "pray", "memorize")
RECORD_LABELS = {
    "week_number": "Week number",
    "service1": "Service1",
    "service2": "Service2",
}

SCOPE_ADMIN = "admin"
SCOPE_USER = "user"

# largest value a SQLite INTEGER column or bound parameter can hold
MAX_DB_INT = 2**63 - 1


def hash_password(password: str) -> str:
    return PWD_CTX.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison of `password` against a stored hash."""
    try:
        return PWD_CTX.verify(password, password_hash)
    except ValueError:
        # unknown or malformed hash format
        return False


def issue_token(user_id: int, username: str, scope: str) -> str:
    """Return a signed JWT carrying `user_id`, `username` and `scope`."""
    expire = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRE_HOURS)
    payload = {"user_id": user_id, "username": username, "scope": scope, "exp": int(expire.timestamp())}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_attendance(value: Optional[str], label: str) -> str:
    """Accept `ontime`/`late`/`absent` in any case; return the value as given."""
    if value is None or value.lower() not in ATTENDANCE_STATUSES:
        raise InvalidArgumentError(f"{label} must be 'ontime', 'late', or 'absent'")
    return value


def parse_sort(sort: Optional[str], allowed) -> Tuple[str, bool]:
    """Parse `field,direction` into `(field, descending)`.

    The direction is ascending unless it is explicitly `desc`; an empty
    value falls back to participation date descending.
    """
    if _is_blank(sort):
        return "participationDate", True
    parts = [p.strip() for p in sort.split(",")]
    field = parts[0] or "participationDate"
    if field not in allowed:
        raise InvalidArgumentError(f"Unsupported sort field: {field}")
    descending = len(parts) > 1 and parts[1].lower() == "desc"
    return field, descending


class AdminService:
    """Admin accounts: validation, soft delete and authentication."""
    def __init__(self, session: Session):
        self.session = session
        self.admin_repo = repositories.AdminRepository(session)

    def list_active(self) -> List[models.Admin]:
        return self.admin_repo.list_by_deleted(False)

    def list_deleted(self) -> List[models.Admin]:
        return self.admin_repo.list_by_deleted(True)

    def get(self, admin_id: int) -> models.Admin:
        admin = self.admin_repo.get(admin_id)
        if not admin:
            raise NotFoundError(f"Admin not found with id: {admin_id}")
        return admin

    def _validate_username(self, username: Optional[str]) -> str:
        if _is_blank(username):
            raise InvalidArgumentError("Username is required")
        if len(username) < 3:
            raise InvalidArgumentError("Username must be at least 3 characters")
        return username

    def _validate_name(self, name: Optional[str]) -> str:
        if _is_blank(name):
            raise InvalidArgumentError("Name is required")
        if len(name) < 2:
            raise InvalidArgumentError("Name must be at least 2 characters")
        return name

    def _validate_password(self, password: Optional[str]) -> str:
        if not password:
            raise InvalidArgumentError("Password is required")
        if len(password) < 8:
            raise InvalidArgumentError("Password must be at least 8 characters")
        return password

    def _validate_type(self, admin_type: Optional[str]) -> str:
        if _is_blank(admin_type):
            raise InvalidArgumentError("Type is required")
        admin_type = admin_type.lower()
        if admin_type not in ADMIN_TYPES:
            raise InvalidArgumentError("Invalid admin type. Must be: superadmin, admin, moderator, or viewer")
        return admin_type

    def create(self, username: Optional[str], name: Optional[str], password: Optional[str], admin_type: Optional[str]) -> models.Admin:
        """Validate and persist a new admin with a hashed password."""
        username = self._validate_username(username)
        name = self._validate_name(name)
        password = self._validate_password(password)
        admin_type = self._validate_type(admin_type)
        if self.admin_repo.exists_by_username(username):
            raise InvalidArgumentError("Username already exists")
        admin = models.Admin(username=username, name=name, password_hash=hash_password(password), type=admin_type)
        admin = self.admin_repo.save(admin)
        logger.info("admin_created id=%s username=%s type=%s", admin.id, admin.username, admin.type)
        return admin

    def update(self, admin_id: int, username: Optional[str] = None, name: Optional[str] = None,
               password: Optional[str] = None, admin_type: Optional[str] = None) -> models.Admin:
        """Apply a partial update; supplied fields follow the create rules."""
        admin = self.get(admin_id)
        if username is not None:
            username = self._validate_username(username)
            if username != admin.username and self.admin_repo.exists_by_username(username):
                raise InvalidArgumentError("Username already exists")
        if name is not None:
            name = self._validate_name(name)
        if password is not None:
            password = self._validate_password(password)
        if admin_type is not None:
            admin_type = self._validate_type(admin_type)
            if (admin.type.lower() == "superadmin" and admin_type != "superadmin" and not admin.is_deleted
                    and self.admin_repo.count_active_by_type("superadmin") <= 1):
                raise InvalidArgumentError("Cannot demote last active superadmin")

        if username is not None:
            admin.username = username
        if name is not None:
            admin.name = name
        if password is not None:
            admin.password_hash = hash_password(password)
        if admin_type is not None:
            admin.type = admin_type
        admin.updated_at = datetime.now(timezone.utc)
        return self.admin_repo.save(admin)

    def delete(self, admin_id: int) -> None:
        """Soft-delete an admin. The last active superadmin cannot be removed."""
        admin = self.get(admin_id)
        if admin.is_deleted:
            raise InvalidArgumentError("Admin already deleted")
        if admin.type.lower() == "superadmin" and self.admin_repo.count_active_by_type("superadmin") <= 1:
            raise InvalidArgumentError("Cannot delete last active superadmin")
        admin.is_deleted = True
        admin.updated_at = datetime.now(timezone.utc)
        self.admin_repo.save(admin)
        logger.info("admin_soft_deleted id=%s username=%s", admin.id, admin.username)

    def restore(self, admin_id: int) -> models.Admin:
        admin = self.get(admin_id)
        if not admin.is_deleted:
            raise InvalidArgumentError("Admin is not deleted")
        admin.is_deleted = False
        admin.updated_at = datetime.now(timezone.utc)
        return self.admin_repo.save(admin)

    def authenticate(self, username: str, password: str) -> models.Admin:
        """Verify credentials and return the admin.

        Unknown usernames and wrong passwords both raise the same
        `UnauthorizedError`; a correct password on a soft-deleted account
        raises `ForbiddenError`.
        """
        admin = self.admin_repo.get_by_username(username)
        if not admin or not verify_password(password, admin.password_hash):
            logger.warning("admin_login_failed username=%s", username)
            raise UnauthorizedError("Invalid username or password")
        if admin.is_deleted:
            logger.warning("admin_login_deleted_account username=%s", username)
            raise ForbiddenError("Account has been deleted")
        return admin

    def login(self, username: str, password: str) -> Dict:
        """Authenticate and return the login payload with a signed token."""
        admin = self.authenticate(username, password)
        token = issue_token(admin.id, admin.username, SCOPE_ADMIN)
        return {"token": token, "id": admin.id, "username": admin.username, "name": admin.name}


class PersonService:
    """Persons: CRUD, self-registration and name/password authentication."""
    def __init__(self, session: Session):
        self.session = session
        self.person_repo = repositories.PersonRepository(session)
        self.member_repo = repositories.GroupMemberRepository(session)
        self.participation_repo = repositories.ParticipationRepository(session)
        self.user_book_repo = repositories.SemesterUserBookRepository(session)

    def list(self) -> List[models.Person]:
        return self.person_repo.list_all()

    def get(self, person_id: int) -> models.Person:
        person = self.person_repo.get(person_id)
        if not person:
            raise NotFoundError(f"Person not found with id: {person_id}")
        return person

    def create(self, name: Optional[str], password: Optional[str]) -> models.Person:
        """Create a person with a hashed password. Names are unique."""
        if _is_blank(name):
            raise InvalidArgumentError("Name is required")
        if not password:
            raise InvalidArgumentError("Password is required")
        name = name.strip()
        if self.person_repo.exists_by_name(name):
            raise InvalidArgumentError("Person name already exists")
        return self.person_repo.save(models.Person(name=name, password_hash=hash_password(password)))

    def register(self, name: Optional[str], password: Optional[str]) -> models.Person:
        """Self-registration from the user portal; same rules as `create`."""
        person = self.create(name, password)
        logger.info("person_registered id=%s", person.id)
        return person

    def update(self, person_id: int, name: Optional[str] = None, password: Optional[str] = None) -> models.Person:
        person = self.get(person_id)
        if name is not None:
            if _is_blank(name):
                raise InvalidArgumentError("Name must not be blank")
            name = name.strip()
            if name != person.name and self.person_repo.exists_by_name(name):
                raise InvalidArgumentError("Person name already exists")
            person.name = name
        if password:
            person.password_hash = hash_password(password)
        return self.person_repo.save(person)

    def delete(self, person_id: int) -> None:
        """Delete a person; group memberships go with it.

        Persons that still own participation or reading records are kept.
        """
        person = self.get(person_id)
        if self.participation_repo.exists_for_person(person_id):
            raise InvalidArgumentError("Person still has participation records")
        if self.user_book_repo.exists_for_person(person_id):
            raise InvalidArgumentError("Person still has semester book records")
        self.person_repo.delete(person)
        logger.info("person_deleted id=%s", person_id)

    def groups(self, person_id: int) -> List[models.Group]:
        self.get(person_id)
        return self.member_repo.owners(person_id)

    def authenticate(self, name: str, password: str) -> models.Person:
        """Look the person up by name and verify the password.

        Both an unknown name and a wrong password raise `UnauthorizedError`
        with the same message.
        """
        name = (name or "").strip()
        person = self.person_repo.get_by_name(name)
        if not person or not verify_password(password, person.password_hash):
            logger.warning("person_login_failed name=%s", name)
            raise UnauthorizedError("Invalid name or password")
        return person

    def login(self, name: str, password: str) -> Dict:
        person = self.authenticate(name, password)
        token = issue_token(person.id, person.name, SCOPE_USER)
        return {"token": token, "id": person.id, "username": person.name, "name": person.name}

    def change_password(self, person_id: int, current_password: str, new_password: str) -> models.Person:
        person = self.get(person_id)
        if not verify_password(current_password, person.password_hash):
            raise UnauthorizedError("Current password is incorrect")
        if not new_password:
            raise InvalidArgumentError("New password is required")
        person.password_hash = hash_password(new_password)
        return self.person_repo.save(person)


class GroupService:
    """Groups and their person membership."""
    def __init__(self, session: Session):
        self.session = session
        self.group_repo = repositories.GroupRepository(session)
        self.person_repo = repositories.PersonRepository(session)
        self.member_repo = repositories.GroupMemberRepository(session)
        self.participation_repo = repositories.ParticipationRepository(session)

    def list(self) -> List[models.Group]:
        return self.group_repo.list_all()

    def get(self, group_id: int) -> models.Group:
        group = self.group_repo.get(group_id)
        if not group:
            raise NotFoundError(f"Group not found with id: {group_id}")
        return group

    def get_by_name(self, group_name: str) -> models.Group:
        group = self.group_repo.get_by_name(group_name)
        if not group:
            raise NotFoundError(f"Group not found with name: {group_name}")
        return group

    def create(self, group_name: Optional[str]) -> models.Group:
        if _is_blank(group_name):
            raise InvalidArgumentError("Group name is required")
        if self.group_repo.exists_by_name(group_name):
            raise InvalidArgumentError("Group name already exists")
        return self.group_repo.save(models.Group(group_name=group_name))

    def update(self, group_id: int, group_name: Optional[str] = None) -> models.Group:
        group = self.get(group_id)
        if group_name is not None and group_name != group.group_name:
            if _is_blank(group_name):
                raise InvalidArgumentError("Group name must not be blank")
            if self.group_repo.exists_by_name(group_name):
                raise InvalidArgumentError("Group name already exists")
            group.group_name = group_name
        return self.group_repo.save(group)

    def delete(self, group_id: int) -> None:
        group = self.get(group_id)
        if self.participation_repo.exists_for_group(group_id):
            raise InvalidArgumentError("Group still has participation records")
        self.group_repo.delete(group)
        logger.info("group_deleted id=%s", group_id)

    def members(self, group_id: int) -> List[models.Person]:
        self.get(group_id)
        return self.member_repo.members(group_id)

    def _person(self, person_id: int) -> models.Person:
        person = self.person_repo.get(person_id)
        if not person:
            raise NotFoundError(f"Person not found with id: {person_id}")
        return person

    def add_person(self, group_id: int, person_id: int) -> Dict:
        """Add a member. Adding an existing member changes nothing."""
        self.get(group_id)
        self._person(person_id)
        if self.member_repo.add(group_id, person_id):
            logger.info("group_member_added group_id=%s person_id=%s", group_id, person_id)
        return {"groupId": group_id, "personIds": self.member_repo.member_ids(group_id)}

    def remove_person(self, group_id: int, person_id: int) -> Dict:
        self.get(group_id)
        self._person(person_id)
        if not self.member_repo.remove(group_id, person_id):
            raise InvalidArgumentError("Person is not a member of this group")
        logger.info("group_member_removed group_id=%s person_id=%s", group_id, person_id)
        return {"groupId": group_id, "personIds": self.member_repo.member_ids(group_id)}


class BookService:
    """Books and keyword search."""
    def __init__(self, session: Session):
        self.session = session
        self.book_repo = repositories.BookRepository(session)
        self.user_book_repo = repositories.SemesterUserBookRepository(session)

    def list(self) -> List[models.Book]:
        return self.book_repo.list_all()

    def get(self, book_id: int) -> models.Book:
        book = self.book_repo.get(book_id)
        if not book:
            raise NotFoundError(f"Book not found with id: {book_id}")
        return book

    def get_by_title(self, title: str) -> models.Book:
        book = self.book_repo.get_by_title(title)
        if not book:
            raise NotFoundError(f"Book not found with title: {title}")
        return book

    def list_by_author(self, author: str) -> List[models.Book]:
        return self.book_repo.list_by_author(author)

    def search_title(self, keyword: str) -> List[models.Book]:
        return self.book_repo.search_title(keyword)

    def search_author(self, keyword: str) -> List[models.Book]:
        return self.book_repo.search_author(keyword)

    def create(self, title: Optional[str], author: Optional[str], description: Optional[str] = None) -> models.Book:
        if _is_blank(title):
            raise InvalidArgumentError("Book title is required")
        if _is_blank(author):
            raise InvalidArgumentError("Book author is required")
        return self.book_repo.save(models.Book(title=title, author=author, description=description))

    def update(self, book_id: int, title: Optional[str] = None, author: Optional[str] = None,
               description: Optional[str] = None) -> models.Book:
        """Partial update; blank titles and authors keep the stored value."""
        book = self.get(book_id)
        if not _is_blank(title):
            book.title = title
        if not _is_blank(author):
            book.author = author
        if description is not None:
            book.description = description
        return self.book_repo.save(book)

    def delete(self, book_id: int) -> None:
        book = self.get(book_id)
        if self.user_book_repo.exists_for_book(book_id):
            raise InvalidArgumentError("Book still has semester book records")
        self.book_repo.delete(book)
        logger.info("book_deleted id=%s", book_id)


class SemesterService:
    """Semesters, their date invariant and their group/book lists."""
    def __init__(self, session: Session):
        self.session = session
        self.semester_repo = repositories.SemesterRepository(session)
        self.group_repo = repositories.GroupRepository(session)
        self.book_repo = repositories.BookRepository(session)
        self.semester_group_repo = repositories.SemesterGroupRepository(session)
        self.semester_book_repo = repositories.SemesterBookRepository(session)
        self.participation_repo = repositories.ParticipationRepository(session)
        self.user_book_repo = repositories.SemesterUserBookRepository(session)

    @staticmethod
    def _check_dates(start_date: date, end_date: date) -> None:
        if end_date < start_date:
            raise InvalidArgumentError("End date must be after start date")

    def list(self) -> List[models.Semester]:
        return self.semester_repo.list_all()

    def get(self, semester_id: int) -> models.Semester:
        semester = self.semester_repo.get(semester_id)
        if not semester:
            raise NotFoundError(f"Semester not found with id: {semester_id}")
        return semester

    def create(self, name: Optional[str], start_date: Optional[date], end_date: Optional[date],
               is_break: Optional[bool] = None) -> models.Semester:
        """Create a semester; the end date may equal but not precede the start."""
        if _is_blank(name):
            raise InvalidArgumentError("Semester name is required")
        if start_date is None or end_date is None:
            raise InvalidArgumentError("Start date and end date are required")
        self._check_dates(start_date, end_date)
        semester = models.Semester(name=name, start_date=start_date, end_date=end_date, is_break=bool(is_break))
        return self.semester_repo.save(semester)

    def update(self, semester_id: int, name: Optional[str] = None, start_date: Optional[date] = None,
               end_date: Optional[date] = None, is_break: Optional[bool] = None) -> models.Semester:
        """Partial update; the date invariant is checked on the merged result."""
        semester = self.get(semester_id)
        new_start = start_date if start_date is not None else semester.start_date
        new_end = end_date if end_date is not None else semester.end_date
        self._check_dates(new_start, new_end)
        if name is not None:
            if _is_blank(name):
                raise InvalidArgumentError("Semester name must not be blank")
            semester.name = name
        semester.start_date = new_start
        semester.end_date = new_end
        if is_break is not None:
            semester.is_break = is_break
        return self.semester_repo.save(semester)

    def delete(self, semester_id: int) -> None:
        """Delete a semester with its assignments and group/book links."""
        semester = self.get(semester_id)
        if self.participation_repo.exists_for_semester(semester_id):
            raise InvalidArgumentError("Semester still has participation records")
        if self.user_book_repo.exists_for_semester(semester_id):
            raise InvalidArgumentError("Semester still has semester book records")
        self.semester_repo.delete(semester)
        logger.info("semester_deleted id=%s", semester_id)

    def _group(self, group_id: int) -> models.Group:
        group = self.group_repo.get(group_id)
        if not group:
            raise NotFoundError(f"Group not found with id: {group_id}")
        return group

    def _book(self, book_id: int) -> models.Book:
        book = self.book_repo.get(book_id)
        if not book:
            raise NotFoundError(f"Book not found with id: {book_id}")
        return book

    def groups(self, semester_id: int) -> List[models.Group]:
        self.get(semester_id)
        return self.semester_group_repo.members(semester_id)

    def add_group(self, semester_id: int, group_id: int) -> Dict:
        self.get(semester_id)
        self._group(group_id)
        if self.semester_group_repo.add(semester_id, group_id):
            logger.info("semester_group_added semester_id=%s group_id=%s", semester_id, group_id)
        return {"semesterId": semester_id, "groupIds": self.semester_group_repo.member_ids(semester_id)}

    def remove_group(self, semester_id: int, group_id: int) -> Dict:
        self.get(semester_id)
        self._group(group_id)
        if not self.semester_group_repo.remove(semester_id, group_id):
            raise InvalidArgumentError("Group is not in this semester")
        logger.info("semester_group_removed semester_id=%s group_id=%s", semester_id, group_id)
        return {"semesterId": semester_id, "groupIds": self.semester_group_repo.member_ids(semester_id)}

    def books(self, semester_id: int) -> List[models.Book]:
        self.get(semester_id)
        return self.semester_book_repo.members(semester_id)

    def add_book(self, semester_id: int, book_id: int) -> Dict:
        self.get(semester_id)
        self._book(book_id)
        if self.semester_book_repo.add(semester_id, book_id):
            logger.info("semester_book_added semester_id=%s book_id=%s", semester_id, book_id)
        return {"semesterId": semester_id, "bookIds": self.semester_book_repo.member_ids(semester_id)}

    def remove_book(self, semester_id: int, book_id: int) -> Dict:
        self.get(semester_id)
        self._book(book_id)
        if not self.semester_book_repo.remove(semester_id, book_id):
            raise InvalidArgumentError("Book is not in this semester")
        logger.info("semester_book_removed semester_id=%s book_id=%s", semester_id, book_id)
        return {"semesterId": semester_id, "bookIds": self.semester_book_repo.member_ids(semester_id)}


class ParticipationService:
    """Participation CRUD and the filtered, paginated search."""
    def __init__(self, session: Session):
        self.session = session
        self.participation_repo = repositories.ParticipationRepository(session)
        self.semester_repo = repositories.SemesterRepository(session)
        self.group_repo = repositories.GroupRepository(session)
        self.person_repo = repositories.PersonRepository(session)

    def list(self) -> List[models.Participation]:
        return self.participation_repo.list_all()

    def get(self, participation_id: int) -> models.Participation:
        participation = self.participation_repo.get(participation_id)
        if not participation:
            raise NotFoundError(f"Participation not found with id: {participation_id}")
        return participation

    def list_by_semester(self, semester_id: int) -> List[models.Participation]:
        return self.participation_repo.list_by_semester(semester_id)

    def list_by_group(self, group_id: int) -> List[models.Participation]:
        return self.participation_repo.list_by_group(group_id)

    def list_by_person(self, person_id: int) -> List[models.Participation]:
        return self.participation_repo.list_by_person(person_id)

    def create(self, semester_id: int, group_id: int, person_id: int, status: Optional[str],
               participation_date: Optional[date]) -> models.Participation:
        """Resolve semester, group and person, validate, then persist."""
        if not self.semester_repo.exists(semester_id):
            raise NotFoundError(f"Semester not found with id: {semester_id}")
        if not self.group_repo.exists(group_id):
            raise NotFoundError(f"Group not found with id: {group_id}")
        if not self.person_repo.exists(person_id):
            raise NotFoundError(f"Person not found with id: {person_id}")
        status = validate_attendance(status, "Status")
        if participation_date is None:
            raise InvalidArgumentError("Participation date is required")
        participation = models.Participation(
            semester_id=semester_id,
            group_id=group_id,
            person_id=person_id,
            status=status,
            participation_date=participation_date,
        )
        return self.participation_repo.save(participation)

    def update(self, participation_id: int, status: Optional[str] = None,
               participation_date: Optional[date] = None) -> models.Participation:
        participation = self.get(participation_id)
        if status is not None:
            participation.status = validate_attendance(status, "Status")
        if participation_date is not None:
            participation.participation_date = participation_date
        return self.participation_repo.save(participation)

    def delete(self, participation_id: int) -> None:
        """Delete a participation together with its weekly record."""
        participation = self.get(participation_id)
        self.participation_repo.delete(participation)
        logger.info("participation_deleted id=%s", participation_id)

    def search(self, start_date: Optional[date], end_date: Optional[date], semester_id: Optional[int] = None,
               group_id: Optional[int] = None, person_id: Optional[int] = None, status: Optional[str] = None,
               page: int = 0, size: Optional[int] = None, sort: Optional[str] = "participationDate,desc") -> Dict:
        """Return a page envelope of participations matching the filters.

        `start_date` and `end_date` are mandatory and inclusive; the other
        filters are optional and combined with AND.
        """
        if start_date is None or end_date is None:
            raise InvalidArgumentError("Start date and end date are required")
        if start_date > end_date:
            raise InvalidArgumentError("Start date must not be after end date")
        if size is None:
            size = settings.DEFAULT_PAGE_SIZE
        if page < 0:
            raise InvalidArgumentError("Page index must not be negative")
        if size < 1 or size > settings.MAX_PAGE_SIZE:
            raise InvalidArgumentError(f"Page size must be between 1 and {settings.MAX_PAGE_SIZE}")
        if page * size > MAX_DB_INT:
            raise InvalidArgumentError("Page index is too large")
        sort_field, descending = parse_sort(sort, self.participation_repo.SORT_COLUMNS)
        content, total = self.participation_repo.search(
            start_date,
            end_date,
            semester_id=semester_id,
            group_id=group_id,
            person_id=person_id,
            status=status,
            sort_field=sort_field,
            descending=descending,
            offset=page * size,
            limit=size,
        )
        return {
            "content": content,
            "total_elements": total,
            "total_pages": math.ceil(total / size),
            "number": page,
            "size": size,
        }


class WeeklyRecordService:
    """Weekly records with bounded counters and attendance enums."""
    def __init__(self, session: Session):
        self.session = session
        self.record_repo = repositories.WeeklyRecordRepository(session)
        self.participation_repo = repositories.ParticipationRepository(session)

    @staticmethod
    def validate_fields(fields: Dict) -> Dict:
        """Validate the supplied (non-None) record fields and return them."""
        for key in ("service1", "service2"):
            if key in fields:
                validate_attendance(fields[key], RECORD_LABELS[key])
        if "week_number" in fields and not 1 <= fields["week_number"] <= MAX_DB_INT:
            raise InvalidArgumentError("Week number must be a positive number")
        for key, (label, low, high) in RECORD_BOUNDS.items():
            if key in fields and not low <= fields[key] <= high:
                raise InvalidArgumentError(f"{label} must be between {low} and {high}")
        return fields

    def list(self) -> List[models.WeeklyRecord]:
        return self.record_repo.list_all()

    def get(self, record_id: int) -> models.WeeklyRecord:
        record = self.record_repo.get(record_id)
        if not record:
            raise NotFoundError(f"Record not found with id: {record_id}")
        return record

    def list_by_person(self, person_id: int) -> List[models.WeeklyRecord]:
        return self.record_repo.list_by_person(person_id)

    def list_by_semester(self, semester_id: int) -> List[models.WeeklyRecord]:
        return self.record_repo.list_by_semester(semester_id)

    def list_by_person_and_semester(self, person_id: int, semester_id: int) -> List[models.WeeklyRecord]:
        return self.record_repo.list_by_person_and_semester(person_id, semester_id)

    def _participation(self, participation_id: int) -> models.Participation:
        participation = self.participation_repo.get(participation_id)
        if not participation:
            raise NotFoundError(f"Participation not found with id: {participation_id}")
        return participation

    def create(self, participation_id: int, fields: Dict) -> models.WeeklyRecord:
        """Create the record for a participation that does not own one yet."""
        participation = self._participation(participation_id)
        if participation.weekly_record is not None:
            raise InvalidArgumentError("Participation already has a weekly record")
        return self._create(participation, fields)

    def _create(self, participation: models.Participation, fields: Dict) -> models.WeeklyRecord:
        for key in RECORD_REQUIRED:
            if fields.get(key) is None:
                raise InvalidArgumentError(f"{RECORD_LABELS.get(key, key.capitalize())} is required")
        self.validate_fields(fields)
        record = models.WeeklyRecord(participation_id=participation.id, **fields)
        return self.record_repo.save(record)

    def update(self, record_id: int, fields: Dict) -> models.WeeklyRecord:
        """Partial update: only supplied fields change, all must be valid."""
        record = self.get(record_id)
        return self._update(record, fields)

    def _update(self, record: models.WeeklyRecord, fields: Dict) -> models.WeeklyRecord:
        self.validate_fields(fields)
        for key, value in fields.items():
            setattr(record, key, value)
        return self.record_repo.save(record)

    def delete(self, record_id: int) -> None:
        record = self.get(record_id)
        participation = record.participation
        if participation is not None:
            participation.weekly_record = None
            self.participation_repo.save(participation)
        else:
            self.record_repo.delete(record)

    def upsert_for_participation(self, participation_id: int, fields: Dict) -> models.WeeklyRecord:
        """Update the participation's record in place or create and bind one."""
        participation = self._participation(participation_id)
        if participation.weekly_record is not None:
            return self._update(participation.weekly_record, fields)
        return self._create(participation, fields)


class SemesterUserBookService:
    """Per-person reading status of a book within a semester."""
    def __init__(self, session: Session):
        self.session = session
        self.user_book_repo = repositories.SemesterUserBookRepository(session)
        self.semester_repo = repositories.SemesterRepository(session)
        self.person_repo = repositories.PersonRepository(session)
        self.book_repo = repositories.BookRepository(session)

    def list(self) -> List[models.SemesterUserBook]:
        return self.user_book_repo.list_all()

    def get(self, entry_id: int) -> models.SemesterUserBook:
        entry = self.user_book_repo.get(entry_id)
        if not entry:
            raise NotFoundError(f"SemesterUserBook not found with id: {entry_id}")
        return entry

    def list_by_semester(self, semester_id: int) -> List[models.SemesterUserBook]:
        return self.user_book_repo.list_by_semester(semester_id)

    def list_by_person(self, person_id: int) -> List[models.SemesterUserBook]:
        return self.user_book_repo.list_by_person(person_id)

    def list_by_book(self, book_id: int) -> List[models.SemesterUserBook]:
        return self.user_book_repo.list_by_book(book_id)

    def list_by_semester_and_person(self, semester_id: int, person_id: int) -> List[models.SemesterUserBook]:
        return self.user_book_repo.list_by_semester_and_person(semester_id, person_id)

    def list_by_semester_and_book(self, semester_id: int, book_id: int) -> List[models.SemesterUserBook]:
        return self.user_book_repo.list_by_semester_and_book(semester_id, book_id)

    def create(self, semester_id: int, person_id: int, book_id: int, status: Optional[str],
               record_date: Optional[date]) -> models.SemesterUserBook:
        if not self.semester_repo.exists(semester_id):
            raise NotFoundError(f"Semester not found with id: {semester_id}")
        if not self.person_repo.exists(person_id):
            raise NotFoundError(f"Person not found with id: {person_id}")
        if not self.book_repo.exists(book_id):
            raise NotFoundError(f"Book not found with id: {book_id}")
        if _is_blank(status):
            raise InvalidArgumentError("Status is required")
        if record_date is None:
            raise InvalidArgumentError("Date is required")
        entry = models.SemesterUserBook(
            semester_id=semester_id,
            person_id=person_id,
            book_id=book_id,
            status=status,
            record_date=record_date,
        )
        return self.user_book_repo.save(entry)

    def update(self, entry_id: int, status: Optional[str] = None, record_date: Optional[date] = None) -> models.SemesterUserBook:
        entry = self.get(entry_id)
        if status is not None:
            if _is_blank(status):
                raise InvalidArgumentError("Status must not be blank")
            entry.status = status
        if record_date is not None:
            entry.record_date = record_date
        return self.user_book_repo.save(entry)

    def delete(self, entry_id: int) -> None:
        self.user_book_repo.delete(self.get(entry_id))


class ReadingAssignmentService:
    """Semester-scoped reading assignments."""
    def __init__(self, session: Session):
        self.session = session
        self.assignment_repo = repositories.ReadingAssignmentRepository(session)
        self.semester_repo = repositories.SemesterRepository(session)

    def list(self) -> List[models.ReadingAssignment]:
        return self.assignment_repo.list_all()

    def get(self, assignment_id: int) -> models.ReadingAssignment:
        assignment = self.assignment_repo.get(assignment_id)
        if not assignment:
            raise NotFoundError(f"Assignment not found with id: {assignment_id}")
        return assignment

    def list_by_semester(self, semester_id: int) -> List[models.ReadingAssignment]:
        return self.assignment_repo.list_by_semester(semester_id)

    def create(self, semester_id: int, title: Optional[str], description: Optional[str],
               assigned_date: Optional[date]) -> models.ReadingAssignment:
        if not self.semester_repo.exists(semester_id):
            raise NotFoundError(f"Semester not found with id: {semester_id}")
        if _is_blank(title):
            raise InvalidArgumentError("Assignment title is required")
        if assigned_date is None:
            raise InvalidArgumentError("Assigned date is required")
        assignment = models.ReadingAssignment(
            semester_id=semester_id, title=title, description=description, assigned_date=assigned_date
        )
        return self.assignment_repo.save(assignment)

    def update(self, assignment_id: int, title: Optional[str] = None, description: Optional[str] = None,
               assigned_date: Optional[date] = None) -> models.ReadingAssignment:
        assignment = self.get(assignment_id)
        if title is not None:
            if _is_blank(title):
                raise InvalidArgumentError("Assignment title must not be blank")
            assignment.title = title
        if description is not None:
            assignment.description = description
        if assigned_date is not None:
            assignment.assigned_date = assigned_date
        return self.assignment_repo.save(assignment)

    def delete(self, assignment_id: int) -> None:
        self.assignment_repo.delete(self.get(assignment_id))


def _record_summary(record: models.WeeklyRecord) -> Dict:
    return {
        "recordId": record.id,
        "weekNumber": record.week_number,
        "service1": record.service1,
        "service2": record.service2,
        "summary1": record.summary1,
        "summary2": record.summary2,
        "qt": record.qt,
        "reading": record.reading,
        "pray": record.pray,
        "memorize": record.memorize,
        "submittedDate": record.submitted_date,
    }


class UserPortalService:
    """Read models for the person-facing endpoints."""
    def __init__(self, session: Session):
        self.session = session
        self.person_repo = repositories.PersonRepository(session)
        self.participation_repo = repositories.ParticipationRepository(session)

    def _person(self, person_id: int) -> models.Person:
        person = self.person_repo.get(person_id)
        if not person:
            raise NotFoundError(f"Person not found with id: {person_id}")
        return person

    def semesters(self, person_id: int) -> Dict:
        """Semesters the person participated in, each with its distinct groups.

        A group appears once per semester with the date of the first
        participation seen for it.
        """
        person = self._person(person_id)
        semesters: Dict[int, Dict] = {}
        seen_groups: Dict[int, Dict[int, Dict]] = {}
        for p in self.participation_repo.list_for_person(person_id):
            if p.semester_id not in semesters:
                semesters[p.semester_id] = {
                    "semesterId": p.semester_id,
                    "semesterName": p.semester.name,
                    "startDate": p.semester.start_date,
                    "endDate": p.semester.end_date,
                    "isBreak": p.semester.is_break,
                    "groups": [],
                }
                seen_groups[p.semester_id] = {}
            groups = seen_groups[p.semester_id]
            if p.group_id not in groups:
                groups[p.group_id] = {
                    "groupId": p.group_id,
                    "groupName": p.group.group_name,
                    "participationDate": p.participation_date,
                }
                semesters[p.semester_id]["groups"].append(groups[p.group_id])
        return {"personId": person.id, "personName": person.name, "semesters": list(semesters.values())}

    def participations(self, person_id: int, semester_id: Optional[int] = None,
                       group_id: Optional[int] = None) -> List[Dict]:
        """The person's participations with their weekly record embedded."""
        self._person(person_id)
        out = []
        for p in self.participation_repo.list_for_person(person_id, semester_id=semester_id, group_id=group_id):
            item = {
                "participationId": p.id,
                "semesterId": p.semester_id,
                "semesterName": p.semester.name,
                "groupId": p.group_id,
                "groupName": p.group.group_name,
                "status": p.status,
                "participationDate": p.participation_date,
            }
            if p.weekly_record is not None:
                item["weeklyRecord"] = _record_summary(p.weekly_record)
            out.append(item)
        return out
