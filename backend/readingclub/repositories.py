"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (people,
groups, semesters, participations, ...). Repositories return SQLModel
objects and perform commits/refreshes where appropriate; one repository
call that writes is one transaction.
"""

from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from . import models


class _Repository:
    """Shared get/list/save/delete for single-table aggregates."""
    model = None

    def __init__(self, session: Session):
        self.session = session

    def get(self, entity_id: int):
        """Fetch a row by primary key, or `None`."""
        return self.session.get(self.model, entity_id)

    def exists(self, entity_id: int) -> bool:
        return self.get(entity_id) is not None

    def list_all(self) -> list:
        """Return every row ordered by id."""
        stmt = select(self.model).order_by(self.model.id)
        return list(self.session.exec(stmt).all())

    def save(self, entity):
        """Persist a new or modified row and return the refreshed instance."""
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def delete(self, entity) -> None:
        self.session.delete(entity)
        self.session.commit()

    def _list_where(self, *conditions) -> list:
        stmt = select(self.model).where(*conditions).order_by(self.model.id)
        return list(self.session.exec(stmt).all())

    def _any_where(self, *conditions) -> bool:
        stmt = select(self.model.id).where(*conditions).limit(1)
        return self.session.exec(stmt).first() is not None


class PersonRepository(_Repository):
    """CRUD operations for `Person` objects."""
    model = models.Person

    def get_by_name(self, name: str) -> Optional[models.Person]:
        """Return a `Person` by its unique name or `None` if not found."""
        stmt = select(models.Person).where(models.Person.name == name)
        return self.session.exec(stmt).first()

    def exists_by_name(self, name: str) -> bool:
        return self._any_where(models.Person.name == name)


class AdminRepository(_Repository):
    """CRUD operations for `Admin` accounts, including soft-deleted ones."""
    model = models.Admin

    def get_by_username(self, username: str) -> Optional[models.Admin]:
        """Return an admin by username regardless of the soft-delete flag."""
        stmt = select(models.Admin).where(models.Admin.username == username)
        return self.session.exec(stmt).first()

    def exists_by_username(self, username: str) -> bool:
        return self._any_where(models.Admin.username == username)

    def list_by_deleted(self, is_deleted: bool) -> List[models.Admin]:
        return self._list_where(models.Admin.is_deleted == is_deleted)

    def count_active_by_type(self, admin_type: str) -> int:
        stmt = select(func.count()).select_from(models.Admin).where(
            func.lower(models.Admin.type) == admin_type.lower(),
            models.Admin.is_deleted == False,  # noqa: E712
        )
        return self.session.exec(stmt).one()

    def count(self) -> int:
        return self.session.exec(select(func.count()).select_from(models.Admin)).one()


class GroupRepository(_Repository):
    """CRUD operations for `Group` objects."""
    model = models.Group

    def get_by_name(self, group_name: str) -> Optional[models.Group]:
        stmt = select(models.Group).where(models.Group.group_name == group_name)
        return self.session.exec(stmt).first()

    def exists_by_name(self, group_name: str) -> bool:
        return self._any_where(models.Group.group_name == group_name)


class BookRepository(_Repository):
    """Query helpers for `Book` records."""
    model = models.Book

    def get_by_title(self, title: str) -> Optional[models.Book]:
        stmt = select(models.Book).where(models.Book.title == title).order_by(models.Book.id)
        return self.session.exec(stmt).first()

    def list_by_author(self, author: str) -> List[models.Book]:
        return self._list_where(models.Book.author == author)

    def search_title(self, keyword: str) -> List[models.Book]:
        """Case-insensitive containment search on the title."""
        return self._list_where(models.Book.title.icontains(keyword, autoescape=True))

    def search_author(self, keyword: str) -> List[models.Book]:
        """Case-insensitive containment search on the author."""
        return self._list_where(models.Book.author.icontains(keyword, autoescape=True))


class SemesterRepository(_Repository):
    model = models.Semester


class _LinkRepository:
    """Id-based operations on a two-column many-to-many link table.

    Subclasses name the link model, the owner/member columns and the
    member entity; the owner side is the first half of the composite key.
    """
    link_model = None
    owner_field = None
    member_field = None
    owner_model = None
    member_model = None

    def __init__(self, session: Session):
        self.session = session

    def _owner_col(self):
        return getattr(self.link_model, self.owner_field)

    def _member_col(self):
        return getattr(self.link_model, self.member_field)

    def _get(self, owner_id: int, member_id: int):
        stmt = select(self.link_model).where(self._owner_col() == owner_id, self._member_col() == member_id)
        return self.session.exec(stmt).first()

    def exists(self, owner_id: int, member_id: int) -> bool:
        return self._get(owner_id, member_id) is not None

    def add(self, owner_id: int, member_id: int) -> bool:
        """Insert the link if missing. Returns False when it already existed.

        A concurrent insert of the same pair surfaces as a primary-key
        conflict; it is rolled back and reported as already present.
        """
        if self.exists(owner_id, member_id):
            return False
        self.session.add(self.link_model(**{self.owner_field: owner_id, self.member_field: member_id}))
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            return False
        return True

    def remove(self, owner_id: int, member_id: int) -> bool:
        """Delete the link. Returns False when there was nothing to delete."""
        link = self._get(owner_id, member_id)
        if link is None:
            return False
        self.session.delete(link)
        self.session.commit()
        return True

    def member_ids(self, owner_id: int) -> List[int]:
        stmt = select(self._member_col()).where(self._owner_col() == owner_id).order_by(self._member_col())
        return list(self.session.exec(stmt).all())

    def members(self, owner_id: int) -> list:
        """Return the member entities linked to `owner_id`."""
        stmt = (
            select(self.member_model)
            .join(self.link_model, self.member_model.id == self._member_col())
            .where(self._owner_col() == owner_id)
            .order_by(self.member_model.id)
        )
        return list(self.session.exec(stmt).all())

    def owners(self, member_id: int) -> list:
        """Return the owner entities that link to `member_id`."""
        stmt = (
            select(self.owner_model)
            .join(self.link_model, self.owner_model.id == self._owner_col())
            .where(self._member_col() == member_id)
            .order_by(self.owner_model.id)
        )
        return list(self.session.exec(stmt).all())


class GroupMemberRepository(_LinkRepository):
    """Group → person membership (`group_member`)."""
    link_model = models.GroupMember
    owner_field = "group_id"
    member_field = "person_id"
    owner_model = models.Group
    member_model = models.Person


class SemesterGroupRepository(_LinkRepository):
    """Semester → group schedule (`semester_group`)."""
    link_model = models.SemesterGroup
    owner_field = "semester_id"
    member_field = "group_id"
    owner_model = models.Semester
    member_model = models.Group


class SemesterBookRepository(_LinkRepository):
    """Semester → book reading list (`semester_book`)."""
    link_model = models.SemesterBook
    owner_field = "semester_id"
    member_field = "book_id"
    owner_model = models.Semester
    member_model = models.Book


class ParticipationRepository(_Repository):
    """Participation queries including the dynamic filtered search."""
    model = models.Participation

    SORT_COLUMNS = {
        "participationDate": models.Participation.participation_date,
        "participationId": models.Participation.id,
        "id": models.Participation.id,
        "status": models.Participation.status,
        "semesterId": models.Participation.semester_id,
        "groupId": models.Participation.group_id,
        "personId": models.Participation.person_id,
    }

    def list_by_semester(self, semester_id: int) -> List[models.Participation]:
        return self._list_where(models.Participation.semester_id == semester_id)

    def list_by_group(self, group_id: int) -> List[models.Participation]:
        return self._list_where(models.Participation.group_id == group_id)

    def list_by_person(self, person_id: int) -> List[models.Participation]:
        return self._list_where(models.Participation.person_id == person_id)

    def list_for_person(self, person_id: int, semester_id: Optional[int] = None, group_id: Optional[int] = None) -> List[models.Participation]:
        """Participations of one person, optionally narrowed to a semester and/or group."""
        conditions = [models.Participation.person_id == person_id]
        if semester_id is not None:
            conditions.append(models.Participation.semester_id == semester_id)
        if group_id is not None:
            conditions.append(models.Participation.group_id == group_id)
        stmt = select(models.Participation).where(*conditions).order_by(
            models.Participation.participation_date, models.Participation.id
        )
        return list(self.session.exec(stmt).all())

    def exists_for_person(self, person_id: int) -> bool:
        return self._any_where(models.Participation.person_id == person_id)

    def exists_for_group(self, group_id: int) -> bool:
        return self._any_where(models.Participation.group_id == group_id)

    def exists_for_semester(self, semester_id: int) -> bool:
        return self._any_where(models.Participation.semester_id == semester_id)

    def search(
        self,
        start_date: date,
        end_date: date,
        semester_id: Optional[int] = None,
        group_id: Optional[int] = None,
        person_id: Optional[int] = None,
        status: Optional[str] = None,
        sort_field: str = "participationDate",
        descending: bool = True,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[models.Participation], int]:
        """Return one page of matching participations and the total match count.

        Supplied filters are ANDed; `None` filters are left out entirely.
        The inclusive date range is always applied and `status` is compared
        case-insensitively. Rows with equal sort keys are ordered by id so
        pages do not overlap.
        """
        P = models.Participation
        conditions = [P.participation_date >= start_date, P.participation_date <= end_date]
        if semester_id is not None:
            conditions.append(P.semester_id == semester_id)
        if group_id is not None:
            conditions.append(P.group_id == group_id)
        if person_id is not None:
            conditions.append(P.person_id == person_id)
        if status:
            conditions.append(func.lower(P.status) == status.lower())

        total = self.session.exec(select(func.count()).select_from(P).where(*conditions)).one()

        column = self.SORT_COLUMNS[sort_field]
        if descending:
            order = [column.desc(), P.id.desc()]
        else:
            order = [column.asc(), P.id.asc()]
        stmt = select(P).where(*conditions).order_by(*order).offset(offset).limit(limit)
        return list(self.session.exec(stmt).all()), total


class WeeklyRecordRepository(_Repository):
    """Weekly records, queried through their owning participation."""
    model = models.WeeklyRecord

    def _joined(self, *conditions) -> List[models.WeeklyRecord]:
        stmt = (
            select(models.WeeklyRecord)
            .join(models.Participation, models.Participation.id == models.WeeklyRecord.participation_id)
            .where(*conditions)
            .order_by(models.WeeklyRecord.id)
        )
        return list(self.session.exec(stmt).all())

    def get_by_participation(self, participation_id: int) -> Optional[models.WeeklyRecord]:
        stmt = select(models.WeeklyRecord).where(models.WeeklyRecord.participation_id == participation_id)
        return self.session.exec(stmt).first()

    def list_by_person(self, person_id: int) -> List[models.WeeklyRecord]:
        return self._joined(models.Participation.person_id == person_id)

    def list_by_semester(self, semester_id: int) -> List[models.WeeklyRecord]:
        return self._joined(models.Participation.semester_id == semester_id)

    def list_by_person_and_semester(self, person_id: int, semester_id: int) -> List[models.WeeklyRecord]:
        return self._joined(
            models.Participation.person_id == person_id,
            models.Participation.semester_id == semester_id,
        )


class SemesterUserBookRepository(_Repository):
    """Per-person book reading status within a semester."""
    model = models.SemesterUserBook

    def list_by_semester(self, semester_id: int) -> List[models.SemesterUserBook]:
        return self._list_where(models.SemesterUserBook.semester_id == semester_id)

    def list_by_person(self, person_id: int) -> List[models.SemesterUserBook]:
        return self._list_where(models.SemesterUserBook.person_id == person_id)

    def list_by_book(self, book_id: int) -> List[models.SemesterUserBook]:
        return self._list_where(models.SemesterUserBook.book_id == book_id)

    def list_by_semester_and_person(self, semester_id: int, person_id: int) -> List[models.SemesterUserBook]:
        return self._list_where(
            models.SemesterUserBook.semester_id == semester_id,
            models.SemesterUserBook.person_id == person_id,
        )

    def list_by_semester_and_book(self, semester_id: int, book_id: int) -> List[models.SemesterUserBook]:
        return self._list_where(
            models.SemesterUserBook.semester_id == semester_id,
            models.SemesterUserBook.book_id == book_id,
        )

    def exists_for_person(self, person_id: int) -> bool:
        return self._any_where(models.SemesterUserBook.person_id == person_id)

    def exists_for_book(self, book_id: int) -> bool:
        return self._any_where(models.SemesterUserBook.book_id == book_id)

    def exists_for_semester(self, semester_id: int) -> bool:
        return self._any_where(models.SemesterUserBook.semester_id == semester_id)


class ReadingAssignmentRepository(_Repository):
    model = models.ReadingAssignment

    def list_by_semester(self, semester_id: int) -> List[models.ReadingAssignment]:
        return self._list_where(models.ReadingAssignment.semester_id == semester_id)
