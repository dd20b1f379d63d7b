"""Default demo data loaded on first start.

`seed_default_data` is a no-op once any admin exists, so it is safe to
call on every startup.
"""

import logging
from datetime import date

from sqlmodel import Session

from . import repositories, services

logger = logging.getLogger("readingclub.seed")

DEFAULT_PASSWORD = "password123"


def seed_default_data(session: Session) -> bool:
    """Create the default admin, persons, groups and semesters.

    Returns True when data was created and False when the database
    already held an admin.
    """
    if repositories.AdminRepository(session).count() > 0:
        logger.info("seed_skipped reason=admins_present")
        return False

    services.AdminService(session).create("admin", "System Administrator", DEFAULT_PASSWORD, "superadmin")

    person_svc = services.PersonService(session)
    john = person_svc.create("John Doe", DEFAULT_PASSWORD)
    jane = person_svc.create("Jane Smith", DEFAULT_PASSWORD)
    bob = person_svc.create("Bob Johnson", DEFAULT_PASSWORD)

    group_svc = services.GroupService(session)
    reading = group_svc.create("Spring 2026 Reading Group")
    advanced = group_svc.create("Advanced Java Study Group")
    group_svc.add_person(reading.id, john.id)
    group_svc.add_person(reading.id, jane.id)
    group_svc.add_person(advanced.id, jane.id)
    group_svc.add_person(advanced.id, bob.id)

    semester_svc = services.SemesterService(session)
    spring = semester_svc.create("Spring 2026", date(2026, 3, 1), date(2026, 6, 30))
    fall = semester_svc.create("Fall 2026", date(2026, 9, 1), date(2026, 12, 31))
    semester_svc.add_group(spring.id, reading.id)
    semester_svc.add_group(spring.id, advanced.id)
    semester_svc.add_group(fall.id, advanced.id)

    logger.info("seed_done admins=1 persons=3 groups=2 semesters=2 login=admin")
    return True
