"""CLI script to create the tables and load the default demo data.
Usage: python scripts/seed_db.py [--reset]
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so `readingclub` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from readingclub.config import settings
from readingclub.database import create_db_and_tables, drop_db_and_tables, engine
from readingclub.seed import seed_default_data


def main(reset: bool = False):
    """Create missing tables, optionally dropping everything first, then seed.

    Seeding is skipped when the database already holds an admin account.
    Results are printed to stdout for a quick CLI feedback loop.
    """
    print(f'Using database: {settings.DATABASE_URL}')
    if reset:
        drop_db_and_tables()
        print('Dropped all tables')
    create_db_and_tables()
    with Session(engine) as session:
        if seed_default_data(session):
            print('Default data created (login: admin / password123)')
        else:
            print('Admins already present; nothing seeded')


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--reset', action='store_true', help='drop all tables before seeding')
    args = parser.parse_args()
    main(reset=args.reset)
