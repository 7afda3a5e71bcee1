import argparse
import getpass
import logging
import sys

from sqlalchemy.orm import Session

from vaev.config import get_settings
from vaev.db import init_db
from vaev.db.repositories import UserRepository
from vaev.services.identity_provider import hash_password


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create a Vaev user account.")
    parser.add_argument("email")
    parser.add_argument("--name", default="")
    args = parser.parse_args(argv)

    password = getpass.getpass("Password: ")
    if not password or password != getpass.getpass("Repeat password: "):
        print("Passwords are empty or do not match.")
        return 1

    engine = init_db(get_settings().DATABASE_URL)
    with Session(engine) as db:
        users = UserRepository(db)
        if users.get_user_by_email(args.email):
            print(f"A user with email {args.email} already exists.")
            return 1
        user = users.create_user(args.email, hash_password(password), name=args.name)
        print(f"Created user {user.email} ({user.id})")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
