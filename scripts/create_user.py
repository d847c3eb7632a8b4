"""Create a local user in the application's database.

Usage (from repository root):
python scripts/create_user.py --username jsmith --password secret --role Editors

This script ensures the project's `src` directory is on sys.path so the
local `app` package can be imported. It calls `init_db()` to prepare the DB
and then creates the user, optionally adding it to existing roles.
"""

import argparse
import os
import sys
from getpass import getpass

# Ensure src is on path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from app.db import SessionLocal
from app.db.init_db import init_db
from app.errors import AuthzAdminError
from app.schemas.user_schemas import UserCreate
from app.services.factory import build_role_graph_service, build_user_service


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a local user.")
    parser.add_argument("--username", required=False)
    parser.add_argument("--password", required=False)
    parser.add_argument("--name", required=False)
    parser.add_argument("--email", required=False)
    parser.add_argument("--role", action="append", default=[], help="Role name to add the user to (repeatable)")
    args = parser.parse_args()

    username = args.username or input("username: ")
    password = args.password or getpass("password: ")

    # initialize DB (creates tables if needed)
    init_db()

    db = SessionLocal()
    try:
        users = build_user_service(db)
        role_graph = build_role_graph_service(db)
        try:
            user_id = users.create_user(UserCreate(user_name=username, password=password, name=args.name, email=args.email))
            for role_name in args.role:
                role = role_graph.get_role_by_name(role_name)
                if role is None:
                    print(f"Role not found, skipped: {role_name}")
                    continue
                role_graph.assign_role_to_user(user_id, role.id)
        except AuthzAdminError as exc:
            sys.exit(f"error: {exc.message}")
        print(f"Created user: {username} (id={user_id}, roles={args.role})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
