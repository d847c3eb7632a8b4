"""
Ensure the administrator account and the administrators role exist.

Usage (from repository root):

    python scripts/bootstrap_admin.py

The routine is find-or-create at every step, so it is safe to run repeatedly:

    python scripts/bootstrap_admin.py --admin-password S3cret
"""

import argparse
import logging
import os
import sys

# Ensure src is on path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from app.db import SessionLocal
from app.db.init_db import init_db
from app.services.bootstrap import bootstrap_admin


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bootstrap the admin account and role.")
    parser.add_argument("--admin-password", help="Password for a newly created admin user (ignored if it exists).")
    return parser


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    args = build_parser().parse_args()

    init_db()
    session = SessionLocal()
    try:
        result = bootstrap_admin(session, password=args.admin_password)
    finally:
        session.close()

    print(
        "Bootstrap completed successfully. "
        f"user_id={result.user_id} role_id={result.role_id} "
        f"(user_created={result.user_created}, role_created={result.role_created}, "
        f"membership_created={result.membership_created})"
    )


if __name__ == "__main__":
    main()
