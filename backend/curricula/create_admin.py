"""
Create an admin user for the back-office.

Usage:
    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD=securepassword curricula-create-admin

Environment variables:
    ADMIN_EMAIL - Email for the admin account
    ADMIN_PASSWORD - Password for the admin account (at least 8 characters)
    ADMIN_NAME - Name for the admin account (optional, defaults to "Admin")
"""
import logging
import os
import sys

from curricula import exceptions
from curricula.database import SessionLocal
from curricula.services.auth import ADMIN_ROLE, create_user

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_admin_user() -> int:
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    name = os.getenv("ADMIN_NAME") or "Admin"

    if not email or not password:
        logger.error("ADMIN_EMAIL and ADMIN_PASSWORD environment variables are required.")
        return 1

    logger.info(f"Creating admin user: {email}...")
    db = SessionLocal()
    try:
        user = create_user(db, email=email, password=password, name=name, role=ADMIN_ROLE)
    except exceptions.CurriculaError as e:
        logger.error(f"Error creating admin user: {e}")
        return 1
    finally:
        db.close()

    logger.info(f"Created admin user {user.email} (id {user.id}). You can now log in at /api/auth/login")
    return 0


def main():
    sys.exit(create_admin_user())


if __name__ == "__main__":
    main()
