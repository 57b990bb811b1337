"""
Seed script: create or promote an administrator identity.

Usage:
  - Dry run (default): python scripts/seed_db.py --phone 919876543210 --name "Store Admin"
  - Apply to configured DB: python scripts/seed_db.py --phone 919876543210 --name "Store Admin" --apply
  - Force mock DB even if FIREBASE configured: add --force-mock

Behavior:
  - Gets DB via `app.config.firebase.get_db()` which returns the mock DB or real Firestore depending on settings.
  - If the phone is already registered, its role is set to admin; otherwise a new admin identity is created.
  - The admin logs in through /api/auth/login like any other user; the role is carried in the issued tokens.
"""

import argparse

from app.core.settings import settings
from app.models.user import ROLE_ADMIN
from app.services.user_service import UserService


def seed_admin(users: UserService, phone: str, name: str, apply: bool = False):
    identity = users.get_user_by_phone(phone)

    if identity is None:
        print(f"Preparing: new admin {phone} ({name})")
        if not apply:
            return None
        identity = users.create_user(phone, name=name)
    else:
        print(f"Preparing: promote existing user {identity.id} to admin")
        if not apply:
            return identity

    identity.role = ROLE_ADMIN
    users.save_user(identity)
    print(f"Wrote: users/{identity.id} role={identity.role}")
    return identity


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--phone", required=True, help="Admin phone number")
    parser.add_argument("--name", default="Admin", help="Name used if the phone is not registered yet")
    parser.add_argument("--apply", action="store_true", help="Write to the DB instead of dry-run")
    parser.add_argument("--force-mock", action="store_true", help="Force use of mock DB even if FIREBASE configured")
    args = parser.parse_args()

    if args.force_mock:
        print("Forcing mock DB usage for this run.")
        settings.USE_MOCK_DB = True

    seed_admin(UserService(), args.phone, args.name, apply=args.apply)

    if args.apply:
        print("Seeding completed.")
    else:
        print("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()
