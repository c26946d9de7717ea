"""Register the bootstrap administrator through the normal registration path."""

import os
import sys

from app import create_app
from identity import lifecycle, roles

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "AdminPass123")


def main() -> int:
    app = create_app()
    with app.app_context():
        if roles.determine_initial_role() != roles.BOOTSTRAP_ROLE:
            print("Users already exist; the bootstrap admin has been claimed.")
            return 1

        user = lifecycle.register_account(ADMIN_EMAIL, ADMIN_PASSWORD, name="Administrator")
        print(f"Registered {user.email} with role {user.role}")
        return 0 if user.role == roles.BOOTSTRAP_ROLE else 1


if __name__ == "__main__":
    sys.exit(main())
