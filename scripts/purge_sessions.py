"""Delete expired login sessions."""

from app import create_app
from identity import sessions


def main() -> None:
    app = create_app()
    with app.app_context():
        removed = sessions.purge_expired()
        print(f"Removed {removed} expired session(s)")


if __name__ == "__main__":
    main()
