"""Create the schema and the platform account for local development."""

from beat_market.db.session import SessionLocal, create_tables
from beat_market.services.accounts import ensure_platform_account


def init_db() -> None:
    """Initialize the database by creating all tables and the platform account."""
    create_tables()
    db = SessionLocal()
    try:
        ensure_platform_account(db)
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
    print("Database initialized.")
