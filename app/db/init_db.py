"""
Create all tables directly from the ORM metadata.

Intended for local development and tests; deployed databases are managed
by Alembic (see app.db.migrate).
"""
import logging

from app.db.session import engine
from app.db.base import Base
import app.db.models  # noqa: F401 - registers every model on Base.metadata

logger = logging.getLogger(__name__)


def init_db(bind=engine) -> None:
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables created")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
