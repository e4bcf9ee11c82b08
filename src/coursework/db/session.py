import logging
from typing import Generator

from sqlmodel import Session, SQLModel, create_engine

from coursework.config.settings import DATABASE_URL, SQL_ECHO

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    echo=SQL_ECHO,
    pool_pre_ping=True,
    connect_args=connect_args,
)


def create_db_and_tables() -> None:
    # Every table model must be imported before metadata.create_all runs.
    import coursework.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created.")


def get_db() -> Generator[Session, None, None]:
    with Session(engine, expire_on_commit=False) as session:
        yield session
