"""Drop and recreate every table, then seed one teacher and one student login."""
import logging

from sqlmodel import Session, SQLModel, select

import coursework.models  # noqa: F401
from coursework.db.session import engine
from coursework.models import User, UserRole
from coursework.utils.security import hash_password

logger = logging.getLogger("reset_db")

DEMO_USERS = [
    ("T001", "Demo Teacher", UserRole.TEACHER),
    ("S001", "Demo Student", UserRole.STUDENT),
]


def reset_database(target=engine, seed: bool = True) -> None:
    logger.info(f"Resetting database at {target.url}")
    SQLModel.metadata.drop_all(target)
    SQLModel.metadata.create_all(target)

    if not seed:
        return
    with Session(target) as session:
        for code, name, role in DEMO_USERS:
            if session.exec(select(User).where(User.code == code)).first():
                continue
            session.add(User(code=code, name=name, role=role, hashed_password=hash_password("password")))
        session.commit()
    logger.info(f"Seeded users: {', '.join(code for code, _, _ in DEMO_USERS)} (password: 'password')")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    reset_database()
    print("Database has been successfully reset.")
