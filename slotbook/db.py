# slotbook/db.py

from sqlmodel import SQLModel, create_engine, Session

from slotbook.config import get_settings

settings = get_settings()

# SQLite needs check_same_thread=False under FastAPI's threadpool
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# Engine = connection to the database
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    connect_args=connect_args,
)


def create_db_and_tables():
    # Importing models registers the tables on SQLModel.metadata
    from slotbook import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
