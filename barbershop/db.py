# barbershop/db.py

from sqlmodel import SQLModel, create_engine, Session

from .config import settings

# Engine = connection to the database
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    # required for SQLite + FastAPI
    connect_args={"check_same_thread": False} if settings.is_sqlite else {},
)


def init_db(bind=None):
    from . import models  # noqa: F401  registers the tables

    SQLModel.metadata.create_all(bind or engine)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
