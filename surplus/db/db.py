from sqlmodel import Session, SQLModel, create_engine

from surplus.config import get_settings

# Register table models on SQLModel.metadata
from surplus.models import claim, listing, notification, user  # noqa: F401


settings = get_settings()

connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.database_url, connect_args=connect_args)


def create_db_and_tables(bind=engine):
    SQLModel.metadata.create_all(bind)


def get_session():
    with Session(engine) as session:
        yield session
