import os
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/app.db")


class Base(DeclarativeBase):
    pass


def _ensure_sqlite_dir(database_url: str) -> None:
    if not database_url.startswith("sqlite:///"):
        return
    path = database_url.replace("sqlite:///", "", 1)
    if path.startswith("./"):
        path = path[2:]
    dir_path = Path(path).parent
    if str(dir_path) and str(dir_path) != ".":
        dir_path.mkdir(parents=True, exist_ok=True)


def make_engine(database_url: str):
    if not database_url.startswith("sqlite"):
        return create_engine(database_url)
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        database_url, connect_args={"check_same_thread": False}
    )


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


def init_db(bind=None) -> None:
    if bind is None:
        _ensure_sqlite_dir(DATABASE_URL)
        bind = engine
    import storefront.models  # noqa: F401

    Base.metadata.create_all(bind=bind)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
