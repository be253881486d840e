from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import get_settings

settings = get_settings()


def _engine_kwargs() -> dict:
    kwargs: dict = {"echo": settings.database_echo, "future": True}
    if settings.database_url.startswith("sqlite"):
        # Worker threads share the file database; writers queue on the lock.
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
    else:
        kwargs["pool_pre_ping"] = True
        if settings.database_isolation_level:
            kwargs["isolation_level"] = settings.database_isolation_level
    return kwargs


engine = create_engine(settings.database_url, **_engine_kwargs())

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
