from typing import Any, Dict
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine,async_sessionmaker,AsyncSession
from sqlalchemy.pool import NullPool, StaticPool
from nexora.config.settings import config_settings
from nexora.db.utils import _normalize_db_url, ensure_sqlite_directory, is_sqlite_memory_url


def _create_engine(database_url: str):
    url = make_url(database_url)
    engine_kwargs: Dict[str, Any] = {"echo": config_settings.DATABASE_ECHO}

    if url.get_backend_name() == "sqlite":
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if is_sqlite_memory_url(url):
            engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["poolclass"] = NullPool
            ensure_sqlite_directory(url)
    else:
        engine_kwargs["pool_pre_ping"] = True

    return create_async_engine(database_url, **engine_kwargs)


DATABASE_URL=_normalize_db_url(config_settings.DATABASE_URL)

async_engine=_create_engine(DATABASE_URL)

async_session=async_sessionmaker(bind=async_engine,class_=AsyncSession,expire_on_commit=False)
