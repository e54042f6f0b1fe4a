"""Async SQLAlchemy engine and session helpers."""

import ssl
from typing import Any, AsyncGenerator, Dict, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from app.config import settings

_ASYNCPG_DRIVER = "postgresql+asyncpg"


def _normalize_db_url(url: str) -> str:
    """Select the asyncpg driver for bare ``postgres://``/``postgresql://`` URLs.

    An explicit driver (``postgresql+psycopg``, ``sqlite+aiosqlite``...) is kept.
    """
    try:
        u = make_url(url)
    except Exception:
        for prefix in ("postgresql://", "postgres://"):
            if url.startswith(prefix):
                return f"{_ASYNCPG_DRIVER}://{url[len(prefix):]}"
        return url

    if (u.drivername or "").lower() in ("postgres", "postgresql"):
        u = u.set(drivername=_ASYNCPG_DRIVER)
    return u.render_as_string(hide_password=False)


def _ssl_connect_args(sslmode: str) -> Dict[str, Any]:
    """Translate a libpq ``sslmode`` into asyncpg's ``ssl`` connect argument."""
    mode = sslmode.lower()
    if mode == "disable":
        return {"ssl": False}
    if mode in {"allow", "prefer"}:
        # asyncpg negotiates TLS on its own when the server asks for it
        return {}
    context = ssl.create_default_context()
    if mode == "require":
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    elif mode == "verify-ca":
        context.check_hostname = False
    return {"ssl": context}


def _prepare_asyncpg_connection(url: str) -> Tuple[str, Dict[str, Any]]:
    """Strip query args asyncpg rejects and derive its connect kwargs."""
    split = urlsplit(_normalize_db_url(url))
    kept = []
    connect_args: Dict[str, Any] = {}
    for key, value in parse_qsl(split.query, keep_blank_values=True):
        if key == "sslmode":
            connect_args.update(_ssl_connect_args(value))
        elif key != "channel_binding":
            kept.append((key, value))

    cleaned_url = urlunsplit(split._replace(query=urlencode(kept, doseq=True))).rstrip("?")
    return cleaned_url, connect_args


DATABASE_URL, CONNECT_ARGS = _prepare_asyncpg_connection(settings.database_url)

engine = create_async_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    connect_args=CONNECT_ARGS,
)
SessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session."""
    async with SessionLocal() as session:
        yield session


async def init_db():
    """Create all league tables (development only)."""
    # Import locally so metadata is populated without circular imports
    from app.schemas import auth, matches, players, seasons  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose of the async engine and its connection pool."""
    await engine.dispose()


def describe_database_url(url: str) -> str:
    """Return a password-free description of the DB URL for logging."""
    try:
        u = make_url(url)
    except Exception:
        return "<unparseable database URL>"
    port = f":{u.port}" if u.port else ""
    return f"{u.drivername}://{u.username or '?'}@{u.host or '?'}{port}/{u.database or '?'}"
