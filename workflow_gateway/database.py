from typing import AsyncGenerator
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from workflow_gateway.config import Settings

class Base(DeclarativeBase):
    pass

def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    url = settings.SQLALCHEMY_DATABASE_URL
    kwargs = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        kwargs.update(pool_size=settings.DB_POOL_SIZE, max_overflow=settings.DB_MAX_OVERFLOW)
    return create_async_engine(url, connect_args=settings.DATABASE_CONNECT_ARGS, **kwargs)

def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

async def init_models(engine: AsyncEngine) -> None:
    # Import models so they are registered on Base.metadata
    import workflow_gateway.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory

async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory(request)() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
