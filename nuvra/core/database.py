"""
Banco de dados da Nuvra AI: engine async, sessões e criação do schema.

Produção usa PostgreSQL (asyncpg); os testes usam SQLite (aiosqlite).
"""

from sqlalchemy import MetaData
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool
import structlog

from nuvra.core.config import settings

logger = structlog.get_logger()


# Nomes estáveis para constraints e índices
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _engine_options(database_url: str) -> dict:
    """
    Em desenvolvimento cada sessão abre a própria conexão (NullPool),
    o que também permite usar o engine a partir de outro event loop.
    """
    options = {"echo": settings.debug}
    if settings.is_development or make_url(database_url).get_backend_name() == "sqlite":
        options["poolclass"] = NullPool
    else:
        options["pool_pre_ping"] = True
    return options


engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))

async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


async def init_db():
    """
    Cria as tabelas que faltam. Só em desenvolvimento; em produção
    o schema é gerenciado fora da aplicação.
    """
    import nuvra.models  # noqa: F401  registra as tabelas no metadata

    if not settings.is_development:
        return

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "schema_ready",
        backend=engine.url.get_backend_name(),
        tables=sorted(Base.metadata.tables)
    )


async def close_db():
    await engine.dispose()
