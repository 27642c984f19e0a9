"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import URL, make_url

from hermes.config import Settings, get_settings
from hermes.domain.entities import PERSONNEL, Record, get_variant
from hermes.infrastructure.database import Database
from hermes.infrastructure.database.repositories import SQLAlchemyRecordRepository
from hermes.infrastructure.dependencies import build_command_dispatcher
from hermes.infrastructure.logging.log_config import setup_logging
from hermes.infrastructure.telegram import TelegramClient
from hermes.presentation.api.error_handlers import register_exception_handlers
from hermes.presentation.api.router import router as api_router
from hermes.presentation.telegram import TelegramBot

logger = logging.getLogger(__name__)

SAMPLE_PERSONNEL = (
    ("198001012010011001", "Budi Santoso", "Kepala Bagian", "IT Department",
     "budi.santoso@hermes.id", "081234567890"),
    ("198502152012022002", "Siti Nurhaliza", "Staff", "HR Department",
     "siti.nurhaliza@hermes.id", "081234567891"),
    ("199003202015031003", "Ahmad Dhani", "Manager", "Finance Department",
     "ahmad.dhani@hermes.id", "081234567892"),
)


def _ensure_sqlite_directory(url: URL) -> None:
    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def _ensure_postgres_database(url: URL) -> None:
    """Issue ``CREATE DATABASE`` through the ``postgres`` maintenance database when missing."""
    import asyncpg

    db_name = url.database
    if not db_name:
        return
    maintenance_dsn = url.set(drivername="postgresql", database="postgres").render_as_string(
        hide_password=False
    )

    try:
        conn = await asyncpg.connect(maintenance_dsn)
    except (OSError, asyncpg.PostgresError) as exc:
        logger.warning("Could not reach PostgreSQL to check database '%s': %s", db_name, exc)
        return
    try:
        if await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", db_name):
            return
        # not allowed inside a transaction block
        await conn.execute(f'CREATE DATABASE "{db_name}"')
        logger.info("Created database '%s'", db_name)
    except asyncpg.PostgresError as exc:
        logger.warning("Could not create database '%s': %s", db_name, exc)
    finally:
        await conn.close()


async def _ensure_database_exists(settings: Settings) -> None:
    """Make sure the configured store can be opened: SQLite directory or PostgreSQL database."""
    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite":
        _ensure_sqlite_directory(url)
    elif url.get_backend_name() == "postgresql":
        await _ensure_postgres_database(url)


async def _seed_sample_personnel(database: Database) -> int:
    """Insert the sample personnel rows if the personnel collection is empty.

    Returns the number of rows inserted; zero on every later startup.
    """
    async with database.session() as session:
        repository = SQLAlchemyRecordRepository(session, PERSONNEL)
        if await repository.list_all():
            return 0
        for nip, nama, jabatan, unit_kerja, email, telepon in SAMPLE_PERSONNEL:
            await repository.create(
                Record(
                    variant=PERSONNEL.key,
                    natural_key=nip,
                    nama=nama,
                    jabatan=jabatan,
                    unit_kerja=unit_kerja,
                    email=email,
                    telepon=telepon,
                )
            )
    logger.info("Seeded %d sample personnel records", len(SAMPLE_PERSONNEL))
    return len(SAMPLE_PERSONNEL)


def _build_telegram_bot(settings: Settings, database: Database) -> TelegramBot | None:
    token = settings.telegram_bot_token.strip()
    if not token:
        logger.warning("TELEGRAM_BOT_TOKEN is empty; the Telegram bot is disabled")
        return None
    client = TelegramClient(
        token=token,
        base_url=settings.telegram_api_base_url,
        poll_timeout=settings.telegram_poll_timeout,
    )
    return TelegramBot(
        client=client,
        database=database,
        variant=get_variant(settings.telegram_record_variant),
        dispatcher_factory=build_command_dispatcher,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the store and start the bot on startup; stop both on shutdown."""
    settings: Settings = app.state.settings
    setup_logging(settings)

    await _ensure_database_exists(settings)
    database = Database(settings.database_url, echo=(settings.app_env == "development"))
    await database.open()
    await database.create_all()
    app.state.database = database

    if settings.seed_sample_data:
        await _seed_sample_personnel(database)

    bot = _build_telegram_bot(settings, database)
    if bot is not None:
        await bot.start()

    try:
        yield
    finally:
        if bot is not None:
            await bot.stop()
            await bot.client.close()
        await database.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, expose_errors=(settings.app_env == "development"))

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hermes.main:app",
        host="0.0.0.0",
        port=3000,
        reload=True,
    )
