"""
DatabaseInitializer — one-shot bring-up of a fresh or existing database.

  test_connection()          → bool, bounded by the connect timeout, never raises
  initialize_database()      → create_all + ensure_admin_user_exists + seed_initial_data
  seed_initial_data()        → no-op once the services table has rows

Seeding has no upsert-by-natural-key, so the sentinel check is what keeps a
second run from duplicating content.
"""
from __future__ import annotations

import structlog
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import func, select

from config.settings import Settings
from database import seed
from database.errors import InitializationError
from database.models import (
    ContactInfoRow, CvDataRow, ProjectRow, ServiceRow, SiteSettingRow,
)
from database.session import Database, redact_url
from database.store import SqlStorage

logger = structlog.get_logger()


def _stamped(row_cls, payloads: list) -> list:
    # One flush can stamp several rows with the same instant; `order` ties
    # fall back to created_at, so keep the seed order explicit.
    base = datetime.now(timezone.utc)
    return [
        row_cls(**p.model_dump(), created_at=base + timedelta(microseconds=i))
        for i, p in enumerate(payloads)
    ]


class DatabaseInitializer:
    """Tests a connection, then creates schema, seed admin and default content."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._database: Optional[Database] = None

    @property
    def database(self) -> Optional[Database]:
        """The database verified by the last successful test_connection()."""
        return self._database

    def _connect(self, url: str) -> Database:
        db_cfg = self._settings.database
        return Database(
            url,
            environment=self._settings.environment,
            connect_timeout=db_cfg.connect_timeout,
            pool_size=db_cfg.pool_size,
            max_overflow=db_cfg.max_overflow,
            echo=db_cfg.echo,
        )

    async def test_connection(self, url: str = None) -> bool:
        url = url or self._settings.database.url
        if not url:
            logger.info("database_url_not_configured")
            return False

        database = None
        try:
            database = self._connect(url)
            await database.ping()
        except Exception as e:
            logger.warning("database_connection_failed",
                           url=redact_url(url), error=str(e) or type(e).__name__)
            if database is not None:
                await database.dispose()
            return False

        if self._database is not None and self._database is not database:
            await self._database.dispose()
        self._database = database
        logger.info("database_connection_ok", dialect=database.dialect, url=redact_url(url))
        return True

    def _require_database(self) -> Database:
        if self._database is None:
            raise InitializationError("No verified database connection", backend="database")
        return self._database

    async def ensure_admin_user_exists(self) -> None:
        """Create the seed admin account unless its username is already taken."""
        store = SqlStorage(self._require_database())
        admin_cfg = self._settings.admin

        existing = await store.get_admin_user_by_username(admin_cfg.username)
        if existing:
            logger.debug("admin_user_present", username=admin_cfg.username)
            return

        await store.create_admin_user(
            seed.admin_user(admin_cfg.username, admin_cfg.email, admin_cfg.password)
        )
        logger.info("admin_user_created", username=admin_cfg.username)

    async def seed_initial_data(self) -> bool:
        """Insert the default content in one transaction. Returns False when skipped."""
        database = self._require_database()
        try:
            async with database.session() as db:
                service_count = await db.scalar(select(func.count()).select_from(ServiceRow))
                if service_count:
                    logger.info("seed_skipped", existing_services=service_count)
                    return False

                db.add_all(_stamped(ServiceRow, seed.SERVICES))
                db.add_all(_stamped(ProjectRow, seed.PROJECTS))
                db.add_all(_stamped(ContactInfoRow, seed.CONTACT_INFO))
                db.add_all(_stamped(CvDataRow, seed.CV_DATA))
                db.add_all(_stamped(SiteSettingRow, seed.SITE_SETTINGS))
                await db.flush()
        except Exception as e:
            logger.error("seed_failed", error=str(e))
            raise InitializationError(f"Seeding failed: {e}", backend="database") from e

        logger.info("seed_completed",
                    services=len(seed.SERVICES),
                    projects=len(seed.PROJECTS),
                    contact_info=len(seed.CONTACT_INFO),
                    cv_data=len(seed.CV_DATA),
                    site_settings=len(seed.SITE_SETTINGS))
        return True

    async def initialize_database(self) -> bool:
        """Create schema, ensure the admin account, seed if empty."""
        database = self._require_database()
        try:
            await database.create_all()
            await self.ensure_admin_user_exists()
            await self.seed_initial_data()
        except InitializationError:
            raise
        except Exception as e:
            logger.error("database_initialization_failed", error=str(e))
            raise InitializationError(f"Database initialization failed: {e}", backend="database") from e
        return True

    async def close(self) -> None:
        if self._database is not None:
            await self._database.dispose()
            self._database = None
