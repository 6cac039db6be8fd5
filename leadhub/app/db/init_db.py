"""Schema bootstrap and one-time migrations for the CRM database."""

import logging

from sqlalchemy.engine import Engine

from leadhub.app.core.errors import StorageError
from leadhub.app.core.security import get_password_hash
from leadhub.app.core.settings import get_settings
from leadhub.app.db.base import Base
from leadhub.app.db.gateway import Gateway

logger = logging.getLogger(__name__)

# Columns added after the first release; databases created before then lack them.
# SQLite cannot add a UNIQUE column, so api_key uniqueness comes from the index below.
ADDED_COLUMNS = [
    "ALTER TABLE clients ADD COLUMN business_id INTEGER",
    "ALTER TABLE accounts ADD COLUMN api_key TEXT",
    "ALTER TABLE accounts ADD COLUMN default_business_id INTEGER",
    "ALTER TABLE notes ADD COLUMN updated_at DATETIME",
]

INDEXES = [
    "CREATE INDEX IF NOT EXISTS ix_clients_business_id ON clients (business_id)",
    "CREATE UNIQUE INDEX IF NOT EXISTS ux_accounts_api_key ON accounts (api_key)",
]


def apply_column_migrations(gateway: Gateway) -> list[str]:
    """Try every column addition, skipping the ones already present."""
    applied = []
    for sql in ADDED_COLUMNS:
        try:
            gateway.exec_write(sql)
            applied.append(sql)
            logger.info("Migration applied: %s", sql)
        except StorageError as exc:
            logger.info("Migration skipped: %s (%s)", sql, exc.message.splitlines()[0])
    for sql in INDEXES:
        gateway.exec_write(sql)
    return applied


def ensure_default_admin(gateway: Gateway) -> bool:
    """
    Seed one admin account the first time the accounts table is empty.
    The password is publicly known and must be changed after first login.
    """
    settings = get_settings()
    count = gateway.exec_one("SELECT COUNT(*) AS count FROM accounts")
    if count and count["count"] > 0:
        return False
    gateway.exec_write(
        "INSERT INTO accounts (email, password, role) VALUES (:email, :password, 'admin')",
        {
            "email": settings.default_admin_email.lower(),
            "password": get_password_hash(settings.default_admin_password),
        },
    )
    logger.warning(
        "Default admin account created: %s. Change its password immediately.",
        settings.default_admin_email,
    )
    return True


def init_database(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
    gateway = Gateway(engine)
    apply_column_migrations(gateway)
    ensure_default_admin(gateway)
    logger.info("Database initialized")
