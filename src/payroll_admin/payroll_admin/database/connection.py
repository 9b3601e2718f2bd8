from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import pooling
from mysql.connector.constants import ClientFlag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5

    @classmethod
    def from_mapping(cls, db_config: dict, *, pool_size: int = 5) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "payroll_db")),
            pool_size=int(pool_size),
        )


class DatabaseConnection:
    """Owns the connection pool shared by every repository.

    The process entry point constructs one instance, calls ``open()`` before
    serving and ``close()`` on shutdown; repositories only ever call
    ``connect()`` and close what they borrow.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    def open(self) -> "DatabaseConnection":
        if self._pool is None:
            self._pool = pooling.MySQLConnectionPool(
                pool_name=f"payroll_admin_{id(self)}",
                pool_size=self._config.pool_size,
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
                # UPDATE rowcount reports matched rows, not only changed ones.
                client_flags=[ClientFlag.FOUND_ROWS],
            )
            logger.info(
                "Opened MySQL pool %s@%s:%s/%s (size=%s)",
                self._config.user,
                self._config.host,
                self._config.port,
                self._config.database,
                self._config.pool_size,
            )
        return self

    def connect(self):
        if self._pool is None:
            raise RuntimeError("DatabaseConnection.open() must be called before use")
        return self._pool.get_connection()

    def ping(self) -> bool:
        try:
            conn = self.connect()
        except (mysql.connector.Error, RuntimeError):
            logger.warning("Database ping failed", exc_info=True)
            return False
        try:
            return bool(conn.is_connected())
        finally:
            conn.close()

    def close(self) -> None:
        # Pooled connections return to the pool on close(); dropping the pool
        # reference lets the driver release the sockets.
        if self._pool is not None:
            logger.info("Closing MySQL pool %s", self._pool.pool_name)
            self._pool = None
