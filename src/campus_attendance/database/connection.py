from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "campus_attendance"

    @classmethod
    def from_dict(cls, db_config: Mapping[str, Any]) -> "DBConfig":
        defaults = cls()
        return cls(
            host=str(db_config.get("host", defaults.host)),
            port=int(db_config.get("port", defaults.port)),
            user=str(db_config.get("user", defaults.user)),
            password=str(db_config.get("password", defaults.password)),
            database=str(db_config.get("database", defaults.database)),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> dict:
        kwargs = {"host": self.host, "port": self.port, "user": self.user, "password": self.password}
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Process-wide connection factory for the attendance store.

    Every unit of work opens its own short-lived connection, so concurrent
    request threads never share one; the unique key on attendance_records
    settles write races.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = cls(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(**self._config.connect_kwargs())
