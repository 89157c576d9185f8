from .schema import schema, table_names
from .migrations import setup_schema, drop_schema

import os
import datetime
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path
from urllib.parse import urlparse

from retry import retry

from enum import StrEnum, auto
import sqlite3, pymysql, psycopg2
import pymysql.cursors
from pymysql.constants import CLIENT
import psycopg2.extras

from typing import Any, Dict, Generator, List, Tuple, Literal, ClassVar, Type

from coursedb.utils.logging import get_logger
from coursedb.utils.exceptions import (
    CourseDBError,
    UniqueConstraintViolation,
    ReferentialIntegrityViolation,
    ValidationError,
)

logger = get_logger(__name__)


def _parse_timestamp(raw: bytes) -> datetime.datetime:
    return datetime.datetime.fromisoformat(raw.decode())


# SQLite has no DECIMAL/DATE/BOOLEAN storage; declared types drive the conversion back
sqlite3.register_adapter(Decimal, str)
sqlite3.register_adapter(datetime.date, lambda d: d.isoformat())
sqlite3.register_adapter(datetime.datetime, lambda d: d.isoformat(" "))
sqlite3.register_converter("DECIMAL", lambda raw: Decimal(raw.decode()))
sqlite3.register_converter("DATE", lambda raw: datetime.date.fromisoformat(raw.decode()))
sqlite3.register_converter("TIMESTAMP", _parse_timestamp)
sqlite3.register_converter("DATETIME", _parse_timestamp)
sqlite3.register_converter("BOOLEAN", lambda raw: raw not in (b"0", b""))


class Backend(StrEnum):
    SQLITE = auto()
    POSTGRESQL = auto()
    MYSQL = auto()


class DBClient:
    OperationalError: ClassVar[Tuple[Type[BaseException], ...]] = (
        sqlite3.OperationalError,
        psycopg2.OperationalError,
        pymysql.err.OperationalError
    )
    ProgrammingError: ClassVar[Tuple[Type[BaseException], ...]] = (
        sqlite3.ProgrammingError,
        psycopg2.ProgrammingError,
        pymysql.err.ProgrammingError
    )
    IntegrityError: ClassVar[Tuple[Type[BaseException], ...]] = (
        sqlite3.IntegrityError,
        psycopg2.IntegrityError,
        pymysql.err.IntegrityError
    )

    def __init__(self, uri: str | None = None):
        self.uri = None
        self.backend = None
        self._shared_conn = None
        self._row_factory = self._dict_factory
        if uri:
            self.configure(uri)

    def init_app(self, app):
        uri = (
            app.config.get("DATABASE_URI")
            or app.config.get("DATABASE_URL")
            or os.getenv("DATABASE_URL")
        )
        if not uri:
            raise RuntimeError("No Database config found")
        self.configure(uri)
        app.extensions["coursedb"] = self

    def configure(self, uri: str) -> None:
        if uri.startswith("sqlite:///"):
            backend = Backend.SQLITE
        elif uri.startswith(("postgresql://", "postgres://")):
            backend = Backend.POSTGRESQL
        elif uri.startswith(("mysql://", "mariadb://")):
            backend = Backend.MYSQL
        else:
            raise ValueError(f"Unsupported DATABASE_URI: {uri}")

        self.close()
        self.uri = uri
        self.backend = backend
        logger.debug(f"Database configured for {backend}")

    def close(self) -> None:
        """Drop the shared in-memory SQLite connection, if any."""
        if self._shared_conn is not None:
            self._shared_conn.close()
            self._shared_conn = None

    def sync_schema(self, table_schema: List[Dict[str, Any]] | None = None) -> None:
        setup_schema(table_schema or schema, self)

    def drop_schema(self, table_schema: List[Dict[str, Any]] | None = None) -> None:
        drop_schema(table_schema or schema, self)

    def _dict_factory(self, cursor, row):
        return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}

    @property
    def _is_memory(self) -> bool:
        return self.backend == Backend.SQLITE and self.uri.split(":///", 1)[-1] in ("", ":memory:")

    def _open_sqlite(self, db_path: str):
        conn = sqlite3.connect(
            db_path,
            timeout=30,
            check_same_thread=False,
            detect_types=sqlite3.PARSE_DECLTYPES,
        )
        conn.execute("PRAGMA foreign_keys = ON")
        if db_path != ":memory:":
            conn.execute("PRAGMA journal_mode = WAL")
        conn.row_factory = self._row_factory
        return conn

    @retry(tries=3,
           delay=1,
           backoff=2,
           exceptions=OperationalError,
           logger=logger,
           )
    def _connect(self) -> Tuple[Any, Any]:
        """Establish connection/ cursor with timeout/retry."""
        if not self.uri:
            raise RuntimeError("DBClient not initialized. Call init_app() first.")

        if self.backend == "sqlite":
            if self._is_memory:
                if self._shared_conn is None:
                    self._shared_conn = self._open_sqlite(":memory:")
                return self._shared_conn, self._shared_conn.cursor()
            path = self.uri.split(":///", 1)[-1]
            db_path = str(Path(path).expanduser().resolve())
            os.makedirs(os.path.dirname(db_path), exist_ok=True)
            conn = self._open_sqlite(db_path)
            return conn, conn.cursor()

        if self.backend == "postgresql":
            conn = psycopg2.connect(self.uri, connect_timeout=10)
            conn.set_session(autocommit=False)
            cur = conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)
            cur.execute("SET client_min_messages TO WARNING;")
            return conn, cur

        if self.backend == "mysql":
            parsed = urlparse(self.uri)
            conn = pymysql.connect(
                host=parsed.hostname or "localhost",
                port=parsed.port or 3306,
                user=parsed.username or "",
                password=parsed.password or "",
                database=parsed.path.lstrip("/") or None,
                charset="utf8mb4",
                autocommit=False,
                connect_timeout=10,
                cursorclass=pymysql.cursors.DictCursor,
                client_flag=CLIENT.FOUND_ROWS,  # rowcount = matched rows, as in sqlite/postgres
            )
            return conn, conn.cursor()

        raise ValueError(f"Unsupported Database Backend: {self.backend}")

    @contextmanager
    def connection(self, autocommit: bool = True) -> Generator[Tuple[Any, Any], None, None]:
        """
        Context manager for conn/cursor.
        Usage:
        with db.connection() as (conn, cur):
            cur.execute(db.sql("SELECT * FROM products WHERE id = ?"), (1,))
            results = cur.fetchall()

        With autocommit=False the caller commits; anything raised inside the
        block rolls the whole transaction back.
        """
        conn, cur = self._connect()
        try:
            yield conn, cur
            if autocommit:
                conn.commit()
        except self.IntegrityError as e:
            conn.rollback()
            logger.info(f"Integrity Error during DB operation: {e}")
            raise self.translate_integrity_error(e) from e
        except CourseDBError:
            conn.rollback()
            raise
        except self.OperationalError as e:
            conn.rollback()
            logger.warning(f"Database operational error: {e}")
            raise
        except self.ProgrammingError as e:
            conn.rollback()
            logger.error(f"Database Programming error: {e}")
            raise
        except Exception as e:
            conn.rollback()
            logger.exception(f"Unexpected DB error: {e}")
            raise
        finally:
            cur.close()
            if conn is not self._shared_conn:
                conn.close()

    # ------------------------------------------------------------------
    # Dialect helpers
    # ------------------------------------------------------------------
    def sql(self, query: str) -> str:
        """Queries are written with '?' placeholders; psycopg2/pymysql want '%s'."""
        if self.backend == "sqlite":
            return query
        return query.replace("?", "%s")

    @property
    def like(self) -> str:
        # MySQL's default collation and SQLite's LIKE ignore ASCII case; Postgres needs ILIKE
        return "ILIKE" if self.backend == "postgresql" else "LIKE"

    def year_of(self, column: str) -> str:
        if self.backend == "sqlite":
            return f"CAST(strftime('%Y', {column}) AS INTEGER)"
        if self.backend == "postgresql":
            return f"CAST(EXTRACT(YEAR FROM {column}) AS INTEGER)"
        return f"YEAR({column})"

    def month_of(self, column: str) -> str:
        if self.backend == "sqlite":
            return f"CAST(strftime('%m', {column}) AS INTEGER)"
        if self.backend == "postgresql":
            return f"CAST(EXTRACT(MONTH FROM {column}) AS INTEGER)"
        return f"MONTH({column})"

    def seconds_ago(self, seconds: int) -> Tuple[str, Any]:
        """SQL fragment + parameter for CURRENT_TIMESTAMP minus `seconds`, in the server's clock."""
        if self.backend == "sqlite":
            return "datetime('now', ?)", f"-{int(seconds)} seconds"
        if self.backend == "postgresql":
            return "(LOCALTIMESTAMP - ? * INTERVAL '1 second')", int(seconds)
        return "(CURRENT_TIMESTAMP - INTERVAL ? SECOND)", int(seconds)

    def execute(
        self,
        query: str,
        params: tuple | list | None = None,
        fetch: Literal["all", "one", "none", "rowcount"] = "all",
    ) -> Any:
        with self.connection() as (conn, cur):
            cur.execute(self.sql(query), tuple(params or ()))
            if fetch == "all":
                return cur.fetchall()
            if fetch == "one":
                return cur.fetchone()
            if fetch == "rowcount":
                return cur.rowcount
            return None

    def insert(self, cur: Any, table_name: str, data: Dict[str, Any], returning: bool = True) -> Any:
        """INSERT one row on an open cursor; returns the new id."""
        columns = ", ".join(data.keys())
        values = ", ".join(["?" for _ in data])
        query = f"INSERT INTO {table_name} ({columns}) VALUES ({values})"
        if returning and self.backend == "postgresql":
            cur.execute(self.sql(query + " RETURNING id"), tuple(data.values()))
            return cur.fetchone()["id"]
        cur.execute(self.sql(query), tuple(data.values()))
        if not returning:
            return data.get("id")
        return cur.lastrowid

    def get_columns(self, table_name: str) -> Dict[str, str]:
        if self.backend == "sqlite":
            res = self.execute(f"PRAGMA table_info({table_name})", fetch="all")
            return {row["name"].lower(): row["type"].lower() for row in res}
        elif self.backend == "postgresql":
            sql = """
                SELECT column_name, data_type
                FROM information_schema.columns
                WHERE table_name = ?
                  AND table_schema = current_schema()
                ORDER BY ordinal_position
            """
            res = self.execute(sql, (table_name,), fetch="all")
            return {row["column_name"].lower(): row["data_type"].lower() for row in res}
        elif self.backend == "mysql":
            sql = """
                SELECT column_name AS column_name, data_type AS data_type
                FROM information_schema.columns
                WHERE table_name = ?
                  AND table_schema = DATABASE()
                ORDER BY ordinal_position
            """
            res = self.execute(sql, (table_name,), fetch="all")
            return {row["column_name"].lower(): row["data_type"].lower() for row in res}
        else:
            raise ValueError(f"Unsupported backend: {self.backend}")

    # ------------------------------------------------------------------
    # Error translation
    # ------------------------------------------------------------------
    @staticmethod
    def is_duplicate(exc: Exception, column: str | None = None) -> bool:
        """
        Checks if Exception is for duplicate entry error
        """
        code = getattr(exc, "pgcode", None) or (exc.args[0] if exc.args else None)
        msg = str(exc).lower()
        if code not in ("23505", 1062) and not any(c in msg for c in ("unique", "duplicate")):
            return False
        if column:
            return column.lower() in msg
        return True

    @staticmethod
    def is_foreign_key(exc: Exception) -> bool:
        code = getattr(exc, "pgcode", None) or (exc.args[0] if exc.args else None)
        if code in ("23503", 1216, 1217, 1451, 1452):
            return True
        return "foreign key" in str(exc).lower()

    @classmethod
    def translate_integrity_error(cls, exc: Exception) -> CourseDBError:
        detail = str(exc)
        if cls.is_foreign_key(exc):
            return ReferentialIntegrityViolation(detail)
        if cls.is_duplicate(exc):
            return UniqueConstraintViolation(detail)
        return ValidationError(detail)


db = DBClient()
