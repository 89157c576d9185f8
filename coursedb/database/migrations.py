from coursedb.utils.logging import get_logger
from typing import Dict, List, Any

from .schema import SPECIAL_KEYS, parse_enum

log = get_logger(__name__)


def _map_type(col_name: str, col_type: str, backend: str) -> str:
    """Map schema type strings to DB-specific equivalents."""
    spec = " ".join(col_type.split())
    enum_values = parse_enum(spec)
    if enum_values is not None:
        base_type = spec[: spec.index(")") + 1]
        constraints = spec[len(base_type):].strip()
    else:
        base_type, _, constraints = spec.partition(" ")
    base_name, _, args = base_type.partition("(")
    base_name = base_name.upper()
    args = f"({args}" if args else ""

    if enum_values is not None:
        literals = ", ".join(f"'{value}'" for value in enum_values)
        if backend == "mysql":
            mapped_base = f"ENUM({literals})"
        else:
            mapped_base = f"VARCHAR({max(len(value) for value in enum_values)})"
            constraints = f"{constraints} CHECK ({col_name} IN ({literals}))".strip()
    else:
        type_map = {
            "INTEGER": {"sqlite": "INTEGER", "postgres": "INTEGER", "mysql": "INT"},
            "VARCHAR": {"sqlite": "VARCHAR", "postgres": "VARCHAR", "mysql": "VARCHAR"},
            "TEXT": {"sqlite": "TEXT", "postgres": "TEXT", "mysql": "TEXT"},
            "DECIMAL": {"sqlite": "DECIMAL", "postgres": "NUMERIC", "mysql": "DECIMAL"},
            "DATE": {"sqlite": "DATE", "postgres": "DATE", "mysql": "DATE"},
            "DATETIME": {"sqlite": "DATETIME", "postgres": "TIMESTAMP", "mysql": "DATETIME"},
            "TIMESTAMP": {"sqlite": "TIMESTAMP", "postgres": "TIMESTAMP", "mysql": "TIMESTAMP"},
            "BOOLEAN": {"sqlite": "BOOLEAN", "postgres": "BOOLEAN", "mysql": "BOOLEAN"},
            "JSON": {"sqlite": "TEXT", "postgres": "JSON", "mysql": "JSON"},
        }
        mapped_base = type_map.get(base_name, {"sqlite": base_name, "postgres": base_name, "mysql": base_name})[backend]
        mapped_base = f"{mapped_base}{args}"

    if "ON UPDATE CURRENT_TIMESTAMP" in constraints.upper() and backend != "mysql":
        constraints = constraints.replace("ON UPDATE CURRENT_TIMESTAMP", "").strip()

    if "PRIMARY KEY" in constraints.upper():
        if "AUTOINCREMENT" in constraints.upper() or "AUTO_INCREMENT" in constraints.upper():
            if backend == "sqlite":
                return f"{mapped_base} PRIMARY KEY AUTOINCREMENT"
            elif backend == "postgres":
                return "SERIAL PRIMARY KEY"
            elif backend == "mysql":
                return f"{mapped_base} AUTO_INCREMENT PRIMARY KEY"
        else:
            return f"{mapped_base} PRIMARY KEY"
    return f"{mapped_base} {constraints}".strip()


def _backend_name(db: Any) -> str:
    backend = str(db.backend)
    return "postgres" if backend == "postgresql" else backend


def _table_exists(db: Any, cur: Any, table_name: str) -> bool:
    backend = db.backend
    if backend == "sqlite":
        query = "SELECT 1 FROM sqlite_master WHERE type='table' AND name=?"
    elif backend == "postgresql":
        query = "SELECT 1 FROM information_schema.tables WHERE table_name = ? AND table_schema = current_schema()"
    elif backend == "mysql":
        query = "SELECT 1 FROM information_schema.tables WHERE table_name = ? AND table_schema = DATABASE()"
    else:
        raise ValueError(f"Unsupported backend: {backend}")
    cur.execute(db.sql(query), (table_name,))
    return cur.fetchone() is not None


def _constraint_exists(db: Any, cur: Any, table_name: str, constraint_name: str) -> bool:
    if db.backend == "sqlite":
        return False
    elif db.backend == "postgresql":
        query = """
            SELECT 1 FROM information_schema.table_constraints
            WHERE table_name = ? AND constraint_name = ?
              AND table_schema = current_schema()
        """
    elif db.backend == "mysql":
        query = """
            SELECT 1 FROM information_schema.table_constraints
            WHERE table_name = ? AND constraint_name = ?
              AND table_schema = DATABASE()
        """
    else:
        raise ValueError(f"Unsupported backend: {db.backend}")
    cur.execute(db.sql(query), (table_name, constraint_name))
    return cur.fetchone() is not None


def _mysql_index_exists(db: Any, cur: Any, table_name: str, index_name: str) -> bool:
    cur.execute(
        db.sql("""
            SELECT 1 FROM information_schema.statistics
            WHERE table_name = ? AND index_name = ? AND table_schema = DATABASE()
        """),
        (table_name, index_name),
    )
    return cur.fetchone() is not None


def _get_row_count(cur: Any, table_name: str) -> int:
    cur.execute(f"SELECT COUNT(*) AS row_count FROM {table_name}")
    row = cur.fetchone()
    return row["row_count"]


def _index_name(table_name: str, index: Dict[str, Any], backend: str) -> str:
    # MySQL scopes index names per table; SQLite and Postgres per schema
    if backend == "mysql":
        return index["name"]
    return f"{table_name}_{index['name']}"


def _foreign_key_clause(table_name: str, fk: Dict[str, Any]) -> str:
    instr = fk.get("instruction", "").strip()
    return (
        f"CONSTRAINT fk_{table_name}_{fk['key']} "
        f"FOREIGN KEY ({fk['key']}) REFERENCES {fk['parent_table']}({fk['parent_key']}) {instr}"
    ).strip()


def _create_table(cur: Any, table_name: str, cols_def: Dict[str, Any], backend: str) -> None:
    parts = []
    for col_name, col_type in cols_def.items():
        if col_name.upper() in SPECIAL_KEYS:
            continue
        parts.append(f"{col_name} {_map_type(col_name, col_type, backend)}")

    if "UNIQUE" in cols_def:
        u = cols_def["UNIQUE"]
        if isinstance(u, list) and u:
            parts.append(f"UNIQUE ({', '.join(u)})")

    if backend == "mysql":
        for index in cols_def.get("INDEX", []):
            parts.append(f"INDEX {index['name']} ({', '.join(index['columns'])})")

    if "FOREIGN KEY" in cols_def:
        fks = cols_def["FOREIGN KEY"] if isinstance(cols_def["FOREIGN KEY"], list) else [cols_def["FOREIGN KEY"]]
        for fk in fks:
            parts.append(_foreign_key_clause(table_name, fk))
    cur.execute(f"CREATE TABLE IF NOT EXISTS {table_name} ({', '.join(parts)})")


def _create_indexes(db: Any, cur: Any, table_name: str, cols_def: Dict[str, Any], backend: str) -> None:
    for index in cols_def.get("INDEX", []):
        name = _index_name(table_name, index, backend)
        columns = ", ".join(index["columns"])
        if backend == "mysql":
            if _mysql_index_exists(db, cur, table_name, name):
                continue
            cur.execute(f"ALTER TABLE {table_name} ADD INDEX {name} ({columns})")
        else:
            cur.execute(f"CREATE INDEX IF NOT EXISTS {name} ON {table_name} ({columns})")
        log.debug(f"Index {name} on {table_name}({columns}) in place")


def _add_missing_columns(db: Any, cur: Any, table_name: str, cols_def: Dict[str, Any], backend: str) -> None:
    existing_cols = db.get_columns(table_name)
    for col_name, col_type in cols_def.items():
        if col_name.upper() in SPECIAL_KEYS or col_name.lower() in existing_cols:
            continue
        mapped_type = _map_type(col_name, col_type, backend)
        if backend == "sqlite" and ("CURRENT_TIMESTAMP" in mapped_type or "UNIQUE" in mapped_type):
            log.warning(
                f"SQLite cannot add {col_name} ({mapped_type}) to an existing table; "
                f"drop and recreate {table_name} to pick it up"
            )
            continue
        row_count = _get_row_count(cur, table_name)
        if "NOT NULL" in mapped_type.upper() and row_count > 0 and "DEFAULT" not in mapped_type.upper():
            default_val = "''" if any(t in mapped_type.upper() for t in ("TEXT", "CHAR")) else "0"
            mapped_type += f" DEFAULT {default_val}"
        cur.execute(f"ALTER TABLE {table_name} ADD COLUMN {col_name} {mapped_type}")
        log.info(f"Added column {table_name}.{col_name}")


def _add_missing_foreign_keys(db: Any, cur: Any, table_name: str, cols_def: Dict[str, Any]) -> None:
    if db.backend == "sqlite":
        # SQLite only accepts foreign keys at CREATE TABLE time
        return
    fks = cols_def.get("FOREIGN KEY", [])
    fks = fks if isinstance(fks, list) else [fks]
    for fk in fks:
        fk_name = f"fk_{table_name}_{fk['key']}"
        if _constraint_exists(db, cur, table_name, fk_name):
            continue
        cur.execute(f"ALTER TABLE {table_name} ADD {_foreign_key_clause(table_name, fk)}")
        log.info(f"Added FK {fk['key']} -> {fk['parent_table']}")


def setup_schema(schema: List[Dict[str, Any]], db: Any) -> None:
    """
    Synchronize DB schema safely:
    - Create missing tables with all columns/constraints/indexes.
    - Add missing columns, indexes and FK constraints to existing tables.
    - Never drops or rewrites data; running it twice is a no-op.
    """
    if not schema:
        log.error("No schema provided")
        return
    backend_str = _backend_name(db)

    with db.connection(autocommit=False) as (conn, cur):
        for table_def in schema:
            table_name = table_def["table_name"]
            cols_def = table_def["table_columns"]
            log.info(f"Syncing {table_name}")

            if not _table_exists(db, cur, table_name):
                _create_table(cur, table_name, cols_def, backend_str)
                _create_indexes(db, cur, table_name, cols_def, backend_str)
                log.info(f"Created table {table_name}")
                continue

            _add_missing_columns(db, cur, table_name, cols_def, backend_str)
            _create_indexes(db, cur, table_name, cols_def, backend_str)
            _add_missing_foreign_keys(db, cur, table_name, cols_def)

        conn.commit()
        log.info("Schema sync complete")


def drop_schema(schema: List[Dict[str, Any]], db: Any) -> None:
    """Drop every table, children first."""
    with db.connection(autocommit=False) as (conn, cur):
        for table_def in reversed(schema):
            cur.execute(f"DROP TABLE IF EXISTS {table_def['table_name']}")
            log.info(f"Dropped {table_def['table_name']}")
        conn.commit()
