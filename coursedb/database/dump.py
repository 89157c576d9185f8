"""
Full-content export and reload of the course database.

A dump is ``{"format": 1, "tables": {table_name: [row, ...]}}`` with tables in
schema order and rows in primary-key order; values are JSON-safe (decimals as
fixed-point strings at their declared scale, dates ISO-8601).
"""
import json
from pathlib import Path
from typing import Any, Dict, List

from coursedb.utils.exceptions import SeedError
from coursedb.utils.helpers import json_safe, to_decimal
from coursedb.utils.logging import get_logger
from .schema import column_names, decimal_columns, get_table, table_names

log = get_logger(__name__)

DUMP_FORMAT = 1


def _json_columns(table_name: str) -> List[str]:
    return [
        col for col, col_type in get_table(table_name).items()
        if isinstance(col_type, str) and col_type.split()[0].upper() == "JSON"
    ]


def _boolean_columns(table_name: str) -> List[str]:
    return [
        col for col, col_type in get_table(table_name).items()
        if isinstance(col_type, str) and col_type.split()[0].upper() == "BOOLEAN"
    ]


def _export_row(table_name: str, row: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    scales = decimal_columns(table_name)
    booleans = _boolean_columns(table_name)
    json_cols = _json_columns(table_name)
    for col in column_names(table_name):
        value = row.get(col)
        if value is not None:
            if col in scales:
                value = to_decimal(value, scales[col])
            elif col in booleans:
                value = bool(value)
            elif col in json_cols and isinstance(value, (str, bytes)):
                value = json.loads(value)
        out[col] = json_safe(value)
    return out


def export_data(db: Any) -> Dict[str, Any]:
    tables = {}
    for table_name in table_names():
        rows = db.execute(f"SELECT * FROM {table_name} ORDER BY id")
        tables[table_name] = [_export_row(table_name, row) for row in rows]
        log.debug(f"Exported {len(rows)} rows from {table_name}")
    return {"format": DUMP_FORMAT, "tables": tables}


def _reset_sequences(db: Any, cur: Any) -> None:
    for table_name in table_names():
        if "AUTOINCREMENT" not in get_table(table_name)["id"].upper():
            continue
        cur.execute(
            f"SELECT setval(pg_get_serial_sequence('{table_name}', 'id'), "
            f"COALESCE(MAX(id), 1), MAX(id) IS NOT NULL) FROM {table_name}"
        )


def import_data(db: Any, data: Any) -> Dict[str, int]:
    """Reload a dump into an empty schema, keeping ids, in one transaction."""
    if not isinstance(data, dict):
        raise SeedError("Not a coursedb dump", found=type(data).__name__)
    if data.get("format") != DUMP_FORMAT or not isinstance(data.get("tables"), dict):
        raise SeedError("Not a coursedb dump", format=data.get("format"))
    unknown = [table for table in data["tables"] if table not in table_names()]
    if unknown:
        raise SeedError(f"Dump holds unknown tables: {', '.join(unknown)}")

    counts: Dict[str, int] = {}
    with db.connection(autocommit=False) as (conn, cur):
        for table_name in table_names():
            cur.execute(f"SELECT COUNT(*) AS row_count FROM {table_name}")
            if cur.fetchone()["row_count"]:
                raise SeedError(f"Import goes into an empty schema; {table_name} has rows")

        for table_name in table_names():
            rows = data["tables"].get(table_name, [])
            json_cols = _json_columns(table_name)
            allowed = column_names(table_name)
            for row in rows:
                record = {col: value for col, value in row.items() if col in allowed}
                for col in json_cols:
                    if isinstance(record.get(col), (dict, list)):
                        record[col] = json.dumps(record[col])
                db.insert(cur, table_name, record, returning=False)
            counts[table_name] = len(rows)
            log.info(f"Imported {len(rows)} rows into {table_name}")

        if db.backend == "postgresql":
            _reset_sequences(db, cur)
        conn.commit()
    return counts


def dump_json(db: Any, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(export_data(db), fh, ensure_ascii=False, indent=2)
        fh.write("\n")
    log.info(f"Wrote dump to {path}")
    return path


def load_json(db: Any, path: str | Path) -> Dict[str, int]:
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as e:
        raise SeedError(f"{path} is not valid JSON: {e}") from e
    return import_data(db, data)
