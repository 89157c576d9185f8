import datetime
import json
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from .exceptions import ValidationError

# MySQL div_precision_increment: AVG/division adds this many digits to the scale
DIV_PRECISION_INCREMENT = 4


def to_decimal(value: Any, places: int = 2) -> Decimal | None:
    """Fixed-point value rounded half-up to `places`, the way MySQL stores DECIMAL."""
    if value is None:
        return None
    if isinstance(value, float):
        # SQLite hands aggregates back as floats; repr is the shortest exact round-trip
        value = repr(value)
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValidationError(f"Not a decimal number: {value!r}") from e
    if not number.is_finite():
        raise ValidationError(f"Not a decimal number: {value!r}")
    return number.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def mysql_avg(total: Any, count: int, scale: int = 2) -> Decimal | None:
    """AVG() over a DECIMAL(p, scale) column, result scale = scale + 4."""
    if not count or total is None:
        return None
    exact = to_decimal(total, scale) / Decimal(count)
    return exact.quantize(Decimal(1).scaleb(-(scale + DIV_PRECISION_INCREMENT)), rounding=ROUND_HALF_UP)


def to_date(value: Any) -> datetime.date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value)[:10])
    except ValueError as e:
        raise ValidationError(f"Not a date: {value!r}") from e


def to_datetime(value: Any) -> datetime.datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    try:
        return datetime.datetime.fromisoformat(str(value))
    except ValueError as e:
        raise ValidationError(f"Not a timestamp: {value!r}") from e


def json_safe(value: Any) -> Any:
    """Recursively turn DB values into JSON-serializable ones (decimals keep their scale)."""
    if isinstance(value, dict):
        return {key: json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime.datetime):
        return value.isoformat(" ")
    if isinstance(value, datetime.date):
        return value.isoformat()
    return value


def dumps(value: Any, **kwargs) -> str:
    return json.dumps(json_safe(value), ensure_ascii=False, **kwargs)
