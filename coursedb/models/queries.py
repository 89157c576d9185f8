"""
Reference query library for the course database.

Every function returns plain dicts whose values have the same Python types on
SQLite, PostgreSQL and MySQL: DECIMAL columns come back as ``Decimal`` at their
declared scale and averages follow MySQL's rule of adding four digits to the
scale of the averaged column.
"""
import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Sequence

from coursedb.database import db
from coursedb.database.schema import column_names, enum_columns
from coursedb.utils.helpers import mysql_avg, to_date, to_datetime, to_decimal
from coursedb.utils.exceptions import NotFoundError, ValidationError
from coursedb.utils.logging import get_logger
from .models import normalize_row

log = get_logger(__name__)

Row = Dict[str, Any]


def _shape(rows, table_name: Optional[str] = None, **scales: int) -> List[Row]:
    return [normalize_row(row, table_name, scales) for row in rows]


def _as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be an integer, got {value!r}") from e


# ----------------------------------------------------------------------
# Basic selects and filters
# ----------------------------------------------------------------------
def first_users(limit: Any = 5) -> List[Row]:
    rows = db.execute("SELECT * FROM users ORDER BY id LIMIT ?", (_as_int(limit, "limit"),))
    return _shape(rows, "users")


def active_user_contacts() -> List[Row]:
    return _shape(db.execute("SELECT name, email FROM users WHERE status = 'active' ORDER BY id"))


def products_priced_above(amount: Any = 500) -> List[Row]:
    rows = db.execute(
        "SELECT * FROM products WHERE price > ? ORDER BY id", (to_decimal(amount, 2),)
    )
    return _shape(rows, "products")


def products_in_category(category_id: Any) -> List[Row]:
    rows = db.execute(
        "SELECT * FROM products WHERE category_id = ? ORDER BY id",
        (_as_int(category_id, "category_id"),),
    )
    return _shape(rows, "products")


def products_name_like(fragment: str = "Pro") -> List[Row]:
    """Case-insensitive substring match; % and _ inside `fragment` act as wildcards."""
    rows = db.execute(
        f"SELECT * FROM products WHERE name {db.like} ? ORDER BY id", (f"%{fragment}%",)
    )
    return _shape(rows, "products")


def orders_since(day: Any = "2024-01-01") -> List[Row]:
    rows = db.execute(
        "SELECT * FROM orders WHERE order_date >= ? ORDER BY id", (to_date(day),)
    )
    return _shape(rows, "orders")


# ----------------------------------------------------------------------
# Ordering
# ----------------------------------------------------------------------
def products_by_price_desc() -> List[Row]:
    return _shape(db.execute("SELECT * FROM products ORDER BY price DESC, id"), "products")


def products_ordered(order_by: Sequence[Any] = (("price", "desc"), ("name", "asc"))) -> List[Row]:
    """
    Multi-column ordering. Each entry is ``(column, "asc"|"desc")`` or a column
    name, optionally prefixed with ``-`` for descending.
    """
    if isinstance(order_by, str):
        order_by = [term.strip() for term in order_by.split(",") if term.strip()]
    allowed = column_names("products")
    terms = []
    for entry in order_by:
        if isinstance(entry, str):
            column, direction = (entry[1:], "DESC") if entry.startswith("-") else (entry, "ASC")
        else:
            column, direction = entry[0], str(entry[1]).upper()
        if column not in allowed:
            raise ValidationError(f"Cannot order products by {column!r}")
        if direction not in ("ASC", "DESC"):
            raise ValidationError(f"Sort direction must be asc or desc, got {direction!r}")
        terms.append(f"{column} {direction}")
    if not terms:
        raise ValidationError("products_ordered needs at least one column")
    terms.append("id ASC")
    return _shape(db.execute(f"SELECT * FROM products ORDER BY {', '.join(terms)}"), "products")


def users_newest_first() -> List[Row]:
    return _shape(db.execute("SELECT * FROM users ORDER BY created_at DESC, id DESC"), "users")


# ----------------------------------------------------------------------
# Grouping and aggregates
# ----------------------------------------------------------------------
def category_price_summary() -> List[Row]:
    """category_id, product_count, avg_price per products.category_id (NULL group included)."""
    rows = db.execute(
        """
        SELECT category_id, COUNT(*) AS product_count, SUM(price) AS price_total
        FROM products
        GROUP BY category_id
        ORDER BY category_id
        """
    )
    summary = []
    for row in rows:
        summary.append({
            "category_id": row["category_id"],
            "product_count": row["product_count"],
            "avg_price": mysql_avg(row["price_total"], row["product_count"], 2),
        })
    return summary


def monthly_sales(rollup: Any = False) -> List[Row]:
    """
    year, month, order_count, total_sales over orders.order_date.
    With rollup, each year is followed by a subtotal row (month None) and the
    result ends with a grand total row (year and month None).
    """
    year, month = db.year_of("order_date"), db.month_of("order_date")
    rows = db.execute(
        f"""
        SELECT {year} AS year, {month} AS month,
               COUNT(*) AS order_count, SUM(total_amount) AS total_sales
        FROM orders
        GROUP BY {year}, {month}
        ORDER BY year, month
        """
    )
    buckets = [
        {
            "year": int(row["year"]),
            "month": int(row["month"]),
            "order_count": int(row["order_count"]),
            "total_sales": to_decimal(row["total_sales"], 2),
        }
        for row in rows
    ]
    if not rollup or rollup in ("0", "false", "False"):
        return buckets

    rolled: List[Row] = []
    grand_count, grand_total = 0, Decimal("0.00")
    for index, bucket in enumerate(buckets):
        rolled.append(bucket)
        is_last_of_year = index == len(buckets) - 1 or buckets[index + 1]["year"] != bucket["year"]
        if is_last_of_year:
            same_year = [b for b in buckets if b["year"] == bucket["year"]]
            rolled.append({
                "year": bucket["year"],
                "month": None,
                "order_count": sum(b["order_count"] for b in same_year),
                "total_sales": sum((b["total_sales"] for b in same_year), Decimal("0.00")),
            })
        grand_count += bucket["order_count"]
        grand_total += bucket["total_sales"]
    if buckets:
        rolled.append({"year": None, "month": None, "order_count": grand_count, "total_sales": grand_total})
    return rolled


def category_product_statistics() -> List[Row]:
    """Per category: product_count, min/max/avg price and total_stock, busiest first."""
    rows = db.execute(
        """
        SELECT c.id AS category_id,
               c.name AS category,
               COUNT(p.id) AS product_count,
               MIN(p.price) AS min_price,
               MAX(p.price) AS max_price,
               SUM(p.price) AS price_total,
               SUM(p.stock) AS total_stock
        FROM categories c
        LEFT JOIN products p ON c.id = p.category_id
        GROUP BY c.id, c.name
        ORDER BY product_count DESC, category_id
        """
    )
    stats = []
    for row in rows:
        stats.append({
            "category": row["category"],
            "product_count": int(row["product_count"]),
            "min_price": to_decimal(row["min_price"], 2),
            "max_price": to_decimal(row["max_price"], 2),
            "avg_price": mysql_avg(row["price_total"], row["product_count"], 2),
            "total_stock": int(row["total_stock"]) if row["total_stock"] is not None else None,
        })
    return stats


def dashboard_summary(days: Any = 30, today: Any = None) -> Row:
    """Order figures for the last `days` days up to `today` (defaults to the current date)."""
    today = to_date(today) or datetime.date.today()
    since = today - datetime.timedelta(days=_as_int(days, "days"))
    row = db.execute(
        """
        SELECT COUNT(DISTINCT customer_id) AS unique_customers,
               COUNT(*) AS total_orders,
               SUM(total_amount) AS total_revenue
        FROM orders
        WHERE order_date >= ? AND order_date <= ?
        """,
        (since, today),
        fetch="one",
    )
    total_orders = int(row["total_orders"])
    return {
        "unique_customers": int(row["unique_customers"]),
        "total_orders": total_orders,
        "total_revenue": to_decimal(row["total_revenue"], 2),
        "avg_order_value": mysql_avg(row["total_revenue"], total_orders, 2),
    }


def order_count_for_year(year: Any) -> int:
    row = db.execute(
        f"SELECT COUNT(*) AS order_count FROM orders WHERE {db.year_of('order_date')} = ?",
        (_as_int(year, "year"),),
        fetch="one",
    )
    return int(row["order_count"])


def order_item_count(order_id: Any) -> int:
    row = db.execute(
        "SELECT COUNT(*) AS item_count FROM order_items WHERE order_id = ?",
        (_as_int(order_id, "order_id"),),
        fetch="one",
    )
    return int(row["item_count"])


def books_per_genre() -> List[Row]:
    rows = db.execute(
        """
        SELECT genre, COUNT(*) AS book_count, SUM(price) AS price_total
        FROM books
        GROUP BY genre
        ORDER BY genre
        """
    )
    return [
        {
            "genre": row["genre"],
            "book_count": int(row["book_count"]),
            "avg_price": mysql_avg(row["price_total"], row["book_count"], 2),
        }
        for row in rows
    ]


# ----------------------------------------------------------------------
# Joins
# ----------------------------------------------------------------------
def orders_with_customers() -> List[Row]:
    rows = db.execute(
        """
        SELECT o.id, u.name, o.total_amount, o.order_date
        FROM orders o
        JOIN users u ON o.customer_id = u.id
        ORDER BY o.id
        """
    )
    return _shape(rows, total_amount=2)


def products_with_category_and_brand() -> List[Row]:
    rows = db.execute(
        """
        SELECT p.name, c.name AS category_name, b.name AS brand_name
        FROM products p
        LEFT JOIN categories c ON p.category_id = c.id
        LEFT JOIN brands b ON p.brand_id = b.id
        ORDER BY p.id
        """
    )
    return _shape(rows)


def books_with_authors() -> List[Row]:
    rows = db.execute(
        """
        SELECT b.id, b.title, a.name AS author_name, b.genre, b.price
        FROM books b
        LEFT JOIN authors a ON b.author_id = a.id
        ORDER BY b.id
        """
    )
    return _shape(rows, price=2)


def featured_products_on(day: Any = None) -> List[Row]:
    """Products whose feature window covers `day` (defaults to today)."""
    day = to_date(day) or datetime.date.today()
    rows = db.execute(
        """
        SELECT p.id AS product_id, p.name, p.price, f.start_date, f.end_date
        FROM featured_products f
        JOIN products p ON f.product_id = p.id
        WHERE f.start_date <= ? AND f.end_date >= ?
        ORDER BY f.id
        """,
        (day, day),
    )
    return _shape(rows, price=2)


def customers_by_membership(level: Optional[str] = None) -> List[Row]:
    if level is None:
        return _shape(db.execute("SELECT * FROM customers ORDER BY id"), "customers")
    if level not in enum_columns("customers")["membership_level"]:
        raise ValidationError(f"Unknown membership level {level!r}")
    rows = db.execute("SELECT * FROM customers WHERE membership_level = ? ORDER BY id", (level,))
    return _shape(rows, "customers")


def users_with_preference(key: str, value: Any) -> List[Row]:
    """Users whose preferences JSON holds `key` == `value`, matched in Python for portability."""
    rows = db.execute(
        """
        SELECT up.user_id, u.name, up.preferences
        FROM user_preferences up
        JOIN users u ON up.user_id = u.id
        ORDER BY up.id
        """
    )
    matches = []
    for row in _shape_json(rows):
        prefs = row["preferences"] or {}
        if key in prefs and (prefs[key] == value or str(prefs[key]).lower() == str(value).lower()):
            matches.append(row)
    return matches


def _shape_json(rows) -> List[Row]:
    return [normalize_row(row, json_columns=("preferences",)) for row in rows]


# ----------------------------------------------------------------------
# Subqueries
# ----------------------------------------------------------------------
def average_product_price() -> Optional[Decimal]:
    row = db.execute(
        "SELECT SUM(price) AS price_total, COUNT(price) AS priced FROM products", fetch="one"
    )
    return mysql_avg(row["price_total"], int(row["priced"]), 2)


def products_above_average_price() -> List[Row]:
    threshold = average_product_price()
    if threshold is None:
        return []
    rows = db.execute("SELECT * FROM products WHERE price > ? ORDER BY id", (threshold,))
    return _shape(rows, "products")


def products_above_category_average() -> List[Row]:
    """
    Products priced above the average of their own category.
    Each average is SUM / COUNT at DECIMAL scale and prices are compared as
    Decimal; products without a category never match.
    """
    totals = db.execute(
        """
        SELECT category_id, SUM(price) AS price_total, COUNT(price) AS priced
        FROM products
        WHERE category_id IS NOT NULL
        GROUP BY category_id
        """
    )
    thresholds = {
        row["category_id"]: mysql_avg(row["price_total"], int(row["priced"]), 2) for row in totals
    }
    rows = db.execute("SELECT * FROM products WHERE category_id IS NOT NULL ORDER BY id")
    return [
        row for row in _shape(rows, "products")
        if thresholds.get(row["category_id"]) is not None
        and row["price"] > thresholds[row["category_id"]]
    ]


def users_who_ordered() -> List[Row]:
    rows = db.execute(
        """
        SELECT * FROM users
        WHERE id IN (SELECT DISTINCT customer_id FROM orders)
        ORDER BY id
        """
    )
    return _shape(rows, "users")


# ----------------------------------------------------------------------
# Date arithmetic
# ----------------------------------------------------------------------
def users_with_account_age(today: Any = None) -> List[Row]:
    """Every user plus days_since_created, counted in whole calendar days like DATEDIFF."""
    today = to_date(today) or datetime.date.today()
    users = _shape(db.execute("SELECT * FROM users ORDER BY id"), "users")
    for user in users:
        created = to_date(user["created_at"])
        user["days_since_created"] = (today - created).days if created else None
    return users


# ----------------------------------------------------------------------
# Mutations
# ----------------------------------------------------------------------
def raise_category_prices(category_id: Any, factor: Any = "1.1") -> int:
    """
    price = price * factor for one category, stored half-up at two places.
    The arithmetic runs on Decimal so every backend lands on the same cents.
    """
    category_id = _as_int(category_id, "category_id")
    factor = Decimal(str(factor))
    if factor < 0:
        raise ValidationError("Price factor must not be negative")
    with db.connection(autocommit=False) as (conn, cur):
        cur.execute(db.sql("SELECT id, price FROM products WHERE category_id = ? ORDER BY id"), (category_id,))
        rows = cur.fetchall()
        for row in rows:
            new_price = to_decimal(to_decimal(row["price"], 2) * factor, 2)
            cur.execute(
                db.sql("UPDATE products SET price = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?"),
                (new_price, row["id"]),
            )
        conn.commit()
    log.info(f"Repriced {len(rows)} products in category {category_id} by x{factor}")
    return len(rows)


def touch_last_login(user_id: Any, when: Any = None) -> datetime.datetime:
    when = to_datetime(when) or datetime.datetime.now().replace(microsecond=0)
    updated = db.execute(
        "UPDATE users SET last_login = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        (when, _as_int(user_id, "user_id")),
        fetch="rowcount",
    )
    if not updated:
        raise NotFoundError(f"No users row with id={user_id}", id=user_id)
    return when


# ----------------------------------------------------------------------
# Hierarchy
# ----------------------------------------------------------------------
def category_tree() -> List[Row]:
    """Categories nested under their parents, roots in id order."""
    rows = db.execute("SELECT id, name, parent_id FROM categories ORDER BY id")
    nodes = {row["id"]: {"id": row["id"], "name": row["name"], "children": []} for row in rows}
    roots = []
    for row in rows:
        node = nodes[row["id"]]
        parent = nodes.get(row["parent_id"]) if row["parent_id"] is not None else None
        (parent["children"] if parent else roots).append(node)

    reached = set()
    pending = list(roots)
    while pending:
        node = pending.pop()
        reached.add(node["id"])
        pending.extend(node["children"])
    stranded = sorted(set(nodes) - reached)
    if stranded:
        raise ValidationError(f"Categories {stranded} sit on a parent cycle", ids=stranded)
    return roots


# Named read-only queries, as exposed on the command line
QUERIES: Dict[str, Callable[..., Any]] = {
    "first-users": first_users,
    "active-user-contacts": active_user_contacts,
    "products-priced-above": products_priced_above,
    "products-in-category": products_in_category,
    "products-name-like": products_name_like,
    "orders-since": orders_since,
    "products-by-price-desc": products_by_price_desc,
    "products-ordered": products_ordered,
    "users-newest-first": users_newest_first,
    "category-price-summary": category_price_summary,
    "monthly-sales": monthly_sales,
    "category-product-statistics": category_product_statistics,
    "dashboard-summary": dashboard_summary,
    "order-count-for-year": order_count_for_year,
    "order-item-count": order_item_count,
    "books-per-genre": books_per_genre,
    "orders-with-customers": orders_with_customers,
    "products-with-category-and-brand": products_with_category_and_brand,
    "books-with-authors": books_with_authors,
    "featured-products-on": featured_products_on,
    "customers-by-membership": customers_by_membership,
    "users-with-preference": users_with_preference,
    "average-product-price": average_product_price,
    "products-above-average-price": products_above_average_price,
    "products-above-category-average": products_above_category_average,
    "users-who-ordered": users_who_ordered,
    "users-with-account-age": users_with_account_age,
    "category-tree": category_tree,
}


def run_query(name: str, **params: Any) -> Any:
    try:
        query = QUERIES[name]
    except KeyError:
        raise ValidationError(f"Unknown query {name!r}", available=sorted(QUERIES)) from None
    log.debug(f"Running {name} with {params}")
    return query(**params)


def snapshot(today: Any = "2024-01-31") -> Dict[str, Any]:
    """Result of every parameter-free read query, for comparing two loads of the same data."""
    results: Dict[str, Any] = {}
    for name, query in QUERIES.items():
        if name in ("users-with-account-age", "dashboard-summary"):
            results[name] = query(today=today)
        elif name in ("products-in-category",):
            results[name] = query(category_id=2)
        elif name == "order-count-for-year":
            results[name] = query(year=2023)
        elif name == "order-item-count":
            results[name] = query(order_id=7)
        elif name == "users-with-preference":
            results[name] = query(key="theme", value="dark")
        elif name == "featured-products-on":
            results[name] = query(day=today)
        else:
            results[name] = query()
    return results
