from coursedb.database import db
from coursedb.database.schema import (
    column_names,
    enum_columns,
    decimal_columns,
    auto_update_columns,
    foreign_keys,
)
from coursedb.database.seed import seed_data

import datetime
import json
from decimal import Decimal

import bcrypt

from typing import Any, Dict, List, Optional

from coursedb.utils.logging import get_logger
from coursedb.utils.helpers import to_decimal, to_date
from coursedb.utils.exceptions import (
    NotFoundError,
    SeedError,
    ValidationError,
)

log = get_logger(__name__)

BOOLEAN_COLUMNS = ("featured", "deleted")


def conn_db(autocommit: bool = True):
    return db.connection(autocommit=autocommit)


def normalize_row(
    row: Dict[str, Any],
    table_name: Optional[str] = None,
    scales: Optional[Dict[str, int]] = None,
    json_columns: tuple = (),
) -> Dict[str, Any]:
    """
    Give a fetched row the same Python types on every backend:
    DECIMAL columns as Decimal at their declared scale, flags as bool,
    JSON columns decoded.
    """
    row = dict(row)
    known = dict(decimal_columns(table_name)) if table_name else {}
    known.update(scales or {})
    for col, places in known.items():
        if col in row and row[col] is not None:
            row[col] = to_decimal(row[col], places)
    for col in BOOLEAN_COLUMNS:
        if col in row and row[col] is not None:
            row[col] = bool(row[col])
    for col in json_columns:
        if isinstance(row.get(col), (str, bytes)):
            row[col] = json.loads(row[col])
    return row


class BaseClass:
    non_update: List[str] = ["id"]
    non_negative: List[str] = []
    json_columns: List[str] = []
    table_name: Optional[str] = None

    def __init__(self, **kwargs: Any) -> None:
        if self.table_name is None:
            raise ValueError("table_name must be set in subclass")
        row = normalize_row(kwargs, self.table_name, json_columns=tuple(self.json_columns))
        for key in row:
            setattr(self, key, row[key])

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)}>"

    def as_dict(self) -> Dict[str, Any]:
        return {col: getattr(self, col, None) for col in column_names(self.table_name)}

    @classmethod
    def clean(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and coerce column values before they reach the database."""
        columns = column_names(cls.table_name)
        excess = [col for col in data if col not in columns]
        if excess:
            raise ValidationError(f"Unknown columns for {cls.table_name}: {', '.join(excess)}")

        cleaned = dict(data)
        for col, allowed in enum_columns(cls.table_name).items():
            if col in cleaned and cleaned[col] is not None and cleaned[col] not in allowed:
                raise ValidationError(
                    f"{cls.table_name}.{col} must be one of {', '.join(allowed)}, got {cleaned[col]!r}",
                    column=col,
                )
        for col, places in decimal_columns(cls.table_name).items():
            if col in cleaned:
                cleaned[col] = to_decimal(cleaned[col], places)
        for col in cls.non_negative:
            if cleaned.get(col) is not None and cleaned[col] < 0:
                raise ValidationError(f"{cls.table_name}.{col} must not be negative", column=col)
        for col in cls.json_columns:
            if isinstance(cleaned.get(col), (dict, list)):
                cleaned[col] = json.dumps(cleaned[col])
        return cleaned

    @classmethod
    def new(cls, **kwargs) -> 'BaseClass':
        if "id" in kwargs:
            raise ValidationError("Invalid ID key found")
        if cls.table_name is None:
            raise ValueError("table_name must be set in subclass")
        data = cls.clean(kwargs)

        with conn_db() as (conn, cursor):
            last_id = db.insert(cursor, cls.table_name, data)
            cursor.execute(db.sql(f"SELECT * FROM {cls.table_name} WHERE id = ?"), (last_id,))
            last_entry = cursor.fetchone()
        log.debug(f"Inserted {cls.table_name} id={last_id}")
        return cls(**last_entry)

    @classmethod
    def get(cls, **kwargs) -> List['BaseClass']:
        clauses = []
        params = []
        for key, value in kwargs.items():
            if key not in column_names(cls.table_name):
                raise ValidationError(f"Unknown column for {cls.table_name}: {key}")
            if value is None:
                clauses.append(f"{key} IS NULL")
            else:
                clauses.append(f"{key} = ?")
                params.append(value)
        query = f"SELECT * FROM {cls.table_name}"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        data = db.execute(query + " ORDER BY id", params)
        return [cls(**entry) for entry in data]

    @classmethod
    def get_by_id(cls, row_id: Any) -> 'BaseClass':
        found = cls.get(id=row_id)
        if not found:
            raise NotFoundError(f"No {cls.table_name} row with id={row_id}", id=row_id)
        return found[0]

    def reload(self) -> 'BaseClass':
        fresh = self.get_by_id(self.id)
        for key, value in vars(fresh).items():
            setattr(self, key, value)
        return self

    def update(self, *keys) -> bool:
        update_data: Dict[str, Any] = {}
        columns = column_names(self.table_name)
        if not keys:
            update_data = {
                k: v for k, v in vars(self).items() if k in columns and k not in self.non_update
            }
        else:
            invalid = [k for k in keys if k in self.non_update or k not in vars(self)]
            if invalid:
                raise ValidationError(f"Invalid keys for update: {', '.join(invalid)}")
            update_data = {k: getattr(self, k) for k in keys}
        if not update_data:
            log.info(f"Nothing updated to {self.table_name}")
            return True
        update_data = self.clean(update_data)
        set_clause = ", ".join(f"{k} = ?" for k in update_data)
        for col in auto_update_columns(self.table_name):
            if col not in update_data:
                set_clause += f", {col} = CURRENT_TIMESTAMP"
        params = tuple(update_data.values()) + (getattr(self, 'id'),)
        with conn_db() as (conn, cursor):
            cursor.execute(
                db.sql(f"UPDATE {self.table_name} SET {set_clause} WHERE id = ?"), params
            )
        self.reload()
        return True

    def delete(self) -> None:
        with conn_db() as (connection, cursor):
            cursor.execute(db.sql(f"DELETE FROM {self.table_name} WHERE id = ?"), (getattr(self, 'id'),))
            if cursor.rowcount == 0:
                raise NotFoundError(f"No {self.table_name} row with id={self.id}", id=self.id)
        log.info(f"Deleted {self.table_name} id={self.id}")


class User(BaseClass):
    table_name = "users"
    non_update = ["id", "created_at", "updated_at"]
    non_negative = ["age"]

    @classmethod
    def register(cls, name: str, email: str, password: str, **kwargs) -> 'User':
        hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')
        return cls.new(name=name, email=email, password=hashed, **kwargs)

    def check_password(self, input_password):
        return bcrypt.checkpw(input_password.encode('utf-8'), self.password.encode('utf-8'))

    def update_password(self, old_password, new_password):
        if not self.check_password(old_password):
            return False
        self.password = bcrypt.hashpw(new_password.encode(), bcrypt.gensalt()).decode()
        self.update("password")
        return True

    def soft_delete(self) -> None:
        self.deleted = True
        self.deleted_at = datetime.datetime.now().replace(microsecond=0)
        self.update("deleted", "deleted_at")

    def restore(self) -> None:
        self.deleted = False
        self.deleted_at = None
        self.update("deleted", "deleted_at")

    def orders(self) -> List['Order']:
        return Order.get(customer_id=self.id)

    def preferences(self) -> List['UserPreference']:
        return UserPreference.get(user_id=self.id)


class Category(BaseClass):
    table_name = "categories"
    non_update = ["id", "created_at"]

    def ancestors(self) -> List['Category']:
        chain: List[Category] = []
        seen = {self.id}
        parent_id = self.parent_id
        while parent_id is not None:
            if parent_id in seen:
                raise ValidationError(f"Category {self.id} sits on a parent cycle", id=self.id)
            seen.add(parent_id)
            parent = Category.get_by_id(parent_id)
            chain.append(parent)
            parent_id = parent.parent_id
        return chain

    def children(self) -> List['Category']:
        return Category.get(parent_id=self.id)

    def products(self) -> List['Product']:
        return Product.get(category_id=self.id)

    def check_parent(self, parent_id: Optional[int]) -> None:
        if parent_id is None:
            return
        if parent_id == self.id:
            raise ValidationError("A category cannot be its own parent", id=self.id)
        parent = Category.get_by_id(parent_id)
        if any(ancestor.id == self.id for ancestor in parent.ancestors()):
            raise ValidationError(
                f"Category {parent_id} descends from {self.id}; re-parenting would create a cycle",
                id=self.id,
                parent_id=parent_id,
            )

    def set_parent(self, parent_id: Optional[int]) -> None:
        self.parent_id = parent_id
        self.update("parent_id")

    def update(self, *keys) -> bool:
        if not keys or "parent_id" in keys:
            self.check_parent(self.parent_id)
        return super().update(*keys)


class Brand(BaseClass):
    table_name = "brands"
    non_update = ["id", "created_at"]

    def products(self) -> List['Product']:
        return Product.get(brand_id=self.id)


class Product(BaseClass):
    table_name = "products"
    non_update = ["id", "created_at", "updated_at"]
    non_negative = ["price", "stock", "weight"]

    @classmethod
    def get_by_sku(cls, sku: str) -> 'Product':
        found = cls.get(sku=sku)
        if not found:
            raise NotFoundError(f"No product with sku={sku}", sku=sku)
        return found[0]

    def category(self) -> Optional[Category]:
        return Category.get_by_id(self.category_id) if self.category_id is not None else None

    def brand(self) -> Optional[Brand]:
        return Brand.get_by_id(self.brand_id) if self.brand_id is not None else None


class Order(BaseClass):
    table_name = "orders"
    non_update = ["id", "customer_id", "created_at", "updated_at"]
    non_negative = ["total_amount", "shipping_fee", "discount_amount"]

    ORDER_TRANSITIONS: Dict[str, tuple] = {
        "pending": ("processing", "cancelled"),
        "processing": ("shipped", "cancelled"),
        "shipped": ("delivered",),
        "delivered": (),
        "cancelled": (),
    }
    PAYMENT_TRANSITIONS: Dict[str, tuple] = {
        "pending": ("paid", "failed"),
        "paid": ("refunded", "failed"),
        "failed": (),
        "refunded": (),
    }

    @classmethod
    def check_transition(cls, kind: str, current: str, new: str) -> None:
        table = cls.ORDER_TRANSITIONS if kind == "order_status" else cls.PAYMENT_TRANSITIONS
        if new == current:
            return
        if new not in table.get(current, ()):
            raise ValidationError(
                f"{kind} cannot move from {current} to {new}",
                current=current,
                requested=new,
            )

    def update(self, *keys) -> bool:
        touched = keys or ("order_status", "payment_status")
        if "order_status" in touched or "payment_status" in touched:
            current = Order.get_by_id(self.id)
            for kind in ("order_status", "payment_status"):
                if kind in touched:
                    self.check_transition(kind, getattr(current, kind), getattr(self, kind))
        return super().update(*keys)

    def advance_status(self, new_status: str) -> None:
        self.check_transition("order_status", self.order_status, new_status)
        self.order_status = new_status
        self.update("order_status")

    def cancel(self) -> None:
        self.advance_status("cancelled")

    def set_payment_status(self, new_status: str) -> None:
        self.check_transition("payment_status", self.payment_status, new_status)
        self.payment_status = new_status
        self.update("payment_status")

    def customer(self) -> User:
        return User.get_by_id(self.customer_id)

    def items(self) -> List['OrderItem']:
        return OrderItem.get(order_id=self.id)

    def add_item(self, product_id: int, quantity: int = 1, unit_price: Any = None) -> 'OrderItem':
        if unit_price is None:
            unit_price = Product.get_by_id(product_id).price
        return OrderItem.new(order_id=self.id, product_id=product_id, quantity=quantity, unit_price=unit_price)

    def items_total(self) -> Decimal:
        return sum((item.total_price for item in self.items()), Decimal("0.00"))


class OrderItem(BaseClass):
    table_name = "order_items"
    non_update = ["id", "order_id", "product_id", "created_at"]
    non_negative = ["unit_price", "total_price"]

    @classmethod
    def clean(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = super().clean(data)
        if "quantity" in cleaned or "unit_price" in cleaned:
            quantity = cleaned.get("quantity")
            unit_price = cleaned.get("unit_price")
            if quantity is None or unit_price is None:
                raise ValidationError("quantity and unit_price are written together")
            if int(quantity) < 1:
                raise ValidationError("order_items.quantity must be at least 1", column="quantity")
            expected = to_decimal(Decimal(int(quantity)) * unit_price, 2)
            if cleaned.get("total_price") is None:
                cleaned["total_price"] = expected
            elif cleaned["total_price"] != expected:
                raise ValidationError(
                    f"total_price {cleaned['total_price']} != quantity * unit_price ({expected})",
                    column="total_price",
                )
        elif "total_price" in cleaned:
            raise ValidationError("total_price follows quantity * unit_price; update those instead")
        return cleaned

    def update(self, *keys) -> bool:
        if "quantity" in keys or "unit_price" in keys:
            self.total_price = None
            keys = tuple(dict.fromkeys(keys + ("quantity", "unit_price", "total_price")))
        elif not keys:
            self.total_price = None
        return super().update(*keys)

    def order(self) -> Order:
        return Order.get_by_id(self.order_id)

    def product(self) -> Product:
        return Product.get_by_id(self.product_id)


class Author(BaseClass):
    table_name = "authors"
    non_update = ["id", "created_at"]

    def books(self) -> List['Book']:
        return Book.get(author_id=self.id)


class Book(BaseClass):
    table_name = "books"
    non_update = ["id", "created_at"]
    non_negative = ["price", "pages"]

    def author(self) -> Optional[Author]:
        return Author.get_by_id(self.author_id) if self.author_id is not None else None


class Customer(BaseClass):
    table_name = "customers"
    non_update = ["id", "created_at"]


class FeaturedProduct(BaseClass):
    table_name = "featured_products"
    non_update = ["id", "created_at"]

    @classmethod
    def clean(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = super().clean(data)
        start, end = to_date(cleaned.get("start_date")), to_date(cleaned.get("end_date"))
        if start and end and start > end:
            raise ValidationError(f"Feature window ends ({end}) before it starts ({start})")
        return cleaned

    def is_active(self, day: Any = None) -> bool:
        day = to_date(day) or datetime.date.today()
        start, end = to_date(self.start_date), to_date(self.end_date)
        return (start is None or start <= day) and (end is None or day <= end)

    def product(self) -> Product:
        return Product.get_by_id(self.product_id)


class UserPreference(BaseClass):
    table_name = "user_preferences"
    non_update = ["id", "user_id", "created_at"]
    json_columns = ["preferences"]

    def value(self, key: str, default: Any = None) -> Any:
        return (self.preferences or {}).get(key, default)


MODELS = [User, Category, Brand, Product, Order, OrderItem, Author, Book, Customer, FeaturedProduct, UserPreference]
MODEL_BY_TABLE = {model.table_name: model for model in MODELS}


def row_counts(tables: Optional[List[str]] = None) -> Dict[str, int]:
    counts = {}
    for table_name in tables or list(MODEL_BY_TABLE):
        row = db.execute(f"SELECT COUNT(*) AS row_count FROM {table_name}", fetch="one")
        counts[table_name] = row["row_count"]
    return counts


def is_empty() -> bool:
    return not any(row_counts().values())


def load_seed(data: Optional[Dict[str, List[Dict[str, Any]]]] = None) -> Dict[str, int]:
    """
    Insert the reference dataset in one transaction.
    Foreign keys in `data` are 1-based positions in the parent table's list and
    are rewritten to the ids the database hands out.
    """
    data = data or seed_data
    unknown = [table for table in data if table not in MODEL_BY_TABLE]
    if unknown:
        raise SeedError(f"No model for seed tables: {', '.join(unknown)}")

    occupied = {table: count for table, count in row_counts(list(data)).items() if count}
    if occupied:
        raise SeedError(
            f"Seed data goes into an empty schema; found rows in {', '.join(occupied)}",
            **occupied,
        )

    id_maps: Dict[str, Dict[int, Any]] = {}
    with conn_db(autocommit=False) as (conn, cursor):
        for table_name, rows in data.items():
            model = MODEL_BY_TABLE[table_name]
            fks = {fk["key"]: fk["parent_table"] for fk in foreign_keys(table_name)}
            id_maps[table_name] = {}
            for position, row in enumerate(rows, start=1):
                record = dict(row)
                for key, parent_table in fks.items():
                    if record.get(key) is None:
                        continue
                    try:
                        record[key] = id_maps[parent_table][record[key]]
                    except KeyError:
                        raise SeedError(
                            f"{table_name} row {position}: {key}={record[key]} has no {parent_table} row"
                        ) from None
                record = model.clean(record)
                id_maps[table_name][position] = db.insert(cursor, table_name, record)
            log.info(f"Seeded {len(rows)} rows into {table_name}")
        conn.commit()
    return {table: len(ids) for table, ids in id_maps.items()}
