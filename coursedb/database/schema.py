import re
from typing import Any, Dict, List

# Tables are listed parents-first; migrations create in this order and drop in reverse.
schema = [
    {"table_name":"users",
    "table_columns":{
        "id":"INTEGER PRIMARY KEY AUTOINCREMENT",
        "name":"VARCHAR(100) NOT NULL",
        "email":"VARCHAR(150) UNIQUE NOT NULL",
        "password":"VARCHAR(255) NOT NULL",    #bcrypt hash
        "age":"INTEGER",
        "phone":"VARCHAR(20)",
        "address":"TEXT",
        "country":"VARCHAR(50) DEFAULT 'Nepal'",
        "status":"ENUM('active','inactive') DEFAULT 'active'",
        "role":"ENUM('admin','editor','subscriber','member') DEFAULT 'member'",
        "last_login":"DATETIME",
        "created_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        "updated_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP",
        "deleted":"BOOLEAN DEFAULT FALSE",
        "deleted_at":"TIMESTAMP NULL",
        }},
    {"table_name":"categories",
    "table_columns":{
        "id":"INTEGER PRIMARY KEY AUTOINCREMENT",
        "name":"VARCHAR(100) NOT NULL",
        "description":"TEXT",
        "parent_id":"INTEGER NULL",
        "created_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        "FOREIGN KEY":[{
                "key":"parent_id",
                "parent_table":"categories",
                "parent_key":"id",
                "instruction":"ON DELETE SET NULL"
            }]
        }},
    {"table_name":"brands",
    "table_columns":{
        "id":"INTEGER PRIMARY KEY AUTOINCREMENT",
        "name":"VARCHAR(100) NOT NULL",
        "description":"TEXT",
        "created_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        }},
    {"table_name":"products",
    "table_columns":{
        "id":"INTEGER PRIMARY KEY AUTOINCREMENT",
        "name":"VARCHAR(200) NOT NULL",
        "description":"TEXT",
        "price":"DECIMAL(10,2) NOT NULL",
        "stock":"INTEGER DEFAULT 0",
        "category_id":"INTEGER",
        "brand_id":"INTEGER",
        "sku":"VARCHAR(50) UNIQUE",
        "weight":"DECIMAL(5,2)",    #kg
        "dimensions":"VARCHAR(50)",
        "image_url":"VARCHAR(255)",
        "featured":"BOOLEAN DEFAULT FALSE",
        "status":"ENUM('active','inactive','discontinued') DEFAULT 'active'",
        "created_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        "updated_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP",
        "FOREIGN KEY":[{
                "key":"category_id",
                "parent_table":"categories",
                "parent_key":"id",
                "instruction":"ON DELETE SET NULL"
            },
            {
                "key":"brand_id",
                "parent_table":"brands",
                "parent_key":"id",
                "instruction":"ON DELETE SET NULL"
            }],
        "INDEX":[
            {"name":"idx_price", "columns":["price"]},
            {"name":"idx_category", "columns":["category_id"]},
            {"name":"idx_status", "columns":["status"]},
            ]
        }},
    {"table_name":"orders",
    "table_columns":{
        "id":"INTEGER PRIMARY KEY AUTOINCREMENT",
        "customer_id":"INTEGER NOT NULL",   #users.id, not customers.id
        "order_date":"DATE NOT NULL",
        "total_amount":"DECIMAL(10,2) NOT NULL",
        "shipping_address":"TEXT",
        "billing_address":"TEXT",
        "payment_method":"ENUM('credit_card','debit_card','paypal','cash_on_delivery') DEFAULT 'cash_on_delivery'",
        "payment_status":"ENUM('pending','paid','failed','refunded') DEFAULT 'pending'",
        "order_status":"ENUM('pending','processing','shipped','delivered','cancelled') DEFAULT 'pending'",
        "shipping_fee":"DECIMAL(8,2) DEFAULT 0.00",
        "discount_amount":"DECIMAL(8,2) DEFAULT 0.00",
        "notes":"TEXT",
        "created_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        "updated_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP",
        "FOREIGN KEY":[{
                "key":"customer_id",
                "parent_table":"users",
                "parent_key":"id",
                "instruction":"ON DELETE CASCADE"
            }],
        "INDEX":[
            {"name":"idx_customer", "columns":["customer_id"]},
            {"name":"idx_order_date", "columns":["order_date"]},
            {"name":"idx_status", "columns":["order_status"]},
            ]
        }},
    {"table_name":"order_items",
    "table_columns":{
        "id":"INTEGER PRIMARY KEY AUTOINCREMENT",
        "order_id":"INTEGER NOT NULL",
        "product_id":"INTEGER NOT NULL",
        "quantity":"INTEGER NOT NULL",
        "unit_price":"DECIMAL(10,2) NOT NULL",
        "total_price":"DECIMAL(10,2) NOT NULL",    #quantity * unit_price, kept by the writer
        "created_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        "FOREIGN KEY":[{
                "key":"order_id",
                "parent_table":"orders",
                "parent_key":"id",
                "instruction":"ON DELETE CASCADE"
            },
            {
                "key":"product_id",
                "parent_table":"products",
                "parent_key":"id",
                "instruction":"ON DELETE CASCADE"
            }],
        "INDEX":[
            {"name":"idx_order", "columns":["order_id"]},
            {"name":"idx_product", "columns":["product_id"]},
            ]
        }},
    {"table_name":"authors",
    "table_columns":{
        "id":"INTEGER PRIMARY KEY AUTOINCREMENT",
        "name":"VARCHAR(100) NOT NULL",
        "email":"VARCHAR(150)",
        "bio":"TEXT",
        "birth_date":"DATE",
        "nationality":"VARCHAR(50)",
        "created_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        }},
    {"table_name":"books",
    "table_columns":{
        "id":"INTEGER PRIMARY KEY AUTOINCREMENT",
        "title":"VARCHAR(200) NOT NULL",
        "author_id":"INTEGER",
        "isbn":"VARCHAR(20)",
        "price":"DECIMAL(8,2)",
        "pages":"INTEGER",
        "publication_date":"DATE",
        "genre":"VARCHAR(50)",
        "created_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        "FOREIGN KEY":[{
                "key":"author_id",
                "parent_table":"authors",
                "parent_key":"id",
                "instruction":"ON DELETE SET NULL"
            }]
        }},
    {"table_name":"sessions",
    "table_columns":{
        "id":"VARCHAR(128) PRIMARY KEY",
        "data":"TEXT",
        "last_accessed":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP",
        }},
    {"table_name":"customers",     #Alternate user records for JOIN examples, no FK from orders
    "table_columns":{
        "id":"INTEGER PRIMARY KEY AUTOINCREMENT",
        "name":"VARCHAR(100) NOT NULL",
        "email":"VARCHAR(150) UNIQUE",
        "membership_level":"ENUM('basic','premium','vip') DEFAULT 'basic'",
        "status":"ENUM('active','inactive') DEFAULT 'active'",
        "created_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        }},
    {"table_name":"featured_products",
    "table_columns":{
        "id":"INTEGER PRIMARY KEY AUTOINCREMENT",
        "product_id":"INTEGER NOT NULL",
        "start_date":"DATE",
        "end_date":"DATE",
        "created_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        "FOREIGN KEY":[{
                "key":"product_id",
                "parent_table":"products",
                "parent_key":"id",
                "instruction":"ON DELETE CASCADE"
            }]
        }},
    {"table_name":"user_preferences",
    "table_columns":{
        "id":"INTEGER PRIMARY KEY AUTOINCREMENT",
        "user_id":"INTEGER NOT NULL",   #no UNIQUE, a user may hold several rows
        "preferences":"JSON",
        "created_at":"TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        "FOREIGN KEY":[{
                "key":"user_id",
                "parent_table":"users",
                "parent_key":"id",
                "instruction":"ON DELETE CASCADE"
            }]
        }},
]

SPECIAL_KEYS = ("FOREIGN KEY", "UNIQUE", "INDEX")

_ENUM_RE = re.compile(r"^ENUM\((?P<values>[^)]*)\)", re.IGNORECASE)
_DECIMAL_RE = re.compile(r"^DECIMAL\(\s*(?P<precision>\d+)\s*,\s*(?P<scale>\d+)\s*\)", re.IGNORECASE)


def table_names() -> List[str]:
    return [table["table_name"] for table in schema]


def get_table(table_name: str) -> Dict[str, Any]:
    for table in schema:
        if table["table_name"] == table_name:
            return table["table_columns"]
    raise KeyError(f"Unknown table: {table_name}")


def column_names(table_name: str) -> List[str]:
    return [col for col in get_table(table_name) if col.upper() not in SPECIAL_KEYS]


def parse_enum(col_type: str) -> List[str] | None:
    match = _ENUM_RE.match(col_type.strip())
    if not match:
        return None
    return [value.strip().strip("'\"") for value in match.group("values").split(",")]


def enum_columns(table_name: str) -> Dict[str, List[str]]:
    """Literal value set of every ENUM column in a table."""
    enums = {}
    for col, col_type in get_table(table_name).items():
        if col.upper() in SPECIAL_KEYS:
            continue
        values = parse_enum(col_type)
        if values:
            enums[col] = values
    return enums


def decimal_columns(table_name: str) -> Dict[str, int]:
    """Scale of every DECIMAL column in a table."""
    scales = {}
    for col, col_type in get_table(table_name).items():
        if col.upper() in SPECIAL_KEYS:
            continue
        match = _DECIMAL_RE.match(col_type.strip())
        if match:
            scales[col] = int(match.group("scale"))
    return scales


def auto_update_columns(table_name: str) -> List[str]:
    """Columns declared ON UPDATE CURRENT_TIMESTAMP."""
    return [
        col for col, col_type in get_table(table_name).items()
        if col.upper() not in SPECIAL_KEYS and "ON UPDATE CURRENT_TIMESTAMP" in col_type.upper()
    ]


def foreign_keys(table_name: str) -> List[Dict[str, str]]:
    fks = get_table(table_name).get("FOREIGN KEY", [])
    return fks if isinstance(fks, list) else [fks]
