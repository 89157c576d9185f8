"""Tests for the reference query library against the seeded dataset."""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from coursedb.models import queries
from coursedb.models.models import Category, Product, User
from coursedb.utils.exceptions import NotFoundError, ValidationError

if TYPE_CHECKING:
    from coursedb.database import DBClient


def _ids(rows: list[dict], key: str = "id") -> list[int]:
    return [row[key] for row in rows]


class TestFilters:
    """Point lookups, LIKE and date range filters."""

    def test_first_users(self, seeded: DBClient) -> None:
        rows = queries.first_users()
        assert _ids(rows) == [1, 2, 3, 4, 5]
        assert rows[0]["email"] == "john@example.com"

    def test_first_users_limit_from_string(self, seeded: DBClient) -> None:
        assert len(queries.first_users("2")) == 2

    def test_bad_limit(self, seeded: DBClient) -> None:
        with pytest.raises(ValidationError):
            queries.first_users("lots")

    def test_active_user_contacts(self, seeded: DBClient) -> None:
        rows = queries.active_user_contacts()
        assert len(rows) == 9
        assert set(rows[0]) == {"name", "email"}
        assert "charlie@example.com" not in {row["email"] for row in rows}

    def test_products_priced_above(self, seeded: DBClient) -> None:
        assert _ids(queries.products_priced_above(500)) == [1, 2, 3, 4, 6, 7, 9, 10, 11, 14]

    def test_products_in_category(self, seeded: DBClient) -> None:
        assert _ids(queries.products_in_category(2)) == [2, 4, 9, 11]

    def test_products_name_like_ignores_case(self, seeded: DBClient) -> None:
        assert _ids(queries.products_name_like("pro")) == [1, 2, 11, 12]

    def test_orders_since(self, seeded: DBClient) -> None:
        rows = queries.orders_since("2024-01-01")
        assert len(rows) == 15
        assert all(row["order_date"] >= datetime.date(2024, 1, 1) for row in rows)


class TestOrdering:
    """Single and multi-column ordering."""

    def test_price_desc(self, seeded: DBClient) -> None:
        assert _ids(queries.products_by_price_desc())[:3] == [2, 7, 14]

    def test_price_desc_name_asc(self, seeded: DBClient) -> None:
        """The 2499.99 tie is broken by name: Canon before MacBook."""
        assert _ids(queries.products_ordered())[:3] == [7, 2, 14]

    def test_order_by_string(self, seeded: DBClient) -> None:
        rows = queries.products_ordered("stock,-price")
        assert _ids(rows)[:2] == [14, 7]

    def test_order_by_unknown_column(self, seeded: DBClient) -> None:
        with pytest.raises(ValidationError):
            queries.products_ordered([("price; DROP TABLE products", "asc")])

    def test_users_newest_first(self, seeded: DBClient) -> None:
        rows = queries.users_newest_first()
        assert len(rows) == 10
        assert rows[0]["created_at"] >= rows[-1]["created_at"]


class TestAggregates:
    """GROUP BY with MySQL-compatible decimal averages."""

    def test_category_price_summary(self, seeded: DBClient) -> None:
        summary = {row["category_id"]: row for row in queries.category_price_summary()}
        assert summary[1]["product_count"] == 4
        assert summary[1]["avg_price"] == Decimal("1474.990000")
        assert summary[4]["product_count"] == 7
        assert summary[4]["avg_price"] == Decimal("161.418571")
        assert summary[10]["avg_price"] == Decimal("176.656667")
        assert sum(row["product_count"] for row in summary.values()) == 20

    def test_avg_keeps_mysql_scale(self, seeded: DBClient) -> None:
        (row,) = [r for r in queries.category_price_summary() if r["category_id"] == 3]
        assert str(row["avg_price"]) == "1099.990000"

    def test_monthly_sales(self, seeded: DBClient) -> None:
        rows = queries.monthly_sales()
        assert [(r["year"], r["month"]) for r in rows] == [
            (2023, 9), (2023, 10), (2023, 11), (2023, 12), (2024, 1),
        ]
        december = rows[3]
        assert december["order_count"] == 2
        assert december["total_sales"] == Decimal("1199.98")

    def test_monthly_sales_rollup(self, seeded: DBClient) -> None:
        rows = queries.monthly_sales(rollup=True)
        subtotals = [r for r in rows if r["month"] is None and r["year"] is not None]
        assert [(r["year"], r["order_count"], r["total_sales"]) for r in subtotals] == [
            (2023, 5, Decimal("5499.95")),
            (2024, 15, Decimal("14989.81")),
        ]
        grand = rows[-1]
        assert grand["year"] is None and grand["month"] is None
        assert grand["order_count"] == 20
        assert grand["total_sales"] == Decimal("20489.76")

    def test_category_product_statistics(self, seeded: DBClient) -> None:
        stats = queries.category_product_statistics()
        assert stats[0]["category"] == "Accessories"
        assert stats[0]["product_count"] == 7
        assert stats[0]["min_price"] == Decimal("49.99")
        assert stats[0]["max_price"] == Decimal("399.99")
        assert stats[0]["total_stock"] == 50 + 75 + 45 + 80 + 65 + 55 + 35
        empty = {row["category"]: row for row in stats}["Books"]
        assert empty["product_count"] == 0
        assert empty["avg_price"] is None

    def test_dashboard_summary(self, seeded: DBClient) -> None:
        summary = queries.dashboard_summary(days=30, today="2024-01-31")
        assert summary == {
            "unique_customers": 10,
            "total_orders": 15,
            "total_revenue": Decimal("14989.81"),
            "avg_order_value": Decimal("999.320667"),
        }

    def test_dashboard_summary_empty_window(self, seeded: DBClient) -> None:
        summary = queries.dashboard_summary(days=7, today="2022-01-01")
        assert summary["total_orders"] == 0
        assert summary["total_revenue"] is None
        assert summary["avg_order_value"] is None

    def test_order_count_for_year(self, seeded: DBClient) -> None:
        assert queries.order_count_for_year(2023) == 5
        assert queries.order_count_for_year("2024") == 15

    def test_order_item_count(self, seeded: DBClient) -> None:
        assert queries.order_item_count(7) == 4

    def test_books_per_genre(self, seeded: DBClient) -> None:
        rows = queries.books_per_genre()
        assert [r["genre"] for r in rows] == ["Fantasy", "Fiction", "Horror", "Mystery", "Thriller"]
        horror = rows[2]
        assert horror["book_count"] == 2
        assert horror["avg_price"] == Decimal("17.490000")


class TestJoins:
    """Two and three table joins."""

    def test_orders_with_customers(self, seeded: DBClient) -> None:
        rows = queries.orders_with_customers()
        assert len(rows) == 20
        assert rows[0] == {
            "id": 1,
            "name": "John Doe",
            "total_amount": Decimal("1549.98"),
            "order_date": datetime.date(2024, 1, 15),
        }

    def test_products_with_category_and_brand(self, seeded: DBClient) -> None:
        rows = queries.products_with_category_and_brand()
        assert rows[0] == {"name": "iPhone 14 Pro", "category_name": "Mobile Phones", "brand_name": "Apple"}

    def test_left_join_keeps_products_without_category(self, seeded: DBClient) -> None:
        product = Product.get_by_id(1)
        product.category_id = None
        product.update("category_id")
        rows = queries.products_with_category_and_brand()
        assert len(rows) == 20
        assert rows[0]["category_name"] is None

    def test_books_with_authors(self, seeded: DBClient) -> None:
        rows = queries.books_with_authors()
        assert len(rows) == 7
        assert rows[5]["author_name"] == "Dan Brown"
        assert rows[5]["price"] == Decimal("16.99")

    def test_featured_products_on(self, seeded: DBClient) -> None:
        assert len(queries.featured_products_on("2024-01-31")) == 8
        assert _ids(queries.featured_products_on("2024-02-20"), "product_id") == [2, 10]

    def test_customers_by_membership(self, seeded: DBClient) -> None:
        assert _ids(queries.customers_by_membership("premium")) == [1, 4]
        assert len(queries.customers_by_membership()) == 5
        with pytest.raises(ValidationError):
            queries.customers_by_membership("gold")

    def test_users_with_preference(self, seeded: DBClient) -> None:
        assert _ids(queries.users_with_preference("theme", "dark"), "user_id") == [1, 3]
        assert _ids(queries.users_with_preference("notifications", "true"), "user_id") == [1, 3, 4]


class TestSubqueries:
    """Correlated and non-correlated subqueries."""

    def test_average_product_price(self, seeded: DBClient) -> None:
        assert queries.average_product_price() == Decimal("762.990000")

    def test_products_above_average_price(self, seeded: DBClient) -> None:
        assert _ids(queries.products_above_average_price()) == [1, 2, 3, 4, 7, 10, 11, 14]

    def test_products_above_category_average(self, seeded: DBClient) -> None:
        assert _ids(queries.products_above_category_average()) == [1, 2, 5, 7, 12, 13, 14, 19]

    def test_equal_prices_are_not_above_their_average(self, db: DBClient) -> None:
        snacks = Category.new(name="Snacks")
        for sku in ("GUM-1", "GUM-2", "GUM-3"):
            Product.new(name="Gum", price="0.70", sku=sku, category_id=snacks.id)
        assert queries.average_product_price() == Decimal("0.700000")
        assert queries.products_above_average_price() == []
        assert queries.products_above_category_average() == []

    def test_category_average_is_per_category(self, db: DBClient) -> None:
        snacks = Category.new(name="Snacks")
        drinks = Category.new(name="Drinks")
        Product.new(name="Gum", price="0.10", sku="GUM-1", category_id=snacks.id)
        Product.new(name="Toffee", price="0.20", sku="TOF-1", category_id=snacks.id)
        Product.new(name="Water", price="0.70", sku="WAT-1", category_id=drinks.id)
        Product.new(name="Loose", price="99.00", sku="LOO-1")
        assert [row["name"] for row in queries.products_above_category_average()] == ["Toffee"]

    def test_users_who_ordered(self, seeded: DBClient) -> None:
        assert _ids(queries.users_who_ordered()) == list(range(1, 11))

    def test_users_who_ordered_excludes_new_user(self, seeded: DBClient) -> None:
        User.new(name="Window Shopper", email="shopper@example.com", password="x")
        assert 11 not in _ids(queries.users_who_ordered())


class TestDateArithmetic:
    def test_users_with_account_age(self, seeded: DBClient) -> None:
        rows = queries.users_with_account_age(today="2030-01-01")
        for row in rows:
            expected = (datetime.date(2030, 1, 1) - row["created_at"].date()).days
            assert row["days_since_created"] == expected


class TestMutations:
    """UPDATE with arithmetic and single-row updates."""

    def test_raise_category_prices(self, seeded: DBClient) -> None:
        assert queries.raise_category_prices(2, "1.1") == 4
        prices = {p.id: p.price for p in Product.get(category_id=2)}
        assert prices == {
            2: Decimal("2749.99"),
            4: Decimal("1319.99"),
            9: Decimal("769.99"),
            11: Decimal("1209.99"),
        }
        # other categories untouched
        assert Product.get_by_id(1).price == Decimal("1299.99")

    def test_raise_prices_rejects_negative_factor(self, seeded: DBClient) -> None:
        with pytest.raises(ValidationError):
            queries.raise_category_prices(2, "-1")

    def test_touch_last_login(self, seeded: DBClient) -> None:
        when = queries.touch_last_login(1, "2024-02-01 09:00:00")
        assert when == datetime.datetime(2024, 2, 1, 9, 0)
        assert User.get_by_id(1).last_login == when

    def test_touch_last_login_missing_user(self, seeded: DBClient) -> None:
        with pytest.raises(NotFoundError):
            queries.touch_last_login(999, "2024-02-01 09:00:00")


class TestHierarchy:
    def test_category_tree(self, seeded: DBClient) -> None:
        tree = queries.category_tree()
        assert [node["name"] for node in tree] == ["Electronics", "Clothing", "Books", "Home & Garden", "Sports"]
        assert [child["id"] for child in tree[0]["children"]] == [2, 3, 4]
        assert tree[2]["children"] == []

    def test_category_tree_rejects_parent_cycle(self, seeded: DBClient) -> None:
        seeded.execute("UPDATE categories SET parent_id = 2 WHERE id = 1", fetch="none")
        with pytest.raises(ValidationError, match="cycle") as exc:
            queries.category_tree()
        assert exc.value.payload["ids"] == [1, 2, 3, 4]


class TestRegistry:
    """The named query table used by the CLI."""

    def test_run_query_by_name(self, seeded: DBClient) -> None:
        assert queries.run_query("order-count-for-year", year="2023") == 5

    def test_unknown_query(self, seeded: DBClient) -> None:
        with pytest.raises(ValidationError) as exc_info:
            queries.run_query("no-such-query")
        assert "first-users" in exc_info.value.payload["available"]

    def test_snapshot_covers_every_query(self, seeded: DBClient) -> None:
        assert set(queries.snapshot()) == set(queries.QUERIES)
