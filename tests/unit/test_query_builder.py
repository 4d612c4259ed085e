"""
Unit tests for the SQL statement builders.

Tests cover:
- WHERE 1=1 composition of optional raw conditions
- Named parameter derivation from column names
- Value binding conversions
- Refusal of unconditional deletes
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from fastsqlite.core.query_builder import (
    Statement,
    bind_value,
    build_delete,
    build_delete_where,
    build_insert,
    build_select,
    build_update,
    join_columns,
    param_name,
    where_clause,
)


class TestWhereClause:
    def test_empty_condition_keeps_sentinel_only(self):
        assert where_clause("") == "WHERE 1=1"
        assert where_clause("   ") == "WHERE 1=1"

    def test_condition_is_appended_with_and(self):
        assert where_clause("id > 3") == "WHERE 1=1 AND id > 3"


class TestSelect:
    def test_string_columns_used_verbatim(self):
        statement = build_select("users", "id, name", "age >= 18")

        assert statement.sql == "SELECT id, name FROM users WHERE 1=1 AND age >= 18"
        assert statement.params == {}

    def test_sequence_columns_joined(self):
        statement = build_select("users", ["id", "name", "email"])

        assert statement.sql == "SELECT id, name, email FROM users WHERE 1=1"

    def test_generator_columns_joined(self):
        statement = build_select("users", (c for c in ("id", "name")))

        assert statement.sql == "SELECT id, name FROM users WHERE 1=1"

    def test_default_is_star(self):
        assert build_select("users").sql == "SELECT * FROM users WHERE 1=1"

    def test_no_columns_rejected(self):
        with pytest.raises(ValueError):
            join_columns([])


class TestInsert:
    def test_columns_and_named_placeholders(self):
        statement = build_insert("users", {"name": "Ann", "age": 31})

        assert statement == Statement(
            "INSERT INTO users (name, age) VALUES (:param_name, :param_age)",
            {"param_name": "Ann", "param_age": 31},
        )

    def test_empty_mapping_inserts_defaults(self):
        statement = build_insert("users", {})

        assert statement.sql == "INSERT INTO users DEFAULT VALUES"
        assert statement.params == {}

    def test_non_mapping_rejected(self):
        with pytest.raises(TypeError):
            build_insert("users", [("name", "Ann")])


class TestUpdate:
    def test_assignments_and_condition(self):
        statement = build_update("users", {"name": "Bob", "age": 40}, "id = 7")

        assert statement.sql == (
            "UPDATE users SET name = :param_name, age = :param_age WHERE 1=1 AND id = 7"
        )
        assert statement.params == {"param_name": "Bob", "param_age": 40}

    def test_empty_condition_matches_all_rows(self):
        statement = build_update("users", {"active": False})

        assert statement.sql == "UPDATE users SET active = :param_active WHERE 1=1"
        assert statement.params == {"param_active": 0}

    def test_empty_data_rejected(self):
        with pytest.raises(ValueError, match="Nothing to update"):
            build_update("users", {})


class TestDelete:
    def test_raw_condition(self):
        statement = build_delete("users", "age < 18")

        assert statement.sql == "DELETE FROM users WHERE 1=1 AND age < 18"

    @pytest.mark.parametrize("condition", ["", "  ", None])
    def test_blank_condition_refused(self, condition):
        with pytest.raises(ValueError, match="without a condition"):
            build_delete("users", condition)

    def test_structured_conditions_joined_with_operator(self):
        statement = build_delete_where("users", {"name": "Ann", "age": 31}, "or")

        assert statement.sql == (
            "DELETE FROM users WHERE name = :param_name OR age = :param_age"
        )
        assert statement.params == {"param_name": "Ann", "param_age": 31}

    def test_single_condition_operator_irrelevant(self):
        with_and = build_delete_where("users", {"id": 1}, "AND")
        with_or = build_delete_where("users", {"id": 1}, "OR")

        assert with_and == with_or

    def test_unknown_operator_rejected(self):
        with pytest.raises(ValueError, match="AND or OR"):
            build_delete_where("users", {"id": 1}, "XOR")

    def test_empty_conditions_refused(self):
        with pytest.raises(ValueError, match="without a condition"):
            build_delete_where("users", {})


class TestParameters:
    def test_param_name_sanitizes_column(self):
        assert param_name("first name") == "param_first_name"
        assert param_name("t.col") == "param_t_col"

    def test_param_name_deduplicates(self):
        assert param_name("a-b", {"param_a_b"}) == "param_a_b_2"
        assert param_name("a-b", {"param_a_b", "param_a_b_2"}) == "param_a_b_3"

    def test_colliding_columns_get_distinct_params(self):
        statement = build_insert("t", {"a-b": 1, "a_b": 2})

        assert statement.sql == "INSERT INTO t (a-b, a_b) VALUES (:param_a_b, :param_a_b_2)"
        assert statement.params == {"param_a_b": 1, "param_a_b_2": 2}

    def test_bind_value_conversions(self):
        assert bind_value(True) == 1
        assert bind_value(Decimal("10.50")) == "10.50"
        assert bind_value(date(2025, 1, 2)) == "2025-01-02"
        assert bind_value(datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)) == "2025-01-02T03:04:05Z"
        assert bind_value(datetime(2025, 1, 2, 3, 4, 5)) == "2025-01-02T03:04:05"
        assert bind_value(b"\x00\x01") == b"\x00\x01"
        assert bind_value(None) is None
        assert bind_value(2.5) == 2.5
