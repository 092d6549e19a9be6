from contextlib import contextmanager
from datetime import datetime
from unittest import mock

import pytest

from infrastructure.sinks import postgres_sink
from infrastructure.sinks.postgres_sink import SYNC_META_TABLE, PostgresTableSink

SYNCED_AT = datetime(2024, 5, 17, 9, 3, 7)


class FakePool:
    def __init__(self):
        self.cursor = mock.MagicMock()
        self.conn = mock.MagicMock()
        self.conn.cursor.return_value.__enter__.return_value = self.cursor

    @contextmanager
    def connection(self):
        yield self.conn

    def statements(self):
        return [repr(c.args[0]) for c in self.cursor.execute.call_args_list]


@pytest.fixture()
def pool():
    return FakePool()


def test_write_recreates_table_and_inserts(pool):
    with mock.patch.object(postgres_sink, "execute_values") as ev:
        PostgresTableSink(pool).write("Deals", ["Title", "Stage"], [["Deal A", "Qualified"]], SYNCED_AT)

    statements = pool.statements()
    assert any("DROP TABLE IF EXISTS" in s and "Identifier('deals')" in s for s in statements)
    assert any(s.startswith("Composed([SQL('CREATE TABLE '), Identifier('deals')") for s in statements)
    assert any("COMMENT ON COLUMN" in s and "Identifier('stage')" in s for s in statements)

    ev.assert_called_once()
    _, stmt, rows = ev.call_args.args
    assert "Identifier('title')" in repr(stmt)
    assert rows == [("Deal A", "Qualified")]
    pool.conn.commit.assert_called_once()


def test_table_is_recreated_before_insert(pool):
    order = []
    pool.cursor.execute.side_effect = lambda stmt, *a: order.append(repr(stmt))
    with mock.patch.object(postgres_sink, "execute_values", side_effect=lambda *a, **k: order.append("INSERT")):
        PostgresTableSink(pool).write("Deals", ["Title"], [["A"]], SYNCED_AT)

    drop_at = next(i for i, s in enumerate(order) if "DROP TABLE" in s)
    create_at = next(i for i, s in enumerate(order) if "CREATE TABLE '), Identifier('deals')" in s)
    assert drop_at < create_at < order.index("INSERT")


def test_sync_meta_is_stamped(pool):
    with mock.patch.object(postgres_sink, "execute_values"):
        PostgresTableSink(pool).write("Deals", ["Title"], [["A"], ["B"]], SYNCED_AT)

    meta_calls = [
        c for c in pool.cursor.execute.call_args_list
        if "INSERT INTO" in repr(c.args[0]) and SYNC_META_TABLE in repr(c.args[0])
    ]
    assert len(meta_calls) == 1
    assert meta_calls[0].args[1] == ("deals", "2024-05-17 09:03:07", 2)


def test_header_only_table_skips_insert(pool):
    with mock.patch.object(postgres_sink, "execute_values") as ev:
        PostgresTableSink(pool).write("Contacts", ["Name"], [], SYNCED_AT)

    ev.assert_not_called()
    assert any("DROP TABLE IF EXISTS" in s for s in pool.statements())


def test_duplicate_headers_get_unique_columns(pool):
    with mock.patch.object(postgres_sink, "execute_values") as ev:
        PostgresTableSink(pool).write("Deals", ["Valor", "valor", "Valor!"], [["1", "2", "3"]], SYNCED_AT)

    stmt = repr(ev.call_args.args[1])
    assert "Identifier('valor')" in stmt
    assert "Identifier('valor_2')" in stmt
    assert "Identifier('valor_3')" in stmt


def _create_statements(pool):
    return [s for s in pool.statements() if s.startswith("Composed([SQL('CREATE TABLE '), Identifier('deals')")]


def test_second_write_follows_new_column_list(pool):
    sink = PostgresTableSink(pool)
    with mock.patch.object(postgres_sink, "execute_values") as ev:
        sink.write("Deals", ["A", "B"], [["1", "2"]], SYNCED_AT)
        sink.write("Deals", ["B"], [["3"]], SYNCED_AT)

    first, second = _create_statements(pool)
    assert "Identifier('a')" in first and "Identifier('b')" in first
    assert "Identifier('a')" not in second
    assert "Identifier('b')" in second
    assert sum("DROP TABLE IF EXISTS" in s for s in pool.statements()) == 2
    assert ev.call_args_list[-1].args[2] == [("3",)]


def test_reordered_columns_are_recreated_in_new_order(pool):
    sink = PostgresTableSink(pool)
    with mock.patch.object(postgres_sink, "execute_values"):
        sink.write("Deals", ["A", "B"], [["1", "2"]], SYNCED_AT)
        sink.write("Deals", ["B", "A"], [["2", "1"]], SYNCED_AT)

    second = _create_statements(pool)[1]
    assert second.index("Identifier('b')") < second.index("Identifier('a')")
