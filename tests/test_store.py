from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path

import pytest

from poolattr.backends.sqlite import SQLiteDatabase
from poolattr.core.attribute_types import AttributeType
from poolattr.core.codec import resolve
from poolattr.core.errors import PersistenceError
from poolattr.core.model import ResolvedAttribute, ValueKind
from poolattr.core.store import AttributeStore


class FakeDatabase:
    """Scriptable database recording every statement."""

    def __init__(self, rows: list[tuple[int, int, bytes]] | None = None, delete_results: list | None = None) -> None:
        self.rows = rows or []
        self.delete_results = list(delete_results or [])
        self.statements: list[tuple[str, tuple]] = []
        self.insert_result = 1

    def execute(self, sql: str, *params):
        self.statements.append((sql, params))
        if sql.startswith("INSERT"):
            return self.insert_result
        if sql.startswith("DELETE"):
            result = self.delete_results.pop(0) if self.delete_results else 1
            if isinstance(result, Exception):
                raise result
            return result
        return -1

    def query(self, sql: str, *params):
        self.statements.append((sql, params))
        return iter(self.rows)

    def last_insert_id(self) -> int:
        return 42

    @contextmanager
    def transaction(self):
        self.statements.append(("BEGIN", ()))
        yield
        self.statements.append(("COMMIT", ()))

    def close(self) -> None:
        pass


@pytest.fixture()
def store(tmp_path: Path) -> AttributeStore:
    database = SQLiteDatabase(tmp_path / "pool.db")
    store = AttributeStore(database)
    store.ensure_schema()
    yield store
    database.close()


def test_add_ipv4_dns(store: AttributeStore) -> None:
    record = store.add(resolve("dns", "8.8.8.8", ValueKind.ADDRESS))
    assert record.type_code == AttributeType.INTERNAL_IP4_DNS
    assert record.value == b"\x08\x08\x08\x08"
    assert list(store.list()) == [record]


def test_add_ipv6_dns(store: AttributeStore) -> None:
    record = store.add(resolve("dns", "2001:db8::1", ValueKind.ADDRESS))
    assert record.type_code == AttributeType.INTERNAL_IP6_DNS
    assert len(record.value) == 16


def test_add_subnet(store: AttributeStore) -> None:
    record = store.add(resolve("unity_split_include", "10.0.0.0/255.255.255.0", ValueKind.SUBNET))
    (stored,) = store.list()
    assert stored.value == bytes.fromhex("0A000000FFFFFF00000000000000")
    assert stored.id == record.id


def test_add_takes_id_from_backend() -> None:
    database = FakeDatabase()
    record = AttributeStore(database).add(resolve("banner", "hi", ValueKind.STRING))
    assert record.id == 42
    assert [sql for sql, _ in database.statements if not sql.startswith("INSERT")] == []


def test_added_ids_follow_insert_order(store: AttributeStore) -> None:
    first = store.add(resolve("banner", "one", ValueKind.STRING))
    second = store.add(resolve("banner", "two", ValueKind.STRING))
    assert (first.id, second.id) == (1, 2)
    assert [r.id for r in store.list()] == [1, 2]


def test_add_requires_exactly_one_row() -> None:
    database = FakeDatabase()
    database.insert_result = 0
    with pytest.raises(PersistenceError) as exc:
        AttributeStore(database).add(resolve("banner", "hi", ValueKind.STRING))
    assert exc.value.operation == "add"
    assert exc.value.type_code == AttributeType.UNITY_BANNER


def test_list_orders_by_type_and_is_restartable(store: AttributeStore) -> None:
    store.add(resolve("banner", "hello", ValueKind.STRING))
    store.add(resolve("dns", "2001:db8::1", ValueKind.ADDRESS))
    store.add(resolve("dns", "8.8.8.8", ValueKind.ADDRESS))

    first = [r.type_code for r in store.list()]
    assert first == [3, 10, 28672]

    store.add(resolve("wins", "10.0.0.9", ValueKind.ADDRESS))
    assert [r.type_code for r in store.list()] == [3, 4, 10, 28672]


def test_delete_keyword_only_matches_both_families(store: AttributeStore) -> None:
    store.add(resolve("dns", "8.8.8.8", ValueKind.ADDRESS))
    store.add(resolve("dns", "2001:db8::1", ValueKind.ADDRESS))
    store.add(resolve("banner", "hello", ValueKind.STRING))

    result = store.delete_matching(resolve("dns", None, ValueKind.NONE))
    assert result.deleted_count == 2
    assert {r.type_code for r in result.deleted} == {3, 10}
    assert [r.type_code for r in store.list()] == [28672]


def test_delete_single_family_keyword_only_matches_its_type(store: AttributeStore) -> None:
    store.add(resolve("dns", "8.8.8.8", ValueKind.ADDRESS))
    store.add(resolve("dns", "2001:db8::1", ValueKind.ADDRESS))

    result = store.delete_matching(resolve("internal_ip4_dns", None, ValueKind.NONE))
    assert [r.value for r in result.deleted] == [b"\x08\x08\x08\x08"]
    assert [r.type_code for r in store.list()] == [10]


def test_delete_with_value_is_exact(store: AttributeStore) -> None:
    store.add(resolve("dns", "8.8.8.8", ValueKind.ADDRESS))
    store.add(resolve("dns", "8.8.4.4", ValueKind.ADDRESS))

    result = store.delete_matching(resolve("dns", "8.8.4.4", ValueKind.ADDRESS))
    assert [r.value for r in result.deleted] == [b"\x08\x08\x04\x04"]
    assert [r.value for r in store.list()] == [b"\x08\x08\x08\x08"]


def test_delete_all_banners_reports_values(store: AttributeStore) -> None:
    store.add(resolve("banner", "one", ValueKind.STRING))
    store.add(resolve("unity_banner", "two", ValueKind.STRING))

    result = store.delete_matching(resolve("banner", None, ValueKind.NONE))
    assert result.deleted_count == 2
    assert [r.value for r in result.deleted] == [b"one", b"two"]


def test_delete_without_match_is_empty(store: AttributeStore) -> None:
    result = store.delete_matching(resolve("banner", None, ValueKind.NONE))
    assert result.deleted_count == 0
    assert result.already_gone == ()


def test_delete_queries_by_id() -> None:
    database = FakeDatabase(rows=[(7, 3, b"\x08\x08\x08\x08"), (9, 10, b"\x00" * 16)])
    result = AttributeStore(database).delete_matching(resolve("dns", None, ValueKind.NONE))

    assert result.deleted_count == 2
    select_sql, select_params = database.statements[0]
    assert "type = ? OR type = ?" in select_sql
    assert select_params == (3, 10)
    deletes = [params for sql, params in database.statements if sql.startswith("DELETE")]
    assert deletes == [(7,), (9,)]


def test_zero_rows_deleted_is_already_gone() -> None:
    database = FakeDatabase(rows=[(7, 28672, b"a"), (8, 28672, b"b")], delete_results=[0, 1])
    result = AttributeStore(database).delete_matching(resolve("banner", None, ValueKind.NONE))

    assert [r.id for r in result.already_gone] == [7]
    assert [r.id for r in result.deleted] == [8]


def test_failed_delete_aborts_and_reports_progress() -> None:
    failure = PersistenceError("disk I/O error", operation="execute")
    database = FakeDatabase(
        rows=[(1, 28672, b"a"), (2, 28672, b"b"), (3, 28672, b"c")],
        delete_results=[1, failure],
    )
    with pytest.raises(PersistenceError) as exc:
        AttributeStore(database).delete_matching(resolve("banner", None, ValueKind.NONE))

    assert exc.value.operation == "delete"
    assert exc.value.record.id == 2
    assert [r.id for r in exc.value.deleted] == [1]
    deletes = [params for sql, params in database.statements if sql.startswith("DELETE")]
    assert deletes == [(1,), (2,)]


def test_delete_affecting_several_rows_is_an_error() -> None:
    database = FakeDatabase(rows=[(1, 28672, b"a")], delete_results=[2])
    with pytest.raises(PersistenceError):
        AttributeStore(database).delete_matching(resolve("banner", None, ValueKind.NONE))


class FailingSecondDelete(SQLiteDatabase):
    def __init__(self, path: Path) -> None:
        super().__init__(path)
        self.deletes = 0

    def execute(self, sql: str, *params):
        if sql.startswith("DELETE"):
            self.deletes += 1
            if self.deletes == 2:
                raise PersistenceError("simulated failure", operation="execute")
        return super().execute(sql, *params)


def _seed(store: AttributeStore) -> None:
    store.ensure_schema()
    for text in ("one", "two", "three"):
        store.add(resolve("banner", text, ValueKind.STRING))


def test_partial_delete_stays_committed(tmp_path: Path) -> None:
    database = FailingSecondDelete(tmp_path / "pool.db")
    store = AttributeStore(database)
    _seed(store)

    with pytest.raises(PersistenceError) as exc:
        store.delete_matching(resolve("banner", None, ValueKind.NONE))

    assert [r.value for r in exc.value.deleted] == [b"one"]
    assert [r.value for r in store.list()] == [b"two", b"three"]


def test_transactional_delete_rolls_back(tmp_path: Path) -> None:
    database = FailingSecondDelete(tmp_path / "pool.db")
    store = AttributeStore(database, transactional=True)
    _seed(store)

    with pytest.raises(PersistenceError) as exc:
        store.delete_matching(resolve("banner", None, ValueKind.NONE))

    assert exc.value.deleted == ()
    assert [r.value for r in store.list()] == [b"one", b"two", b"three"]


def test_transactional_delete_commits(tmp_path: Path) -> None:
    database = SQLiteDatabase(tmp_path / "pool.db")
    store = AttributeStore(database, transactional=True)
    _seed(store)

    result = store.delete_matching(ResolvedAttribute("banner", ValueKind.STRING, 28672))
    assert result.deleted_count == 3
    assert list(store.list()) == []
