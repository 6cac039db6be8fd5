import pytest

from leadhub.app.core.errors import StorageError
from leadhub.app.db.gateway import Gateway, WriteResult
from leadhub.app.db.session import build_engine


@pytest.fixture
def gateway(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'gateway.db'}")
    gw = Gateway(engine)
    gw.exec_write("CREATE TABLE parents (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL UNIQUE)")
    gw.exec_write(
        "CREATE TABLE children (id INTEGER PRIMARY KEY AUTOINCREMENT, "
        "parent_id INTEGER NOT NULL REFERENCES parents(id) ON DELETE CASCADE)"
    )
    yield gw
    engine.dispose()


def test_exec_write_reports_inserted_id_and_count(gateway):
    first = gateway.exec_write("INSERT INTO parents (name) VALUES (:name)", {"name": "a"})
    second = gateway.exec_write("INSERT INTO parents (name) VALUES (:name)", {"name": "b"})
    assert first == WriteResult(inserted_id=1, affected_count=1)
    assert second.inserted_id == 2

    updated = gateway.exec_write("UPDATE parents SET name = name || '!'")
    assert updated.affected_count == 2


def test_exec_rows_and_exec_one(gateway):
    gateway.exec_write("INSERT INTO parents (name) VALUES ('a'), ('b')")
    assert gateway.exec_rows("SELECT name FROM parents ORDER BY id") == [{"name": "a"}, {"name": "b"}]
    assert gateway.exec_one("SELECT name FROM parents WHERE name = :n", {"n": "b"}) == {"name": "b"}
    assert gateway.exec_one("SELECT name FROM parents WHERE name = 'zzz'") is None


def test_constraint_violation_raises_storage_error(gateway):
    gateway.exec_write("INSERT INTO parents (name) VALUES ('dup')")
    with pytest.raises(StorageError):
        gateway.exec_write("INSERT INTO parents (name) VALUES ('dup')")


def test_foreign_keys_are_enforced(gateway):
    with pytest.raises(StorageError):
        gateway.exec_write("INSERT INTO children (parent_id) VALUES (99)")


def test_foreign_key_cascade(gateway):
    parent_id = gateway.exec_write("INSERT INTO parents (name) VALUES ('p')").inserted_id
    gateway.exec_write("INSERT INTO children (parent_id) VALUES (:p)", {"p": parent_id})
    gateway.exec_write("DELETE FROM parents WHERE id = :p", {"p": parent_id})
    assert gateway.exec_rows("SELECT * FROM children") == []


def test_transaction_commits_as_a_unit(gateway):
    with gateway.transaction():
        assert gateway.in_transaction
        parent_id = gateway.exec_write("INSERT INTO parents (name) VALUES ('tx')").inserted_id
        gateway.exec_write("INSERT INTO children (parent_id) VALUES (:p)", {"p": parent_id})
    assert not gateway.in_transaction
    assert len(gateway.exec_rows("SELECT * FROM children")) == 1


def test_transaction_rolls_back_on_error(gateway):
    with pytest.raises(StorageError):
        with gateway.transaction():
            gateway.exec_write("INSERT INTO parents (name) VALUES ('kept?')")
            gateway.exec_write("INSERT INTO children (parent_id) VALUES (12345)")
    assert gateway.exec_rows("SELECT * FROM parents") == []


def test_transaction_rolls_back_on_application_error(gateway):
    with pytest.raises(RuntimeError):
        with gateway.transaction():
            gateway.exec_write("INSERT INTO parents (name) VALUES ('gone')")
            raise RuntimeError("boom")
    assert gateway.exec_rows("SELECT * FROM parents") == []


def test_nested_transaction_joins_outer(gateway):
    with pytest.raises(RuntimeError):
        with gateway.transaction():
            with gateway.transaction():
                gateway.exec_write("INSERT INTO parents (name) VALUES ('inner')")
            raise RuntimeError("outer fails")
    assert gateway.exec_rows("SELECT * FROM parents") == []
