"""Tests for the persistent client session."""

from tumbi.client.session import SessionContext


def test_save_and_load(tmp_path):
    path = tmp_path / "session.json"
    SessionContext(path).save("abc", {"id": 3, "name": "Hana"})

    restored = SessionContext(path)

    assert restored.load() is True
    assert restored.token == "abc"
    assert restored.user_id == 3


def test_clear_removes_file(tmp_path):
    path = tmp_path / "session.json"
    session = SessionContext(path)
    session.save("abc", {"id": 3})

    session.clear()

    assert not path.exists()
    assert session.is_authenticated is False
    assert session.user is None


def test_unreadable_file_is_ignored(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")

    session = SessionContext(path)

    assert session.load() is False
    assert session.is_authenticated is False


def test_update_user_requires_token(tmp_path):
    session = SessionContext(tmp_path / "session.json")

    session.update_user({"id": 1})

    assert session.user is None


def test_memory_only_session():
    session = SessionContext()
    session.save("abc", {"id": 1})

    assert session.load() is False
    assert session.is_authenticated is True
    session.clear()
    assert session.token is None
