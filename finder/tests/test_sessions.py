import pytest

from services.sessions import SessionRegistry


def test_create_and_get(tmdb_client):
    registry = SessionRegistry(tmdb_client)
    session_id, controller = registry.create()
    assert registry.get(session_id) is controller
    assert controller.client is tmdb_client


def test_unknown_session_raises(tmdb_client):
    with pytest.raises(KeyError):
        SessionRegistry(tmdb_client).get("missing")


def test_oldest_session_evicted(tmdb_client):
    registry = SessionRegistry(tmdb_client, max_sessions=2)
    first, _ = registry.create()
    second, _ = registry.create()
    registry.get(first)  # touch: second is now the oldest
    registry.create()

    assert len(registry) == 2
    registry.get(first)
    with pytest.raises(KeyError):
        registry.get(second)


def test_drop(tmdb_client):
    registry = SessionRegistry(tmdb_client)
    session_id, _ = registry.create()
    assert registry.drop(session_id) is True
    assert registry.drop(session_id) is False
