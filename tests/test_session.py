"""
Tests for Session: register/login/logout transitions and restore at startup.
"""
import json

import pytest

from taskboard.session import Session, SessionState
from taskboard.store import AUTH_KEY


@pytest.fixture
def session(api, store):
    return Session(api, store)


def _blob(store):
    raw = store.read_value(AUTH_KEY)
    return json.loads(raw) if raw is not None else None


class TestTransitions:

    def test_starts_anonymous(self, session):
        assert session.state == SessionState.ANONYMOUS
        assert not session.is_authenticated
        assert session.user is None
        assert session.token is None

    def test_register_authenticates_and_persists(self, session, store):
        response = session.register("alice", "pw1")
        assert response.success
        assert session.is_authenticated
        assert session.user.username == "alice"

        blob = _blob(store)
        assert blob["token"] == session.token
        assert blob["user"]["username"] == "alice"
        assert blob["user"]["password"] == ""

    def test_register_duplicate_stays_anonymous(self, session, api):
        api.register({"username": "alice", "password": "pw1"})
        response = session.register("alice", "other")
        assert not response.success
        assert response.error == "Username already exists"
        assert not session.is_authenticated

    def test_login(self, session, alice, store):
        user, _ = alice
        response = session.login("alice", "pw1")
        assert response.success
        assert session.user.id == user.id
        assert session.user.password == ""
        assert _blob(store)["token"] == session.token

    def test_bad_login_stays_anonymous(self, session, alice, store):
        response = session.login("alice", "wrong")
        assert not response.success
        assert not session.is_authenticated
        assert store.read_value(AUTH_KEY) is None

    def test_logout_clears_everything(self, session, store):
        session.register("alice", "pw1")
        session.logout()
        assert session.state == SessionState.ANONYMOUS
        assert session.user is None
        assert session.token is None
        assert store.read_value(AUTH_KEY) is None

    def test_logout_when_anonymous_is_harmless(self, session):
        session.logout()
        assert not session.is_authenticated

    def test_session_token_works_against_api(self, session, api):
        session.register("alice", "pw1")
        assert api.create_task(session.token, {"title": "Buy milk"}).success
        assert len(api.list_tasks(session.token).data) == 1

    def test_unexpected_api_error_is_reported_not_raised(self, session, api, monkeypatch):
        def explode(credentials):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(api, "login", explode)
        response = session.login("alice", "pw1")
        assert not response.success
        assert response.error == "An unexpected error occurred"
        assert not session.is_authenticated


class TestRestore:

    def test_nothing_to_restore(self, api, store):
        session = Session(api, store)
        assert session.restore_session() is False
        assert not session.is_authenticated

    def test_restore_previous_session(self, api, store):
        first = Session(api, store)
        first.register("alice", "pw1")

        second = Session(api, store)
        assert second.restore_session() is True
        assert second.is_authenticated
        assert second.user == first.user
        assert second.token == first.token

    def test_restore_does_not_revalidate_token(self, api, store):
        """Restored even if the token is garbage; the API rejects it later"""
        store.write_value(AUTH_KEY, json.dumps({
            "user": {"id": "user-1", "username": "alice", "password": "", "createdAt": "2024-01-01T00:00:00+00:00"},
            "token": "stale-token",
        }))
        session = Session(api, store)
        assert session.restore_session() is True
        assert session.token == "stale-token"
        assert api.list_tasks(session.token).error == "Invalid token"

    @pytest.mark.parametrize("raw", [
        "{not json",
        "[]",
        json.dumps({"user": None, "token": "t"}),
        json.dumps({"user": {"id": "u"}, "token": "t"}),
        json.dumps({"user": {"id": "u", "username": "alice"}}),
        json.dumps({"user": {"id": "u", "username": "alice"}, "token": 5}),
    ])
    def test_unparseable_blob_is_discarded(self, api, store, raw):
        store.write_value(AUTH_KEY, raw)
        session = Session(api, store)
        assert session.restore_session() is False
        assert not session.is_authenticated
        assert store.read_value(AUTH_KEY) is None
