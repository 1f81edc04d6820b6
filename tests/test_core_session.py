"""
Tests for hrms_portal/core/session.py - session lifecycle and persistence.
"""
import json

from conftest import ADMIN_USER, EMPLOYEE_USER


class TestFileSessionStore:
    """Test the JSON file store."""

    def test_write_then_read(self, tmp_path):
        """Token and user survive a round trip through the file."""
        from hrms_portal.core.session import FileSessionStore

        store = FileSessionStore(str(tmp_path / "nested" / "session.json"))
        store.write("tok", {"_id": "u1", "email": "a@example.com"})

        assert store.read() == ("tok", {"_id": "u1", "email": "a@example.com"})

    def test_missing_file_reads_as_no_session(self, tmp_path):
        from hrms_portal.core.session import FileSessionStore

        assert FileSessionStore(str(tmp_path / "absent.json")).read() is None

    def test_corrupt_file_reads_as_no_session(self, tmp_path):
        """A half-written file is ignored rather than crashing startup."""
        from hrms_portal.core.session import FileSessionStore

        path = tmp_path / "session.json"
        path.write_text("{not json")

        assert FileSessionStore(str(path)).read() is None

    def test_file_without_token_reads_as_no_session(self, tmp_path):
        from hrms_portal.core.session import FileSessionStore

        path = tmp_path / "session.json"
        path.write_text(json.dumps({"user": {"_id": "u1"}}))

        assert FileSessionStore(str(path)).read() is None

    def test_clear_removes_file(self, tmp_path):
        from hrms_portal.core.session import FileSessionStore

        path = tmp_path / "session.json"
        store = FileSessionStore(str(path))
        store.write("tok", {"_id": "u1"})
        store.clear()
        store.clear()

        assert not path.exists()


class TestSessionManager:
    """Test the unauthenticated/authenticated lifecycle."""

    def test_starts_unauthenticated(self, session):
        from hrms_portal.core.session import SessionState

        assert session.state == SessionState.UNAUTHENTICATED
        assert session.token is None
        assert session.user is None

    def test_login_persists_token_and_user(self, session):
        """Login writes both values to the store."""
        session.login("tok-1", ADMIN_USER)

        token, stored_user = session.store.read()
        assert token == "tok-1"
        assert stored_user["email"] == "admin@example.com"
        assert session.is_authenticated
        assert session.user.id == "u-admin"

    def test_login_without_token_fails(self, session):
        import pytest

        with pytest.raises(ValueError):
            session.login("", ADMIN_USER)

    def test_load_restores_stored_session(self):
        from hrms_portal.core.session import MemorySessionStore, SessionManager

        manager = SessionManager(MemorySessionStore("tok", EMPLOYEE_USER))

        restored = manager.load()

        assert restored is not None
        assert manager.token == "tok"
        assert manager.user.role_name == "employee"

    def test_load_discards_malformed_user(self):
        """A stored user that fails validation is cleared."""
        from hrms_portal.core.session import MemorySessionStore, SessionManager

        store = MemorySessionStore("tok", {"permissions": "not-a-list"})
        manager = SessionManager(store)

        assert manager.load() is None
        assert store.read() is None

    def test_logout_clears_store(self, admin_session):
        admin_session.logout()

        assert admin_session.store.read() is None
        assert not admin_session.is_authenticated

    def test_invalidate_clears_store(self, admin_session):
        admin_session.invalidate()

        assert admin_session.store.read() is None
        assert admin_session.token is None

    def test_refresh_user_keeps_token(self, admin_session):
        """A fresh user record replaces the stored one under the same token."""
        admin_session.refresh_user({**ADMIN_USER, "permissions": ["view_employees"]})

        token, stored_user = admin_session.store.read()
        assert token == "admin-token"
        assert stored_user["permissions"] == ["view_employees"]
        assert admin_session.user.permissions == ["view_employees"]

    def test_refresh_user_without_session_is_ignored(self, session):
        session.refresh_user(ADMIN_USER)

        assert session.store.read() is None

    def test_listeners_see_transitions(self, session):
        from hrms_portal.core.session import SessionState

        seen = []
        unsubscribe = session.subscribe(lambda state, _: seen.append(state))
        session.login("tok", ADMIN_USER)
        session.logout()
        unsubscribe()
        session.login("tok", ADMIN_USER)

        assert seen == [SessionState.AUTHENTICATED, SessionState.UNAUTHENTICATED]


class TestAuthorizationHelpers:
    """Test permission and role checks."""

    def test_permissions(self, employee_session):
        assert employee_session.has_permission("view_leaves_own")
        assert not employee_session.has_permission("manage_leaves")
        assert employee_session.has_any_permission(["manage_leaves", "view_leaves_own"])

    def test_role_from_populated_object(self, employee_session):
        """Roles may arrive as `{name}` objects; comparison ignores case."""
        assert employee_session.has_role("Employee")
        assert not employee_session.has_role("admin", "hr")

    def test_unauthenticated_has_nothing(self, session):
        assert not session.has_permission("view_employees")
        assert not session.has_role("admin")
