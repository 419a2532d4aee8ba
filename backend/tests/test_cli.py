"""
CLI command groups: bootstrap, users, perms, maintenance.
"""

from datetime import timedelta

from stockdesk.models import SessionToken, User
from stockdesk.services import session_service
from stockdesk.time_utils import utcnow


class TestSystemInit:

    def test_creates_default_admin_once(self, app, db_session):
        runner = app.test_cli_runner()

        result = runner.invoke(args=["system", "init"])
        assert result.exit_code == 0, result.output
        assert "Created admin: admin@inventory.com" in result.output

        admin = db_session.query(User).filter_by(email="admin@inventory.com").one()
        assert admin.role == "admin"

        result = runner.invoke(args=["system", "init"])
        assert result.exit_code == 0
        assert "Using existing admin" in result.output
        assert db_session.query(User).count() == 1


class TestUsersCommands:

    def test_create_and_list(self, app, db_session):
        runner = app.test_cli_runner()

        result = runner.invoke(args=[
            "users", "create",
            "--email", "mary@shop.local",
            "--name", "Mary",
            "--role", "salesgirl",
            "--password", "secret1",
        ])
        assert result.exit_code == 0, result.output

        result = runner.invoke(args=["users", "list"])
        assert "mary@shop.local" in result.output
        assert "salesgirl" in result.output

    def test_create_rejects_duplicate(self, app, db_session, manager_user):
        runner = app.test_cli_runner()

        result = runner.invoke(args=[
            "users", "create",
            "--email", "manager@inventory.com",
            "--name", "Copy",
            "--role", "manager",
            "--password", "secret1",
        ])

        assert result.exit_code != 0
        assert "Email already exists" in result.output


class TestPermsCommands:

    def test_list_for_role(self, app):
        result = app.test_cli_runner().invoke(args=["perms", "list", "--role", "salesgirl"])

        assert result.exit_code == 0
        assert "CREATE_SALE" in result.output
        assert "REVERSE_SALE" not in result.output


class TestMaintenanceCommands:

    def test_cleanup_sessions(self, app, db_session, manager_user):
        session, _token = session_service.create_session(manager_user.id)
        session.expires_at = utcnow() - timedelta(hours=1)
        db_session.commit()

        result = app.test_cli_runner().invoke(args=["maintenance", "cleanup-sessions"])

        assert result.exit_code == 0
        assert "Deleted 1 session tokens" in result.output
        assert db_session.query(SessionToken).count() == 0
