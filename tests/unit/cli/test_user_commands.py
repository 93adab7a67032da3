"""Tests for the userstore CLI."""

from collections.abc import Callable, Iterator

import pytest
from loguru import logger
from typer.testing import CliRunner

from userstore.cli import app
from userstore.core.services.database.db_session import DbSessionService
from userstore.core.services.user.user_store import UserRecordStore
from userstore.runtime.config.config_data import ConfigData
from userstore.runtime.context import with_context

runner = CliRunner()


@pytest.fixture
def cli_config(make_config: Callable[..., ConfigData]) -> Iterator[ConfigData]:
    """Run CLI commands against a fresh database file."""
    config = make_config(db_name="cli.db")
    with with_context(config):
        result = runner.invoke(app, ["init-db"])
        assert result.exit_code == 0, result.output
        yield config
    logger.remove()


@pytest.fixture
def cli_store(cli_config: ConfigData) -> Iterator[UserRecordStore]:
    service = DbSessionService(cli_config)
    yield UserRecordStore(service, case_sensitive_usernames=True)
    service.dispose()


class TestInitDb:
    def test_init_db_reports_success(self, cli_config: ConfigData):
        result = runner.invoke(app, ["init-db"])

        assert result.exit_code == 0
        assert "Database initialized" in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])

        assert "users" in result.output
        assert "init-db" in result.output


class TestUsersAdd:
    def test_add_user(self, cli_store: UserRecordStore):
        result = runner.invoke(
            app, ["users", "add", "alice", "--password", "p1", "--phone", "5551234", "--admin"]
        )

        assert result.exit_code == 0, result.output
        assert "Created user 'alice' with ID 1" in result.output
        user = cli_store.find_by_username("alice")
        assert user.password == "p1"
        assert user.phone == 5551234
        assert user.admin is True

    def test_add_user_without_optional_flags(self, cli_store: UserRecordStore):
        result = runner.invoke(app, ["users", "add", "bob", "--password", "p2"])

        assert result.exit_code == 0, result.output
        user = cli_store.find_by_username("bob")
        assert user.phone is None
        assert user.admin is None

    def test_password_prompt(self, cli_store: UserRecordStore):
        result = runner.invoke(app, ["users", "add", "carol"], input="hidden\n")

        assert result.exit_code == 0, result.output
        assert cli_store.find_by_username("carol").password == "hidden"

    def test_duplicate_username(self, cli_store: UserRecordStore):
        cli_store.create({"username": "alice", "password": "p1"})

        result = runner.invoke(app, ["users", "add", "alice", "--password", "p2"])

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_blank_username(self, cli_config: ConfigData):
        result = runner.invoke(app, ["users", "add", "  ", "--password", "p"])

        assert result.exit_code == 1
        assert "Invalid user record" in result.output


class TestUsersShowAndList:
    def test_show_user(self, cli_store: UserRecordStore):
        cli_store.create({"username": "dave", "password": "p", "phone": 5550101})

        result = runner.invoke(app, ["users", "show", "dave"])

        assert result.exit_code == 0
        assert "dave" in result.output
        assert "5550101" in result.output

    def test_show_missing_user(self, cli_config: ConfigData):
        result = runner.invoke(app, ["users", "show", "nobody"])

        assert result.exit_code == 1
        assert "No user named 'nobody'" in result.output

    def test_list_users(self, cli_store: UserRecordStore):
        for name in ("erin", "frank"):
            cli_store.create({"username": name, "password": "p"})

        result = runner.invoke(app, ["users", "list"])

        assert result.exit_code == 0
        assert "erin" in result.output
        assert "frank" in result.output
        assert "Found 2 users" in result.output

    def test_list_empty(self, cli_config: ConfigData):
        result = runner.invoke(app, ["users", "list"])

        assert result.exit_code == 0
        assert "No users found" in result.output


class TestUsersUpdate:
    def test_update_user(self, cli_store: UserRecordStore):
        user = cli_store.create({"username": "gina", "password": "p", "phone": 1})

        result = runner.invoke(
            app, ["users", "update", str(user.id), "--username", "georgina", "--clear-phone"]
        )

        assert result.exit_code == 0, result.output
        updated = cli_store.get(user.id)
        assert updated.username == "georgina"
        assert updated.phone is None

    def test_update_missing_user(self, cli_config: ConfigData):
        result = runner.invoke(app, ["users", "update", "99", "--password", "x"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_update_conflict(self, cli_store: UserRecordStore):
        cli_store.create({"username": "hank", "password": "p"})
        other = cli_store.create({"username": "ivan", "password": "p"})

        result = runner.invoke(app, ["users", "update", str(other.id), "--username", "hank"])

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_phone_options_are_exclusive(self, cli_config: ConfigData):
        result = runner.invoke(
            app, ["users", "update", "1", "--phone", "5", "--clear-phone"]
        )

        assert result.exit_code == 2
        assert "mutually exclusive" in result.output


class TestUsersDelete:
    def test_delete_with_force(self, cli_store: UserRecordStore):
        user = cli_store.create({"username": "judy", "password": "p"})

        result = runner.invoke(app, ["users", "delete", str(user.id), "--force"])

        assert result.exit_code == 0, result.output
        assert cli_store.find_by_username("judy") is None

    def test_delete_declined(self, cli_store: UserRecordStore):
        user = cli_store.create({"username": "kim", "password": "p"})

        result = runner.invoke(app, ["users", "delete", str(user.id)], input="n\n")

        assert result.exit_code == 0
        assert "Aborted" in result.output
        assert cli_store.get(user.id) is not None

    def test_delete_missing_user(self, cli_config: ConfigData):
        result = runner.invoke(app, ["users", "delete", "42", "--force"])

        assert result.exit_code == 1
        assert "not found" in result.output
