"""CLI commands run against an in-memory database."""

import pytest
from sqlalchemy import Engine
from sqlmodel import Session, select
from typer.testing import CliRunner

from src.cli import app, db_commands, market_commands
from src.farmconnect.core.services import DbSessionService
from src.farmconnect.entities.core.profile.table import ProfileTable
from src.farmconnect.entities.service.market.table import MarketplaceItemTable

runner = CliRunner()


@pytest.fixture
def cli_database(engine: Engine, monkeypatch: pytest.MonkeyPatch) -> DbSessionService:
    database = DbSessionService(engine=engine)
    monkeypatch.setattr(db_commands, "get_database_service", lambda: database)
    monkeypatch.setattr(market_commands, "get_database_service", lambda: database)
    return database


class TestDbCommands:
    def test_seed_creates_demo_accounts(self, cli_database: DbSessionService, engine: Engine):
        result = runner.invoke(app, ["db", "seed"])

        assert result.exit_code == 0, result.output
        assert "Created 4 accounts and 6 products" in result.output
        with Session(engine) as session:
            assert len(session.exec(select(ProfileTable)).all()) == 4

    def test_seed_twice_is_a_noop(self, cli_database: DbSessionService):
        runner.invoke(app, ["db", "seed"])

        result = runner.invoke(app, ["db", "seed"])

        assert result.exit_code == 0
        assert "already present" in result.output

    def test_reset_without_confirmation_aborts(self, cli_database: DbSessionService):
        result = runner.invoke(app, ["db", "reset"], input="n\n")
        assert result.exit_code == 1
        assert "Aborted" in result.output


class TestMarketCommands:
    def test_show_without_data(self, cli_database: DbSessionService):
        result = runner.invoke(app, ["market", "show"])

        assert result.exit_code == 0
        assert "No stored market prices" in result.output

    def test_refresh_then_show(self, cli_database: DbSessionService, engine: Engine):
        result = runner.invoke(app, ["market", "refresh"])

        assert result.exit_code == 0, result.output
        with Session(engine) as session:
            assert session.exec(select(MarketplaceItemTable)).first() is not None

        result = runner.invoke(app, ["market", "show", "--limit", "3"])
        assert result.exit_code == 0
        assert "Stored market prices" in result.output
