"""
Tests for the Typer CLI running against the mock API.
"""

import pendulum
import pytest
from typer.testing import CliRunner

from showingplanner.adapters.mock_api_client import MockShowingApiClient
from showingplanner.cli.app import app

runner = CliRunner()


@pytest.fixture
def mock_args(tmp_path):
    """Global options selecting the mock API without a config file."""
    return ["--mock", "--config", str(tmp_path / "missing.yaml")]


@pytest.fixture
def next_monday():
    return pendulum.today("America/Mexico_City").next(pendulum.MONDAY).to_date_string()


class TestCli:
    """Tests for CLI commands."""

    def test_hours(self, mock_args):
        result = runner.invoke(app, [*mock_args, "hours"])

        assert result.exit_code == 0
        assert "Monday" in result.output
        assert "closed" in result.output

    def test_slots(self, mock_args, next_monday):
        result = runner.invoke(app, [*mock_args, "slots", next_monday])

        assert result.exit_code == 0
        assert "09:00 - 10:00" in result.output
        assert "17:00 - 18:00" in result.output

    def test_slots_invalid_date(self, mock_args):
        result = runner.invoke(app, [*mock_args, "slots", "25/11/2024"])

        assert result.exit_code == 1
        assert "Invalid date" in result.output

    def test_slots_past_date(self, mock_args):
        result = runner.invoke(app, [*mock_args, "slots", "2000-01-03"])

        assert result.exit_code == 0
        assert "cannot be booked" in result.output

    def test_plan_tour(self, mock_args, next_monday):
        result = runner.invoke(app, [*mock_args, "plan-tour", next_monday, "10:00 - 11:00", "p1", "p2"])

        assert result.exit_code == 0
        assert "10:30" in result.output

    def test_plan_tour_too_long(self, mock_args, next_monday):
        result = runner.invoke(app, [*mock_args, "plan-tour", next_monday, "10:00 - 11:00", "p1", "p2", "p3"])

        assert result.exit_code == 1
        assert "90" in result.output

    def test_book_tour(self, mock_args, next_monday):
        result = runner.invoke(app, [*mock_args, "book", next_monday, "10:00 - 11:00", "p1", "p2", "--tour"])

        assert result.exit_code == 0
        assert "2 appointment(s) booked" in result.output

    def test_plan_tour_single_property(self, mock_args, next_monday):
        result = runner.invoke(app, [*mock_args, "plan-tour", next_monday, "10:00 - 11:00", "p1"])

        assert result.exit_code == 0
        assert "Single property" in result.output
        assert "without a tour id" in result.output
        assert "Tour " not in result.output

    def test_book_several_properties_without_tour(self, mock_args, next_monday):
        result = runner.invoke(app, [*mock_args, "book", next_monday, "10:00 - 11:00", "p1", "p2"])

        assert result.exit_code == 1
        assert "Individual mode" in result.output

    def test_book_tour_partial_failure(self, mock_args, next_monday, monkeypatch):
        monkeypatch.setattr(
            "showingplanner.cli.app.MockShowingApiClient",
            lambda **kwargs: MockShowingApiClient(failing_property_ids=["p2"], **kwargs),
        )

        result = runner.invoke(app, [*mock_args, "book", next_monday, "10:00 - 11:00", "p1", "p2", "--tour"])

        assert result.exit_code == 1
        assert "Tour incomplete" in result.output
        assert "p2" in result.output

    def test_book_unavailable_slot(self, mock_args, next_monday):
        result = runner.invoke(app, [*mock_args, "book", next_monday, "20:00 - 21:00", "p1"])

        assert result.exit_code == 1
        assert "not available" in result.output

    def test_missing_config_without_mock(self, tmp_path):
        result = runner.invoke(app, ["--config", str(tmp_path / "missing.yaml"), "hours"])

        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "showingplanner" in result.output
