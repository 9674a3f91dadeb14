#!/usr/bin/env python3
"""
Integration tests for the daybook CLI.

Runs the commands end to end against a temporary database: setup, users,
reference data, chapters and periods, days and the structured reports.
"""
import json

import pytest
import yaml
from click.testing import CliRunner

from daybook.database.cli import cli


class TestDaybookCLI:
    """Test CLI commands with a temporary database."""

    @pytest.fixture
    def runner(self):
        """Create Click test runner."""
        return CliRunner()

    @pytest.fixture
    def test_dirs(self, tmp_path):
        """Temporary database and log locations."""
        return {
            "db_path": tmp_path / "daybook.db",
            "log_dir": tmp_path / "logs",
        }

    def invoke_cli(self, runner, test_dirs, args, **kwargs):
        """Helper to invoke CLI with test configuration."""
        base_args = [
            "--db-path", str(test_dirs["db_path"]),
            "--log-dir", str(test_dirs["log_dir"]),
        ]
        return runner.invoke(cli, base_args + args, obj={}, **kwargs)

    @pytest.fixture
    def seeded(self, runner, test_dirs):
        """Database with user 1, a Work chapter (id 1) and one closed period."""
        steps = [
            ["user", "add", "Ada", "--timezone", "UTC"],
            ["chapter", "add", "First job", "--category-id", "1"],
            ["period", "add", "1", "--start", "2024-01-01", "--end", "2024-01-10"],
        ]
        for args in steps:
            result = self.invoke_cli(runner, test_dirs, args)
            assert result.exit_code == 0, result.output
        return test_dirs

    def test_cli_help(self, runner):
        """Test that CLI help message works."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "chapter" in result.output
        assert "memories" in result.output

    def test_init_and_status(self, runner, test_dirs):
        """'init' creates the database, 'status' reports the head revision."""
        result = self.invoke_cli(runner, test_dirs, ["init"])
        assert result.exit_code == 0
        assert "Database ready!" in result.output
        assert test_dirs["db_path"].exists()
        assert (test_dirs["log_dir"] / "database.log").exists()

        result = self.invoke_cli(runner, test_dirs, ["status"])
        assert result.exit_code == 0
        assert "3c1d7a9e5b20" in result.output
        assert "up_to_date" in result.output

    def test_user_and_reference_data(self, runner, test_dirs):
        """A new user gets the default categories and moods."""
        result = self.invoke_cli(runner, test_dirs, ["user", "add", "Ada"])
        assert result.exit_code == 0
        assert "Created user 1: Ada (UTC)" in result.output

        result = self.invoke_cli(runner, test_dirs, ["category", "list"])
        assert result.exit_code == 0
        assert "Work" in result.output
        assert "Finance" in result.output

        result = self.invoke_cli(
            runner, test_dirs, ["mood", "add", "Calm", "--color", "#00aa00", "--score", "6"]
        )
        assert result.exit_code == 0
        assert "Calm (6)" in result.output

        result = self.invoke_cli(runner, test_dirs, ["mood", "list"])
        assert "Calm" in result.output
        assert "#00AA00" in result.output

    def test_invalid_timezone(self, runner, test_dirs):
        result = self.invoke_cli(
            runner, test_dirs, ["user", "add", "Ada", "--timezone", "Mars/Olympus"]
        )
        assert result.exit_code == 1
        assert "Unknown timezone" in result.output

    def test_period_lifecycle(self, runner, seeded):
        """Periods can be added, closed and listed."""
        result = self.invoke_cli(runner, seeded, ["period", "add", "1", "--start", "2024-02-01"])
        assert result.exit_code == 0
        assert "active" in result.output

        result = self.invoke_cli(runner, seeded, ["period", "close", "2", "--end", "2024-02-20"])
        assert result.exit_code == 0
        assert "2024-02-01 → 2024-02-20" in result.output

        result = self.invoke_cli(runner, seeded, ["chapter", "list"])
        assert "First job (Work)" in result.output
        assert "2024-01-01 → 2024-01-10" in result.output

    def test_overlap_is_rejected(self, runner, seeded):
        """An overlapping closed period exits with code 1."""
        result = self.invoke_cli(
            runner, seeded, ["period", "add", "1", "--start", "2024-01-05", "--end", "2024-01-20"]
        )
        assert result.exit_code == 1
        assert "PeriodOverlapError" in result.output

    def test_shared_boundary_is_accepted(self, runner, seeded):
        result = self.invoke_cli(
            runner, seeded, ["period", "add", "1", "--start", "2024-01-10", "--end", "2024-01-20"]
        )
        assert result.exit_code == 0

    def test_error_logged_to_file(self, runner, seeded):
        self.invoke_cli(runner, seeded, ["chapter", "delete", "1"])
        errors = (seeded["log_dir"] / "errors.log").read_text()
        assert "InUseError" in errors

    def test_reopen_conflicts_with_end(self, runner, seeded):
        result = self.invoke_cli(
            runner, seeded, ["period", "update", "1", "--end", "2024-01-12", "--reopen"]
        )
        assert result.exit_code != 0

    def test_day_commands(self, runner, seeded):
        result = self.invoke_cli(runner, seeded, ["day", "set", "2024-01-05", "--mood", "1"])
        assert result.exit_code == 0
        assert "2024-01-05: Great" in result.output

        result = self.invoke_cli(
            runner,
            seeded,
            ["day", "media", "2024-01-05", "photos/a.jpg", "--file-name", "a.jpg", "--main"],
        )
        assert result.exit_code == 0

        result = self.invoke_cli(runner, seeded, ["day", "show", "2024-01-05"])
        assert "Mood: Great" in result.output
        assert "a.jpg ★" in result.output

    def test_chapter_show(self, runner, seeded):
        self.invoke_cli(runner, seeded, ["day", "set", "2024-01-05", "--mood", "1"])
        result = self.invoke_cli(runner, seeded, ["chapter", "show", "1"])
        assert result.exit_code == 0
        details = json.loads(result.output)
        assert details["moodStats"][0]["moodName"] == "Great"
        assert details["moodStats"][0]["percentage"] == 100

    @pytest.mark.parametrize("fmt, load", [("json", json.loads), ("yaml", yaml.safe_load)])
    def test_stats_overview(self, runner, seeded, fmt, load):
        self.invoke_cli(runner, seeded, ["day", "set", "2024-01-05", "--mood", "1"])
        self.invoke_cli(runner, seeded, ["day", "set", "2024-01-06", "--mood", "4"])

        result = self.invoke_cli(runner, seeded, ["stats", "overview", "--format", fmt])
        assert result.exit_code == 0
        overview = load(result.output)
        assert overview["totalDaysWithMood"] == 2
        assert overview["averageMoodScore"] == 6.0
        assert overview["bestCategory"]["name"] == "Work"
        assert overview["weekdayInsights"] is None

    @pytest.mark.parametrize("fmt, load", [("json", json.loads), ("yaml", yaml.safe_load)])
    def test_memories(self, runner, seeded, fmt, load):
        self.invoke_cli(runner, seeded, ["day", "set", "2024-03-31", "--mood", "2"])
        self.invoke_cli(runner, seeded, ["day", "set", "2024-02-29", "--mood", "1"])

        result = self.invoke_cli(
            runner, seeded, ["memories", "day", "--date", "2024-03-31", "--format", fmt]
        )
        assert result.exit_code == 0
        context = load(result.output)
        assert context["type"] == "day"
        assert [m["date"] for m in context["memories"]] == ["2024-02-29"]

        result = self.invoke_cli(
            runner, seeded, ["memories", "week", "--date", "2024-03-31", "--format", fmt]
        )
        assert load(result.output)["baseWeek"] == {"start": "2024-03-25", "end": "2024-03-31"}

    def test_user_id_option(self, runner, seeded):
        self.invoke_cli(runner, seeded, ["user", "add", "Bob"])
        result = self.invoke_cli(runner, seeded, ["--user-id", "2", "chapter", "list"])
        assert result.exit_code == 0
        assert "No chapters." in result.output

    def test_day_location(self, runner, seeded):
        result = self.invoke_cli(
            runner,
            seeded,
            ["day", "location", "2024-01-05", "--name", "Lisbon", "--lat", "38.72", "--lon", "-9.14"],
        )
        assert result.exit_code == 0, result.output
        assert "2024-01-05: Lisbon" in result.output

        result = self.invoke_cli(runner, seeded, ["day", "show", "2024-01-05"])
        assert "Location: Lisbon (38.72, -9.14)" in result.output

        result = self.invoke_cli(runner, seeded, ["day", "location", "2024-01-05", "--clear"])
        assert "no location" in result.output

    def test_day_location_out_of_range(self, runner, seeded):
        result = self.invoke_cli(runner, seeded, ["day", "location", "2024-01-05", "--lat", "91"])
        assert result.exit_code == 1
        assert "latitude must be between -90 and 90" in result.output

    def test_day_location_needs_a_field(self, runner, seeded):
        result = self.invoke_cli(runner, seeded, ["day", "location", "2024-01-05"])
        assert result.exit_code != 0

    def test_timeline_range(self, runner, seeded):
        self.invoke_cli(runner, seeded, ["day", "set", "2024-01-05", "--mood", "1"])
        result = self.invoke_cli(
            runner, seeded, ["timeline", "range", "--from", "2024-01-01", "--to", "2024-01-31"]
        )
        assert result.exit_code == 0, result.output
        timeline = json.loads(result.output)
        assert timeline["periods"][0]["chapter"]["title"] == "First job"
        assert timeline["periods"][0]["endDate"] == "2024-01-10"
        assert [d["date"] for d in timeline["days"]] == ["2024-01-05"]

    def test_timeline_inverted_range(self, runner, seeded):
        result = self.invoke_cli(
            runner, seeded, ["timeline", "range", "--from", "2024-02-01", "--to", "2024-01-01"]
        )
        assert result.exit_code == 1
        assert "InvalidDateRangeError" in result.output

    def test_timeline_week(self, runner, seeded):
        result = self.invoke_cli(
            runner, seeded, ["timeline", "week", "--date", "2024-01-10", "--format", "yaml"]
        )
        assert result.exit_code == 0, result.output
        week = yaml.safe_load(result.output)
        assert (week["weekStart"], week["weekEnd"]) == ("2024-01-08", "2024-01-14")
        assert len(week["days"]) == 7

    def test_recommendations(self, runner, seeded):
        result = self.invoke_cli(runner, seeded, ["category", "recommendations"])
        assert "#0EA5E9  travel" in result.output

        result = self.invoke_cli(
            runner, seeded, ["category", "add-recommended", "travel", "Trips"]
        )
        assert result.exit_code == 0, result.output
        assert "Trips (#0EA5E9)" in result.output

        result = self.invoke_cli(runner, seeded, ["mood", "add-recommended", "good", "Fine"])
        assert "Fine (7)" in result.output

    def test_unknown_recommendation(self, runner, seeded):
        result = self.invoke_cli(runner, seeded, ["mood", "add-recommended", "meh", "Meh"])
        assert result.exit_code == 1
        assert "Unknown recommendation key" in result.output
