"""
Tests for the veilleur CLI.

Usage:
    pytest tests/unit/presentation/test_cli.py
"""

import json
from unittest.mock import patch

from click.testing import CliRunner

from conftest import HASH_A, HASH_B, FakeExecutionService, FakeIndexService
from veilleur.cli import cli
from veilleur.config.settings import TrackingConfig, VeilleurConfig
from veilleur.di import DIContainer
from veilleur.domain.entities.receipt import Receipt


def _events(output: str) -> list:
    """Status events printed by the command, one JSON object per line."""
    events = []
    for line in output.splitlines():
        if line.startswith("{") and "transactionHash" in line:
            events.append(json.loads(line))
    return events


def _container(receipts, watermarks=(1_000,)) -> DIContainer:
    settings = VeilleurConfig(
        log_level="warning",
        json_logs=False,
        tracking=TrackingConfig(
            max_attempts=3, delay_ms=1, polling_interval_ms=1, timeout_ms=20
        ),
    )
    return DIContainer(
        settings=settings,
        execution_service=FakeExecutionService(receipts),
        index_service=FakeIndexService(watermarks),
    )


class TestTrackCommand:
    """Tests for `veilleur track`."""

    def test_prints_json_lines(self):
        container = _container([Receipt.pending(), Receipt.success(4)])

        with patch("veilleur.cli._build_container", return_value=container):
            result = CliRunner().invoke(cli, ["track", HASH_A, "-o", "mint"])

        assert result.exit_code == 0
        events = _events(result.output)
        assert [e["status"] for e in events] == ["pending", "pending", "confirmed"]
        assert container.execution_service.closed

    def test_failed_exits_non_zero(self):
        container = _container([Receipt.reverted(4, "Paused")])

        with patch("veilleur.cli._build_container", return_value=container):
            result = CliRunner().invoke(cli, ["track", HASH_A])

        assert result.exit_code == 1
        assert _events(result.output)[-1]["reason"] == "Paused"

    def test_invalid_hash(self):
        result = CliRunner().invoke(cli, ["track", "0x1"])
        assert result.exit_code == 2


class TestWaitCommand:
    """Tests for `veilleur wait`."""

    def test_all_confirmed(self):
        container = _container([Receipt.success(4)])

        with patch("veilleur.cli._build_container", return_value=container):
            result = CliRunner().invoke(cli, ["wait", HASH_A, HASH_B])

        assert result.exit_code == 0
        report = json.loads(result.output[result.output.index("{\n") :])
        assert set(report) == {HASH_A, HASH_B}

    def test_failure(self):
        container = _container([Receipt.pending()])

        with patch("veilleur.cli._build_container", return_value=container):
            result = CliRunner().invoke(cli, ["wait", HASH_A])

        assert result.exit_code == 1
        assert HASH_A in result.output
