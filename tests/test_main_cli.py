"""Tests for the command line entry point."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from unittest import TestCase
from unittest.mock import MagicMock, patch

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import main as cli_main  # pylint: disable=wrong-import-position
from stock_forecaster.app import RunResult  # noqa: E402

CSV = (
    "Date,Open,High,Low,Close,Adj Close,Volume\n"
    "2024-01-02,14.0,14.5,13.5,14.0,14.0,100\n"
    "2024-01-03,13.0,13.5,12.5,13.0,13.0,110\n"
    "2024-01-04,12.0,12.5,11.5,12.0,12.0,120\n"
    "2024-01-05,11.0,11.5,10.5,11.0,11.0,130\n"
    "2024-01-08,10.0,10.5,9.5,10.0,10.0,140\n"
)
FAST = ["--runs", "2", "--trees", "3", "--days", "3", "--trials", "40", "--seed", "5"]


class ParseArgsTests(TestCase):
    """Verify the CLI argument parsing behaviour."""

    def test_defaults(self) -> None:
        args = cli_main.parse_args([])
        self.assertEqual(args.files, ["-"])
        self.assertIsNone(args.runs)
        self.assertIsNone(args.seed)
        self.assertFalse(args.json)
        self.assertEqual(args.log_level, "WARNING")

    def test_custom_values(self) -> None:
        args = cli_main.parse_args(
            [
                "a.csv",
                "b.csv",
                "--runs",
                "4",
                "--trees",
                "20",
                "--feature-subset",
                "3",
                "--train-fraction",
                "0.8",
                "--trials",
                "1000",
                "--jobs",
                "-1",
                "--timeout",
                "2.5",
                "--json",
            ]
        )
        self.assertEqual(args.files, ["a.csv", "b.csv"])
        self.assertEqual(args.runs, 4)
        self.assertEqual(args.trees, 20)
        self.assertEqual(args.feature_subset, 3)
        self.assertEqual(args.train_fraction, 0.8)
        self.assertEqual(args.trials, 1000)
        self.assertEqual(args.jobs, -1)
        self.assertEqual(args.timeout, 2.5)
        self.assertTrue(args.json)


class MainDispatchTests(TestCase):
    """Ensure overrides reach the application and exit codes follow results."""

    def test_overrides_are_forwarded(self) -> None:
        app = MagicMock()
        app.run.return_value = [RunResult(source="x.csv", status="ok", payload={"direction": "up"})]
        with patch.object(cli_main, "StockForecasterApplication") as app_cls, patch.object(
            cli_main, "format_result", return_value=""
        ):
            app_cls.from_environment.return_value = app
            code = cli_main.main(["x.csv", "--runs", "3", "--seed", "11"])

        self.assertEqual(code, 0)
        kwargs = app_cls.from_environment.call_args.kwargs
        self.assertEqual(kwargs["runs"], 3)
        self.assertEqual(kwargs["random_state"], 11)
        self.assertIsNone(kwargs["n_trees"])
        app.run.assert_called_once_with(["x.csv"])

    def test_invalid_configuration_exits_with_two(self) -> None:
        with patch("sys.stderr"):
            self.assertEqual(cli_main.main(["x.csv", "--runs", "0"]), 2)


def test_main_prints_both_forecasts(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "falling.csv"
    path.write_text(CSV, encoding="utf-8")

    code = cli_main.main([str(path), *FAST])

    out = capsys.readouterr().out
    assert code == 0
    assert "Monte Carlo methods predict a price of" in out
    assert "The Random Forest predicts a decrease with a test accuracy of 100.00%!" in out


def test_main_json_output_and_failure_exit_code(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "falling.csv"
    path.write_text(CSV, encoding="utf-8")

    code = cli_main.main([str(path), str(tmp_path / "missing.csv"), "--json", *FAST])

    payload = json.loads(capsys.readouterr().out)
    assert code == 1
    assert [item["status"] for item in payload] == ["ok", "error"]
    assert payload[0]["direction"] == "down"
    assert payload[0]["source"] == str(path)
