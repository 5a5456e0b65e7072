"""Tests for output mode selection."""

from __future__ import annotations

import json

from xcclean.output.formatters import OutputSettings, format_result
from xcclean.services.result import ServiceResult

RESULT = ServiceResult(
    ok=True,
    op="clean",
    data={
        "dry_run": False,
        "mode": "delete",
        "bytes_freed": 1_500_000,
        "items_removed": 2,
        "categories": [],
        "failed": [],
        "run_id": 1,
    },
)


class TestFormatResult:
    def test_default_is_rich(self) -> None:
        out = format_result(RESULT)
        assert "Freed: 1.5 MB from 2 items" in out

    def test_json(self) -> None:
        out = format_result(RESULT, settings=OutputSettings(json_output=True))
        parsed = json.loads(out)
        assert parsed["ok"] is True
        assert parsed["data"]["bytes_freed"] == 1_500_000

    def test_json_wins_over_quiet(self) -> None:
        out = format_result(RESULT, settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(out)["op"] == "clean"

    def test_quiet(self) -> None:
        assert format_result(RESULT, settings=OutputSettings(quiet=True)) == "1500000"
