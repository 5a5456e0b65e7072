"""Tests for HistoryService."""

from __future__ import annotations

from pathlib import Path

from tests.conftest import DERIVED_DATA_SIZE, make_env
from xcclean.infrastructure.environment import Environment
from xcclean.services.clean import CleanService
from xcclean.services.history import HistoryService


class TestHistory:
    def test_empty(self, env: Environment) -> None:
        result = HistoryService(env).history()
        assert result.ok
        assert result.data["runs"] == []
        assert result.data["count"] == 0
        assert result.data["totals"] == {"runs": 0, "bytes_freed": 0, "items_removed": 0}

    def test_after_clean(self, env: Environment) -> None:
        CleanService(env).clean(["derived_data"])
        CleanService(env).clean(["xcode_caches"])
        result = HistoryService(env).history()
        assert result.data["count"] == 2
        assert result.data["runs"][0]["categories"] == ["xcode_caches"]
        assert result.data["totals"]["bytes_freed"] == DERIVED_DATA_SIZE + 500

    def test_limit(self, env: Environment) -> None:
        CleanService(env).clean(["derived_data"])
        CleanService(env).clean(["xcode_caches"])
        assert HistoryService(env).history(limit=1).data["count"] == 1

    def test_invalid_limit(self, env: Environment) -> None:
        result = HistoryService(env).history(limit=0)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"

    def test_disabled(self, isolated: Path) -> None:
        env = make_env(history={"enabled": False})
        try:
            for result in (
                HistoryService(env).history(),
                HistoryService(env).show(1),
                HistoryService(env).clear(),
            ):
                assert not result.ok
                assert result.error is not None
                assert result.error.code == "HISTORY_DISABLED"
        finally:
            env.close()


class TestShow:
    def test_show_run(self, env: Environment) -> None:
        run_id = CleanService(env).clean(["derived_data"]).data["run_id"]
        result = HistoryService(env).show(run_id)
        assert result.ok
        assert result.op == "history_run"
        assert result.data["id"] == run_id
        assert [i["bytes"] for i in result.data["items"]] == [4000, 2000]
        assert result.data["items"][0]["path"].endswith("App-abc")

    def test_missing_run(self, env: Environment) -> None:
        result = HistoryService(env).show(42)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail["run_id"] == 42


class TestClear:
    def test_clear(self, env: Environment) -> None:
        CleanService(env).clean(["derived_data"])
        result = HistoryService(env).clear()
        assert result.ok
        assert result.data["runs_removed"] == 1
        assert HistoryService(env).history().data["count"] == 0


class TestUnavailableStore:
    def test_state_dir_is_a_file(self, isolated: Path) -> None:
        blocker = isolated / "not-a-dir"
        blocker.write_text("x")
        env = make_env(paths={"home": isolated, "state_dir": blocker})
        try:
            for result in (
                HistoryService(env).history(),
                HistoryService(env).show(1),
                HistoryService(env).clear(),
            ):
                assert not result.ok
                assert result.error is not None
                assert result.error.code == "HISTORY_UNAVAILABLE"
        finally:
            env.close()
