"""Tests for XcSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from xcclean.config.settings import XcSettings


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XCCLEAN_CONFIG", str(tmp_path / "absent.toml"))
    for var in ("XCCLEAN_QUIET", "XCCLEAN_PATHS__HOME", "XCCLEAN_CLEAN__USE_TRASH"):
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_all_defaults(self) -> None:
        settings = XcSettings.from_cli()
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.clean.confirm is True
        assert settings.clean.use_trash is False
        assert settings.history.enabled is True
        assert settings.history.keep_runs == 100
        assert settings.scan.exclude == []
        assert settings.home == Path.home()

    def test_frozen(self) -> None:
        settings = XcSettings.from_cli()
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_derived_paths(self, tmp_path: Path) -> None:
        settings = XcSettings.from_cli(paths={"home": tmp_path})
        assert settings.state_dir == tmp_path / ".xcclean"
        assert settings.trash_dir == tmp_path / ".Trash"
        assert settings.history_db == tmp_path / ".xcclean" / "history.db"
        assert settings.plugins_dir == tmp_path / ".xcclean" / "plugins"

    def test_explicit_state_dir(self, tmp_path: Path) -> None:
        settings = XcSettings.from_cli(paths={"home": tmp_path, "state_dir": tmp_path / "state"})
        assert settings.history_db == tmp_path / "state" / "history.db"


class TestTomlSource:
    def test_explicit_config_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "my.toml"
        cfg.write_text('[clean]\nuse_trash = true\nmin_size = "10MB"\n[scan]\nexclude = ["archives"]\n')
        settings = XcSettings.from_cli(config_path=str(cfg))
        assert settings.config_path == cfg
        assert settings.clean.use_trash is True
        assert settings.clean.min_size == 10_000_000
        assert settings.clean.confirm is True  # default preserved
        assert settings.scan.exclude == ["archives"]

    def test_env_config_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        cfg = tmp_path / "env.toml"
        cfg.write_text("[history]\nenabled = false\n")
        monkeypatch.setenv("XCCLEAN_CONFIG", str(cfg))
        settings = XcSettings.from_cli()
        assert settings.history.enabled is False

    def test_missing_explicit_path_uses_defaults(self, tmp_path: Path) -> None:
        settings = XcSettings.from_cli(config_path=str(tmp_path / "nope.toml"))
        assert settings.config_path is None
        assert settings.clean.confirm is True

    def test_invalid_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "bad.toml"
        cfg.write_text("[clean\nconfirm = ")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            XcSettings.from_cli(config_path=str(cfg))

    def test_negative_age_rejected(self, tmp_path: Path) -> None:
        cfg = tmp_path / "neg.toml"
        cfg.write_text("[clean]\nolder_than_days = -1\n")
        with pytest.raises(Exception):
            XcSettings.from_cli(config_path=str(cfg))


class TestPriority:
    def test_cli_flags_override(self) -> None:
        settings = XcSettings.from_cli(json_output=True, quiet=True, verbose=True)
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.verbose is True

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        cfg = tmp_path / "c.toml"
        cfg.write_text("[clean]\nuse_trash = false\n")
        monkeypatch.setenv("XCCLEAN_CLEAN__USE_TRASH", "true")
        settings = XcSettings.from_cli(config_path=str(cfg))
        assert settings.clean.use_trash is True

    def test_nested_env_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XCCLEAN_PATHS__HOME", str(tmp_path))
        settings = XcSettings.from_cli()
        assert settings.home == tmp_path

    def test_env_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XCCLEAN_QUIET", "true")
        settings = XcSettings.from_cli()
        assert settings.quiet is True
