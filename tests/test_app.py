"""Tests covering the application bootstrap helpers."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import pytest

from matchlines import app
from matchlines.services.settings import Settings, SettingsStore
from matchlines.utils import logging as logging_utils


def test_parse_overrides_converts_field_types() -> None:
    overrides = app.parse_overrides(
        ["default_case_sensitive=on", "font_size=15", "new_document_prefix=Lines", "last_open_file=none"]
    )

    assert overrides == {
        "default_case_sensitive": True,
        "font_size": 15,
        "new_document_prefix": "Lines",
        "last_open_file": None,
    }


@pytest.mark.parametrize("entry", ["novalue", "=1", "unknown=1"])
def test_parse_overrides_rejects_bad_entries(entry: str) -> None:
    with pytest.raises(ValueError):
        app.parse_overrides([entry])


def test_parse_flag_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        app.parse_flag("maybe")


def test_dump_settings_writes_json(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")
    stream = io.StringIO()

    app.dump_settings(Settings(font_size=11), store, {"font_size": 11}, stream=stream)

    payload = json.loads(stream.getvalue())
    assert payload["settings"]["font_size"] == 11
    assert payload["meta"]["path"] == str(store.path)
    assert payload["meta"]["cli_overrides"] == ["font_size"]


def test_main_dump_settings_exits_before_ui(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("MATCHLINES_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setattr(app, "create_qapp", lambda: pytest.fail("UI should not start"))

    app.main(["--dump-settings", "--settings-path", str(tmp_path / "s.json"), "--set", "font_size=9"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["settings"]["font_size"] == 9


def test_main_rejects_invalid_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MATCHLINES_LOG_DIR", str(tmp_path / "logs"))

    with pytest.raises(SystemExit) as excinfo:
        app.main(["--set", "nonsense"])

    assert excinfo.value.code == 2


def test_setup_logging_writes_to_log_dir(tmp_path: Path) -> None:
    path = logging_utils.setup_logging(logging.DEBUG, log_dir=tmp_path, console=False, force=True)

    logging.getLogger("matchlines.test").info("hello")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert path == tmp_path / "matchlines.log"
    assert logging_utils.get_log_path() == path
    assert "hello" in path.read_text(encoding="utf-8")


def test_parse_options_reads_settings_path_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MATCHLINES_SETTINGS_PATH", str(tmp_path / "env.json"))

    options = app.parse_options(["a.txt", "--set", "default_eol=crlf"])

    assert options.settings_path == tmp_path / "env.json"
    assert options.files == [Path("a.txt")]
    assert options.overrides == {"default_eol": "crlf"}


def test_load_settings_falls_back_on_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    settings = app.load_settings(SettingsStore(path), {"font_size": 20})

    assert settings.font_size == 20
    assert settings.default_case_sensitive is False
