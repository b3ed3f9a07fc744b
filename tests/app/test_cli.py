from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from modelsync.config import ReconciliationConfig
from modelsync.ui import cli as cli_module


def _capture(monkeypatch: pytest.MonkeyPatch, name: str, result: object) -> dict[str, object]:
    captured: dict[str, object] = {}

    def fake(*args: object, **kwargs: object) -> object:
        captured["args"] = args
        captured.update(kwargs)
        return result

    monkeypatch.setattr(cli_module, name, fake)
    return captured


def _summary() -> SimpleNamespace:
    return SimpleNamespace(
        summary=SimpleNamespace(added=1, updated=0, skipped=0, failed=0),
    )


def test_init_uses_default_config(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture(
        monkeypatch,
        "initialise_model",
        SimpleNamespace(roots_created=["Strategy"], folders=SimpleNamespace(created=8)),
    )

    cli_module.main(["init", "--database-uri", "sqlite+pysqlite:///:memory:"])

    assert captured["config"] == ReconciliationConfig()
    assert captured["database_uri"] == "sqlite+pysqlite:///:memory:"


def test_sync_passes_sheet_and_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture(monkeypatch, "sync_sheet", _summary())

    cli_module.main(
        ["sync", "heatmap.xlsx", "--skip-rows", "1", "--sheet-name", "HeatMap", "--output", "o.csv"]
    )

    assert captured["args"] == (Path("heatmap.xlsx"),)
    assert captured["output"] == Path("o.csv")
    assert captured["sheet_name"] == "HeatMap"
    config = captured["config"]
    assert isinstance(config, ReconciliationConfig)
    assert config.skip_rows == 1


def test_export_requires_output(monkeypatch: pytest.MonkeyPatch) -> None:
    _capture(monkeypatch, "export_sheet", None)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["export", "heatmap.csv"])

    assert excinfo.value.code == 2


def test_export_reads_settings_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    settings = tmp_path / "settings.toml"
    settings.write_text('view_suffix = "Map"\n', encoding="utf-8")
    captured = _capture(
        monkeypatch,
        "export_sheet",
        SimpleNamespace(records=[], matched_rows=0, graph_only=0),
    )

    cli_module.main(["export", "heatmap.csv", "--output", "out.csv", "--config", str(settings)])

    assert captured["args"] == (Path("heatmap.csv"), Path("out.csv"))
    config = captured["config"]
    assert isinstance(config, ReconciliationConfig)
    assert config.view_suffix == "Map"


@pytest.mark.parametrize(
    "argv",
    [
        ["sync", "heatmap.csv", "--skip-rows", "-1"],
        ["sync", "heatmap.csv", "--config", "does-not-exist.toml"],
    ],
)
def test_invalid_options_exit_with_code_2(
    monkeypatch: pytest.MonkeyPatch,
    argv: list[str],
) -> None:
    _capture(monkeypatch, "sync_sheet", _summary())

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(argv)

    assert excinfo.value.code == 2


def test_run_failures_exit_with_code_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing(*_: object, **__: object) -> None:
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(cli_module, "sync_sheet", failing)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync", "heatmap.csv"])

    assert excinfo.value.code == 1
