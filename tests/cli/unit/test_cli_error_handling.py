"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

from setter_sync.cli import main


def test_missing_required_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["set", "image-tag", "v2"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Missing option" in captured.err
    assert "--schema" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["list", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option: --bogus" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_setter_returns_domain_error(tmp_path: Path, capsys) -> None:
    schema_path = tmp_path / "Kptfile"
    schema_path.write_text("openAPI:\n  definitions: {}\n", encoding="utf-8")

    exit_code = main(["set", "missing", "v2", "--schema", str(schema_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "No setter 'missing' found" in captured.err
    assert "Traceback" not in captured.err


def test_propagate_without_source_returns_domain_error(capsys) -> None:
    exit_code = main(["propagate", "--dest", "somewhere"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Either --config or --schema is required." in captured.err


def test_propagate_without_destinations_returns_domain_error(tmp_path: Path, capsys) -> None:
    exit_code = main(["propagate", "--schema", str(tmp_path / "Kptfile")])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "At least one --dest directory is required." in captured.err


def test_invalid_configuration_returns_domain_error(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "setter-sync.yaml"
    config_path.write_text("destinations: [a]\n", encoding="utf-8")

    exit_code = main(["propagate", "--config", str(config_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Configuration section 'source' is required." in captured.err
