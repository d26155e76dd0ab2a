"""Tests for the command-line entry point."""

import csv
import json
from pathlib import Path

import pandas as pd
import pytest

from metadata_builders import dep, package
from workspace_dependencies import cli
from workspace_dependencies.cli import DEFAULT_OUTPUT, main


def _read_rows(path: Path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


def test_cli_merges_workspaces(write_metadata, tmp_path: Path) -> None:
    path_a = write_metadata(
        "A",
        [package("alpha", deps=[dep("libfoo"), dep("sibling", path="/work/sibling")])],
        [package("libfoo", license="MIT", homepage="https://foo.example"), package("sibling")],
    )
    path_b = write_metadata(
        "B",
        [package("beta", deps=[dep("libfoo", kind="dev")])],
        [package("libfoo", license="MIT")],
    )
    output = tmp_path / "report.csv"

    main([str(path_a), str(path_b), "--output", str(output)])

    header, *rows = _read_rows(output)
    assert header == [
        "Crate Name", "URL", "License", "Components", "Dependency Of", "Dependency Type"
    ]
    assert len(rows) == 1
    name, url, license, workspaces, components, kinds = rows[0]
    assert (name, url, license) == ("libfoo", "https://foo.example", "MIT")
    assert set(workspaces.split(",")) == {"A", "B"}
    assert set(components.split(",")) == {"alpha", "beta"}
    assert set(kinds.split(",")) == {"normal", "dev"}


def test_cli_include_private_crates(write_metadata, tmp_path: Path) -> None:
    path = write_metadata(
        "ws",
        [package("app", deps=[dep("local", path="/work/local"), dep("serde")])],
        [package("serde", license="MIT")],
    )
    output = tmp_path / "report.csv"

    main([str(path), "--include-private-crates", "--output", str(output)])

    # `local` has no catalog entry, so it is only warned about.
    rows = _read_rows(output)[1:]
    assert [row[0] for row in rows] == ["serde"]


def test_cli_output_is_deterministic(write_metadata, tmp_path: Path) -> None:
    path = write_metadata(
        "ws",
        [
            package("one", deps=[dep("zeta"), dep("alpha", kind="build")]),
            package("two", deps=[dep("mid"), dep("alpha")]),
        ],
        [package("zeta"), package("alpha"), package("mid")],
    )
    first = tmp_path / "first.csv"
    second = tmp_path / "second.csv"

    main([str(path), "--output", str(first)])
    main([str(path), "--output", str(second)])

    assert first.read_text() == second.read_text()
    names = [row[0] for row in _read_rows(first)[1:]]
    assert names == sorted(names) == ["alpha", "mid", "zeta"]


def test_cli_default_output_location(write_metadata, tmp_path: Path, monkeypatch) -> None:
    path = write_metadata("ws", [package("app")])
    monkeypatch.chdir(tmp_path)

    main([str(path)])

    assert (tmp_path / DEFAULT_OUTPUT).exists()


def test_cli_optional_exports(write_metadata, tmp_path: Path) -> None:
    path = write_metadata("ws", [package("app", deps=[dep("serde")])], [package("serde")])
    output = tmp_path / "deps.csv"

    main([str(path), "--output", str(output), "--summary-json", "--get-worksheets"])

    summary = json.loads((tmp_path / "deps_summary.json").read_text())
    assert summary["num_dependencies"] == 1
    assert (tmp_path / "deps.xlsx").exists()


def test_cli_aborts_on_bad_input(write_metadata, tmp_path: Path, capsys) -> None:
    good = write_metadata("ws", [package("app")])
    missing = tmp_path / "missing.json"
    output = tmp_path / "report.csv"

    with pytest.raises(SystemExit) as excinfo:
        main([str(good), str(missing), "--output", str(output)])

    assert excinfo.value.code == 1
    assert "missing.json" in capsys.readouterr().err
    assert not output.exists()


def test_cli_worksheets_with_awkward_labels(write_metadata, tmp_path: Path) -> None:
    first = write_metadata(
        "dependencies",
        [package("app", deps=[dep("serde"), dep("zeta")])],
        [package("serde"), package("zeta")],
    )
    second = write_metadata(
        "ws[1]",
        [package("tool", deps=[dep("anyhow"), dep("serde")])],
        [package("anyhow"), package("serde")],
    )
    output = tmp_path / "deps.csv"

    main([str(first), str(second), "--output", str(output), "--get-worksheets"])

    sheets = pd.read_excel(tmp_path / "deps.xlsx", sheet_name=None, keep_default_na=False)
    assert list(sheets["dependencies"]["Crate Name"]) == ["anyhow", "serde", "zeta"]
    assert list(sheets["dependencies_2"]["Crate Name"]) == ["serde", "zeta"]
    assert list(sheets["ws_1_"]["Crate Name"]) == ["anyhow", "serde"]


def test_cli_worksheet_failure_exits_with_error(
    write_metadata, tmp_path: Path, monkeypatch, capsys
) -> None:
    path = write_metadata("ws", [package("app", deps=[dep("serde")])], [package("serde")])
    output = tmp_path / "deps.csv"

    def fail_export(frame, dependencies, excel_file):
        raise ValueError("Invalid character [ found in sheet title")

    monkeypatch.setattr(cli, "export_worksheets", fail_export)

    with pytest.raises(SystemExit) as excinfo:
        main([str(path), "--output", str(output), "--get-worksheets"])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert err.startswith("Error writing worksheets to")
    assert "deps.xlsx" in err


def test_cli_configures_level_prefixed_logging(write_metadata, tmp_path: Path, monkeypatch) -> None:
    path = write_metadata("ws", [package("app")])
    captured = {}
    monkeypatch.setattr(cli.logging, "basicConfig", lambda **kwargs: captured.update(kwargs))

    main([str(path), "--output", str(tmp_path / "deps.csv")])

    assert captured["level"] == cli.logging.INFO
    assert captured["format"] == "%(levelname)s: %(message)s"
