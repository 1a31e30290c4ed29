"""Unit tests for CLI command handling."""

from __future__ import annotations

import json

from cli.main import build_parser, main
from lexicon_fixtures import populate_store
from transfer.client import EtymologClient


def _seed(config) -> None:
    client = EtymologClient(config)
    populate_store(client.store)
    client.store.persist()
    client.settings_store.save({"conlangName": "Kabanic"})
    client.close()


def test_parser_defaults_export_format_to_json() -> None:
    """Export should default to the JSON document format."""
    args = build_parser().parse_args(["export", "--output", "out.json"])

    assert args.format == "json" and args.data_root is None


def test_cli_export_prints_written_path(config, tmp_path, capsys) -> None:
    """CLI export into a directory should print the default file path."""
    _seed(config)
    output_dir = tmp_path / "exports"
    output_dir.mkdir()

    exit_code = main(
        ["--data-root", str(config.data_root), "export", "--format", "png", "--output", str(output_dir)]
    )
    output = capsys.readouterr().out.strip()

    assert exit_code == 0
    assert output.endswith("Kabanic.etymolog.png")


def test_cli_import_then_inspect(config, tmp_path, capsys) -> None:
    """Importing an export should print row totals and inspect should list counts."""
    _seed(config)
    artifact = tmp_path / "lexicon.etymolog.json"
    main(["--data-root", str(config.data_root), "export", "--output", str(artifact)])
    target_root = tmp_path / "target"
    capsys.readouterr()

    import_code = main(["--data-root", str(target_root), "import", str(artifact)])
    import_output = capsys.readouterr().out
    inspect_code = main(["--data-root", str(target_root), "inspect", str(artifact)])
    inspect_lines = capsys.readouterr().out.splitlines()

    assert import_code == 0 and "imported_rows=13" in import_output
    assert inspect_code == 0
    assert inspect_lines[0] == "kind=document"
    assert "lexicon\t2" in inspect_lines


def test_cli_reports_errors_with_exit_code(config, tmp_path, capsys) -> None:
    """Invalid artifacts should print an error line and return 1."""
    artifact = tmp_path / "broken.etymolog.json"
    artifact.write_text('{"magic": "nope"}', encoding="utf-8")

    exit_code = main(["--data-root", str(config.data_root), "import", str(artifact)])
    output = capsys.readouterr().out.strip()

    assert exit_code == 1
    assert output == "error=Invalid export: not a recognized export"


def test_cli_inspect_prints_dash_without_timestamp(config, tmp_path, capsys) -> None:
    """Inspecting a document without exportedAt should print a placeholder."""
    _seed(config)
    artifact = tmp_path / "lexicon.etymolog.json"
    main(["--data-root", str(config.data_root), "export", "--output", str(artifact)])
    payload = json.loads(artifact.read_text(encoding="utf-8"))
    del payload["exportedAt"]
    artifact.write_text(json.dumps(payload), encoding="utf-8")
    capsys.readouterr()

    exit_code = main(["--data-root", str(config.data_root), "inspect", str(artifact)])
    lines = capsys.readouterr().out.splitlines()

    assert exit_code == 0
    assert "exported_at=-" in lines
