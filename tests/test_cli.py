from __future__ import annotations

import json
from pathlib import Path

from docx import Document

from staticloc import cli
from staticloc.settings import SettingsStore


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "staticloc.yaml"
    path.write_text(
        "concurrency: 1\n"
        "progress: false\n"
        "log_path: run.log\n"
        "report_path: report.html\n"
        "report_jsonl_path: report.jsonl\n"
        "settings_path: settings.sqlite\n",
        encoding="utf-8",
    )
    return path


def _write_inputs(tmp_path: Path) -> tuple[Path, Path]:
    dictionary = tmp_path / "dict.tsv"
    dictionary.write_text("RU\tEN\nПривет!\tHello!\nПока\t\n", encoding="utf-8")
    exceptions = tmp_path / "exceptions.txt"
    exceptions.write_text("^\\d+$\n", encoding="utf-8")
    return dictionary, exceptions


def test_cli_translate_json_and_persist_settings(tmp_path, capsys):
    cfg_path = _write_config(tmp_path)
    dictionary, exceptions = _write_inputs(tmp_path)
    src = tmp_path / "in.json"
    src.write_text(
        json.dumps({"id": "0:1", "type": "TEXT", "runs": [{"text": "Привет!"}]}, ensure_ascii=False),
        encoding="utf-8",
    )
    out = tmp_path / "out.json"

    rc = cli.main(
        [
            "translate",
            "-i", str(src),
            "-o", str(out),
            "-c", str(cfg_path),
            "--dictionary", str(dictionary),
            "--exceptions", str(exceptions),
            "--source", "RU",
            "--target", "EN",
        ]
    )
    assert rc == 0
    assert json.loads(out.read_text(encoding="utf-8"))["runs"][0]["text"] == "Hello!"
    assert "Done: 1 translated" in capsys.readouterr().out

    with SettingsStore(tmp_path / "settings.sqlite") as store:
        settings = store.load()
    assert settings.serialized_exceptions == "^\\d+$\n"
    assert settings.serialized_dictionary.startswith("RU\tEN\n")


def test_cli_translate_failure_exits_1_with_report(tmp_path, capsys):
    cfg_path = _write_config(tmp_path)
    dictionary, _ = _write_inputs(tmp_path)
    doc = Document()
    doc.add_paragraph("Пока")
    src = tmp_path / "in.docx"
    doc.save(str(src))

    rc = cli.main(["translate", "-i", str(src), "-o", str(tmp_path / "out.docx"), "-c", str(cfg_path), "--dictionary", str(dictionary)])
    assert rc == 1
    err = capsys.readouterr().err
    assert "Localization failed: found some untranslatable nodes (1 nodes)" in err
    assert "[body/p0] no translation\n    Пока" in err
    assert not (tmp_path / "out.docx").exists()
    assert "body/p0" in (tmp_path / "report.html").read_text(encoding="utf-8")


def test_cli_translate_missing_column(tmp_path, capsys):
    cfg_path = _write_config(tmp_path)
    src = tmp_path / "in.json"
    src.write_text(json.dumps({"id": "0:1", "type": "TEXT", "runs": [{"text": "x"}]}), encoding="utf-8")
    rc = cli.main(["translate", "-i", str(src), "-o", str(tmp_path / "o.json"), "-c", str(cfg_path), "--target", "DE"])
    assert rc == 1
    assert "Localization failed: DE not listed in [RU,EN]" in capsys.readouterr().err


def test_cli_settings_show_and_reset(tmp_path, capsys):
    cfg_path = _write_config(tmp_path)
    with SettingsStore(tmp_path / "settings.sqlite") as store:
        store.set("target_language", "DE")

    assert cli.main(["settings", "show", "-c", str(cfg_path)]) == 0
    assert "target_language: 'DE'" in capsys.readouterr().out
    assert cli.main(["settings", "reset", "-c", str(cfg_path)]) == 0
    assert "target_language: 'EN'" in capsys.readouterr().out


def test_cli_sections_lists_runs(tmp_path, capsys):
    src = tmp_path / "in.json"
    bold = {"fontName": {"family": "Inter", "style": "Bold"}}
    src.write_text(
        json.dumps({"id": "0:1", "type": "TEXT", "runs": [{"text": "Hello "}, {"text": "world", "style": bold}]}),
        encoding="utf-8",
    )
    assert cli.main(["sections", "-i", str(src)]) == 0
    out = capsys.readouterr().out
    assert "0:1: 'Hello world'" in out
    assert "0-6" in out and "6-11" in out
    assert "Inter Bold" in out
