from __future__ import annotations

import pytest

from staticloc.config import LocalizerConfig, load_config


def test_config_defaults():
    cfg = LocalizerConfig()
    assert cfg.delimiter == "\t"
    assert cfg.concurrency == 4
    assert cfg.fonts.strict is False
    assert cfg.docx.include_headers is False


def test_load_config_resolves_paths_relative_to_config(tmp_path):
    config_path = tmp_path / "conf" / "staticloc.yaml"
    config_path.parent.mkdir()
    config_path.write_text(
        "delimiter: '\\t'\n"
        "concurrency: 2\n"
        "log_level: DEBUG\n"
        "report_path: out/report.html\n"
        "fonts:\n"
        "  strict: true\n"
        "  available: [Inter, Roboto]\n"
        "docx:\n"
        "  include_footers: true\n",
        encoding="utf-8",
    )
    cfg = load_config(config_path)
    assert cfg.delimiter == "\t"
    assert cfg.concurrency == 2
    assert cfg.log_level == "debug"
    assert cfg.report_path == str((tmp_path / "conf" / "out" / "report.html").resolve())
    assert cfg.settings_path == str((tmp_path / "conf" / "staticloc_settings.sqlite").resolve())
    assert cfg.fonts.available == ("Inter", "Roboto")
    assert cfg.fonts.strict is True
    assert cfg.docx.include_footers is True


def test_load_config_empty_file(tmp_path):
    config_path = tmp_path / "c.yaml"
    config_path.write_text("", encoding="utf-8")
    cfg = load_config(config_path)
    assert cfg.delimiter == "\t"
    assert cfg.log_path == str((tmp_path / "staticloc.log").resolve())


@pytest.mark.parametrize(
    "body",
    ["log_level: loud\n", "concurrency: 0\n", "delimiter: '\\n'\n"],
)
def test_load_config_rejects_invalid_values(tmp_path, body):
    config_path = tmp_path / "c.yaml"
    config_path.write_text(body, encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(config_path)
