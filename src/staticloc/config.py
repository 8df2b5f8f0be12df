from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class FontConfig:
    # Font families that may be written; only enforced when `strict` is true.
    available: tuple[str, ...] = ()
    strict: bool = False


@dataclass(frozen=True)
class DocxConfig:
    include_headers: bool = False
    include_footers: bool = False


@dataclass(frozen=True)
class LocalizerConfig:
    delimiter: str = "\t"
    concurrency: int = 4
    log_path: str = "staticloc.log"
    log_level: str = "info"  # 'debug' | 'info' | 'warning'
    report_path: str = "localization_report.html"
    report_jsonl_path: str = "localization_report.jsonl"
    settings_path: str = "staticloc_settings.sqlite"
    progress: bool = True
    fonts: FontConfig = field(default_factory=FontConfig)
    docx: DocxConfig = field(default_factory=DocxConfig)


def _resolve_path(base_dir: Path, value: Any, default: str) -> str:
    raw = str(default if value is None else value).strip() or default
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)


def _normalize_choice(value: Any, *, field_name: str, allowed: set[str], default: str) -> str:
    raw = str(default if value is None else value).strip().lower()
    if raw not in allowed:
        allowed_list = ", ".join(sorted(allowed))
        raise ValueError(f"Invalid value for {field_name}: {raw!r}. Allowed: {allowed_list}")
    return raw


def _decode_delimiter(value: Any) -> str:
    raw = "\t" if value is None else str(value)
    # YAML users tend to write the two characters backslash-t.
    decoded = {"\\t": "\t", "tab": "\t", "\\n": "\n"}.get(raw.lower(), raw)
    if not decoded or "\n" in decoded:
        raise ValueError(f"Invalid value for delimiter: {raw!r}")
    return decoded


def load_config(path: str | Path) -> LocalizerConfig:
    cfg_path = Path(path)
    data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    base_dir = cfg_path.parent
    defaults = LocalizerConfig()

    fonts_data = data.get("fonts", {}) or {}
    docx_data = data.get("docx", {}) or {}

    available = fonts_data.get("available", []) or []
    if isinstance(available, str):
        available = [available]

    concurrency = int(data.get("concurrency", defaults.concurrency))
    if concurrency < 1:
        raise ValueError(f"Invalid value for concurrency: {concurrency}. Must be >= 1")

    return LocalizerConfig(
        delimiter=_decode_delimiter(data.get("delimiter")),
        concurrency=concurrency,
        log_path=_resolve_path(base_dir, data.get("log_path"), defaults.log_path),
        log_level=_normalize_choice(
            data.get("log_level"),
            field_name="log_level",
            allowed={"debug", "info", "warning"},
            default=defaults.log_level,
        ),
        report_path=_resolve_path(base_dir, data.get("report_path"), defaults.report_path),
        report_jsonl_path=_resolve_path(base_dir, data.get("report_jsonl_path"), defaults.report_jsonl_path),
        settings_path=_resolve_path(base_dir, data.get("settings_path"), defaults.settings_path),
        progress=bool(data.get("progress", defaults.progress)),
        fonts=FontConfig(
            available=tuple(str(family) for family in available),
            strict=bool(fonts_data.get("strict", False)),
        ),
        docx=DocxConfig(
            include_headers=bool(docx_data.get("include_headers", False)),
            include_footers=bool(docx_data.get("include_footers", False)),
        ),
    )
