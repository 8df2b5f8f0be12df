from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

from .config import LocalizerConfig, load_config
from .docx_doc import load_docx_document
from .errors import BatchFailure, LocalizationError
from .json_doc import load_json_document
from .pipeline import translate_file
from .report import format_failure_log
from .segmenter import slice_into_sections
from .settings import Settings, SettingsStore
from .styled_text import StyledTextHost


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="staticloc", description="Dictionary-based localization of styled text that keeps run styling."
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    t = sub.add_parser("translate", help="Replace dictionary strings in a .json or .docx document.")
    t.add_argument("--input", "-i", required=True, help="Path to source document")
    t.add_argument("--output", "-o", required=True, help="Path to output document")
    t.add_argument("--config", "-c", default=None, help="Path to YAML config")
    t.add_argument("--dictionary", default=None, help="Tab-separated dictionary file (saved to settings).")
    t.add_argument("--exceptions", default=None, help="File with one regular expression per line (saved to settings).")
    t.add_argument("--source", default=None, help="Source language code, as in the dictionary header.")
    t.add_argument("--target", default=None, help="Target language code, as in the dictionary header.")
    t.add_argument(
        "--select",
        action="append",
        default=[],
        help="Node id (.json) or location prefix (.docx) to translate; repeatable. Default: everything.",
    )
    t.add_argument("--concurrency", type=int, default=None, help="Override concurrency from config.")
    t.add_argument("--report", default=None, help="Override failure report HTML path.")
    t.add_argument("--log", default=None, help="Override log path.")

    s = sub.add_parser("settings", help="Show or reset the persisted settings.")
    s.add_argument("action", choices=["show", "reset"])
    s.add_argument("--config", "-c", default=None, help="Path to YAML config")

    x = sub.add_parser("sections", help="Print the style sections of each text node.")
    x.add_argument("--input", "-i", required=True, help="Path to a .json or .docx document")
    x.add_argument("--select", action="append", default=[], help="Node id or location prefix; repeatable.")
    x.add_argument("--config", "-c", default=None, help="Path to YAML config")
    return p


def _read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8-sig")


def _load_cfg(path: str | None) -> LocalizerConfig:
    return load_config(path) if path else LocalizerConfig()


def _apply_settings_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides: dict[str, str] = {}
    if args.dictionary is not None:
        overrides["serialized_dictionary"] = _read_text(args.dictionary)
    if args.exceptions is not None:
        overrides["serialized_exceptions"] = _read_text(args.exceptions)
    if args.source is not None:
        overrides["source_language"] = str(args.source)
    if args.target is not None:
        overrides["target_language"] = str(args.target)
    return dataclasses.replace(settings, **overrides) if overrides else settings


def _print_sections(args: argparse.Namespace) -> int:
    cfg = _load_cfg(args.config)
    path = Path(args.input)
    if path.suffix.lower() == ".docx":
        document = load_docx_document(
            path, include_headers=cfg.docx.include_headers, include_footers=cfg.docx.include_footers
        )
    else:
        document = load_json_document(path)
    host = StyledTextHost()
    for node in document.find_text_nodes(args.select):
        print(f"{node.node_id}: {node.characters!r}")
        for section in slice_into_sections(node, host):
            font = section.style.font_name
            text = node.characters[section.start : section.end]
            print(f"  {section.label:>9}  {font.family or '-'} {font.style} {section.style.font_size:g}  {text!r}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.cmd == "translate":
        cfg = _load_cfg(args.config)

        # CLI overrides
        if args.concurrency is not None:
            cfg = cfg.__class__(**{**cfg.__dict__, "concurrency": int(args.concurrency)})
        if args.report is not None:
            cfg = cfg.__class__(**{**cfg.__dict__, "report_path": str(args.report)})
        if args.log is not None:
            cfg = cfg.__class__(**{**cfg.__dict__, "log_path": str(args.log)})

        with SettingsStore(cfg.settings_path) as store:
            settings = _apply_settings_overrides(store.load(), args)
            store.save(settings)

        try:
            result = translate_file(
                input_path=Path(args.input),
                output_path=Path(args.output),
                cfg=cfg,
                settings=settings,
                selection=list(args.select),
            )
        except BatchFailure as e:
            print(f"Localization failed: {e.message} ({len(e.failures)} nodes)", file=sys.stderr)
            print(format_failure_log(e.failures), file=sys.stderr)
            print(f"Report written: {cfg.report_path}", file=sys.stderr)
            return 1
        except LocalizationError as e:
            print(f"Localization failed: {e.message}", file=sys.stderr)
            return 1
        print(f"Done: {result.translated} translated, {result.kept} kept as is, {result.nodes} selected")
        return 0

    if args.cmd == "settings":
        cfg = _load_cfg(args.config)
        with SettingsStore(cfg.settings_path) as store:
            settings = store.reset() if args.action == "reset" else store.load()
        for name, value in dataclasses.asdict(settings).items():
            print(f"{name}: {value!r}")
        return 0

    if args.cmd == "sections":
        return _print_sections(args)

    print(f"Unknown command: {args.cmd}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
