from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config import LocalizerConfig
from .dictionary import get_mapping, parse_dictionary
from .docx_doc import load_docx_document
from .errors import BatchFailure
from .exception_patterns import parse_exceptions
from .fonts import FontRegistry
from .json_doc import load_json_document, save_json_document
from .logging_utils import setup_logging
from .planner import plan_replacements
from .reapplier import apply_replacements
from .report import write_failure_jsonl, write_failure_report
from .settings import Settings
from .styled_text import StyledTextHost

_logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".json", ".docx")


@dataclass(frozen=True)
class LocalizationResult:
    nodes: int
    translated: int
    kept: int


def translate_selection(
    settings: Settings,
    nodes: Sequence[Any],
    host: StyledTextHost,
    cfg: LocalizerConfig | None = None,
) -> LocalizationResult:
    """Translate the given text nodes in place, or none of them.

    Raises ParseError/MissingColumn before any node is looked at, BatchFailure when at
    least one node cannot be translated, FontLoadFailure when a font is unavailable.
    """
    cfg = cfg or LocalizerConfig()
    dictionary = parse_dictionary(settings.serialized_dictionary, delimiter=cfg.delimiter)
    mapping = get_mapping(dictionary, settings.source_language, settings.target_language)
    patterns = parse_exceptions(settings.serialized_exceptions)
    _logger.info(
        "Dictionary: %d rows, %d %s->%s entries, %d exception patterns",
        len(dictionary.rows),
        len(mapping),
        settings.source_language,
        settings.target_language,
        len(patterns),
    )

    plan = plan_replacements(
        nodes, host, mapping, patterns, concurrency=cfg.concurrency, progress=cfg.progress
    )
    replacements = plan.require_success()
    written = apply_replacements(replacements, host, concurrency=cfg.concurrency)
    _logger.info("Translated nodes: %d/%d (kept as is: %d)", written, len(nodes), len(plan.skipped))
    return LocalizationResult(nodes=len(nodes), translated=written, kept=len(plan.skipped))


def translate_file(
    input_path: Path,
    output_path: Path,
    cfg: LocalizerConfig,
    settings: Settings,
    selection: Sequence[str] = (),
) -> LocalizationResult:
    setup_logging(Path(cfg.log_path), cfg.log_level)
    suffix = input_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported document type {suffix!r}; expected one of {', '.join(SUPPORTED_SUFFIXES)}")

    host = StyledTextHost(FontRegistry(cfg.fonts.available, strict=cfg.fonts.strict))
    if suffix == ".docx":
        document: Any = load_docx_document(
            input_path,
            include_headers=cfg.docx.include_headers,
            include_footers=cfg.docx.include_footers,
        )
        if document.unsupported:
            _logger.warning(
                "Paragraphs left untouched (unsupported structure): %d (%s)",
                len(document.unsupported),
                ", ".join(document.unsupported),
            )
    else:
        document = load_json_document(input_path)
    nodes = document.find_text_nodes(selection)
    _logger.info("Selected text nodes: %d in %s", len(nodes), input_path)

    try:
        result = translate_selection(settings, nodes, host, cfg)
    except BatchFailure as e:
        write_failure_report(e.failures, Path(cfg.report_path))
        write_failure_jsonl(e.failures, Path(cfg.report_jsonl_path))
        _logger.error("Untranslatable nodes: %d; report: %s", len(e.failures), cfg.report_path)
        raise

    # Nothing reaches the output file unless every node was applied.
    if suffix == ".docx":
        document.save(output_path)
    else:
        save_json_document(document, output_path)
    _logger.info("Saved %s", output_path)
    return result
