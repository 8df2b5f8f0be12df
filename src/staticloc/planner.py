from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Pattern

from tqdm import tqdm

from .base_style import select_base_style
from .errors import BatchFailure
from .exception_patterns import keep_as_is
from .host import StyleSource, TextNode
from .models import ErrorKind, Mapping, Replacement, ReplacementFailure
from .normalize import normalize_content
from .segmenter import slice_into_sections

_logger = logging.getLogger(__name__)


def compute_replacement(
    node: TextNode,
    source: StyleSource,
    mapping: Mapping,
    patterns: Sequence[Pattern[str]],
) -> Replacement | ReplacementFailure | None:
    """Plan the translation of one text node.

    Returns None when the node is left untouched on purpose (exception match).
    """
    characters = node.characters
    content = normalize_content(characters)
    if keep_as_is(content, patterns):
        return None
    if content not in mapping:
        return ReplacementFailure(node=node, kind=ErrorKind.NO_TRANSLATION, log=[content])

    log: list[str] = [f"Computing replacement for `{content}`"]
    sections = slice_into_sections(node, source)
    log.append("Sections: " + ", ".join(section.label for section in sections))

    translation = mapping[content]
    choice = select_base_style(characters, sections, translation, mapping, patterns, log)
    if choice is None:
        return ReplacementFailure(node=node, kind=ErrorKind.CANNOT_DETERMINE_BASE_STYLE, log=log)
    return Replacement(
        node=node,
        translation=translation,
        base_style=choice.base_style,
        sections=choice.sections,
    )


@dataclass
class BatchPlan:
    replacements: list[Replacement] = field(default_factory=list)
    failures: list[ReplacementFailure] = field(default_factory=list)
    skipped: list[TextNode] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def require_success(self) -> list[Replacement]:
        if self.failures:
            raise BatchFailure(self.failures)
        return self.replacements


def plan_replacements(
    nodes: Sequence[TextNode],
    source: StyleSource,
    mapping: Mapping,
    patterns: Sequence[Pattern[str]],
    *,
    concurrency: int = 4,
    progress: bool = True,
) -> BatchPlan:
    """Compute every node's outcome before anything is mutated.

    Nodes are independent, so they are planned concurrently; results keep node order.
    """
    outcomes: list[Replacement | ReplacementFailure | None] = [None] * len(nodes)
    if nodes:
        with ThreadPoolExecutor(max_workers=max(1, concurrency)) as ex:
            futures = {
                ex.submit(compute_replacement, node, source, mapping, patterns): i
                for i, node in enumerate(nodes)
            }
            for fut in tqdm(
                as_completed(futures), total=len(futures), desc="Plan", unit="node", disable=not progress
            ):
                outcomes[futures[fut]] = fut.result()

    plan = BatchPlan()
    for node, outcome in zip(nodes, outcomes):
        if outcome is None:
            plan.skipped.append(node)
        elif isinstance(outcome, ReplacementFailure):
            plan.failures.append(outcome)
        else:
            plan.replacements.append(outcome)

    _logger.info(
        "Planned %d nodes: %d replacements, %d kept as is, %d failures",
        len(nodes),
        len(plan.replacements),
        len(plan.skipped),
        len(plan.failures),
    )
    for failure in plan.failures:
        _logger.debug("Node %s failed (%s):\n%s", failure.node_id, failure.kind.reason, "\n".join(failure.log))
    return plan
