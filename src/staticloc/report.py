from __future__ import annotations

import html
import json
from collections.abc import Iterable
from pathlib import Path

from .models import ReplacementFailure


def _node_text(failure: ReplacementFailure) -> str:
    return str(getattr(failure.node, "characters", ""))


def format_failure_log(failures: Iterable[ReplacementFailure]) -> str:
    """Plain-text variant of the report, one block per failing node."""
    blocks = []
    for failure in failures:
        lines = [f"[{failure.node_id}] {failure.kind.reason}"]
        lines.extend(f"    {entry}" for entry in failure.log)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def write_failure_jsonl(failures: Iterable[ReplacementFailure], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        for failure in failures:
            rec = {
                "node_id": failure.node_id,
                "kind": failure.kind.value,
                "reason": failure.kind.reason,
                "text": _node_text(failure),
                "log": failure.log,
            }
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")


def write_failure_report(failures: Iterable[ReplacementFailure], path: Path) -> None:
    def esc(s: str) -> str:
        return html.escape(s, quote=True)

    rows: list[str] = []
    for failure in failures:
        node_id = failure.node_id
        rows.append(
            f"<tr class='failure' id='{esc(node_id)}' data-kind='{esc(failure.kind.value)}'>"
            + f"<td class='node'><a href='#{esc(node_id)}'>{esc(node_id)}</a></td>"
            + f"<td class='reason'>{esc(failure.kind.reason)}</td>"
            + f"<td class='text'><pre>{esc(_node_text(failure))}</pre></td>"
            + "<td class='log'><details open><summary>log</summary><pre>"
            + esc("\n".join(failure.log))
            + "</pre></details></td>"
            + "</tr>"
        )

    html_doc = f"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8"/>
<title>staticloc localization report</title>
<style>
body {{ font-family: system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif; margin: 16px; }}
h1 {{ margin: 0 0 12px 0; }}
table {{ border-collapse: collapse; width: 100%; }}
th, td {{ border: 1px solid #ddd; padding: 6px 8px; vertical-align: top; }}
th {{ background: #f6f6f6; text-align: left; position: sticky; top: 0; }}
tr:target {{ background: #fffbe6; }}
pre {{ margin: 0; white-space: pre-wrap; word-break: break-word; }}
.small {{ color: #666; font-size: 12px; }}
</style>
</head>
<body>
<h1>Localization failed</h1>
<div class="small">No node was modified. Fix the dictionary or the exceptions and run again.</div>
<table>
<thead>
<tr>
  <th>node</th>
  <th>reason</th>
  <th>text</th>
  <th>decision log</th>
</tr>
</thead>
<tbody>
{''.join(rows) if rows else '<tr><td colspan="4">No failures</td></tr>'}
</tbody>
</table>
</body>
</html>
"""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html_doc, encoding="utf-8")
