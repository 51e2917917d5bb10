"""
report/renderer.py — HTML report generation for step results

This module handles:
- Converting per-step results to a JSON payload for client-side drawing
- Generating a self-contained HTML page with the exhibit, the extension
  families of every step and both rank tables
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import Optional, Sequence, Union

from argblazer.argumentation.models import Extension, Semantics, StepResult
from argblazer.models import FrameworkDocument

FAMILY_TITLES = {
    Semantics.CONFLICT_FREE: "Conflict-free",
    Semantics.ADMISSIBLE: "Admissible",
    Semantics.COMPLETE: "Complete",
    Semantics.PREFERRED: "Preferred",
    Semantics.GROUNDED: "Grounded",
    Semantics.STABLE: "Stable",
}


def default_report_name(path: Union[str, Path]) -> str:
    """``debate.yaml`` → ``debate_argBlazerReport.html``."""
    name = Path(path).name
    return re.sub(r"\.(yaml|yml)$", "", name) + "_argBlazerReport.html"


def _first_steps(steps: Sequence[StepResult]) -> dict[str, int]:
    seen: dict[str, int] = {}
    for result in steps:
        for arg in result.framework.arguments:
            seen.setdefault(arg, result.step)
    return seen


def build_payload(document: FrameworkDocument, steps: Sequence[StepResult]) -> dict:
    """JSON-ready graph, per-step ranks and per-step extensions."""
    appears = _first_steps(steps)
    arguments = []
    for decl in document.arguments:
        roles = [r for r in ("top", "bottom") if getattr(decl, f"is_{r}")]
        arguments.append({
            "id": decl.id,
            "step": appears.get(decl.id),
            "roles": roles,
            "labels": list(decl.labels),
        })

    return {
        "graph": {
            "arguments": arguments,
            "attacks": [list(pair) for pair in document.attacks],
            "steps": {
                "numbers": [r.step for r in steps],
                "rank_top": [dict(r.rank_top) for r in steps],
                "rank_bottom": [dict(r.rank_bottom) for r in steps],
            },
        },
        "extensions": [r.extensions.to_dict() for r in steps],
    }


def _format_extension(ext: Extension) -> str:
    if not ext:
        return "∅"
    return "{" + ", ".join(escape(a) for a in ext) + "}"


def _format_family(family: Sequence[Extension]) -> str:
    if not family:
        return '<span class="none">none</span>'
    return " ".join(
        f'<span class="ext">{_format_extension(ext)}</span>' for ext in family
    )


def _render_step(result: StepResult) -> str:
    graph = result.framework
    attacks = ", ".join(
        f"{escape(a)} → {escape(b)}" for a, b in graph.attack_pairs
    ) or "none"
    members = ", ".join(escape(a) for a in graph.arguments)

    family_rows = "\n".join(
        f"<tr><th>{title}</th><td>{_format_family(result.extensions.get(sem))}</td></tr>"
        for sem, title in FAMILY_TITLES.items()
    )

    rank_rows = "\n".join(
        "<tr><td>{}</td><td>{}</td><td>{}</td></tr>".format(
            escape(arg),
            result.rank_top.get(arg, "–"),
            result.rank_bottom.get(arg, "–"),
        )
        for arg in graph.arguments
    )

    return f"""
    <section class="step" id="step-{result.step}">
        <h2>Step {result.step}</h2>
        <p><strong>Arguments:</strong> {members}</p>
        <p><strong>Attacks:</strong> {attacks}</p>
        <table class="families">
            {family_rows}
        </table>
        <table class="ranks">
            <tr><th>Argument</th><th>Rank (top)</th><th>Rank (bottom)</th></tr>
            {rank_rows}
        </table>
    </section>"""


def render_html(
    document: FrameworkDocument,
    steps: Sequence[StepResult],
    exhibit: Optional[str] = None,
    title: str = "ArgBlazer Report",
) -> str:
    """Convert step results to a readable, self-contained HTML page."""
    exhibit = exhibit if exhibit is not None else document.exhibit
    payload = json.dumps(build_payload(document, steps)).replace("</", "<\\/")
    generated = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    sections = "".join(_render_step(r) for r in steps)
    exhibit_html = escape(exhibit or "[Not provided]")

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>
        body {{
            padding: 20px;
            max-width: 1100px;
            margin: 0 auto;
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
        }}
        pre.exhibit {{
            white-space: pre-wrap;
            background-color: #f8f9fa;
            border-left: 4px solid #adb5bd;
            padding: 15px;
        }}
        .step {{
            margin-bottom: 30px;
            border-top: 1px solid #dee2e6;
        }}
        table {{ border-collapse: collapse; margin: 10px 0; }}
        th, td {{ padding: 4px 10px; text-align: left; border-bottom: 1px solid #eee; }}
        .ext {{ font-family: monospace; margin-right: 8px; }}
        .none {{ color: #868e96; font-style: italic; }}
    </style>
</head>
<body>
    <h1>{escape(title)}</h1>
    <p class="meta">Generated {generated} · {len(steps)} step(s)</p>
    <h2>Exhibit</h2>
    <pre class="exhibit">{exhibit_html}</pre>
    {sections}
    <script type="application/json" id="af-data">{payload}</script>
</body>
</html>
"""
