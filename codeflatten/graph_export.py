"""Inclusion-graph export helpers for DOT and JSON outputs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

from .models import BundleResult


def _labels(result: BundleResult, root: Optional[Path]) -> Dict[str, str]:
    labels: Dict[str, str] = {}
    for source in result.files:
        label = source.path
        if root is not None:
            try:
                label = Path(source.path).relative_to(root.resolve()).as_posix()
            except ValueError:
                pass
        labels[source.path] = label
    return labels


def render_dot(result: BundleResult, root: Optional[Path] = None) -> str:
    labels = _labels(result, root)
    modules = {source.path: source.module or "<no package>" for source in result.files}

    lines = ["digraph Flatten {"]
    lines.append("  rankdir=LR;")
    for index, source in enumerate(result.files):
        label = f"{_esc(labels[source.path])}\\n{_esc(modules[source.path])}"
        shape = ', shape=box, style=bold' if index == 0 else ""
        lines.append(f'  "{_esc(source.path)}" [label="{label}"{shape}];')
    for step in result.steps:
        lines.append(
            f'  "{_esc(step.source)}" -> "{_esc(step.target)}" '
            f'[label="{_esc(step.category)}: {_esc(step.reference)}"];'
        )
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_json(result: BundleResult, root: Optional[Path] = None) -> str:
    labels = _labels(result, root)
    nodes: List[dict] = [
        {
            "id": source.path,
            "label": labels[source.path],
            "package": source.module,
            "symbols": sorted(source.symbols),
            "order": index,
        }
        for index, source in enumerate(result.files)
    ]
    edges = [
        {
            "src": step.source,
            "dst": step.target,
            "category": step.category,
            "reference": step.reference,
        }
        for step in result.steps
    ]
    return json.dumps({"nodes": nodes, "edges": edges}, indent=2)


def export_graph(result: BundleResult, output_file: Path, fmt: str = "dot", root: Optional[Path] = None) -> None:
    if fmt == "json":
        doc = render_json(result, root)
    elif fmt == "dot":
        doc = render_dot(result, root)
    else:
        raise ValueError(f"Unsupported graph format: {fmt}")
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(doc, encoding="utf-8")


def _esc(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
