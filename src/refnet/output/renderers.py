"""Rich renderers for ServiceResult, one per operation.

``render_result`` picks a renderer from ``_OP_RENDERERS`` by ``result.op``
(falling back to plain key/value fields), draws into a buffered console,
and returns the text. ``render_quiet`` produces the script-friendly form:
``id<TAB>score`` lines for rankings, otherwise one bare value.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from refnet.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from refnet.services.result import ServiceResult

# Checked in order; the first key present in ``data`` is the quiet answer.
_QUIET_KEYS = ("reach", "bonus", "total", "allowed", "days")

_SCORE_LABELS = {
    "top_reach": "Reach",
    "expansion": "New Reach",
    "centrality": "Pass-through",
}


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* for a human reader; *verbose* adds error detail and telemetry."""
    console = create_console()
    if not result.ok:
        _render_error(result, console, verbose=verbose)
    else:
        _OP_RENDERERS.get(result.op, _render_fields)(result, console)
    if verbose and result.meta:
        _render_meta(result.meta, console)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    if not result.ok:
        reason = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {reason}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(f"{item['id']}\t{item['score']}" for item in items)
    key = next((k for k in _QUIET_KEYS if k in result.data), None)
    return f"OK: {result.op}" if key is None else str(result.data[key])


# ── Building blocks ───────────────────────────────────────────────────


def _value_text(key: str, value: Any) -> Text:
    if value is None:
        return Text("-", style="dim")
    if key == "id" or key.endswith("_id"):
        return Text(str(value), style="ref.id")
    if isinstance(value, (dict, list)):
        return Text(json.dumps(value, separators=(",", ":")))
    return Text(str(value))


def _print_field(console: Console, key: str, value: Any) -> None:
    console.print(Text.assemble((f"  {key}: ", "ref.key"), _value_text(key, value)))


def _print_ok(console: Console, op: str) -> None:
    console.print(Text.assemble(("OK", "ref.ok"), (f"  {op}", "ref.op")))


def _print_warnings(console: Console, warnings: list[str]) -> None:
    for warning in warnings:
        console.print(Text.assemble(("  warning: ", "ref.warning"), warning))


def _render_meta(meta: dict[str, Any], console: Console) -> None:
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in meta.items():
        if key != "telemetry":
            console.print(Text(f"    {key}: {value}"))
    if "telemetry" in meta:
        console.print(_span_tree(meta["telemetry"]))


def _span_label(span: dict[str, Any]) -> Text:
    duration = span.get("duration_ms", 0.0)
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"
    label = Text.assemble((f"{duration:.2f}ms", style), f"  {span.get('name', '?')}")
    details = {**span.get("annotations", {}), **span.get("counts", {})}
    if details:
        label.append("  (" + ", ".join(f"{k}={v}" for k, v in details.items()) + ")")
    return label


def _span_tree(span: dict[str, Any], tree: Tree | None = None) -> Tree:
    """Build a rich Tree mirroring the span hierarchy."""
    node = Tree(_span_label(span)) if tree is None else tree.add(_span_label(span))
    for child in span.get("children", []):
        _span_tree(child, node)
    return node


# ── Per-operation renderers ───────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    error = result.error
    header = Text.assemble(("ERROR", "ref.error"), (f"  {result.op}", "ref.op"))
    if error is None:
        console.print(header, Text("Unknown error"), sep=" — ")
        return
    header.append(f" [{error.code}]", style="ref.warning")
    console.print(header, Text(error.message), sep=" — ")
    if verbose and error.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in error.detail.items():
            console.print(Text(f"    {key}: {value}"))


def _render_fields(result: ServiceResult, console: Console) -> None:
    """Status line, every data field except long series, then warnings."""
    _print_ok(console, result.op)
    for key, value in result.data.items():
        if key != "series":
            _print_field(console, key, value)
    _print_warnings(console, result.warnings)


def _render_ranking(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print(f"No ranked users ({result.op}).")
        return

    table = Table(pad_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("User", style="ref.id", no_wrap=True)
    table.add_column(_SCORE_LABELS.get(result.op, "Score"), justify="right", style="ref.score")
    for rank, item in enumerate(items, start=1):
        table.add_row(str(rank), str(item["id"]), str(item["score"]))
    console.print(table)

    if "covered" in result.data:
        console.print(f"\nCovered users: {result.data['covered']}")
    console.print(f"{result.data.get('count', len(items))} results")


def _render_referrals(result: ServiceResult, console: Console) -> None:
    data = result.data
    _print_ok(console, result.op)
    _print_field(console, "id", data.get("id"))
    if not data.get("exists"):
        _print_warnings(console, result.warnings)
        return
    _print_field(console, "referrer_id", data.get("referrer_id"))
    _print_field(console, "referrals_made", data.get("referrals_made", 0))
    for child in data.get("direct_referrals", []):
        console.print(Text.assemble("    ", (child, "ref.id")))


def _render_check(result: ServiceResult, console: Console) -> None:
    data = result.data
    allowed = bool(data.get("allowed"))
    console.print(
        Text.assemble(
            (f"{data.get('referrer_id')} -> {data.get('candidate_id')}: ", "ref.id"),
            ("allowed", "ref.ok") if allowed else ("rejected", "ref.error"),
        )
    )
    for reason in data.get("reasons", []):
        console.print(f"  reason: {reason}")


def _render_simulation(result: ServiceResult, console: Console) -> None:
    table = Table(pad_edge=False)
    table.add_column("Day", justify="right", style="dim")
    table.add_column("Cumulative", justify="right", style="ref.score")
    for day, value in enumerate(result.data.get("series", []), start=1):
        table.add_row(str(day), f"{value:.2f}")
    console.print(table)
    data = result.data
    console.print(
        f"\np={data.get('probability')}  total after {data.get('days')} days: {data.get('total')}"
    )


_OP_RENDERERS: dict[str, Any] = {
    "add_user": _render_fields,
    "add_referral": _render_fields,
    "clear_cache": _render_fields,
    "reach": _render_fields,
    "days_to_target": _render_fields,
    "min_bonus": _render_fields,
    "referrals": _render_referrals,
    "check_referral": _render_check,
    "top_reach": _render_ranking,
    "expansion": _render_ranking,
    "centrality": _render_ranking,
    "simulate": _render_simulation,
}
