"""Data-quality diagnostics for loaded narrative graphs."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from cyoa.domain.defs import NarrativeGraph

Severity = str


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: Mapping[str, str]


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def diagnose_graph(graph: NarrativeGraph) -> list[Issue]:
    """Report content problems that the engine tolerates until traversal."""
    issues: list[Issue] = []
    for node_id, node in graph.nodes.items():
        _check_terminal_signals(node_id, node.is_end, bool(node.options), issues)
        for index, option in enumerate(node.options):
            if option.destination not in graph.nodes:
                issues.append(
                    Issue(
                        severity="WARN",
                        code="DANGLING_DESTINATION",
                        message="Option leads to a node that is not defined.",
                        context={
                            "node_id": node_id,
                            "field_path": f"options[{index}].destination",
                            "referenced_id": option.destination,
                        },
                    )
                )
    _check_reachability(graph, issues)
    return issues


def _check_terminal_signals(node_id: str, is_end: bool | None, has_options: bool, issues: list[Issue]) -> None:
    if is_end and has_options:
        issues.append(
            Issue(
                severity="WARN",
                code="TERMINAL_SIGNAL_MISMATCH",
                message="Node is marked isEnd but still lists options; options will not be offered.",
                context={"node_id": node_id},
            )
        )
    elif is_end is False and not has_options:
        issues.append(
            Issue(
                severity="WARN",
                code="TERMINAL_SIGNAL_MISMATCH",
                message="Node is marked isEnd false but has no options; treating it as an ending.",
                context={"node_id": node_id},
            )
        )


def _check_reachability(graph: NarrativeGraph, issues: list[Issue]) -> None:
    reachable: set[str] = set()
    stack: list[str] = [graph.start_node] if graph.start_node in graph.nodes else []
    while stack:
        node_id = stack.pop()
        if node_id in reachable:
            continue
        reachable.add(node_id)
        for option in graph.nodes[node_id].options:
            if option.destination in graph.nodes:
                stack.append(option.destination)
    for node_id in sorted(set(graph.nodes) - reachable):
        issues.append(
            Issue(
                severity="WARN",
                code="UNREACHABLE_NODE",
                message="Node is unreachable from start_node.",
                context={"node_id": node_id},
            )
        )
