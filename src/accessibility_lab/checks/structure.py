"""Checks on element metadata and navigation order."""

from __future__ import annotations

from typing import Dict, List, Set

from ..models import AccessibilityHierarchy, CheckId, CheckResult, ResultType
from .base import AccessibilityCheck, CheckConfig


class ClassNameCheck(AccessibilityCheck):
    """Actionable elements need a class name so their role can be announced."""

    check_id = CheckId.CLASS_NAME

    RESULT_MISSING_CLASS_NAME = 1

    def evaluate(self, hierarchy: AccessibilityHierarchy, config: CheckConfig) -> List[CheckResult]:
        results: List[CheckResult] = []
        for view in hierarchy.iter_views():
            if not (view.is_visible and view.important_for_accessibility and view.is_actionable):
                continue
            if not (view.accessibility_class_name or "").strip():
                results.append(
                    self.result(self.RESULT_MISSING_CLASS_NAME, ResultType.WARNING, view)
                )
        return results


class TraversalOrderCheck(AccessibilityCheck):
    """Explicit traversal-before/after constraints must not form a loop."""

    check_id = CheckId.TRAVERSAL_ORDER

    RESULT_CYCLE = 1
    RESULT_UNKNOWN_REFERENCE = 2

    def evaluate(self, hierarchy: AccessibilityHierarchy, config: CheckConfig) -> List[CheckResult]:
        views = hierarchy.index_by_condensed_id()
        order = list(views)
        position = {node: index for index, node in enumerate(order)}

        results: List[CheckResult] = []
        # Edge a -> b means "a is visited before b".
        graph: Dict[int, List[int]] = {}
        for node, view in views.items():
            for reference, edge in (
                (view.traversal_before_id, (node, view.traversal_before_id)),
                (view.traversal_after_id, (view.traversal_after_id, node)),
            ):
                if reference is None:
                    continue
                if reference not in views:
                    results.append(
                        self.result(
                            self.RESULT_UNKNOWN_REFERENCE,
                            ResultType.INFO,
                            view,
                            missing_id=reference,
                        )
                    )
                    continue
                graph.setdefault(edge[0], []).append(edge[1])

        for cycle in _find_cycles(graph, order):
            first = min(cycle, key=position.__getitem__)
            results.append(
                self.result(
                    self.RESULT_CYCLE,
                    ResultType.WARNING,
                    views[first],
                    cycle_length=len(cycle),
                )
            )
        return results


def _find_cycles(graph: Dict[int, List[int]], order: List[int]) -> List[List[int]]:
    visiting: Set[int] = set()
    done: Set[int] = set()
    stack: List[int] = []
    cycles: List[List[int]] = []

    def visit(node: int) -> None:
        visiting.add(node)
        stack.append(node)
        for successor in graph.get(node, ()):
            if successor in visiting:
                cycles.append(stack[stack.index(successor):])
            elif successor not in done:
                visit(successor)
        stack.pop()
        visiting.discard(node)
        done.add(node)

    for node in order:
        if node not in done:
            visit(node)
    return cycles
