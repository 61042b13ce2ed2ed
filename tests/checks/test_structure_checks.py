from __future__ import annotations

from accessibility_lab.checks import CheckConfig, ClassNameCheck, TraversalOrderCheck
from accessibility_lab.models import ResultType


def test_actionable_element_without_class_name_warns(make_view, make_hierarchy):
    hierarchy = make_hierarchy(
        make_view(0, clickable=True),
        make_view(1, clickable=True, accessibility_class_name="android.widget.Button"),
        make_view(2),
    )

    results = ClassNameCheck().evaluate(hierarchy, CheckConfig())

    assert [(r.element.id, r.result_id, r.result_type) for r in results] == [
        (0, 1, ResultType.WARNING)
    ]


def test_traversal_cycle_is_reported_once(make_view, make_hierarchy):
    hierarchy = make_hierarchy(
        make_view(0),
        make_view(1, traversal_before_id=2),
        make_view(2, traversal_before_id=3),
        make_view(3, traversal_before_id=1),
    )

    results = TraversalOrderCheck().evaluate(hierarchy, CheckConfig())

    assert [(r.element.id, r.result_id, r.result_type) for r in results] == [
        (1, 1, ResultType.WARNING)
    ]
    assert results[0].metadata == {"cycle_length": 3}


def test_consistent_before_and_after_constraints_pass(make_view, make_hierarchy):
    hierarchy = make_hierarchy(
        make_view(0, traversal_before_id=1),
        make_view(1, traversal_after_id=0),
    )

    assert TraversalOrderCheck().evaluate(hierarchy, CheckConfig()) == []


def test_reference_to_unknown_element_is_info(make_view, make_hierarchy):
    hierarchy = make_hierarchy(make_view(0, traversal_after_id=99))

    results = TraversalOrderCheck().evaluate(hierarchy, CheckConfig())

    assert [(r.result_id, r.result_type) for r in results] == [(2, ResultType.INFO)]
    assert results[0].metadata == {"missing_id": 99}
