"""
Tests for the roadmap flowchart checks.
"""

import pytest

from youthmind.roadmap import CycleError, flowchart_issues, topological_order
from youthmind.schemas import Flowchart


def _chart(nodes: list[tuple[str, float]], edges: list[tuple[str, str]]) -> Flowchart:
    return Flowchart.model_validate(
        {
            "nodes": [
                {"id": node_id, "position": {"x": x, "y": 0}, "data": {"label": node_id}}
                for node_id, x in nodes
            ],
            "edges": [
                {"id": f"{source}-{target}", "source": source, "target": target}
                for source, target in edges
            ],
        }
    )


class TestFlowchartChecks:
    def test_sound_chart(self):
        chart = _chart(
            [("start", 0), ("html", 200), ("js", 400), ("react", 600)],
            [("start", "html"), ("html", "js"), ("js", "react")],
        )

        assert flowchart_issues(chart) == []
        assert topological_order(chart) == ["start", "html", "js", "react"]

    def test_order_respects_edges_not_listing(self):
        chart = _chart([("b", 200), ("a", 0)], [("a", "b")])

        assert topological_order(chart) == ["a", "b"]

    def test_cycle_reported(self):
        chart = _chart(
            [("start", 0), ("a", 200), ("b", 400)],
            [("start", "a"), ("a", "b"), ("b", "a")],
        )

        with pytest.raises(CycleError) as exc_info:
            topological_order(chart)
        assert sorted(exc_info.value.remaining) == ["a", "b"]
        assert any("Cycle" in issue for issue in flowchart_issues(chart))

    def test_unknown_node_reported(self):
        chart = _chart([("start", 0), ("a", 200)], [("start", "a"), ("a", "ghost")])

        issues = flowchart_issues(chart)

        assert issues == ["edge a-ghost references unknown node 'ghost'"]

    def test_edge_into_start_reported(self):
        chart = _chart([("start", 0), ("a", 200)], [("a", "start")])

        assert any("start node" in issue for issue in flowchart_issues(chart))

    def test_overlap_reported(self):
        chart = _chart([("start", 0), ("a", 200), ("b", 200)], [("start", "a"), ("start", "b")])

        assert flowchart_issues(chart) == ["nodes 'a' and 'b' overlap at (200.0, 0.0)"]
