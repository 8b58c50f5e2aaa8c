"""
Checks for the career roadmap flowchart.

The model lays out the graph itself. These helpers only report problems with
what it returned (cycles, dangling edges, a Start node with inbound edges,
overlapping nodes); nothing is repaired and model coordinates are kept.
"""

from collections import defaultdict, deque

from .schemas import Flowchart

START_NODE_IDS = {"start", "Start"}


class CycleError(ValueError):
    """The flowchart's edges do not form a DAG."""

    def __init__(self, remaining: list[str]) -> None:
        super().__init__(f"Cycle among nodes: {', '.join(sorted(remaining))}")
        self.remaining = remaining


def topological_order(flowchart: Flowchart) -> list[str]:
    """
    Order node ids so every edge points forward (Kahn's algorithm).

    Ties keep the order the nodes were listed in. Edges to unknown nodes are
    ignored here; ``flowchart_issues`` reports them.

    Raises:
        CycleError: If some nodes can never be reached with in-degree zero
    """
    ids = [node.id for node in flowchart.nodes]
    known = set(ids)
    indegree = dict.fromkeys(ids, 0)
    successors: dict[str, list[str]] = defaultdict(list)
    for edge in flowchart.edges:
        if edge.source in known and edge.target in known:
            successors[edge.source].append(edge.target)
            indegree[edge.target] += 1

    ready = deque(node_id for node_id in ids if indegree[node_id] == 0)
    order: list[str] = []
    while ready:
        node_id = ready.popleft()
        order.append(node_id)
        for target in successors[node_id]:
            indegree[target] -= 1
            if indegree[target] == 0:
                ready.append(target)

    if len(order) != len(ids):
        placed = set(order)
        raise CycleError([node_id for node_id in ids if node_id not in placed])
    return order


def flowchart_issues(flowchart: Flowchart) -> list[str]:
    """Describe everything wrong with ``flowchart``; an empty list means it looks sound."""
    issues: list[str] = []
    known = {node.id for node in flowchart.nodes}

    for edge in flowchart.edges:
        for end in (edge.source, edge.target):
            if end not in known:
                issues.append(f"edge {edge.id} references unknown node {end!r}")
        if edge.target in START_NODE_IDS and edge.target in known:
            issues.append(f"edge {edge.id} points into the start node")

    try:
        topological_order(flowchart)
    except CycleError as e:
        issues.append(str(e))

    seen: dict[tuple[float, float], str] = {}
    for node in flowchart.nodes:
        key = (node.position.x, node.position.y)
        if key in seen:
            issues.append(f"nodes {seen[key]!r} and {node.id!r} overlap at {key}")
        else:
            seen[key] = node.id

    return issues
