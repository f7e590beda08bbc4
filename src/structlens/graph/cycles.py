"""Import cycle detection.

``detect_cycles`` samples a bounded number of concrete import loops for
reporting. ``tarjan_scc`` / ``cycle_groups`` give the complete picture:
every file that sits on some cycle, grouped by component.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from .models import Cycle, CycleGroup, DependencyGraph

DEFAULT_CYCLE_LIMIT = 5


def detect_cycles(graph: DependencyGraph, limit: int = DEFAULT_CYCLE_LIMIT) -> list[Cycle]:
    """Depth-first search for import cycles, stopping after ``limit``.

    Nodes on the current DFS path are *visiting*, fully explored nodes are
    *visited*. Reaching a visiting node closes the loop formed by the path
    suffix starting at that node. Each branch carries its own copy of the
    path, so loops are never stitched together from sibling branches.
    Roots are taken in graph order, neighbours in sorted order.

    Uses an explicit frame stack so long import chains don't hit the
    recursion limit.
    """
    cycles: list[Cycle] = []
    visiting: set[str] = set()
    visited: set[str] = set()
    adjacency = graph.adjacency()

    for root in graph.nodes:
        if root in visited:
            continue

        visiting.add(root)
        frames: list[tuple[str, tuple[str, ...], Iterator[str]]] = [
            (root, (root,), iter(adjacency.get(root, ())))
        ]

        while frames:
            node, path, neighbours = frames[-1]
            advanced = False
            for dep in neighbours:
                if dep in visiting:
                    start = path.index(dep)
                    cycles.append(Cycle(path=path[start:] + (dep,)))
                    if len(cycles) >= limit:
                        return cycles
                    continue
                if dep in visited:
                    continue
                visiting.add(dep)
                frames.append((dep, path + (dep,), iter(adjacency.get(dep, ()))))
                advanced = True
                break

            if not advanced:
                frames.pop()
                visiting.discard(node)
                visited.add(node)

    return cycles


def tarjan_scc(adjacency: dict[str, list[str]], all_nodes: Iterable[str]) -> list[set[str]]:
    """Tarjan's algorithm for strongly connected components (iterative).

    Uses an explicit call stack to avoid Python recursion limits on deep
    dependency chains.
    """
    nodes = list(all_nodes)
    node_set = set(nodes)
    counter = 0
    scc_stack: list[str] = []
    on_stack: set[str] = set()
    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    result: list[set[str]] = []

    for root in nodes:
        if root in index:
            continue

        # Each frame is (node, neighbor_iterator)
        call_stack: list[tuple[str, Iterator[str]]] = []
        index[root] = lowlink[root] = counter
        counter += 1
        scc_stack.append(root)
        on_stack.add(root)
        call_stack.append((root, iter([w for w in adjacency.get(root, []) if w in node_set])))

        while call_stack:
            v, it = call_stack[-1]
            pushed = False
            for w in it:
                if w not in index:
                    index[w] = lowlink[w] = counter
                    counter += 1
                    scc_stack.append(w)
                    on_stack.add(w)
                    call_stack.append(
                        (w, iter([n for n in adjacency.get(w, []) if n in node_set]))
                    )
                    pushed = True
                    break
                elif w in on_stack:
                    lowlink[v] = min(lowlink[v], index[w])

            if not pushed:
                call_stack.pop()
                if call_stack:
                    caller = call_stack[-1][0]
                    lowlink[caller] = min(lowlink[caller], lowlink[v])

                if lowlink[v] == index[v]:
                    component: set[str] = set()
                    while True:
                        w = scc_stack.pop()
                        on_stack.discard(w)
                        component.add(w)
                        if w == v:
                            break
                    result.append(component)

    return result


def cycle_groups(graph: DependencyGraph) -> list[CycleGroup]:
    """Every component that contains a cycle, largest first.

    A component qualifies when it has more than one file, or a single file
    that imports itself.
    """
    adjacency = graph.adjacency()
    groups: list[CycleGroup] = []
    for scc in tarjan_scc(adjacency, graph.nodes):
        if len(scc) == 1:
            (only,) = scc
            if only not in adjacency.get(only, []):
                continue
        internal = sum(1 for e in graph.edges if e.source in scc and e.target in scc)
        groups.append(CycleGroup(nodes=frozenset(scc), internal_edge_count=internal))

    groups.sort(key=lambda g: (-len(g.nodes), sorted(g.nodes)))
    return groups
