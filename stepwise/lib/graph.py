"""
Graph primitives over a plan's steps.

Pure functions: nothing here mutates a step or keeps state between calls.
Edges point from a step to the steps it depends on. Dangling dependency ids
are ignored by the traversals and reported separately by
find_missing_dependencies().

All traversals use an explicit stack so deep dependency chains cannot hit
the interpreter's recursion limit.
"""

from collections import defaultdict
from typing import Iterable

from stepwise.lib.types import PlanStep

# DFS colors
WHITE = 0
GRAY = 1
BLACK = 2


def dependency_map(steps: Iterable[PlanStep]) -> dict[str, list[str]]:
    """Map each step id to its resolvable dependency ids.

    Dangling references and duplicates are dropped. Keys keep step order.
    """
    steps = list(steps)
    known = {s.id for s in steps}
    graph: dict[str, list[str]] = {}
    for step in steps:
        deps = []
        for dep in step.dependencies:
            if dep in known and dep not in deps:
                deps.append(dep)
        graph[step.id] = deps
    return graph


def detect_cycles(steps: list[PlanStep]) -> list[str]:
    """Find steps that take part in a dependency cycle.

    White/gray/black DFS started from every step, so disconnected fragments
    are covered too. A step reached while it is still gray (on the stack)
    closes a cycle and is reported once, by title.

    Returns:
        One issue message per step that closes a cycle.
    """
    graph = dependency_map(steps)
    titles = {s.id: s.title for s in steps}
    color = {step_id: WHITE for step_id in graph}
    reported: set[str] = set()
    issues: list[str] = []

    for root in graph:
        if color[root] != WHITE:
            continue
        color[root] = GRAY
        stack = [(root, iter(graph[root]))]
        while stack:
            node, deps = stack[-1]
            for dep in deps:
                if color[dep] == GRAY:
                    if dep not in reported:
                        reported.add(dep)
                        issues.append(f'Circular dependency detected involving step "{titles[dep]}"')
                elif color[dep] == WHITE:
                    color[dep] = GRAY
                    stack.append((dep, iter(graph[dep])))
                    break
            else:
                color[node] = BLACK
                stack.pop()

    return issues


def find_missing_dependencies(steps: list[PlanStep]) -> list[tuple[PlanStep, str]]:
    """Return (step, dependency_id) for every dependency that resolves to no step."""
    known = {s.id for s in steps}
    missing = []
    for step in steps:
        for dep in step.dependencies:
            if dep not in known:
                missing.append((step, dep))
    return missing


def post_order(graph: dict[str, list[str]]) -> list[str]:
    """Order node ids so every dependency comes before its dependents.

    Edges that close a cycle are skipped, which makes the order well defined
    (and the callers terminate) on cyclic input.
    """
    order: list[str] = []
    done: set[str] = set()
    on_stack: set[str] = set()

    for root in graph:
        if root in done:
            continue
        on_stack.add(root)
        stack = [(root, iter(graph[root]))]
        while stack:
            node, deps = stack[-1]
            for dep in deps:
                if dep not in done and dep not in on_stack:
                    on_stack.add(dep)
                    stack.append((dep, iter(graph[dep])))
                    break
            else:
                stack.pop()
                on_stack.discard(node)
                done.add(node)
                order.append(node)

    return order


def longest_chains(steps: list[PlanStep]) -> dict[str, list[str]]:
    """Longest dependency chain ending at each step, root first.

    A step without dependencies is its own chain of length 1. Otherwise the
    chain is the longest chain among its dependencies with the step appended.
    Ties go to the dependency listed first.
    """
    graph = dependency_map(steps)
    chains: dict[str, list[str]] = {}
    for node in post_order(graph):
        best: list[str] = []
        for dep in graph[node]:
            chain = chains.get(dep)  # None for a cycle back-edge
            if chain is not None and len(chain) > len(best):
                best = chain
        chains[node] = best + [node]
    return chains


def critical_path(steps: list[PlanStep]) -> list[str]:
    """The longest dependency chain in the plan, as step ids root first.

    Ties are broken by step order: the first step with the longest chain wins.
    """
    chains = longest_chains(steps)
    path: list[str] = []
    for step in steps:
        chain = chains[step.id]
        if len(chain) > len(path):
            path = chain
    return list(path)


def dependency_depths(steps: list[PlanStep]) -> dict[str, int]:
    """Depth of every step: 0 without dependencies, else 1 + max depth of its dependencies."""
    graph = dependency_map(steps)
    depths: dict[str, int] = {}
    for node in post_order(graph):
        resolved = [depths[d] for d in graph[node] if d in depths]
        depths[node] = 1 + max(resolved) if resolved else 0
    return depths


def parallel_groups(steps: list[PlanStep]) -> list[list[str]]:
    """Group step ids sharing a dependency depth.

    Only groups with two or more members are returned, shallowest first,
    members in step order.
    """
    depths = dependency_depths(steps)
    buckets: dict[int, list[str]] = defaultdict(list)
    for step in steps:
        buckets[depths[step.id]].append(step.id)
    return [buckets[d] for d in sorted(buckets) if len(buckets[d]) > 1]
