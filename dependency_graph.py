#!/usr/bin/env python3
"""
Dependency Graph - Task DAG with write-once cumulative offsets per node
"""

from typing import Dict, List, Optional, Sequence

import networkx as nx

from planner_errors import CyclicDependency, DuplicateTask, UnknownDependency
from project_config import Task


class GraphNode:
    """Arena node: a task index, its memoized cumulative offset and its relations"""

    def __init__(self, task_index: int):
        self.task_index = task_index
        self.offset: Optional[float] = None  # days since project start when the task ends
        self.parents: List[int] = []
        self.children: List[int] = []

    @property
    def resolved(self) -> bool:
        return self.offset is not None

    def __repr__(self):
        return (
            f"GraphNode(task={self.task_index}, offset={self.offset}, "
            f"parents={self.parents}, children={self.children})"
        )


class DependencyGraph:
    """Nodes are addressed by index; node i holds tasks[i]"""

    def __init__(self, tasks: Sequence[Task]):
        self.tasks = list(tasks)
        self.nodes: List[GraphNode] = []
        self.starting_points: List[int] = []
        self.lookup: Dict[str, int] = {}
        self._nx_graph = nx.DiGraph()

    @classmethod
    def build(cls, tasks: Sequence[Task]) -> "DependencyGraph":
        """
        Build the task graph

        Args:
            tasks: Tasks in declaration order

        Returns:
            DependencyGraph with parent/child links and starting points

        Raises:
            DuplicateTask, UnknownDependency, CyclicDependency
        """
        graph = cls(tasks)

        # First pass: one node per task
        for i, task in enumerate(graph.tasks):
            if task.id in graph.lookup:
                raise DuplicateTask(task.id)
            graph.lookup[task.id] = i
            graph.nodes.append(GraphNode(i))
            graph._nx_graph.add_node(task.id, task=task)
            if not task.after:
                graph.starting_points.append(i)

        # Second pass: link parents and children
        for i, node in enumerate(graph.nodes):
            task = graph.tasks[node.task_index]
            for dep in task.after:
                if dep not in graph.lookup:
                    raise UnknownDependency(task.id, dep)
                parent_id = graph.lookup[dep]
                graph.nodes[parent_id].children.append(i)
                node.parents.append(parent_id)
                graph._nx_graph.add_edge(dep, task.id)

        if not nx.is_directed_acyclic_graph(graph._nx_graph):
            cycle = nx.find_cycle(graph._nx_graph)
            raise CyclicDependency([u for u, _ in cycle] + [cycle[-1][1]])

        return graph

    def __len__(self):
        return len(self.nodes)

    def task(self, node_id: int) -> Task:
        return self.tasks[self.nodes[node_id].task_index]

    def start_offset(self, node_id: int) -> Optional[float]:
        """Max of the parents' offsets, or None while any parent is unresolved"""
        offset = 0.0
        for parent_id in self.nodes[node_id].parents:
            parent = self.nodes[parent_id]
            if parent.offset is None:
                return None
            offset = max(offset, parent.offset)
        return offset

    def set_offset(self, node_id: int, offset: float) -> None:
        node = self.nodes[node_id]
        if node.offset is not None:
            raise RuntimeError(f"Offset of task '{self.task(node_id).id}' is already set")
        node.offset = offset

    def to_networkx(self) -> nx.DiGraph:
        """Task-id keyed DiGraph mirroring the dependency edges"""
        return self._nx_graph.copy()
