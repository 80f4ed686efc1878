"""
流程图模块

有向图：节点为步骤 ID，边带有结果标签。每个节点的出边按加入顺序保存，
同一标签有多条出边时总是选择最先声明的一条，保证路由结果可复现。
"""

from collections import OrderedDict
from typing import Dict, Iterable, List, Optional

from taskflow.core.errors import FlowGraphError
from .parsers.script import EdgeRecord


ALWAYS_LABEL = "always"


class FlowGraph:
    """
    流程图

    Attributes:
        nodes: 按声明顺序排列的步骤 ID
    """

    def __init__(self):
        self._out_edges: "OrderedDict[str, List[EdgeRecord]]" = OrderedDict()
        self._in_degree: Dict[str, int] = {}

    @classmethod
    def from_records(cls, step_ids: Iterable[str], edges: Iterable[EdgeRecord]) -> "FlowGraph":
        """由步骤 ID 与边声明构建流程图"""
        graph = cls()
        for step_id in step_ids:
            graph.add_node(step_id)
        for edge in edges:
            graph.add_edge(edge.source_id, edge.target_id, edge.outcome_label)
        return graph

    @property
    def nodes(self) -> List[str]:
        return list(self._out_edges.keys())

    def __contains__(self, step_id: str) -> bool:
        return step_id in self._out_edges

    def __len__(self) -> int:
        return len(self._out_edges)

    def add_node(self, step_id: str) -> bool:
        """加入节点，已存在时返回 False"""
        if step_id in self._out_edges:
            return False
        self._out_edges[step_id] = []
        self._in_degree[step_id] = 0
        return True

    def add_edge(self, source: str, target: str, label: str) -> Optional[EdgeRecord]:
        """
        加入一条边

        任一端点不在图中时忽略该边并返回 None。
        """
        if source not in self._out_edges or target not in self._out_edges:
            return None
        edge = EdgeRecord(source_id=source, target_id=target, outcome_label=label)
        self._out_edges[source].append(edge)
        self._in_degree[target] += 1
        return edge

    def out_edges(self, step_id: str) -> List[EdgeRecord]:
        """节点的出边（按加入顺序）"""
        return list(self._out_edges.get(step_id, []))

    def edge_count(self) -> int:
        return sum(len(edges) for edges in self._out_edges.values())

    def in_degree(self, step_id: str) -> int:
        return self._in_degree.get(step_id, 0)

    def entry_candidates(self) -> List[str]:
        """所有入度为 0 的节点（按声明顺序）"""
        return [node for node in self._out_edges if self._in_degree[node] == 0]

    def entry_node(self) -> str:
        """
        唯一的入口节点

        Raises:
            FlowGraphError: 没有或有多个入度为 0 的节点
        """
        candidates = self.entry_candidates()
        if not candidates:
            raise FlowGraphError("流程没有入口步骤", candidates=[])
        if len(candidates) > 1:
            raise FlowGraphError(
                f"流程存在多个入口步骤: {', '.join(candidates)}",
                candidates=candidates,
            )
        return candidates[0]

    def has_edge_label(self, step_id: str, label: str) -> bool:
        return any(edge.outcome_label == label for edge in self._out_edges.get(step_id, []))

    def find_next(self, step_id: str, label: str) -> Optional[str]:
        """按标签查找后继节点，取第一条匹配的边"""
        for edge in self._out_edges.get(step_id, []):
            if edge.outcome_label == label:
                return edge.target_id
        return None

    def route(self, step_id: str, outcome_label: str) -> Optional[str]:
        """
        根据步骤结果选择后继节点

        存在 always 边时忽略结果直接走 always 边。
        """
        if self.has_edge_label(step_id, ALWAYS_LABEL):
            return self.find_next(step_id, ALWAYS_LABEL)
        return self.find_next(step_id, outcome_label)

    def __repr__(self) -> str:
        return f"FlowGraph(nodes={len(self)}, edges={self.edge_count()})"


__all__ = ["ALWAYS_LABEL", "FlowGraph"]
