"""Repository for story and conversation graphs."""
from __future__ import annotations

import logging
from typing import Dict

from cyoa.data.errors import DataError, DataValidationError
from cyoa.data.repositories.base import RepositoryBase
from cyoa.domain.defs import NarrativeGraph, NarrativeNode
from cyoa.domain.diagnostics import diagnose_graph, format_issue
from cyoa.domain.normalize import normalize_node_messages, normalize_options
from cyoa.errors import GraphUnavailable

logger = logging.getLogger(__name__)


class NarrativeGraphRepository(RepositoryBase):
    """Fetches one narrative file and normalizes every node in it."""

    def load(self, path: str) -> NarrativeGraph:
        """Return the parsed graph stored at ``path``."""
        try:
            raw = self._load_raw(path)
            graph = self._build(raw)
        except DataError as exc:
            logger.warning("Narrative graph %s could not be loaded: %s", path, exc)
            raise GraphUnavailable(f"Story file '{path}' can't load ({exc}).") from exc
        logger.info("Loaded narrative graph %s with %d nodes", path, len(graph.nodes))
        self._report_issues(path, graph)
        return graph

    def _build(self, raw: dict[str, object]) -> NarrativeGraph:
        start_node = self._require_str(raw.get("start_node"), "start_node")
        raw_nodes = self._require_mapping(raw.get("nodes"), "nodes")
        nodes: Dict[str, NarrativeNode] = {}
        for node_id, node_payload in raw_nodes.items():
            context = f"node '{node_id}'"
            node_data = self._require_mapping(node_payload, context)
            is_end = self._require_optional_bool(node_data.get("isEnd"), f"{context} isEnd")
            nodes[node_id] = NarrativeNode(
                id=node_id,
                messages=normalize_node_messages(node_data, context),
                options=normalize_options(node_data, context),
                is_end=is_end,
            )
        if start_node not in nodes:
            raise DataValidationError(f"start_node '{start_node}' is not a defined node.")
        return NarrativeGraph(start_node=start_node, nodes=nodes)

    @staticmethod
    def _report_issues(path: str, graph: NarrativeGraph) -> None:
        for issue in diagnose_graph(graph):
            logger.warning("%s: %s", path, format_issue(issue))
