"""Prompt packs and the text helpers used to build them."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any

from .object_id import ObjectId

_PATH_SUFFIXES = (".rs", ".py", ".js", ".ts", ".toml", ".md")


class ChunkKind(enum.Enum):
    """What a retrieved chunk of content holds."""

    FILE_CONTENT = "FileContent"
    NARRATIVE_EXCERPT = "NarrativeExcerpt"
    DECISION = "Decision"
    DIAGNOSTIC_OUTPUT = "DiagnosticOutput"
    SYMBOL_DEFINITION = "SymbolDefinition"


@dataclass
class RetrievedChunk:
    """A piece of retrieved content.

    ``relevance_score`` is fixed-point: 1000 stands for 1.0.
    """

    title: str
    object_id: ObjectId
    snippet: str
    relevance_score: int
    chunk_kind: ChunkKind

    def _to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "object_id": list(self.object_id.raw),
            "snippet": self.snippet,
            "relevance_score": self.relevance_score,
            "chunk_kind": self.chunk_kind.value,
        }


@dataclass
class GraphContext:
    """How the context graph was expanded."""

    seed_nodes: list[str] = field(default_factory=list)
    expanded_nodes: list[str] = field(default_factory=list)
    expansion_depth: int = 0
    scc_dag_used: bool = False

    def _to_dict(self) -> dict[str, Any]:
        return {
            "seed_nodes": list(self.seed_nodes),
            "expanded_nodes": list(self.expanded_nodes),
            "expansion_depth": self.expansion_depth,
            "scc_dag_used": self.scc_dag_used,
        }


@dataclass
class TokenBudget:
    """Token accounting for a pack."""

    total: int
    used: int
    reserved_for_response: int

    def _to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "used": self.used,
            "reserved_for_response": self.reserved_for_response,
        }


@dataclass
class PromptPack:
    """Retrieved context for a task, with budget and graph details."""

    task: str
    head_commit: ObjectId
    retrieved: list[RetrievedChunk]
    graph_context: GraphContext
    recent_narrative: str
    token_budget: TokenBudget

    def to_json(self) -> str:
        """Return the pack as pretty-printed JSON."""
        document = {
            "task": self.task,
            "head_commit": list(self.head_commit.raw),
            "retrieved": [chunk._to_dict() for chunk in self.retrieved],
            "graph_context": self.graph_context._to_dict(),
            "recent_narrative": self.recent_narrative,
            "token_budget": self.token_budget._to_dict(),
        }
        return json.dumps(document, indent=2, ensure_ascii=False)

    def to_text(self) -> str:
        """Return the pack formatted as Markdown."""
        budget = self.token_budget
        graph = self.graph_context
        parts = [
            f"# Prompt Pack: {self.task}\n\n",
            f"**Commit:** {self.head_commit}\n",
            f"**Tokens:** {budget.used}/{budget.total} "
            f"(reserved: {budget.reserved_for_response})\n\n",
            "## Graph Context\n\n",
            f"- Seeds: {', '.join(graph.seed_nodes)}\n",
            f"- Expanded: {len(graph.expanded_nodes)} nodes\n",
            f"- Depth: {graph.expansion_depth}\n\n",
        ]
        if self.recent_narrative:
            parts.append("## Recent Narrative\n\n")
            parts.append(self.recent_narrative)
            parts.append("\n\n")
        parts.append("## Retrieved Content\n\n")
        for chunk in self.retrieved:
            score = chunk.relevance_score / 1000.0
            parts.append(
                f"### {chunk.title} (score: {score:.3f}, kind: {chunk.chunk_kind.value})\n\n"
            )
            parts.append(chunk.snippet)
            parts.append("\n\n")
        return "".join(parts)


def estimate_tokens(text: str) -> int:
    """Estimate a token count as the number of characters divided by four."""
    return len(text) // 4


def looks_like_path(text: str) -> bool:
    """Return True if ``text`` looks like a file path."""
    return "/" in text or text.endswith(_PATH_SUFFIXES)


def normalize_path(path: str) -> str:
    """Strip surrounding single and double quotes from a path."""
    return path.strip("\"'")


def _is_ident_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def extract_identifiers(text: str) -> list[str]:
    """Return the runs of alphanumeric or underscore characters in ``text``."""
    identifiers = []
    current: list[str] = []
    for char in text:
        if _is_ident_char(char):
            current.append(char)
        elif current:
            identifiers.append("".join(current))
            current = []
    if current:
        identifiers.append("".join(current))
    return identifiers