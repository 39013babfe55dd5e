import json

import pytest

from ctxstore.object_id import ObjectId
from ctxstore.pack import (
    ChunkKind,
    GraphContext,
    PromptPack,
    RetrievedChunk,
    TokenBudget,
    estimate_tokens,
    extract_identifiers,
    looks_like_path,
    normalize_path,
)


def _pack(narrative="", chunks=None):
    if chunks is None:
        chunks = [
            RetrievedChunk(
                title="src/auth.rs",
                object_id=ObjectId(bytes([0x11] * 32)),
                snippet="pub fn login() {}",
                relevance_score=500,
                chunk_kind=ChunkKind.FILE_CONTENT,
            )
        ]
    return PromptPack(
        task="authentication login",
        head_commit=ObjectId(bytes([0xAB] * 32)),
        retrieved=chunks,
        graph_context=GraphContext(
            seed_nodes=["Item::login", "File::src/auth.rs"],
            expanded_nodes=["File::src/auth.rs", "Item::login", "Module::auth"],
            expansion_depth=2,
            scc_dag_used=False,
        ),
        recent_narrative=narrative,
        token_budget=TokenBudget(total=16000, used=4, reserved_for_response=4000),
    )


@pytest.mark.parametrize(
    "text, expected",
    [
        ("src/main.rs", True),
        ("test.py", True),
        ("/absolute/path.js", True),
        ("index.ts", True),
        ("Cargo.toml", True),
        ("README.md", True),
        ("function_name", False),
        ("SomeType", False),
    ],
)
def test_looks_like_path(text, expected):
    assert looks_like_path(text) is expected


def test_extract_identifiers():
    assert extract_identifiers("hello_world") == ["hello_world"]
    assert extract_identifiers("foo::bar::baz") == ["foo", "bar", "baz"]
    assert extract_identifiers("fn test() {}") == ["fn", "test"]


def test_extract_identifiers_empty_and_symbols():
    assert extract_identifiers("") == []
    assert extract_identifiers("::()") == []


def test_estimate_tokens():
    assert estimate_tokens("1234") == 1
    assert estimate_tokens("12345678") == 2
    assert estimate_tokens("hello world") == 2


def test_estimate_tokens_counts_characters():
    assert estimate_tokens("中文中文") == 1
    assert estimate_tokens("abc") == 0


def test_normalize_path():
    assert normalize_path('"src/main.rs"') == "src/main.rs"
    assert normalize_path("'test.py'") == "test.py"
    assert normalize_path("normal.rs") == "normal.rs"


def test_to_text_contains_sections():
    text = _pack().to_text()
    assert text.startswith("# Prompt Pack: authentication login\n\n")
    assert f"**Commit:** {'ab' * 32}\n" in text
    assert "**Tokens:** 4/16000 (reserved: 4000)\n\n" in text
    assert "- Seeds: Item::login, File::src/auth.rs\n" in text
    assert "- Expanded: 3 nodes\n" in text
    assert "- Depth: 2\n\n" in text
    assert "### src/auth.rs (score: 0.500, kind: FileContent)\n\npub fn login() {}\n\n" in text
    assert "## Recent Narrative" not in text


def test_to_text_includes_narrative_when_present():
    text = _pack(narrative="## Task: tasks/task_0001.md\n\nbody").to_text()
    assert "## Recent Narrative\n\n## Task: tasks/task_0001.md\n\nbody\n\n" in text
    assert text.index("## Recent Narrative") < text.index("## Retrieved Content")


def test_to_text_score_formatting():
    chunk = RetrievedChunk(
        title="a.rs",
        object_id=ObjectId(bytes(32)),
        snippet="x",
        relevance_score=333,
        chunk_kind=ChunkKind.SYMBOL_DEFINITION,
    )
    text = _pack(chunks=[chunk]).to_text()
    assert "### a.rs (score: 0.333, kind: SymbolDefinition)" in text


def test_to_json_structure():
    document = json.loads(_pack().to_json())
    assert list(document) == [
        "task",
        "head_commit",
        "retrieved",
        "graph_context",
        "recent_narrative",
        "token_budget",
    ]
    assert document["head_commit"] == [0xAB] * 32
    assert document["retrieved"][0]["chunk_kind"] == "FileContent"
    assert document["retrieved"][0]["relevance_score"] == 500
    assert document["retrieved"][0]["object_id"] == [0x11] * 32
    assert document["graph_context"]["scc_dag_used"] is False
    assert document["token_budget"] == {
        "total": 16000,
        "used": 4,
        "reserved_for_response": 4000,
    }


def test_to_json_keeps_unicode_and_is_pretty():
    text = _pack(narrative="émojis 🚀 中文").to_json()
    assert "émojis 🚀 中文" in text
    assert text.startswith('{\n  "task": "authentication login",')


def test_to_json_empty_retrieved():
    document = json.loads(_pack(chunks=[]).to_json())
    assert document["retrieved"] == []