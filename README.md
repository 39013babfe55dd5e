# ctxstore

A small storage layer for tracking the context an agent works in:

- **Content-addressed objects**: raw blobs and JSON-compatible values are
  wrapped in a canonical envelope (`CTXO1`, a kind byte, a little-endian
  length, the payload), identified by the BLAKE3 hash of that envelope,
  compressed with zstd and written atomically into a sharded directory
  (`objects/ab/abcd…`). Every read is checked against the hash.
- **Refs**: `HEAD`, an optional `STAGE` and named refs (`refs/main`,
  `refs/heads/feature`) stored as one-line hex files, written atomically.
- **Narrative space**: Markdown documents under `narrative/` (daily logs,
  numbered task files) with change detection against earlier snapshots.
- **Prompt packs**: a structured bundle of retrieved content, graph context
  and token accounting, renderable as JSON or readable text.

BLAKE3 is implemented in pure Python (`ctxstore.blake3.blake3_hash`); the only
third-party dependency is `zstandard`.

## Installation

```
pip install ctxstore
```

## Object ids

```python
from ctxstore.object_id import ObjectId, hash_blob

oid = ObjectId.from_hex("ab" * 32)   # surrounding whitespace is ignored
print(oid.hex(), oid.shard())        # 64 hex chars, "ab"
print(hash_blob(b"hello"))
```

`ObjectId.from_hex` raises `InvalidHexError` for a wrong length or a non-hex
character.

## Objects

```python
from ctxstore.object_store import ObjectStore

store = ObjectStore(".ctx/objects")
blob_id = store.put_blob(b"hello world")
assert store.get_blob(blob_id) == b"hello world"

typed_id = store.put_typed({"name": "test", "values": [1, 2, 3]})
print(store.get_typed(typed_id))

for info in store.list_all_objects():
    print(info.object_id, info.size, info.modified)
```

Typed values are serialized as compact JSON with sorted keys, so equal values
always get the same id. Storing the same content twice gives the same id and
one file on disk. A blob over 100 MB raises `BlobTooLargeError`; a missing
object raises `ObjectNotFoundError`; a damaged file raises
`CorruptedObjectError`, `HashMismatchError` or `CompressionError`; reading a
blob as typed (or the reverse) raises `CorruptedObjectError`. `delete()`
removes an object without any reachability check. All of these errors derive
from `ctxstore.errors.CtxError`.

## Refs

```python
from ctxstore.refs import Refs

refs = Refs(".ctx")
refs.write_head(blob_id)
refs.write_ref("heads/feature", blob_id)
print(refs.read_head())
print(refs.list_refs())       # sorted (name, ObjectId) pairs
print(refs.read_stage())      # None when no staging area exists
refs.delete_stage()           # no-op when STAGE is absent
```

A missing ref raises `RefNotFoundError`; malformed content raises
`InvalidRefError`.

## Narrative

```python
from ctxstore.narrative import NarrativeSpace

narrative = NarrativeSpace(".ctx")
narrative.ensure_structure()
narrative.append_log("2026-01-22", "10:30", "Started on the parser")
task = narrative.create_task("Fix the bug", "Details here")
narrative.update_task(task.task_id, "in_progress", "Reproduced it")

changed = narrative.snapshot_changed(store, [], "agent")
for ref in changed:
    print(ref.path, ref.blob_id)
print(NarrativeSpace.read_from_blob(store, changed[0].blob_id))
```

Tasks are numbered one past the highest existing `task_NNNN.md`. Updating a
missing task raises `FileNotFoundError` listing the available tasks; a task
file without a `**Status:**` line raises `ValueError`. `snapshot_changed`
stores every narrative file and returns `NarrativeRef`s only for files that
are new or whose blob id differs from the previous refs. The file-format
helpers (`task_filename`, `parse_task_id`, `task_content`, `replace_status`)
live in `ctxstore.narrative_types`.

## Prompt packs

`ctxstore.pack` holds `PromptPack`, `RetrievedChunk`, `ChunkKind`,
`GraphContext` and `TokenBudget`, with `to_json()` and `to_text()` for output,
plus the helpers `estimate_tokens` (characters / 4), `looks_like_path`,
`normalize_path` and `extract_identifiers`.

## What this package does not do

It has no repository object tying the pieces together: no commits, trees,
sessions, name/path index or graph expansion. Prompt packs are data types you
fill in yourself; nothing here builds one from a query. There is no garbage
collector and no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```