"""Content-addressed object storage, refs, narrative documents and prompt packs."""

__version__ = "0.1.0"

__all__ = [
    "blake3",
    "errors",
    "fsutil",
    "narrative",
    "narrative_types",
    "object_id",
    "object_store",
    "pack",
    "refs",
]