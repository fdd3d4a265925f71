"""Chunk page text into token-bounded pieces and export them as JSON."""

from __future__ import annotations

import hashlib
import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable

from quillchunk.passes import create_hierarchical_chunks

TokenCounter = Callable[[str], int]

SCHEMA_NAME = "docling_core.transforms.chunker.DocMeta"
SCHEMA_VERSION = "1.0.0"


@dataclass
class ChunkOptions:
    """Settings for hierarchical chunking."""

    max_tokens: int = 512
    min_tokens: int = 150
    overlap_tokens: int = 0
    thread_count: int = 0  # 0 means one per available CPU


@dataclass
class ChunkResult:
    """One finished chunk."""

    text: str
    token_count: int
    start_page: int
    end_page: int
    has_major_heading: bool
    min_heading_level: int


@dataclass
class ChunkingResult:
    """All chunks produced from one document, with summary figures."""

    chunks: list[ChunkResult] = field(default_factory=list)
    total_pages: int = 0
    total_chunks: int = 0
    processing_time_ms: float = 0.0


def _name_hash(name: str) -> int:
    digest = hashlib.sha256(name.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=True)


class HierarchicalChunker:
    """Split the text of numbered pages into hierarchical chunks."""

    def __init__(
        self, count_tokens: TokenCounter, options: ChunkOptions | None = None
    ) -> None:
        self.count_tokens = count_tokens
        self.options = options if options is not None else ChunkOptions()

    def chunk_pages(
        self, pages: Iterable[tuple[str, int]], page_limit: int = -1
    ) -> ChunkingResult:
        """Chunk ``(text, page_number)`` pairs, reading at most ``page_limit`` pages when positive."""
        start = time.perf_counter()
        taken: list[tuple[str, int]] = []
        for text, page_number in pages:
            taken.append((text, page_number))
            if 0 < page_limit <= len(taken):
                break

        chunks = create_hierarchical_chunks(
            taken,
            self.count_tokens,
            self.options.max_tokens,
            self.options.overlap_tokens,
            self.options.min_tokens,
        )
        results = [
            ChunkResult(
                text=chunk.text,
                token_count=chunk.tokens,
                start_page=chunk.start_page,
                end_page=chunk.end_page,
                has_major_heading=chunk.has_major_heading,
                min_heading_level=chunk.min_heading_level,
            )
            for chunk in chunks
        ]
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        return ChunkingResult(
            chunks=results,
            total_pages=len(taken),
            total_chunks=len(results),
            processing_time_ms=elapsed_ms,
        )

    def to_json(self, result: ChunkingResult, source_name: str) -> list[dict[str, Any]]:
        """Describe each chunk of ``result`` as a JSON-ready record."""
        origin = {
            "mimetype": "application/pdf",
            "binary_hash": _name_hash(source_name),
            "filename": Path(source_name).name,
            "uri": None,
        }
        records = []
        for index, chunk in enumerate(result.chunks):
            meta = {
                "schema_name": SCHEMA_NAME,
                "version": SCHEMA_VERSION,
                "start_page": chunk.start_page,
                "end_page": chunk.end_page,
                "page_count": chunk.end_page - chunk.start_page + 1,
                "chunk_index": index,
                "total_chunks": result.total_chunks,
                "token_count": chunk.token_count,
                "has_major_heading": chunk.has_major_heading,
                "min_heading_level": chunk.min_heading_level,
                "origin": dict(origin),
                "doc_items": [],
                "headings": [],
                "captions": None,
            }
            records.append({"text": chunk.text, "meta": meta})
        return records

    def write_json(
        self,
        pages: Iterable[tuple[str, int]],
        output_path: str | Path,
        source_name: str,
        page_limit: int = -1,
    ) -> ChunkingResult:
        """Chunk ``pages`` and write the records to ``output_path`` as indented JSON."""
        result = self.chunk_pages(pages, page_limit)
        records = self.to_json(result, source_name)
        with open(output_path, "w", encoding="utf-8") as out:
            json.dump(records, out, indent=2, ensure_ascii=False)
        return result