"""The passes that turn page text into token-bounded hierarchical chunks."""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Callable, Iterable, Sequence

DEFAULT_MAX_TOKENS = 512
DEFAULT_OVERLAP_TOKENS = 50
DEFAULT_MIN_TOKENS = 150
_NO_HEADING = 999

TokenCounter = Callable[[str], int]

_HEADING_RE = re.compile(r"(#+)\s+([^\r\n]+)")
_LIST_RE = re.compile(r"\s*[-*+\u2022]\s+([^\r\n]+)|\s*\d+\.\s+([^\r\n]+)")


class LineType(Enum):
    """Kind of a single line of page text."""

    NORMAL = auto()
    MAJOR_HEADING = auto()
    MINOR_HEADING = auto()
    LIST_ITEM = auto()
    BLANK = auto()
    CODE_BLOCK = auto()


_HEADINGS = frozenset({LineType.MAJOR_HEADING, LineType.MINOR_HEADING})


@dataclass
class AnnotatedLine:
    """A line with its type, token count and page."""

    text: str
    type: LineType
    tokens: int
    page: int
    heading_level: int = 0


@dataclass
class SemanticUnit:
    """A run of related lines, usually a heading and what follows it."""

    lines: list[AnnotatedLine] = field(default_factory=list)
    total_tokens: int = 0
    pages: set[int] = field(default_factory=set)
    has_major_heading: bool = False
    max_heading_level: int = _NO_HEADING

    def add_line(self, line: AnnotatedLine) -> None:
        self.lines.append(line)
        self.total_tokens += line.tokens
        self.pages.add(line.page)
        if line.type is LineType.MAJOR_HEADING:
            self.has_major_heading = True
            self.max_heading_level = min(self.max_heading_level, line.heading_level)

    def text(self) -> str:
        """The unit's lines, each ending in a newline."""
        return "".join(line.text + "\n" for line in self.lines)


@dataclass
class Chunk:
    """A piece of output text with its token count and page range."""

    text: str = ""
    tokens: int = 0
    start_page: int = -1
    end_page: int = -1
    overlap_text: str = ""
    overlap_tokens: int = 0
    has_major_heading: bool = False
    min_heading_level: int = _NO_HEADING

    def _absorb(self, other: "Chunk") -> None:
        self.text += other.text
        self.tokens += other.tokens
        self.end_page = other.end_page
        if other.has_major_heading:
            self.has_major_heading = True
            self.min_heading_level = min(self.min_heading_level, other.min_heading_level)


def _split_lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return parts


def _half(value: int) -> int:
    return int(value / 2)


def detect_line_type(line: str) -> tuple[LineType, int]:
    """Classify a line; the second item is the heading level, 0 if none."""
    if not line or line.isspace():
        return LineType.BLANK, 0

    match = _HEADING_RE.fullmatch(line)
    if match:
        level = len(match.group(1))
        kind = LineType.MAJOR_HEADING if level <= 2 else LineType.MINOR_HEADING
        return kind, level

    if _LIST_RE.fullmatch(line):
        return LineType.LIST_ITEM, 0

    if "```" in line or line.startswith("  "):
        return LineType.CODE_BLOCK, 0

    return LineType.NORMAL, 0


def annotate_lines(
    pages: Iterable[tuple[str, int]], count_tokens: TokenCounter
) -> list[AnnotatedLine]:
    """Pass 1: split pages into lines tagged with type and token count."""
    annotated = []
    for page_text, page_num in pages:
        for line in _split_lines(page_text):
            kind, level = detect_line_type(line)
            annotated.append(AnnotatedLine(line, kind, count_tokens(line), page_num, level))
    return annotated


def create_semantic_units(lines: Sequence[AnnotatedLine]) -> list[SemanticUnit]:
    """Pass 2: group lines into units that break before each heading."""
    lines = list(lines)
    units = []
    current = SemanticUnit()
    for line, following in zip(lines, [*lines[1:], None]):
        should_break = line.type in _HEADINGS or (
            line.type is LineType.BLANK
            and following is not None
            and following.type in _HEADINGS
        )
        if should_break and current.lines:
            units.append(current)
            current = SemanticUnit()
        if not (line.type is LineType.BLANK and not current.lines):
            current.add_line(line)
    if current.lines:
        units.append(current)
    return units


def create_initial_chunks(units: Iterable[SemanticUnit], max_tokens: int) -> list[Chunk]:
    """Pass 3: pack whole units into chunks of at most ``max_tokens``."""
    chunks = []
    current = Chunk()
    for unit in units:
        if current.text and current.tokens + unit.total_tokens > max_tokens:
            chunks.append(current)
            current = Chunk()
        current.text += unit.text()
        current.tokens += unit.total_tokens
        if unit.pages:
            if current.start_page == -1:
                current.start_page = min(unit.pages)
            current.end_page = max(unit.pages)
        if unit.has_major_heading:
            current.has_major_heading = True
            current.min_heading_level = min(current.min_heading_level, unit.max_heading_level)
    if current.text:
        chunks.append(current)
    return chunks


def add_overlap(
    chunks: Sequence[Chunk], overlap_tokens: int, count_tokens: TokenCounter
) -> list[Chunk]:
    """Pass 4: give each chunk the tail of its predecessor as overlap text."""
    result = [replace(chunk) for chunk in chunks]
    for previous, chunk in zip(result, result[1:]):
        prev_text = previous.text
        if overlap_tokens < 0:
            take = len(prev_text)
        else:
            take = min(len(prev_text), overlap_tokens * 5)
        overlap = prev_text[len(prev_text) - take:]
        while count_tokens(overlap) > overlap_tokens and len(overlap) > 10:
            overlap = overlap[10:]
        chunk.overlap_text = overlap
        chunk.overlap_tokens = count_tokens(overlap)
    return result


def merge_small_chunks_hierarchically(
    chunks: Sequence[Chunk], min_tokens: int, max_tokens: int
) -> list[Chunk]:
    """Pass 5: merge small chunks forward, respecting major headings."""
    pending = deque(chunks)
    merged = []
    while pending:
        current = replace(pending.popleft())
        while current.tokens < min_tokens and pending:
            following = pending[0]
            combined = current.tokens + following.tokens
            should_merge = combined <= max_tokens or (
                combined <= max_tokens * 1.1 and following.tokens < _half(min_tokens)
            )
            if (
                following.has_major_heading
                and following.min_heading_level <= 2
                and current.tokens >= _half(min_tokens)
            ):
                should_merge = False
            if not should_merge:
                break
            current._absorb(following)
            pending.popleft()
        merged.append(current)
    return merged


def split_oversized_chunks(
    chunks: Iterable[Chunk], max_tokens: int, count_tokens: TokenCounter
) -> list[Chunk]:
    """Pass 6: split chunks above ``max_tokens`` at line boundaries."""
    result = []
    for chunk in chunks:
        if chunk.tokens <= max_tokens:
            result.append(chunk)
            continue
        piece = Chunk(start_page=chunk.start_page)
        for line in _split_lines(chunk.text):
            line_tokens = count_tokens(line)
            if (
                piece.text
                and piece.tokens + line_tokens > max_tokens
                and piece.tokens >= max_tokens * 0.8
            ):
                piece.end_page = chunk.end_page
                result.append(piece)
                piece = Chunk(start_page=chunk.start_page)
            piece.text += line + "\n"
            piece.tokens += line_tokens
        if piece.text:
            piece.end_page = chunk.end_page
            result.append(piece)
    return result


def final_merge_pass(
    chunks: Sequence[Chunk], min_tokens: int, max_tokens: int
) -> list[Chunk]:
    """Pass 7: merge remaining small chunks without ever exceeding ``max_tokens``."""
    pending = deque(chunks)
    final: list[Chunk] = []
    while pending:
        current = replace(pending.popleft())
        while (
            current.tokens < min_tokens
            and pending
            and current.tokens + pending[0].tokens <= max_tokens
        ):
            current._absorb(pending.popleft())
        if (
            current.tokens < min_tokens
            and final
            and final[-1].tokens + current.tokens <= max_tokens
        ):
            final[-1]._absorb(current)
            continue
        final.append(current)
    return final


def create_hierarchical_chunks(
    pages: Iterable[tuple[str, int]],
    count_tokens: TokenCounter,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    overlap_tokens: int = DEFAULT_OVERLAP_TOKENS,
    min_tokens: int = DEFAULT_MIN_TOKENS,
) -> list[Chunk]:
    """Run every pass over ``(text, page_number)`` pairs and return the chunks."""
    non_empty = [(text, page) for text, page in pages if text]
    if not non_empty:
        return []
    lines = annotate_lines(non_empty, count_tokens)
    units = create_semantic_units(lines)
    chunks = create_initial_chunks(units, max_tokens)
    chunks = add_overlap(chunks, overlap_tokens, count_tokens)
    chunks = merge_small_chunks_hierarchically(chunks, min_tokens, max_tokens)
    chunks = split_oversized_chunks(chunks, max_tokens, count_tokens)
    chunks = final_merge_pass(chunks, min_tokens, max_tokens)
    for chunk in chunks:
        chunk.tokens = count_tokens(chunk.text)
    return chunks