# quillchunk

Split paged text into chunks that respect a token budget and follow the
document's structure.

quillchunk works on text that has already been pulled out of a document page
by page. It recognises Markdown-style headings, list items and code lines,
groups related lines into semantic units, and builds chunks from them in
several passes:

1. annotate every line with its type and token count;
2. group lines into semantic units that start at headings;
3. pack units into chunks of up to `max_tokens`;
4. record overlap text taken from the end of the previous chunk;
5. merge chunks smaller than `min_tokens` into the chunks that follow, but
   do not pull a level-1 or level-2 heading into a chunk that already holds
   at least half of `min_tokens`;
6. split chunks that are still over `max_tokens` at line boundaries;
7. make a final merge pass that never goes over `max_tokens`.

Finally every chunk's token count is recomputed from its text.

Token counting is up to you: pass any callable that takes a string and
returns an integer. The package has no runtime dependencies.

## Installation

Install from a checkout with pip; the `test` extra adds pytest.

## Chunking pages

Pages are given as `(text, page_number)` pairs. Pages with empty text are
ignored when chunking.

```python
from quillchunk.chunker import ChunkOptions, HierarchicalChunker


def count_tokens(text: str) -> int:
    return len(text.split())


pages = [
    ("# Introduction\n\nSome opening text.\n\n## Background\n\nMore text.", 0),
    ("## Method\n\n- first step\n- second step", 1),
]

chunker = HierarchicalChunker(count_tokens, ChunkOptions(max_tokens=512, min_tokens=150))
result = chunker.chunk_pages(pages, page_limit=0)

for chunk in result.chunks:
    print(chunk.start_page, chunk.end_page, chunk.token_count, chunk.has_major_heading)
print(result.total_pages, result.total_chunks, result.processing_time_ms)
```

`ChunkOptions` holds `max_tokens` (default 512), `min_tokens` (default 150),
`overlap_tokens` (default 0) and `thread_count` (default 0). `thread_count`
is kept with the options but chunking does not use it. A positive
`page_limit` stops reading pages after that many; 0 or less takes every page.

Each `ChunkResult` carries `text`, `token_count`, `start_page`, `end_page`,
`has_major_heading` and `min_heading_level` (999 when the chunk has no
level-1 or level-2 heading).

## JSON output

`to_json(result, source_name)` turns a result into a list of records. Each
record holds the chunk `text` and a `meta` block with `schema_name`,
`version`, `start_page`, `end_page`, `page_count`, `chunk_index`,
`total_chunks`, `token_count`, `has_major_heading`, `min_heading_level`, and
an `origin` with the mimetype `application/pdf`, a 64-bit hash of
`source_name`, and the file name part of `source_name`.

`write_json(pages, output_path, source_name, page_limit)` chunks the pages,
writes the records to `output_path` as JSON indented by two spaces, and
returns the `ChunkingResult`. The directory of `output_path` must already
exist.

```python
records = chunker.to_json(result, "report.pdf")
chunker.write_json(pages, "report_hierarchical_chunks.json", "report.pdf", page_limit=0)
```

## Distribution report

```python
from quillchunk.report import analyze_chunk_distribution

report = analyze_chunk_distribution([c.token_count for c in result.chunks], min_tokens=150)
print(report.format())
```

`DistributionReport` gives the number of chunks, the smallest, largest and
(truncated) average token counts, the 20th, 40th, 60th and 80th percentiles,
a count per token range (`1-50`, `51-100`, `101-200`, up to `501-512` and
`513+`), and how many chunks fall below `min_tokens`. With no token counts,
`format()` reports that no chunks were created.

## Lower-level pieces

The individual passes live in `quillchunk.passes`: `detect_line_type`,
`annotate_lines`, `create_semantic_units`, `create_initial_chunks`,
`add_overlap`, `merge_small_chunks_hierarchically`, `split_oversized_chunks`,
`final_merge_pass`, and `create_hierarchical_chunks`, which runs them all in
order. `detect_line_type` returns a `LineType` and a heading level: `#` and
`##` headings are major, deeper ones minor; lines starting with `-`, `*`,
`+`, `•` or `N.` followed by whitespace are list items; lines containing
three backticks or starting with two spaces count as code.

`quillchunk.threadpool.ThreadPool` is a small fixed-size worker pool.
`submit` returns a `concurrent.futures.Future`, `wait_all` blocks until every
submitted task has finished, `queue_size` and `active_threads` report
waiting and unfinished tasks, and `shutdown` (also run on leaving a `with`
block) lets queued work finish and joins the workers. Submitting after
shutdown raises `RuntimeError`.

```python
from quillchunk.threadpool import ThreadPool

with ThreadPool(4) as pool:
    futures = [pool.submit(pow, i, 2) for i in range(10)]
    squares = [f.result() for f in futures]
```

## What it does not do

quillchunk does not open or read PDF or other document files: you supply the
text of each page yourself. It ships no tokenizer and no command-line
program, and the chunker does not use the thread pool.