"""
Source-code reshaping for explorer ``getsourcecode`` / ``getabi`` results.

Multi-file verified contracts come back as a standard-JSON input document
wrapped in one extra pair of braces (``{{ ... }}``); single-file contracts come
back as plain Solidity. ``normalize_source`` flattens the former into one
single-file-style text and leaves the latter alone.
"""

import json
from dataclasses import dataclass
from typing import List, Tuple, Union

HEADER_PREFIXES = ("pragma solidity", "import")


@dataclass(frozen=True)
class ParsedMultiFile:
    files: Tuple[Tuple[str, str], ...]  # (path, content) in document order


@dataclass(frozen=True)
class PlainText:
    text: str


ParsedSource = Union[ParsedMultiFile, PlainText]


def _try_json(text: str):
    try:
        return True, json.loads(text)
    except ValueError:
        return False, None


def parse_source(raw: str) -> ParsedSource:
    """Classify ``raw`` as a wrapped multi-file bundle or plain source text."""
    if len(raw) < 2:
        return PlainText(raw)

    ok, parsed = _try_json(raw[1:-1])
    if not ok or not isinstance(parsed, dict):
        return PlainText(raw)

    sources = parsed.get("sources")
    if not isinstance(sources, dict):
        return PlainText(raw)

    files: List[Tuple[str, str]] = []
    for path, meta in sources.items():
        if not isinstance(meta, dict) or not isinstance(meta.get("content"), str):
            return PlainText(raw)
        files.append((path, meta["content"]))
    return ParsedMultiFile(tuple(files))


def strip_file_header(content: str) -> str:
    lines = content.split("\n")
    return "\n".join(line for line in lines if not line.startswith(HEADER_PREFIXES))


def normalize_source(raw: str) -> str:
    """
    Concatenate a multi-file bundle into one text.

    Each file is preceded by a newline; every file after the first loses its
    ``pragma solidity`` and ``import`` lines so a single header block remains.
    Plain source is returned unchanged.
    """
    parsed = parse_source(raw)
    if isinstance(parsed, PlainText):
        return parsed.text

    out = ""
    for index, (_, content) in enumerate(parsed.files):
        out += "\n" + (content if index == 0 else strip_file_header(content))
    return out


def format_abi(abi: str) -> str:
    """Pretty-print ABI JSON; non-JSON text (e.g. "Contract source code not verified") passes through."""
    ok, parsed = _try_json(abi)
    if not ok:
        return abi
    return json.dumps(parsed, indent=2, ensure_ascii=False)
