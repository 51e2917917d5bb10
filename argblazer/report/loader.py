"""
report/loader.py — YAML framework documents

A document is a YAML mapping with an ``arguments`` list (or mapping),
an optional ``attacks`` list and an optional free-text ``exhibit``:

    exhibit: |
      # the text the arguments were drawn from
      ...
    arguments:
      - a: [top]
      - b: [{step: 2}]
      - c
    attacks:
      - [b, a]
      - [c, b]

The exhibit is re-read from the raw text so that comments and line
breaks survive; the YAML parser would drop them.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from argblazer.argumentation.errors import InvalidDocument, InvalidFramework
from argblazer.models import FrameworkDocument

log = logging.getLogger("argblazer.report")

MAX_DOCUMENT_CHARS = int(os.environ.get("ARGBLAZER_MAX_DOCUMENT_CHARS", "200000"))

_EXHIBIT_KEY = re.compile(r"^exhibit\s*:\s*(.*)")
_BLOCK_INDICATORS = ("|", ">", "|-", ">-")


class CoreSchemaLoader(yaml.SafeLoader):
    """SafeLoader with YAML 1.2 booleans: `no`, `on`, `yes` and `off` stay strings."""


CoreSchemaLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
CoreSchemaLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    where = ".".join(str(p) for p in first.get("loc", ()))
    msg = first.get("msg", "invalid value")
    return f"{where}: {msg}" if where else msg


def load_document(text: str) -> FrameworkDocument:
    """Parse and validate a YAML framework document."""
    if len(text) > MAX_DOCUMENT_CHARS:
        raise InvalidDocument(
            f"Document is {len(text)} characters; the limit is {MAX_DOCUMENT_CHARS}."
        )

    try:
        data = yaml.load(text, Loader=CoreSchemaLoader)
    except yaml.YAMLError as e:
        log.debug(f"YAML parse failure: {e}")
        raise InvalidDocument("Invalid YAML format") from e

    if not isinstance(data, dict) or "arguments" not in data:
        raise InvalidDocument('YAML file must contain an "arguments" keyword')
    if not data["arguments"]:
        raise InvalidFramework('The "arguments" field must be a non-empty list')

    try:
        document = FrameworkDocument.model_validate(data)
    except ValidationError as e:
        raise InvalidDocument(_describe(e)) from e

    exhibit = extract_raw_exhibit(text)
    if exhibit is not None:
        document = document.model_copy(update={"exhibit": exhibit})

    log.info(
        f"Loaded document: {len(document.arguments)} declarations, "
        f"{len(document.attacks)} attacks"
    )
    return document


def load_file(path: Union[str, Path]) -> FrameworkDocument:
    return load_document(Path(path).read_text(encoding="utf-8"))


def extract_raw_exhibit(text: str) -> Optional[str]:
    """
    Exhibit text straight from the raw YAML.

    An inline value is returned as written. For a block value (or an
    empty/comment-only remainder after the colon) the following lines
    up to the next top-level key are collected, their common indent
    removed and trailing blank lines dropped.
    """
    found = False
    collected: list[str] = []

    for line in text.split("\n"):
        if not found:
            match = _EXHIBIT_KEY.match(line)
            if match:
                found = True
                rest = match.group(1).strip()
                if rest in _BLOCK_INDICATORS:
                    continue
                if rest and not rest.startswith("#"):
                    return rest
            continue
        if line.strip() and not line[0].isspace():
            break
        collected.append(line)

    non_empty = [ln for ln in collected if ln.strip()]
    if not non_empty:
        return None

    indent = min(len(ln) - len(ln.lstrip()) for ln in non_empty)
    trimmed = [ln[indent:] if len(ln) >= indent else ln for ln in collected]
    while trimmed and not trimmed[-1].strip():
        trimmed.pop()
    return "\n".join(trimmed) if trimmed else None
