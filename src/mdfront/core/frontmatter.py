"""Front-matter splitting and metadata block decoding (TOML +++ / YAML ---)"""

import logging
import re
import tomllib
from collections.abc import Hashable
from typing import Any

import yaml

from mdfront.core.errors import MalformedHeader
from mdfront.core.models import LEADING_WHITESPACE, Delimiter, Document


logger = logging.getLogger(__name__)

LINE_RE = re.compile(r'[^\n]*\n|[^\n]+\Z')
MERGE_TAG = 'tag:yaml.org,2002:merge'


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that refuses repeated mapping keys instead of keeping the last one."""


def _construct_unique_mapping(loader: _UniqueKeyLoader, node: yaml.MappingNode, deep: bool = False) -> dict:
    # Only the node's own keys must be unique; local keys may override merged (<<) ones
    seen = set()
    for key_node, _ in node.value:
        if key_node.tag == MERGE_TAG:
            continue
        key = loader.construct_object(key_node, deep=deep)
        if not isinstance(key, Hashable):
            continue  # construct_mapping reports unhashable keys itself
        if key in seen:
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping", node.start_mark,
                f"found duplicate key {key!r}", key_node.start_mark,
            )
        seen.add(key)
    return loader.construct_mapping(node, deep=deep)


_UniqueKeyLoader.add_constructor(yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_unique_mapping)


def split_document(raw_text: str) -> Document:
    """Split raw text into opening marker, metadata block, closing marker, and body.

    The opening marker must be the first non-whitespace content and sit alone on
    its line; otherwise the whole text is body. Raises MalformedHeader when the
    opening marker is never closed.
    """
    stripped = raw_text.lstrip(LEADING_WHITESPACE)
    start = len(raw_text) - len(stripped)
    first_line = LINE_RE.match(stripped)
    delimiter = Delimiter.from_line(first_line.group()) if first_line else None
    if delimiter is None:
        return Document(raw_text=raw_text, body=raw_text)

    block_start = pos = start + first_line.end()
    for m in LINE_RE.finditer(raw_text, block_start):
        line = m.group()
        if Delimiter.from_line(line) is delimiter:
            logger.debug("Found %s header spanning [%d, %d)", delimiter.value, start, m.end())
            return Document(
                raw_text=raw_text,
                delimiter=delimiter,
                opening=raw_text[:block_start],
                metadata_block=raw_text[block_start:pos],
                closing=line,
                body=raw_text[m.end():],
            )
        pos = m.end()

    raise MalformedHeader(start, f"no closing {delimiter.value!r} marker")


def _decode_toml(block: str) -> Any:
    return tomllib.loads(block)


def _decode_yaml(block: str) -> Any:
    return yaml.load(block, Loader=_UniqueKeyLoader)


DECODERS = {
    Delimiter.toml: (_decode_toml, tomllib.TOMLDecodeError),
    Delimiter.yaml: (_decode_yaml, yaml.YAMLError),
}


def decode_fields(document: Document) -> dict[str, Any]:
    """Decode the metadata block into an ordered key/value mapping.

    Headerless, blank and comment-only blocks decode to {}. Raises MalformedHeader (at the
    opening marker offset) for undecodable blocks, non-mapping blocks, and
    repeated keys.
    """
    if not document.has_header or not document.metadata_block.strip():
        return {}

    decode, error_type = DECODERS[document.delimiter]
    try:
        fields = decode(document.metadata_block)
    except error_type as e:
        raise MalformedHeader(document.header_offset, f"invalid {document.delimiter.name.upper()}: {e}") from e
    if fields is None:  # comment-only YAML
        return {}
    if not isinstance(fields, dict):
        raise MalformedHeader(
            document.header_offset,
            f"expected a mapping, got {type(fields).__name__}",
        )
    return fields


def parse(raw_text: str) -> tuple[Document, dict[str, Any]]:
    """Split raw text and decode its metadata block."""
    document = split_document(raw_text)
    return document, decode_fields(document)
