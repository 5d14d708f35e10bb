"""REFI-QDA Export — serializes codes, memos and codings to an XML interchange document.

Invariants:
    - Output is a single line: XML declaration + <Project> root
    - Order inside <Project>: all <Code>, then all <Memo>, then all <Coding>
    - Every attribute value and text node escapes & < > " '
    - Attribute values also escape tab, newline and carriage return as character
      references, so they survive attribute-value normalization on parse
    - Characters XML 1.0 forbids (C0 controls other than tab/newline/CR, lone
      surrogates, U+FFFE, U+FFFF) are dropped; the document is always well-formed
    - Elements always carry explicit end tags (<Code ...></Code>, never <Code/>)
    - Pure: reads the given snapshots, never mutates them

Design Decisions:
    - String assembly with xml.sax.saxutils.escape over ElementTree: the element
      shape and attribute order are part of the interchange contract, and
      ElementTree neither escapes "'" nor guarantees the empty-element form
"""

import re
from datetime import datetime, timezone
from typing import Mapping, Sequence
from xml.sax.saxutils import escape

from qualstore.core.domain_types import CodeId, RowId
from qualstore.core.entities import Code, Memo

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_TEXT_ENTITIES = {'"': "&quot;", "'": "&apos;", "\r": "&#13;"}
_ATTR_ENTITIES = {**_TEXT_ENTITIES, "\n": "&#10;", "\t": "&#9;"}

_INVALID_XML_CHARS = re.compile(
    "[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]",
)


def _clean(value: object) -> str:
    return _INVALID_XML_CHARS.sub("", str(value))


def _esc(value: object) -> str:
    """Escape a text node."""
    return escape(_clean(value), _TEXT_ENTITIES)


def _esc_attr(value: object) -> str:
    return escape(_clean(value), _ATTR_ENTITIES)


def _element(tag: str, attrs: Sequence[tuple[str, object]], inner: str = "") -> str:
    rendered = "".join(f' {name}="{_esc_attr(value)}"' for name, value in attrs)
    return f"<{tag}{rendered}>{inner}</{tag}>"


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a trailing Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def code_element(code: Code) -> str:
    return _element("Code", [
        ("id", code.id),
        ("name", code.name),
        ("color", code.color),
        ("level", int(code.level)),
        ("parentId", code.parent_id or ""),
    ])


def memo_element(memo: Memo) -> str:
    return _element(
        "Memo",
        [
            ("id", memo.id),
            ("type", memo.memo_type.value),
            ("createdAt", format_timestamp(memo.created_at)),
        ],
        inner=f"<Content>{_esc(memo.content)}</Content>",
    )


def coding_element(code_id: CodeId, row_id: RowId) -> str:
    return _element("Coding", [("codeId", code_id), ("dataPointId", str(row_id))])


def export_refi_qda(
    codes: Sequence[Code],
    memos: Sequence[Memo],
    assignments: Mapping[CodeId, Sequence[RowId]],
) -> str:
    """Render the project document. Pure, no IO."""
    parts = [XML_DECLARATION, "<Project>"]
    parts.extend(code_element(code) for code in codes)
    parts.extend(memo_element(memo) for memo in memos)
    for code_id, rows in assignments.items():
        parts.extend(coding_element(code_id, row_id) for row_id in rows)
    parts.append("</Project>")
    return "".join(parts)


def export_refi_qda_bytes(
    codes: Sequence[Code],
    memos: Sequence[Memo],
    assignments: Mapping[CodeId, Sequence[RowId]],
) -> bytes:
    """Same document, UTF-8 encoded for download."""
    return export_refi_qda(codes, memos, assignments).encode("utf-8")
