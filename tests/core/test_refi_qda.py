"""REFI-QDA Export — exact document shape, escaping, ordering and encoding.

Tests cover:
    - The single-code / single-coding document byte for byte
    - Memo element with millisecond UTC timestamp and <Content> text
    - Escaping of & < > " ' in attributes and text
    - Element order: codes, memos, codings
    - Export is a pure read (store unchanged)
"""

import xml.etree.ElementTree as ET
from datetime import datetime, timedelta, timezone

from qualstore.core.domain_types import CodeLevel, MemoType
from qualstore.core.entities import Code, Memo
from qualstore.core.refi_qda import (
    XML_DECLARATION, export_refi_qda, export_refi_qda_bytes, format_timestamp,
)

from tests.conftest import FIXED_NOW, make_store


def _code(**overrides) -> Code:
    fields = dict(
        id="code-1", name="X", description="", color="#fff",
        level=CodeLevel.THEME, created_at=FIXED_NOW,
    )
    fields.update(overrides)
    return Code(**fields)


def test_single_code_single_coding_document():
    xml = export_refi_qda([_code()], [], {"code-1": ("0",)})
    assert xml == (
        '<?xml version="1.0" encoding="UTF-8"?>'
        "<Project>"
        '<Code id="code-1" name="X" color="#fff" level="1" parentId=""></Code>'
        '<Coding codeId="code-1" dataPointId="0"></Coding>'
        "</Project>"
    )


def test_numeric_row_id_is_stringified():
    xml = export_refi_qda([_code()], [], {"code-1": (0, 12)})
    assert '<Coding codeId="code-1" dataPointId="0"></Coding>' in xml
    assert '<Coding codeId="code-1" dataPointId="12"></Coding>' in xml


def test_parent_id_and_level_rendered():
    xml = export_refi_qda(
        [_code(id="code-2", parent_id="code-1", level=CodeLevel.SUBCATEGORY)], [], {},
    )
    assert 'level="3" parentId="code-1"' in xml


def test_memo_element():
    memo = Memo(
        id="memo-1", content="Saw a pattern", memo_type=MemoType.OBSERVATIONAL,
        created_at=FIXED_NOW,
    )
    xml = export_refi_qda([], [memo], {})
    assert (
        '<Memo id="memo-1" type="observational" createdAt="2025-03-01T12:30:45.123Z">'
        "<Content>Saw a pattern</Content></Memo>"
    ) in xml


def test_reserved_characters_are_escaped():
    code = _code(name='A & B <"quoted"> \'it\'')
    memo = Memo(
        id="memo-1", content="x < y && z > 'w'", memo_type=MemoType.THEORETICAL,
        created_at=FIXED_NOW,
    )
    xml = export_refi_qda([code], [memo], {"code-1": ('r"1',)})
    assert 'name="A &amp; B &lt;&quot;quoted&quot;&gt; &apos;it&apos;"' in xml
    assert "<Content>x &lt; y &amp;&amp; z &gt; &apos;w&apos;</Content>" in xml
    assert 'dataPointId="r&quot;1"' in xml


def test_elements_ordered_codes_memos_codings():
    memo = Memo(id="memo-1", content="m", memo_type=MemoType.THEORETICAL, created_at=FIXED_NOW)
    xml = export_refi_qda([_code()], [memo], {"code-1": (1,)})
    assert xml.index("<Code ") < xml.index("<Memo ") < xml.index("<Coding ")


def test_empty_project():
    assert export_refi_qda([], [], {}) == XML_DECLARATION + "<Project></Project>"


def test_bytes_are_utf8():
    data = export_refi_qda_bytes([_code(name="Categoría ✓")], [], {})
    assert isinstance(data, bytes)
    assert "Categoría ✓".encode("utf-8") in data


def test_format_timestamp_normalizes_to_utc_and_naive():
    plus_two = timezone(timedelta(hours=2))
    assert format_timestamp(datetime(2025, 1, 1, 2, 0, tzinfo=plus_two)) == "2025-01-01T00:00:00.000Z"
    assert format_timestamp(datetime(2025, 1, 1)) == "2025-01-01T00:00:00.000Z"


def test_store_export_matches_scenario_and_is_pure(store):
    code = store.create_code(name="X", color="#fff")
    store.apply_code(code.id, ["0"])
    events_before = store.coding_events.value

    xml = store.export_refi_qda()

    assert xml.endswith(
        '<Project><Code id="code-1" name="X" color="#fff" level="1" parentId=""></Code>'
        '<Coding codeId="code-1" dataPointId="0"></Coding></Project>'
    )
    assert store.coding_events.value == events_before
    assert store.export_refi_qda_bytes() == xml.encode("utf-8")


def test_store_export_lists_newest_memo_first():
    store = make_store()
    store.create_memo("old", "theoretical")
    store.create_memo("new", "theoretical")
    xml = store.export_refi_qda()
    assert xml.index('id="memo-2"') < xml.index('id="memo-1"')


def test_control_characters_dropped_and_document_parses():
    store = make_store()
    code = store.create_code(name="bad\x0bname\x00")
    store.create_memo("memo\x1f text\x08", "theoretical")
    store.apply_code(code.id, ["row\x0c1"])

    root = ET.fromstring(store.export_refi_qda_bytes())

    assert root.find("Code").get("name") == "badname"
    assert root.find("Memo/Content").text == "memo text"
    assert root.find("Coding").get("dataPointId") == "row1"


def test_whitespace_in_attributes_survives_parsing():
    store = make_store()
    store.create_code(name="line1\nline2\tcol\r\nend")
    root = ET.fromstring(store.export_refi_qda_bytes())
    assert root.find("Code").get("name") == "line1\nline2\tcol\r\nend"
    assert "&#10;" in store.export_refi_qda()


def test_memo_text_keeps_newlines_and_carriage_returns():
    store = make_store()
    store.create_memo("first\r\nsecond\nthird", "observational")
    root = ET.fromstring(store.export_refi_qda_bytes())
    assert root.find("Memo/Content").text == "first\r\nsecond\nthird"
