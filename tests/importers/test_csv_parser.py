import json

import pytest

from table_import.csv_parser import coerce_cell, csv_to_envelope
from table_import.errors import PayloadError
from table_import.tables import TABLES, ColumnSpec


def _rows(text, table):
    return json.loads(csv_to_envelope(text, TABLES[table]))[0]["rows"]


def test_entity_csv_with_bom_and_quoted_vectors():
    raw = '\ufeffentity_id,position\n1,"[1,2,3]"\n2,"4;5;6"\n'
    assert _rows(raw, "entity") == [[1, [1, 2, 3]], [2, [4.0, 5.0, 6.0]]]


def test_semicolon_delimiter_is_detected():
    raw = b"entity_id;speed\r\n3;1.5\r\n"
    assert _rows(raw, "mob") == [[3, 1.5]]


def test_columns_are_matched_by_header_name():
    raw = "speed,entity_id\n2.5,8\n"
    assert _rows(raw, "mob") == [[8, 2.5]]


def test_player_optional_entity_and_identity():
    raw = "identity,player_id,name,entity_id\n deadbeef ,7,Alice,\n0xab,8,Bob,42\n"
    assert _rows(raw, "player") == [
        ["deadbeef", 7, "Alice", None],
        ["0xab", 8, "Bob", 42],
    ]


def test_message_identity_and_timestamp_are_wrapped():
    raw = "sender,sent,text,sender_name\nabcd,1700000000000000,hi,Ann\n"
    assert _rows(raw, "message") == [[["abcd"], [1700000000000000], "hi", "Ann"]]


def test_uncoercible_cells_pass_through_for_the_importer_to_reject():
    raw = "entity_id,speed\nseven,fast\n"
    assert _rows(raw, "mob") == [["seven", "fast"]]


def test_short_rows_stay_short():
    raw = "entity_id,direction,speed\n1\n"
    assert _rows(raw, "movement_component") == [[1]]


def test_blank_lines_are_skipped():
    raw = "entity_id,speed\n\n1,1\n\n"
    assert _rows(raw, "mob") == [[1, 1.0]]


@pytest.mark.parametrize("raw", ["", "   ", "entity_id,speed\n"])
def test_empty_csv_is_a_payload_error(raw):
    with pytest.raises(PayloadError):
        csv_to_envelope(raw, TABLES["mob"])


def test_coerce_cell_by_kind():
    assert coerce_cell("12", ColumnSpec("id", "u64")) == 12
    assert coerce_cell("none", ColumnSpec("e", "optional_u32")) is None
    assert coerce_cell("nan", ColumnSpec("s", "f32")) == "nan"
    assert coerce_cell('{"x":1,"y":2,"z":3}', ColumnSpec("p", "vector3")) == {"x": 1, "y": 2, "z": 3}
    assert coerce_cell("1,2", ColumnSpec("p", "vector3")) == "1,2"
    assert coerce_cell("soon", ColumnSpec("t", "timestamp")) == ["soon"]
    assert coerce_cell(" Alice ", ColumnSpec("n", "string")) == " Alice "
