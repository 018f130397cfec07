import pytest

from db.types import Identity, Timestamp, Vector3
from table_import.decoders import (
    decode_f32,
    decode_identity,
    decode_optional_u32,
    decode_string,
    decode_timestamp,
    decode_u32,
    decode_u64,
    decode_vector3,
)
from table_import.errors import CellDecodeError

HEX = "0123456789abcdef" * 4


# ── Vector3 ───────────────────────────────────────────────────────────

def test_vector3_object_and_array_are_equivalent():
    assert decode_vector3({"x": 1, "y": 2, "z": 3}) == decode_vector3([1, 2, 3])
    assert decode_vector3([1, 2, 3]) == Vector3(1.0, 2.0, 3.0)


def test_vector3_ignores_extra_elements():
    assert decode_vector3([0.5, 1.5, 2.5, 99, "junk"]) == Vector3(0.5, 1.5, 2.5)


def test_vector3_short_array_fails():
    with pytest.raises(CellDecodeError, match="at least 3 elements"):
        decode_vector3([1, 2], "position")


def test_vector3_missing_axis_fails():
    with pytest.raises(CellDecodeError, match="'z'"):
        decode_vector3({"x": 1, "y": 2})


def test_vector3_non_numeric_element_fails():
    with pytest.raises(CellDecodeError, match="element 1"):
        decode_vector3([1, "2", 3])


def test_vector3_wrong_type_names_field():
    with pytest.raises(CellDecodeError) as exc_info:
        decode_vector3("1,2,3", "direction")
    assert exc_info.value.field == "direction"
    assert "expected object or array for Vector3" in str(exc_info.value)


def test_vector3_narrows_to_f32():
    v = decode_vector3([0.1, 0, 0])
    assert v.x != 0.1
    assert v.x == pytest.approx(0.1, rel=1e-6)


# ── Identity ──────────────────────────────────────────────────────────

def test_identity_bare_and_wrapped():
    expected = Identity(bytes.fromhex(HEX))
    assert decode_identity(HEX) == expected
    assert decode_identity([HEX]) == expected


def test_identity_accepts_0x_prefix():
    assert decode_identity("0xdeadbeef") == Identity(b"\xde\xad\xbe\xef")


def test_identity_empty_array_fails():
    with pytest.raises(CellDecodeError, match="empty"):
        decode_identity([])


@pytest.mark.parametrize("text", ["not-hex", "de ad be ef", " deadbeef ", "deadbeef\n", "0x dead"])
def test_identity_non_hex_fails(text):
    with pytest.raises(CellDecodeError, match="invalid identity hex"):
        decode_identity(text)


def test_identity_empty_string_fails():
    with pytest.raises(CellDecodeError):
        decode_identity("")


def test_identity_wrapped_inner_must_be_string():
    with pytest.raises(CellDecodeError, match="not a string"):
        decode_identity([42])


def test_identity_representation_can_be_pinned():
    with pytest.raises(CellDecodeError, match="wrapped hex string"):
        decode_identity(HEX, "sender", wrapped=True)
    with pytest.raises(CellDecodeError):
        decode_identity([HEX], "identity", wrapped=False)


# ── Timestamp ─────────────────────────────────────────────────────────

def test_timestamp_wrapped_micros():
    ts = decode_timestamp([1700000000000000])
    assert ts == Timestamp(1_700_000_000_000_000)
    assert ts.to_datetime().year == 2023


def test_timestamp_pre_epoch():
    assert decode_timestamp([-5]).micros_since_epoch == -5


def test_timestamp_empty_fails():
    with pytest.raises(CellDecodeError, match="empty"):
        decode_timestamp([])


@pytest.mark.parametrize("value", [1700000000000000, ["1700"], [1.5], [True], [1 << 63]])
def test_timestamp_bad_shapes_fail(value):
    with pytest.raises(CellDecodeError):
        decode_timestamp(value)


# ── Optional u32 ──────────────────────────────────────────────────────

def test_optional_u32():
    assert decode_optional_u32(None) is None
    assert decode_optional_u32(42) == 42


@pytest.mark.parametrize("value", ["x", -1, 1 << 32, 4.0, False, [1]])
def test_optional_u32_rejects(value):
    with pytest.raises(CellDecodeError):
        decode_optional_u32(value, "entity_id")


# ── Scalars ───────────────────────────────────────────────────────────

def test_u32_overflow_is_an_error_not_truncation():
    assert decode_u32((1 << 32) - 1) == 4294967295
    with pytest.raises(CellDecodeError, match="overflows u32"):
        decode_u32(1 << 32, "entity_id")


def test_u32_rejects_negative_bool_and_float():
    for value in (-1, True, 3.0, "3"):
        with pytest.raises(CellDecodeError):
            decode_u32(value)


def test_u64_range():
    assert decode_u64((1 << 64) - 1) == (1 << 64) - 1
    with pytest.raises(CellDecodeError):
        decode_u64(1 << 64)


def test_f32_accepts_integers_and_rejects_out_of_range():
    assert decode_f32(3) == 3.0
    with pytest.raises(CellDecodeError, match="f32"):
        decode_f32(1e300, "speed")
    with pytest.raises(CellDecodeError):
        decode_f32(None)


def test_string():
    assert decode_string("Alice") == "Alice"
    with pytest.raises(CellDecodeError, match="expected string, got integer"):
        decode_string(7, "name")
