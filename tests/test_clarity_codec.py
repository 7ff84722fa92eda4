import pytest

from stacks_sdk.clarity import codec
from stacks_sdk.clarity import (
    MAX_DEPTH,
    ClarityType,
    bool_cv,
    buffer_cv,
    contract_principal_cv,
    decode,
    decode_exact,
    encode,
    err_cv,
    false_cv,
    from_hex,
    int_cv,
    list_cv,
    none_cv,
    ok_cv,
    optional_cv,
    principal_cv,
    some_cv,
    standard_principal_cv,
    string_ascii_cv,
    string_utf8_cv,
    to_hex,
    true_cv,
    tuple_cv,
    uint_cv,
)
from stacks_sdk.errors import InvalidValue, MalformedValue


def _i128(n: int) -> str:
    return n.to_bytes(16, "big", signed=True).hex()


# Known encodings produced by the network's reference implementation.
INT_1 = "00" + "00" * 15 + "01"
INT_NEG_1 = "00" + "ff" * 16
UINT_1 = "01" + "00" * 15 + "01"


def test_integer_encodings():
    assert encode(int_cv(1)).hex() == INT_1
    assert encode(int_cv(-1)).hex() == INT_NEG_1
    assert encode(uint_cv(1)).hex() == UINT_1
    assert encode(int_cv(-(2**127))).hex() == "00" + "80" + "00" * 15
    assert encode(uint_cv(2**128 - 1)).hex() == "01" + "ff" * 16


def test_simple_variant_encodings():
    assert encode(buffer_cv(b"\xde\xad\xbe\xef")).hex() == "0200000004deadbeef"
    assert encode(true_cv()).hex() == "03"
    assert encode(false_cv()).hex() == "04"
    assert encode(none_cv()).hex() == "09"
    assert encode(some_cv(true_cv())).hex() == "0a03"
    assert encode(ok_cv(int_cv(1))).hex() == "07" + INT_1
    assert encode(err_cv(uint_cv(1))).hex() == "08" + UINT_1
    assert encode(string_ascii_cv("hello world")).hex() == "0d0000000b68656c6c6f20776f726c64"
    assert encode(string_utf8_cv("hello \U0001F33E")).hex() == "0e0000000a68656c6c6f20f09f8cbe"


def test_principal_encodings():
    std = standard_principal_cv("SP2JXKMSH007NPYAQHKJPQMAQYAD90NQGTVJVQ02B")
    assert encode(std).hex() == "0516a5d9d331000f5b79578ce56bd157f29a9056f0d6"

    ctr = contract_principal_cv("STB44HYPYAT2BB2QE513NSP81HTMYWBJP02HPGK6", "abcd")
    assert encode(ctr).hex() == "061a164247d6f2b425ac5771423ae6c80c754f7172b00461626364"

    assert principal_cv("STB44HYPYAT2BB2QE513NSP81HTMYWBJP02HPGK6.abcd") == ctr


def test_tuple_keys_are_encoded_sorted():
    # insertion order must not matter on the wire
    a = tuple_cv({"foobar": true_cv(), "baz": none_cv()})
    b = tuple_cv({"baz": none_cv(), "foobar": true_cv()})
    expected = "0c000000020362617a0906666f6f62617203"
    assert encode(a).hex() == expected
    assert encode(b).hex() == expected
    assert a == b


def test_list_encoding():
    value = list_cv([int_cv(1), int_cv(2), int_cv(3), int_cv(-4), uint_cv(1)])
    expected = "0b00000005" + "".join(
        "00" + _i128(n) for n in (1, 2, 3, -4)
    ) + UINT_1
    assert encode(value).hex() == expected


def test_nested_value_survives_decode():
    value = tuple_cv(
        {
            "owner": standard_principal_cv("SP2JXKMSH007NPYAQHKJPQMAQYAD90NQGTVJVQ02B"),
            "balances": list_cv([uint_cv(0), uint_cv(10**20)]),
            "memo": optional_cv(buffer_cv("0xc0ffee")),
            "status": ok_cv(string_utf8_cv("ça va")),
            "error": err_cv(int_cv(-42)),
        }
    )
    raw = encode(value)
    decoded, used = decode(raw)
    assert used == len(raw)
    assert decoded == value
    assert encode(decoded) == raw


def test_decode_reports_consumed_bytes_from_offset():
    raw = b"\xff\xff" + encode(uint_cv(7)) + b"\x00"
    value, used = decode(raw, 2)
    assert value == uint_cv(7)
    assert used == 17


def test_hex_helpers():
    assert to_hex(true_cv()) == "0x03"
    assert from_hex("0x0100000000000000000000000000000064") == uint_cv(100)
    assert from_hex("0100000000000000000000000000000064") == uint_cv(100)
    assert uint_cv(100).to_hex() == "0x0100000000000000000000000000000064"
    assert bool_cv(0) == false_cv()


@pytest.mark.parametrize(
    "raw_hex",
    [
        "",  # empty
        "01000000",  # truncated uint
        "0f",  # unknown tag
        "0200000004dead",  # buffer shorter than its prefix
        "0bffffffff",  # list count far beyond the input
        "0d0000000180",  # non-ASCII byte in string-ascii
        "0e00000001ff",  # invalid UTF-8
        "0c0000000206666f6f626172030362617a09",  # tuple keys out of order
        "0c000000020362617a090362617a09",  # duplicate tuple key
        "061a164247d6f2b425ac5771423ae6c80c754f7172b000",  # empty contract name
        "0a" * 5000,  # some-chain far past the nesting limit
        "070a08" * 20 + "03",  # ok/some/err chain just past the nesting limit
    ],
)
def test_malformed_input_is_rejected(raw_hex):
    with pytest.raises(MalformedValue):
        decode_exact(bytes.fromhex(raw_hex))


def test_trailing_bytes_are_rejected_by_decode_exact():
    with pytest.raises(MalformedValue) as ei:
        decode_exact(encode(true_cv()) + b"\x00")
    assert ei.value.offset == 1


def test_constructor_validation():
    with pytest.raises(InvalidValue):
        int_cv(2**127)
    with pytest.raises(InvalidValue):
        uint_cv(-1)
    with pytest.raises(InvalidValue):
        buffer_cv(b"\x00" * (1024 * 1024 + 1))
    with pytest.raises(InvalidValue):
        string_ascii_cv("café")
    with pytest.raises(InvalidValue):
        tuple_cv([("a", true_cv()), ("a", false_cv())])
    with pytest.raises(InvalidValue):
        contract_principal_cv("SP2JXKMSH007NPYAQHKJPQMAQYAD90NQGTVJVQ02B", "x" * 129)
    with pytest.raises(InvalidValue):
        list_cv([1, 2])


def test_display_form():
    value = tuple_cv({"a": uint_cv(1), "b": some_cv(string_ascii_cv("hi"))})
    assert str(value) == '(tuple (a u1) (b (some "hi")))'
    assert str(list_cv([int_cv(-3), uint_cv(2)])) == "(list -3 u2)"
    assert str(err_cv(none_cv())) == "(err none)"
    assert str(buffer_cv("beef")) == "0xbeef"
    assert str(string_utf8_cv("x")) == 'u"x"'
    assert (
        str(principal_cv("STB44HYPYAT2BB2QE513NSP81HTMYWBJP02HPGK6.abcd"))
        == "STB44HYPYAT2BB2QE513NSP81HTMYWBJP02HPGK6.abcd"
    )


def test_type_ids_follow_wire_tags():
    assert true_cv().type_id is ClarityType.BOOL_TRUE
    assert false_cv().type_id is ClarityType.BOOL_FALSE
    assert tuple_cv({"k": none_cv()}).type_id == 0x0C
    assert uint_cv(5).byte_length() == 17
    assert set(codec._ENCODERS) == set(ClarityType) == set(codec._DECODERS)


def test_nesting_up_to_the_limit_decodes():
    raw = bytes.fromhex("0a" * MAX_DEPTH + "03")
    value = decode_exact(raw)
    for _ in range(MAX_DEPTH):
        value = value.value
    assert value == true_cv()

    with pytest.raises(MalformedValue) as ei:
        decode_exact(b"\x0a" + raw)
    assert ei.value.offset == MAX_DEPTH + 1


@pytest.mark.parametrize(
    "value,raw_hex",
    [
        (list_cv([]), "0b00000000"),
        (buffer_cv(b""), "0200000000"),
        (string_ascii_cv(""), "0d00000000"),
        (string_utf8_cv(""), "0e00000000"),
        (tuple_cv({}), "0c00000000"),
    ],
)
def test_empty_containers(value, raw_hex):
    assert encode(value).hex() == raw_hex
    assert decode_exact(bytes.fromhex(raw_hex)) == value
