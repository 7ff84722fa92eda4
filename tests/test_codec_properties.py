"""
Property tests for the Clarity value codec and c32check addresses.

- Any constructible value survives encode -> decode unchanged.
- Any byte string the decoder accepts re-encodes to exactly the same bytes.
- Tuple entry order never reaches the wire.
- Addresses round-trip through (version, hash160), and a single substituted
  character is always caught.
"""
from __future__ import annotations

import pytest
from hypothesis import given, strategies as st

from stacks_sdk.address import C32_ALPHABET, derive_address, is_valid, parse_address
from stacks_sdk.clarity import (
    ContractPrincipalCV,
    StandardPrincipalCV,
    bool_cv,
    buffer_cv,
    decode,
    decode_exact,
    encode,
    err_cv,
    int_cv,
    list_cv,
    none_cv,
    ok_cv,
    some_cv,
    string_ascii_cv,
    string_utf8_cv,
    tuple_cv,
    uint_cv,
)
from stacks_sdk.errors import InvalidAddress, MalformedValue

# ---- strategies ---------------------------------------------------------------

NAMES = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789-", min_size=1, max_size=24)
HASH160 = st.binary(min_size=20, max_size=20)
VERSIONS = st.integers(min_value=0, max_value=31)

LEAVES = st.one_of(
    st.integers(min_value=-(2**127), max_value=2**127 - 1).map(int_cv),
    st.integers(min_value=0, max_value=2**128 - 1).map(uint_cv),
    st.booleans().map(bool_cv),
    st.just(none_cv()),
    st.binary(max_size=64).map(buffer_cv),
    st.text(alphabet=st.characters(min_codepoint=0x20, max_codepoint=0x7E), max_size=32).map(
        string_ascii_cv
    ),
    st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=32).map(string_utf8_cv),
    st.builds(StandardPrincipalCV, VERSIONS, HASH160),
    st.builds(ContractPrincipalCV, VERSIONS, HASH160, NAMES),
)


def _containers(children):
    return st.one_of(
        children.map(some_cv),
        children.map(ok_cv),
        children.map(err_cv),
        st.lists(children, max_size=5).map(list_cv),
        st.dictionaries(NAMES, children, max_size=5).map(tuple_cv),
    )


VALUES = st.recursive(LEAVES, _containers, max_leaves=20)


# ---- clarity values -----------------------------------------------------------


@given(VALUES)
def test_value_round_trip(value):
    raw = encode(value)
    assert decode_exact(raw) == value
    assert decode(raw + b"\xff") == (value, len(raw))
    assert value.byte_length() == len(raw)


@given(st.binary(max_size=64))
def test_accepted_bytes_reencode_identically(raw):
    try:
        value = decode_exact(raw)
    except MalformedValue:
        return
    assert encode(value) == raw


@given(st.dictionaries(NAMES, VALUES, min_size=1, max_size=6), st.data())
def test_tuple_entry_order_does_not_reach_the_wire(entries, data):
    items = list(entries.items())
    shuffled = data.draw(st.permutations(items))
    a, b = tuple_cv(items), tuple_cv(shuffled)
    assert a == b
    assert encode(a) == encode(b)
    assert decode_exact(encode(b)).keys() == tuple(sorted(entries, key=lambda k: k.encode("ascii")))


# ---- addresses ----------------------------------------------------------------


@given(HASH160, VERSIONS)
def test_address_round_trip(h, version):
    address = derive_address(h, version)
    assert address[0] == "S" and address[1] == C32_ALPHABET[version]
    assert parse_address(address) == (version, h)
    assert is_valid(address)


@given(HASH160, VERSIONS, st.data())
def test_single_character_substitution_is_rejected(h, version, data):
    address = derive_address(h, version)
    i = data.draw(st.integers(min_value=0, max_value=len(address) - 1))
    replacement = data.draw(st.sampled_from(C32_ALPHABET).filter(lambda ch: ch != address[i]))
    corrupted = address[:i] + replacement + address[i + 1 :]
    with pytest.raises(InvalidAddress):
        parse_address(corrupted)
