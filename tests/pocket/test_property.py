"""
Property-based tests for the pocket codec.

This module contains property-based tests using the hypothesis framework.
"""

import json

from hypothesis import given
from hypothesis import strategies as st

from pocketstream.pocket.codec import decode_command, encode_command, format_float
from pocketstream.pocket.fields import INT64_MAX, INT64_MIN
from pocketstream.pocket.registry import get_command_registry
from pocketstream.pocket.types import FrequencyRangeQuery, Range, SingleQuery, SParamSelect

int64s = st.integers(min_value=INT64_MIN, max_value=INT64_MAX)
envelopes = st.fixed_dictionaries({"id": st.text(max_size=50), "t": int64s})


@given(envelope=envelopes, start=int64s, end=int64s)
def test_frequency_range_query_roundtrip(envelope, start, end):
    """Test that a FrequencyRangeQuery survives encoding and decoding."""
    query = FrequencyRangeQuery(**envelope, result=Range(start, end))
    assert decode_command(encode_command(query)) == query


@given(
    envelope=envelopes,
    freq=st.integers(min_value=0, max_value=INT64_MAX),
    avg=st.integers(min_value=0, max_value=INT64_MAX),
    flags=st.tuples(st.booleans(), st.booleans(), st.booleans(), st.booleans()),
)
def test_single_query_request_roundtrip(envelope, freq, avg, flags):
    """Test that the request-shaped fields of a SingleQuery survive a round trip."""
    query = SingleQuery(**envelope, freq=freq, avg=avg, select=SParamSelect(*flags))
    decoded = decode_command(encode_command(query))

    assert type(decoded) is SingleQuery
    assert (decoded.id, decoded.t, decoded.cmd) == (query.id, query.t, "sq")
    assert (decoded.freq, decoded.avg, decoded.select) == (freq, avg, query.select)


@given(value=st.floats(allow_nan=False, allow_infinity=False))
def test_format_float_reads_back(value):
    """Test that every rendered float parses back to the same value."""
    text = format_float(value)

    assert float(json.loads(text)) == value
    assert not text.endswith(".0")


@given(tag=st.sampled_from(get_command_registry().tags()))
def test_zero_value_roundtrip(tag):
    """Test that every registered variant's zero value survives a round trip."""
    zero = get_command_registry().resolve(tag).zero()
    assert decode_command(encode_command(zero)) == zero
