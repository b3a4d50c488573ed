"""
Tests for the wire message type.
"""

import dataclasses

import pytest

from pocketstream.transport.message import MessageType, WireMessage


def test_message_type_values():
    """Test that frame kinds are numbered like WebSocket opcodes."""
    assert MessageType.TEXT == 1
    assert MessageType.BINARY == 2


def test_wire_message_defaults_to_text():
    """Test the default frame kind."""
    message = WireMessage(b"{}")
    assert message.type is MessageType.TEXT
    assert message.data == b"{}"


def test_wire_message_from_text():
    """Test building a text frame from a string."""
    message = WireMessage.from_text('{"cmd":"µ"}')
    assert message.data == '{"cmd":"µ"}'.encode("utf-8")
    assert message.type is MessageType.TEXT
    assert message.text == '{"cmd":"µ"}'


def test_wire_message_text_rejects_invalid_utf8():
    """Test that a payload that is not UTF-8 cannot be read as text."""
    message = WireMessage(b"\xff\xfe", MessageType.BINARY)
    with pytest.raises(UnicodeDecodeError):
        message.text


def test_wire_message_is_immutable():
    """Test that wire messages cannot be changed once built."""
    message = WireMessage(b"{}")
    with pytest.raises(dataclasses.FrozenInstanceError):
        message.data = b"[]"


def test_wire_message_equality():
    """Test value equality between messages."""
    assert WireMessage(b"a", MessageType.BINARY) == WireMessage(b"a", MessageType.BINARY)
    assert WireMessage(b"a", MessageType.BINARY) != WireMessage(b"a", MessageType.TEXT)
