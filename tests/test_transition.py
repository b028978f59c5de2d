"""Tests for transition keys and transition magic."""

import logging

import pytest

from clusterops.exceptions import InvalidArgumentError, MalformedKeyError
from clusterops.transition import (
    UUID_FIELD_WIDTH,
    TransitionKey,
    TransitionMagic,
    decode_transition_key,
    decode_transition_magic,
    transition_key,
    transition_magic,
)
from clusterops.types import OpStatus

NODE_UUID = "6f5c2e0a-1b2c-4d3e-8f90-a1b2c3d4e5f6"


# ---------------------------------------------------------------------------
# Transition key
# ---------------------------------------------------------------------------


class TestTransitionKey:
    def test_encode(self):
        assert transition_key(5, 3, 7, NODE_UUID) == f"3:5:7:{NODE_UUID}"

    def test_encode_pads_short_node(self):
        key = transition_key(5, 3, 0, "node1")
        assert key == "3:5:0:node1" + " " * 31
        assert len(key.split(":", 3)[3]) == UUID_FIELD_WIDTH

    def test_encode_truncates_long_node(self):
        key = transition_key(1, 2, 0, NODE_UUID + "-extra")
        assert key == f"2:1:0:{NODE_UUID}"

    def test_encode_width_counts_characters(self):
        key = transition_key(1, 2, 0, "n\u00f6de")
        node_field = key.split(":", 3)[3]
        assert len(node_field) == UUID_FIELD_WIDTH
        assert len(node_field.encode("utf-8")) == UUID_FIELD_WIDTH + 1

    @pytest.mark.parametrize("node", [None, ""])
    def test_encode_requires_node(self, node):
        with pytest.raises(InvalidArgumentError):
            transition_key(1, 2, 0, node)

    def test_round_trip(self):
        decoded = decode_transition_key(transition_key(12, 4, 7, NODE_UUID))
        assert decoded == TransitionKey(action_id=4, transition_id=12, target_rc=7, node_uuid=NODE_UUID)

    def test_model_encode(self):
        key = TransitionKey(action_id=4, transition_id=12, target_rc=0, node_uuid=NODE_UUID)
        assert key.encode() == f"4:12:0:{NODE_UUID}"
        assert str(key) == key.encode()

    def test_decode_signed_and_spaced_fields(self):
        decoded = decode_transition_key(f"-1: 2:-7:{NODE_UUID}")
        assert decoded.action_id == -1
        assert decoded.transition_id == 2
        assert decoded.target_rc == -7

    def test_decode_short_uuid_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="clusterops.transition"):
            decoded = decode_transition_key(transition_key(5, 3, 0, "node1"))
        assert decoded.node_uuid == "node1"
        assert decoded.transition_id == 5
        assert "Invalid UUID" in caplog.text

    def test_decode_uuid_width_ok_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="clusterops.transition"):
            decode_transition_key(f"3:5:0:{NODE_UUID}")
        assert caplog.text == ""

    def test_decode_reads_at_most_uuid_width(self):
        decoded = decode_transition_key(f"3:5:0:{NODE_UUID}trailing")
        assert decoded.node_uuid == NODE_UUID

    @pytest.mark.parametrize("key", [
        None,
        "",
        "1:2:3",
        "1:2:3:",
        "a:2:3:" + NODE_UUID,
        "1:x:3:" + NODE_UUID,
        "1:2:rc:" + NODE_UUID,
        "1;2;3;" + NODE_UUID,
    ])
    def test_decode_malformed(self, key):
        with pytest.raises(MalformedKeyError):
            decode_transition_key(key)


# ---------------------------------------------------------------------------
# Transition magic
# ---------------------------------------------------------------------------


class TestTransitionMagic:
    def test_decode(self):
        magic = decode_transition_magic(f"0:7;3:5:7:{NODE_UUID}")
        assert magic.op_status == 0
        assert magic.status is OpStatus.DONE
        assert magic.op_rc == 7
        assert magic.target_rc == 7
        assert magic.action_id == 3
        assert magic.transition_id == 5
        assert magic.uuid == NODE_UUID

    def test_decode_padded_key(self):
        magic = decode_transition_magic(transition_magic(OpStatus.TIMEOUT, 1, transition_key(9, 8, 0, "node1")))
        assert magic.status is OpStatus.TIMEOUT
        assert magic.op_rc == 1
        assert magic.uuid == "node1"
        assert magic.transition_id == 9
        assert magic.action_id == 8

    def test_decode_unknown_status(self):
        magic = decode_transition_magic(f"42:0;3:5:0:{NODE_UUID}")
        assert magic.op_status == 42
        assert magic.status is None

    def test_builder(self):
        assert transition_magic(OpStatus.PENDING, 0, "1:2:0:x") == "-1:0;1:2:0:x"

    def test_model_encode_round_trip(self):
        magic = TransitionMagic(
            op_status=OpStatus.ERROR,
            op_rc=1,
            key=TransitionKey(action_id=1, transition_id=2, target_rc=0, node_uuid=NODE_UUID),
        )
        assert magic.encode() == f"4:1;1:2:0:{NODE_UUID}"
        assert decode_transition_magic(magic.encode()) == magic

    @pytest.mark.parametrize("magic", [
        None,
        "",
        f"0:0:3:5:0:{NODE_UUID}",
        "0:7",
        "0:7;",
        f"0;3:5:0:{NODE_UUID}",
        f"x:0;3:5:0:{NODE_UUID}",
    ])
    def test_decode_malformed(self, magic):
        with pytest.raises(MalformedKeyError):
            decode_transition_magic(magic)

    def test_decode_propagates_key_failure(self):
        with pytest.raises(MalformedKeyError):
            decode_transition_magic("0:0;garbage")

    def test_incomplete_magic_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="clusterops.transition"):
            with pytest.raises(MalformedKeyError):
                decode_transition_magic("0:7")
        assert "incomplete" in caplog.text
