"""Tests for the pulse wire format."""

from __future__ import annotations

import json

import pytest

from pulse_py.exceptions import InvalidMessageError
from pulse_py.realtime.messages import MessageType, PulseMessage, parse_message


class TestPulseMessage:
    """Tests for PulseMessage serialization and validation."""

    def test_message_type_value(self) -> None:
        """Test that the only message type is 'pulse'."""
        assert MessageType.PULSE.value == "pulse"
        assert [m.value for m in MessageType] == ["pulse"]

    def test_to_dict(self) -> None:
        """Test PulseMessage serialization uses the camelCase wire keys."""
        msg = PulseMessage(x_norm=0.25, y_norm=0.75, color="#ff0000")

        assert msg.to_dict() == {"type": "pulse", "xNorm": 0.25, "yNorm": 0.75, "color": "#ff0000"}

    def test_to_json_is_compact(self) -> None:
        """Test the JSON frame carries no whitespace."""
        msg = PulseMessage(x_norm=0.5, y_norm=0.5, color="#3399ff")

        assert msg.to_json() == '{"type":"pulse","xNorm":0.5,"yNorm":0.5,"color":"#3399ff"}'

    def test_from_dict_discards_extra_keys(self) -> None:
        """Test that unknown fields do not survive validation."""
        msg = PulseMessage.from_dict(
            {"type": "pulse", "xNorm": 0.1, "yNorm": 0.2, "color": "#000000", "admin": True},
        )

        assert msg == PulseMessage(x_norm=0.1, y_norm=0.2, color="#000000")
        assert "admin" not in msg.to_dict()

    def test_from_dict_accepts_out_of_range_coordinates(self) -> None:
        """Test that coordinates are relayed as-is; clamping happens at draw time."""
        msg = PulseMessage.from_dict({"type": "pulse", "xNorm": -3, "yNorm": 12.5, "color": "#000000"})

        assert msg.x_norm == -3
        assert msg.y_norm == 12.5

    def test_from_dict_accepts_any_color_string(self) -> None:
        """Test that the server does not judge colour format."""
        msg = PulseMessage.from_dict({"type": "pulse", "xNorm": 0, "yNorm": 0, "color": "not-a-color"})

        assert msg.color == "not-a-color"

    @pytest.mark.parametrize(
        ("payload", "reason"),
        [
            ([1, 2, 3], "not_an_object"),
            ("pulse", "not_an_object"),
            (None, "not_an_object"),
            ({"xNorm": 0.5, "yNorm": 0.5, "color": "#fff000"}, "unknown_type"),
            ({"type": "cursor", "xNorm": 0.5, "yNorm": 0.5, "color": "#fff000"}, "unknown_type"),
            ({"type": "pulse", "yNorm": 0.5, "color": "#fff000"}, "invalid_coordinates"),
            ({"type": "pulse", "xNorm": "0.5", "yNorm": 0.5, "color": "#fff000"}, "invalid_coordinates"),
            ({"type": "pulse", "xNorm": True, "yNorm": 0.5, "color": "#fff000"}, "invalid_coordinates"),
            ({"type": "pulse", "xNorm": 0.5, "yNorm": None, "color": "#fff000"}, "invalid_coordinates"),
            ({"type": "pulse", "xNorm": float("inf"), "yNorm": 0.5, "color": "#fff000"}, "invalid_coordinates"),
            ({"type": "pulse", "xNorm": 0.5, "yNorm": float("nan"), "color": "#fff000"}, "invalid_coordinates"),
            ({"type": "pulse", "xNorm": 10**400, "yNorm": 0.5, "color": "#fff000"}, "invalid_coordinates"),
            ({"type": "pulse", "xNorm": 0.5, "yNorm": 0.5}, "invalid_color"),
            ({"type": "pulse", "xNorm": 0.5, "yNorm": 0.5, "color": 16777215}, "invalid_color"),
        ],
    )
    def test_from_dict_rejects(self, payload: object, reason: str) -> None:
        """Test each schema violation is rejected with its reason."""
        with pytest.raises(InvalidMessageError) as exc_info:
            PulseMessage.from_dict(payload)

        assert exc_info.value.reason == reason


class TestParseMessage:
    """Tests for decoding raw frames."""

    def test_parse_text_frame(self) -> None:
        """Test a well-formed text frame."""
        raw = json.dumps({"type": "pulse", "xNorm": 0.3, "yNorm": 0.4, "color": "#123456"})

        assert parse_message(raw) == PulseMessage(x_norm=0.3, y_norm=0.4, color="#123456")

    def test_parse_bytes_frame(self) -> None:
        """Test a UTF-8 binary frame is decoded like text."""
        raw = b'{"type":"pulse","xNorm":1,"yNorm":0,"color":"#abcdef"}'

        assert parse_message(raw).color == "#abcdef"

    def test_parse_invalid_utf8(self) -> None:
        """Test undecodable bytes are rejected."""
        with pytest.raises(InvalidMessageError) as exc_info:
            parse_message(b"\xff\xfe\xfd")

        assert exc_info.value.reason == "invalid_encoding"

    @pytest.mark.parametrize(
        "raw",
        [
            "hello",
            "",
            "{",
            '{"type":"pulse","xNorm":NaN,"yNorm":0,"color":"#000000"}',
            '{"type":"pulse","xNorm":Infinity,"yNorm":0,"color":"#000000"}',
        ],
    )
    def test_parse_invalid_json(self, raw: str) -> None:
        """Test non-JSON and non-standard JSON constants are rejected."""
        with pytest.raises(InvalidMessageError) as exc_info:
            parse_message(raw)

        assert exc_info.value.reason == "invalid_json"

    def test_parse_overflowing_float_literal(self) -> None:
        """Test a literal that decodes to infinity is rejected, not relayed as Infinity."""
        with pytest.raises(InvalidMessageError) as exc_info:
            parse_message('{"type":"pulse","xNorm":1e400,"yNorm":0,"color":"#123456"}')

        assert exc_info.value.reason == "invalid_coordinates"

    def test_parse_oversized_integer(self) -> None:
        """Test an integer beyond the interpreter's digit limit is rejected as bad JSON."""
        raw = '{"type":"pulse","xNorm":' + "9" * 5000 + ',"yNorm":0,"color":"#123456"}'

        with pytest.raises(InvalidMessageError) as exc_info:
            parse_message(raw)

        assert exc_info.value.reason == "invalid_json"

    def test_parse_deeply_nested(self) -> None:
        """Test pathological nesting is rejected instead of exhausting the stack."""
        with pytest.raises(InvalidMessageError) as exc_info:
            parse_message("[" * 100000 + "]" * 100000)

        assert exc_info.value.reason == "invalid_json"

    def test_to_json_refuses_non_finite(self) -> None:
        """Test serialization never emits bare NaN or Infinity tokens."""
        with pytest.raises(ValueError, match="not JSON compliant"):
            PulseMessage(x_norm=float("inf"), y_norm=0.0, color="#000000").to_json()
