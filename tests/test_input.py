"""Tests for surface taps and the colour picker handle."""

from __future__ import annotations

import random

import pytest

from pulse_py.core.animation import Surface
from pulse_py.core.color import RGB, parse_hex_color, random_color, to_hex
from pulse_py.core.input import ColorPicker, InputController, TouchPoint
from pulse_py.exceptions import InvalidColorError


class Recorder:
    """Collects controller callbacks."""

    def __init__(self) -> None:
        self.pulses: list[tuple[float, float, str]] = []
        self.opened = 0

    def on_pulse(self, norm_x: float, norm_y: float, color: str) -> None:
        self.pulses.append((norm_x, norm_y, color))

    def on_open_picker(self) -> None:
        self.opened += 1


@pytest.fixture
def recorder() -> Recorder:
    """Create a callback recorder."""
    return Recorder()


@pytest.fixture
def controller(surface: Surface, picker: ColorPicker, recorder: Recorder) -> InputController:
    """Create a controller on the 800x600 sample surface."""
    return InputController(surface, picker, recorder.on_pulse, recorder.on_open_picker)


class TestColor:
    """Tests for colour helpers."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("#ff8800", RGB(255, 136, 0)), ("00FF7f", RGB(0, 255, 127)), (" #000000 ", RGB(0, 0, 0))],
    )
    def test_parse_hex_color(self, value: str, expected: RGB) -> None:
        """Test decoding six digit hex colours."""
        assert parse_hex_color(value) == expected

    @pytest.mark.parametrize("value", ["", "#fff", "#gggggg", "red", "#1234567", 42])
    def test_parse_hex_color_rejects(self, value: object) -> None:
        """Test malformed colours raise InvalidColorError."""
        with pytest.raises(InvalidColorError) as exc_info:
            parse_hex_color(value)  # type: ignore[arg-type]

        assert exc_info.value.color == value

    def test_to_hex(self) -> None:
        """Test encoding is lowercase with leading hash."""
        assert to_hex(RGB(171, 205, 239)) == "#abcdef"

    def test_random_color_is_visible(self) -> None:
        """Test generated colours avoid near-black and near-white channels."""
        rng = random.Random(1234)
        for _ in range(50):
            rgb = parse_hex_color(random_color(rng))
            assert all(30 <= channel <= 229 for channel in rgb)


class TestColorPicker:
    """Tests for the picker handle geometry."""

    def test_default_color_is_random(self) -> None:
        """Test a picker without a colour gets a valid one."""
        picker = ColorPicker()

        assert parse_hex_color(picker.color)

    def test_default_position_is_bottom_left(self, surface: Surface, picker: ColorPicker) -> None:
        """Test the handle starts inset from the bottom-left corner."""
        picker.reposition(surface)

        assert (picker.x, picker.y) == (44.0, 556.0)

    def test_reposition_clamps_on_screen(self, surface: Surface) -> None:
        """Test a handle left outside the surface is pulled back in."""
        picker = ColorPicker(color="#ffffff", x=5000.0, y=-30.0)

        picker.reposition(surface)

        assert (picker.x, picker.y) == (780.0, 20.0)

    def test_contains(self, surface: Surface, picker: ColorPicker) -> None:
        """Test hit testing against the handle radius."""
        picker.reposition(surface)

        assert picker.contains(50, 550)
        assert not picker.contains(400, 300)


class TestSurfaceTaps:
    """Tests for taps on the drawing surface."""

    def test_pointer_tap_spawns_pulse(self, controller: InputController, recorder: Recorder) -> None:
        """Test a pointer press emits a normalized pulse in the picker colour."""
        assert controller.surface_pointer_down(200, 450)

        assert recorder.pulses == [(0.25, 0.75, "#ff8800")]

    def test_touch_tap_uses_first_touch(self, controller: InputController, recorder: Recorder) -> None:
        """Test only the first touch of a multi-touch start counts."""
        touches = [TouchPoint(identifier=1, x=400, y=300), TouchPoint(identifier=2, x=100, y=100)]

        assert controller.surface_touch_start(touches)

        assert recorder.pulses == [(0.5, 0.5, "#ff8800")]

    def test_empty_touch_list_is_ignored(self, controller: InputController, recorder: Recorder) -> None:
        """Test a touch start without touches does nothing."""
        assert not controller.surface_touch_start([])
        assert recorder.pulses == []

    def test_press_on_handle_is_not_a_tap(self, controller: InputController, recorder: Recorder) -> None:
        """Test presses on the picker handle never spawn pulses."""
        assert not controller.surface_pointer_down(44, 556)
        assert recorder.pulses == []

    def test_explicit_target_overrides_hit_test(self, controller: InputController, recorder: Recorder) -> None:
        """Test the caller can report that the event did not target the surface."""
        assert not controller.surface_pointer_down(400, 300, on_surface=False)
        assert recorder.pulses == []

    def test_taps_suppressed_while_dragging(self, controller: InputController, recorder: Recorder) -> None:
        """Test surface taps are ignored during a picker drag."""
        controller.picker_pointer_down(7, 44, 556)

        assert not controller.surface_pointer_down(400, 300)
        assert not controller.surface_touch_start([TouchPoint(identifier=3, x=400, y=300)])
        assert recorder.pulses == []

    def test_color_change_applies_to_later_taps(self, controller: InputController, recorder: Recorder) -> None:
        """Test a newly chosen colour is used for subsequent pulses."""
        controller.set_color("#00ff00")
        controller.surface_pointer_down(400, 300)

        assert recorder.pulses[-1][2] == "#00ff00"


class TestPickerDrag:
    """Tests for dragging the picker handle."""

    def test_pointer_drag_moves_handle(self, controller: InputController, recorder: Recorder) -> None:
        """Test the handle follows the pointer by its offset."""
        assert controller.picker_pointer_down(1, 50, 550)
        assert controller.picker_pointer_move(1, 150, 450)
        assert controller.picker_pointer_up(1)

        assert (controller.picker.x, controller.picker.y) == (144.0, 456.0)
        assert not controller.is_dragging
        assert recorder.opened == 0

    def test_tap_on_handle_opens_picker(self, controller: InputController, recorder: Recorder) -> None:
        """Test releasing after a tiny movement opens the colour selection."""
        controller.picker_pointer_down(1, 44, 556)
        controller.picker_pointer_move(1, 45, 557)
        controller.picker_pointer_up(1)

        assert recorder.opened == 1

    def test_cancel_never_opens_picker(self, controller: InputController, recorder: Recorder) -> None:
        """Test a cancelled drag ends without opening the colour selection."""
        controller.picker_pointer_down(1, 44, 556)

        assert controller.picker_pointer_cancel(1)
        assert recorder.opened == 0
        assert not controller.is_dragging

    def test_other_pointers_are_ignored(self, controller: InputController) -> None:
        """Test only the pointer that started the drag can move or end it."""
        controller.picker_pointer_down(1, 44, 556)

        assert not controller.picker_pointer_move(2, 300, 300)
        assert not controller.picker_pointer_up(2)
        assert controller.active_pointer == 1
        assert (controller.picker.x, controller.picker.y) == (44.0, 556.0)

    def test_second_drag_cannot_start(self, controller: InputController) -> None:
        """Test a drag in progress is not taken over."""
        assert controller.picker_pointer_down(1, 44, 556)

        assert not controller.picker_pointer_down(2, 44, 556)
        assert not controller.picker_touch_start([TouchPoint(identifier=9, x=44, y=556)])
        assert controller.active_pointer == 1

    def test_drag_is_clamped_to_surface(self, controller: InputController) -> None:
        """Test the handle cannot be dragged off the surface."""
        controller.picker_pointer_down(1, 44, 556)
        controller.picker_pointer_move(1, -500, 2000)

        assert (controller.picker.x, controller.picker.y) == (20.0, 580.0)

    def test_touch_drag_tracks_owning_touch(self, controller: InputController, recorder: Recorder) -> None:
        """Test touch drags follow the touch that started them."""
        assert controller.picker_touch_start([TouchPoint(identifier=4, x=44, y=556)])

        assert not controller.picker_touch_move([TouchPoint(identifier=5, x=300, y=300)])
        assert controller.picker_touch_move(
            [TouchPoint(identifier=5, x=300, y=300), TouchPoint(identifier=4, x=144, y=456)]
        )
        assert not controller.picker_touch_end([TouchPoint(identifier=5, x=300, y=300)])
        assert controller.picker_touch_end([TouchPoint(identifier=4, x=144, y=456)])

        assert (controller.picker.x, controller.picker.y) == (144.0, 456.0)
        assert recorder.opened == 0

    def test_touch_tap_opens_picker(self, controller: InputController, recorder: Recorder) -> None:
        """Test a stationary touch on the handle opens the colour selection."""
        controller.picker_touch_start([TouchPoint(identifier=4, x=44, y=556)])
        controller.picker_touch_end([TouchPoint(identifier=4, x=44, y=556)])

        assert recorder.opened == 1

    def test_touch_cancel(self, controller: InputController, recorder: Recorder) -> None:
        """Test touch cancel aborts the drag."""
        controller.picker_touch_start([TouchPoint(identifier=4, x=44, y=556)])

        assert controller.picker_touch_cancel()
        assert not controller.picker_touch_cancel()
        assert recorder.opened == 0

    def test_resize_keeps_handle_visible(self, controller: InputController) -> None:
        """Test shrinking the surface pulls the handle back on screen."""
        controller.picker_pointer_down(1, 44, 556)
        controller.picker_pointer_move(1, 700, 100)
        controller.picker_pointer_up(1)

        controller.resize(320, 240)

        assert (controller.picker.x, controller.picker.y) == (300.0, 100.0)
