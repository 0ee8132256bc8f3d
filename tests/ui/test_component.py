# tests/ui/test_component.py
"""Unit tests for the component contract and the pumps.
=======================================================

Covered areas:
- `Component.event` computing the three-way `EventState`
- show/hide/focus coupling
- `event_pump` stopping at the first consumer
- `command_pump` honouring `CommandBlocking`
"""

from typing import Any

import pytest

from revtui.ui.Component import (
    CommandBlocking,
    CommandInfo,
    Component,
    EventState,
    command_pump,
    event_pump,
    is_key_event,
    visibility_blocking,
)


class CountingComponent(Component):
    """Records every event it is offered; consumes the ones in `consumes`."""

    def __init__(self, consumes: tuple[Any, ...] = (), hides_on: tuple[Any, ...] = ()) -> None:
        super().__init__()
        self.visible = True
        self.consumes = consumes
        self.hides_on = hides_on
        self.seen: list[Any] = []

    def _handle_event(self, ev: Any) -> EventState:
        self.seen.append(ev)
        if ev in self.hides_on:
            self.hide()
            return EventState.CONSUMED
        if ev in self.consumes:
            return EventState.CONSUMED
        return EventState.NOT_CONSUMED

    def draw(self, win: Any, rect: Any) -> None:
        pass


class CommandComponent(Component):
    def __init__(self, text: str, blocking: CommandBlocking) -> None:
        super().__init__()
        self.visible = True
        self.text = text
        self.blocking = blocking

    def commands(self, out: list[CommandInfo], force_all: bool) -> CommandBlocking:
        out.append(CommandInfo(self.text))
        return self.blocking


# ===== EventState =====


def test_event_state_values() -> None:
    assert not EventState.NOT_CONSUMED.is_consumed
    assert EventState.CONSUMED.is_consumed
    changed = EventState.visibility_changed(True, False)
    assert changed.is_consumed
    assert changed.became_hidden
    assert not EventState.CONSUMED.became_hidden
    assert not EventState.visibility_changed(False, True).became_hidden


def test_event_reports_visibility_change_when_handler_hides() -> None:
    comp = CountingComponent(hides_on=("x",))
    state = comp.event("x")
    assert state == EventState.visibility_changed(True, False)
    assert not comp.is_visible()


def test_event_passes_plain_consumption_through() -> None:
    comp = CountingComponent(consumes=("a",))
    assert comp.event("a") == EventState.CONSUMED
    assert comp.event("b") == EventState.NOT_CONSUMED


def test_base_draw_must_be_overridden() -> None:
    with pytest.raises(NotImplementedError):
        Component().draw(None, None)


# ===== visibility and focus =====


def test_focus_requires_visibility() -> None:
    comp = Component()
    comp.focus(True)
    assert not comp.focused()
    comp.show()
    comp.focus(True)
    assert comp.focused()


def test_hide_clears_focus() -> None:
    comp = Component()
    comp.show()
    comp.focus(True)
    comp.hide()
    assert not comp.is_visible()
    assert not comp.focused()


def test_visibility_blocking() -> None:
    comp = Component()
    assert visibility_blocking(comp) is CommandBlocking.PASSING_ON
    comp.show()
    assert visibility_blocking(comp) is CommandBlocking.BLOCKING


# ===== pumps =====


def test_event_pump_stops_at_first_consumer() -> None:
    first = CountingComponent()
    second = CountingComponent(consumes=("k",))
    third = CountingComponent(consumes=("k",))

    state = event_pump("k", [first, second, third])

    assert state.is_consumed
    assert first.seen == ["k"]
    assert second.seen == ["k"]
    assert third.seen == []


def test_event_pump_offers_to_all_when_nobody_consumes() -> None:
    children = [CountingComponent(), CountingComponent()]
    assert event_pump("z", children) == EventState.NOT_CONSUMED
    assert all(c.seen == ["z"] for c in children)


def test_event_pump_returns_visibility_change_of_consumer() -> None:
    child = CountingComponent(hides_on=("h",))
    assert event_pump("h", [child]).became_hidden


def test_command_pump_stops_after_blocking() -> None:
    out: list[CommandInfo] = []
    comps = [
        CommandComponent("one", CommandBlocking.PASSING_ON),
        CommandComponent("two", CommandBlocking.BLOCKING),
        CommandComponent("three", CommandBlocking.PASSING_ON),
    ]
    command_pump(out, False, comps)
    assert [c.text for c in out] == ["one", "two"]


def test_command_pump_force_all_ignores_blocking() -> None:
    out: list[CommandInfo] = []
    comps = [
        CommandComponent("one", CommandBlocking.BLOCKING),
        CommandComponent("two", CommandBlocking.PASSING_ON),
    ]
    command_pump(out, True, comps)
    assert [c.text for c in out] == ["one", "two"]


def test_command_info_with_order() -> None:
    info = CommandInfo("Close [esc]")
    assert info.with_order(5).order == 5
    assert info.order == 0


def test_is_key_event() -> None:
    assert is_key_event(10)
    assert is_key_event("alt-x")
    assert not is_key_event(True)
    assert not is_key_event({"type": "commit_files"})
