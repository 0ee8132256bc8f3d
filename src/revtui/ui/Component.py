# revtui/ui/Component.py
"""Component.py
========================
The uniform contract every visual element of revtui implements, plus the
two pumps composites use to talk to their children.

Every component can be drawn into a rectangle of a curses window, offered a
key event, asked for the commands it currently supports, shown or hidden,
and focused. Composites own their children and forward these calls in a
fixed, declared order.

Event handling returns an ``EventState`` with three possible values:

- ``EventState.NOT_CONSUMED``
- ``EventState.CONSUMED``
- ``EventState.visibility_changed(old, new)``: consumed, and handling the
  event flipped the component's own visibility (e.g. the file tree hid
  itself to open another popup).

``Component.event`` computes the third value itself, so a parent never has
to re-poll ``is_visible()`` to notice the transition.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Any, ClassVar, Iterable, Optional

from .Layout import Rect

CursesWindow = Any
Key = Any


class ComponentError(RuntimeError):
    """A component was driven in a way its contract does not allow."""


class CommandBlocking(enum.Enum):
    BLOCKING = "blocking"
    PASSING_ON = "passing_on"


@dataclass(frozen=True)
class CommandInfo:
    """One entry of the command bar, e.g. ``"Close [esc]"``."""

    text: str
    enabled: bool = True
    available: bool = True
    order: int = 0

    def with_order(self, order: int) -> CommandInfo:
        return replace(self, order=order)


@dataclass(frozen=True)
class EventState:
    consumed: bool
    visibility: Optional[tuple[bool, bool]] = None

    NOT_CONSUMED: ClassVar[EventState]
    CONSUMED: ClassVar[EventState]

    @classmethod
    def visibility_changed(cls, old: bool, new: bool) -> EventState:
        return cls(True, (old, new))

    @property
    def is_consumed(self) -> bool:
        return self.consumed

    @property
    def became_hidden(self) -> bool:
        return self.visibility == (True, False)


EventState.NOT_CONSUMED = EventState(False)
EventState.CONSUMED = EventState(True)


# ==================== Component Class ====================
class Component:
    """Base class for leaves, tree lists, composites and popups.

    Subclasses implement ``draw`` and override ``_handle_event``; the public
    ``event`` wrapper must not be overridden. A hidden component keeps its
    state but does not draw and does not take focus.
    """

    def __init__(self) -> None:
        self.visible: bool = False
        self._focused: bool = False

    def draw(self, win: CursesWindow, rect: Rect) -> None:
        raise NotImplementedError(
            "The 'draw' method must be implemented in a child class."
        )

    def commands(self, out: list[CommandInfo], force_all: bool) -> CommandBlocking:
        return visibility_blocking(self)

    def event(self, ev: Key) -> EventState:
        was_visible = self.is_visible()
        state = self._handle_event(ev)
        is_visible = self.is_visible()
        if state.is_consumed and is_visible != was_visible:
            return EventState.visibility_changed(was_visible, is_visible)
        return state

    def _handle_event(self, ev: Key) -> EventState:
        return EventState.NOT_CONSUMED

    def is_visible(self) -> bool:
        return self.visible

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False
        self._focused = False

    def focused(self) -> bool:
        return self._focused

    def focus(self, focus: bool) -> None:
        self._focused = bool(focus) and self.is_visible()


def event_pump(ev: Key, components: Iterable[Component]) -> EventState:
    """Offers ``ev`` to each component in order, stopping at the first consumer."""
    for component in components:
        state = component.event(ev)
        if state.is_consumed:
            return state
    return EventState.NOT_CONSUMED


def command_pump(
    out: list[CommandInfo], force_all: bool, components: Iterable[Component]
) -> None:
    for component in components:
        if component.commands(out, force_all) is CommandBlocking.BLOCKING and not force_all:
            break


def visibility_blocking(component: Component) -> CommandBlocking:
    return CommandBlocking.BLOCKING if component.is_visible() else CommandBlocking.PASSING_ON


def is_key_event(ev: Key) -> bool:
    """Keys arrive from curses as ints or from the escape decoder as strings."""
    return isinstance(ev, (int, str)) and not isinstance(ev, bool)
