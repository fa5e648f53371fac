"""Shared state behind a multi progress: member bars, their order and drawing."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TypeVar

from progline.draw_target import (
    DrawState,
    DrawStateWrapper,
    LineAdjust,
    MultiProgressAlignment,
    ProgressDrawTarget,
)
from progline.term import measure_text_width

R = TypeVar("R")


class _Where(Enum):
    END = "end"
    INDEX = "index"
    FROM_BACK = "from_back"
    AFTER = "after"
    BEFORE = "before"


@dataclass(frozen=True)
class InsertLocation:
    """Where a new member goes in the visual order."""

    kind: _Where
    value: int = 0

    @classmethod
    def end(cls) -> InsertLocation:
        """After all existing members."""
        return cls(_Where.END)

    @classmethod
    def index(cls, pos: int) -> InsertLocation:
        """At visual position ``pos``, or at the end when ``pos`` is past it."""
        return cls(_Where.INDEX, pos)

    @classmethod
    def from_back(cls, pos: int) -> InsertLocation:
        """``pos`` places from the end, or at the start when ``pos`` is past it."""
        return cls(_Where.FROM_BACK, pos)

    @classmethod
    def after(cls, idx: int) -> InsertLocation:
        """Right after the member with index ``idx``."""
        return cls(_Where.AFTER, idx)

    @classmethod
    def before(cls, idx: int) -> InsertLocation:
        """Right before the member with index ``idx``."""
        return cls(_Where.BEFORE, idx)


@dataclass
class MultiStateMember:
    """One slot of a multi progress.

    ``draw_state`` is None until the member is first drawn, and for free slots.
    """

    draw_state: Optional[DrawState] = None
    is_zombie: bool = False


def _split_lines(msg: str) -> list[str]:
    if not msg:
        return [""]
    lines = msg.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _real_len(lines: list[str], width: int) -> int:
    """Rows the lines take on a terminal of ``width`` columns, counting wraps."""
    if width <= 0:
        return 0
    return sum(math.ceil(measure_text_width(line) / width) for line in lines)


class MultiState:
    """The members of a multi progress and the target they are drawn to."""

    def __init__(self, draw_target: ProgressDrawTarget) -> None:
        self.lock = threading.RLock()
        self.members: list[MultiStateMember] = []
        self.free_set: list[int] = []
        self.ordering: list[int] = []
        self.draw_target = draw_target
        self.move_cursor = False
        self.alignment = MultiProgressAlignment.TOP
        self.orphan_lines: list[str] = []
        self.zombie_lines_count = 0

    def mark_zombie(self, index: int) -> None:
        """Mark a member whose bar is gone; reap it now if it is drawn first."""
        with self.lock:
            member = self.members[index]
            if index != self.ordering[0]:
                member.is_zombie = True
                return
            line_count = len(member.draw_state.lines) if member.draw_state else 0
            self.zombie_lines_count += line_count
            self.draw_target.adjust_last_line_count(LineAdjust(keep=line_count))
            self.remove_idx(index)

    def draw(
        self, force_draw: bool, extra_lines: Optional[list[str]], now: float
    ) -> None:
        """Draw all members, with ``extra_lines`` printed above them."""
        with self.lock:
            width = self.width()

            reap_indices = []
            adjust = 0
            for index in self.ordering:
                member = self.members[index]
                if not member.is_zombie:
                    break
                line_count = (
                    _real_len(member.draw_state.lines, width) if member.draw_state else 0
                )
                self.zombie_lines_count += line_count
                adjust += line_count
                reap_indices.append(index)

            if extra_lines is not None:
                self.draw_target.adjust_last_line_count(
                    LineAdjust(clear=self.zombie_lines_count)
                )
                self.zombie_lines_count = 0

            orphan_lines_count = _real_len(self.orphan_lines, width)
            force_draw = force_draw or orphan_lines_count > 0
            drawable = self.draw_target.drawable(force_draw, now)
            if drawable is None:
                return

            with drawable.state() as draw_state:
                draw_state.orphan_lines_count = orphan_lines_count
                draw_state.alignment = self.alignment
                if extra_lines is not None:
                    draw_state.lines.extend(extra_lines)
                    draw_state.orphan_lines_count += _real_len(extra_lines, width)
                draw_state.lines.extend(self.orphan_lines)
                self.orphan_lines.clear()
                for index in self.ordering:
                    member_state = self.members[index].draw_state
                    if member_state is not None:
                        draw_state.lines.extend(member_state.lines)

            try:
                drawable.draw()
            finally:
                for index in reap_indices:
                    self.remove_idx(index)
                if extra_lines is None:
                    self.draw_target.adjust_last_line_count(LineAdjust(keep=adjust))

    def println(self, msg: str, now: float) -> None:
        """Print ``msg`` above all members; an empty message prints an empty line."""
        self.draw(True, _split_lines(msg), now)

    def draw_state(self, idx: int) -> DrawStateWrapper:
        """The draw state of member ``idx``, created on first use."""
        with self.lock:
            member = self.members[idx]
            if member.draw_state is None:
                member.draw_state = DrawState(move_cursor=self.move_cursor)
            return DrawStateWrapper(member.draw_state, self.orphan_lines)

    def is_hidden(self) -> bool:
        return self.draw_target.is_hidden()

    def suspend(self, func: Callable[[], R], now: float) -> R:
        """Clear the display, run ``func``, then draw again; returns its result."""
        with self.lock:
            self.clear(now)
            result = func()
            self.draw(True, None, time.monotonic())
            return result

    def width(self) -> int:
        return self.draw_target.width()

    def insert(self, location: InsertLocation) -> int:
        """Add a member at ``location`` and return its index."""
        with self.lock:
            if self.free_set:
                idx = self.free_set.pop()
                self.members[idx] = MultiStateMember()
            else:
                self.members.append(MultiStateMember())
                idx = len(self.members) - 1

            kind = location.kind
            if kind is _Where.END:
                self.ordering.append(idx)
            elif kind is _Where.INDEX:
                self.ordering.insert(min(location.value, len(self.ordering)), idx)
            elif kind is _Where.FROM_BACK:
                self.ordering.insert(max(len(self.ordering) - location.value, 0), idx)
            elif kind is _Where.AFTER:
                self.ordering.insert(self.ordering.index(location.value) + 1, idx)
            else:
                self.ordering.insert(self.ordering.index(location.value), idx)
            return idx

    def clear(self, now: float) -> None:
        """Wipe everything drawn, zombie lines included."""
        with self.lock:
            drawable = self.draw_target.drawable(True, now)
            if drawable is None:
                return
            drawable.adjust_last_line_count(LineAdjust(clear=self.zombie_lines_count))
            self.zombie_lines_count = 0
            drawable.clear()

    def remove_idx(self, idx: int) -> None:
        """Free member ``idx``; removing a free member does nothing."""
        with self.lock:
            if idx in self.free_set:
                return
            self.members[idx] = MultiStateMember()
            self.free_set.append(idx)
            self.ordering = [x for x in self.ordering if x != idx]

    def __len__(self) -> int:
        return len(self.members) - len(self.free_set)