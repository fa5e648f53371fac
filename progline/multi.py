"""Several progress displays drawn together on one target."""

from __future__ import annotations

import time
from typing import Callable, Optional, TypeVar

from progline.draw_target import (
    MultiProgressAlignment,
    ProgressDrawTarget,
    _HiddenTarget,
)
from progline.multi_state import InsertLocation, MultiState

R = TypeVar("R")


class MultiProgress:
    """Manages several progress displays, possibly updated from different threads.

    Each member is represented by a remote draw target handed out by
    :meth:`add` and the other insertion methods; drawing to that target
    paints the member's lines in its place among the others.
    """

    def __init__(self, draw_target: Optional[ProgressDrawTarget] = None) -> None:
        if draw_target is None:
            draw_target = ProgressDrawTarget.stderr()
        self.state = MultiState(draw_target)

    def set_draw_target(self, target: ProgressDrawTarget) -> None:
        """Replace the target the whole multi progress is drawn to."""
        with self.state.lock:
            self.state.draw_target.disconnect(time.monotonic())
            self.state.draw_target = target

    def set_move_cursor(self, move_cursor: bool) -> None:
        """Move the cursor instead of clearing lines when redrawing.

        This reduces flicker but should not be used when members come and go.
        """
        with self.state.lock:
            self.state.move_cursor = move_cursor

    def set_alignment(self, alignment: MultiProgressAlignment) -> None:
        """Set how members are aligned when some of them are removed."""
        with self.state.lock:
            self.state.alignment = alignment

    def add(self) -> ProgressDrawTarget:
        """Add a member at the end and return its draw target."""
        return self._internalize(InsertLocation.end())

    def insert(self, index: int) -> ProgressDrawTarget:
        """Add a member at visual position ``index`` (the end if past it)."""
        return self._internalize(InsertLocation.index(index))

    def insert_from_back(self, index: int) -> ProgressDrawTarget:
        """Add a member ``index`` places from the end (the start if past it)."""
        return self._internalize(InsertLocation.from_back(index))

    def insert_before(self, before: ProgressDrawTarget) -> ProgressDrawTarget:
        """Add a member right before the member drawn to ``before``."""
        return self._internalize(InsertLocation.before(self._member_index(before)))

    def insert_after(self, after: ProgressDrawTarget) -> ProgressDrawTarget:
        """Add a member right after the member drawn to ``after``."""
        return self._internalize(InsertLocation.after(self._member_index(after)))

    def remove(self, target: ProgressDrawTarget) -> None:
        """Remove the member drawn to ``target``; the target becomes hidden.

        Targets that are not members (for instance ones already removed)
        are left alone. A member of another multi progress is an error.
        """
        remote = target.remote()
        if remote is None:
            return
        state, idx = remote
        if state is not self.state:
            raise ValueError("draw target belongs to a different multi progress")
        with self.state.lock:
            # The handed-out target stops forwarding to this multi progress.
            target._kind = _HiddenTarget()
            self.state.remove_idx(idx)

    def println(self, msg: str) -> None:
        """Print a line above all members; does nothing when hidden."""
        self.state.println(msg, time.monotonic())

    def suspend(self, func: Callable[[], R]) -> R:
        """Clear the display, run ``func``, redraw, and return its result.

        The state lock is held while ``func`` runs.
        """
        return self.state.suspend(func, time.monotonic())

    def clear(self) -> None:
        """Wipe everything the multi progress has drawn."""
        self.state.clear(time.monotonic())

    def is_hidden(self) -> bool:
        """Whether the multi progress draws to nothing visible."""
        with self.state.lock:
            return self.state.is_hidden()

    def _internalize(self, location: InsertLocation) -> ProgressDrawTarget:
        idx = self.state.insert(location)
        return ProgressDrawTarget.new_remote(self.state, idx)

    def _member_index(self, target: ProgressDrawTarget) -> int:
        remote = target.remote()
        if remote is None or remote[0] is not self.state:
            raise ValueError("draw target is not a member of this multi progress")
        return remote[1]

    def __repr__(self) -> str:
        return f"MultiProgress(members={len(self.state)})"