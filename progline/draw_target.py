"""Draw targets: where progress output is painted and how often."""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from progline.term import Term, measure_text_width

MAX_BURST = 20


class MultiProgressAlignment(Enum):
    """Vertical alignment of a multi progress when some of its bars are removed."""

    TOP = "top"
    BOTTOM = "bottom"


@dataclass(frozen=True)
class LineAdjust:
    """A change to the remembered line count of a target.

    ``clear`` lines are added so the next draw also wipes them; ``keep``
    lines are subtracted so the next draw leaves them on screen.
    """

    clear: int = 0
    keep: int = 0

    def _apply(self, count: int) -> int:
        return max(count + self.clear - self.keep, 0)


class RateLimiter:
    """Limits draws to a rate while allowing occasional bursts."""

    def __init__(self, rate: int, now: float) -> None:
        if not 1 <= rate <= 255:
            raise ValueError("refresh rate must be between 1 and 255")
        self.interval_ms = 1000 // rate
        self.capacity = MAX_BURST
        self.prev = now

    def allow(self, now: float) -> bool:
        """Return whether a draw may happen at time ``now`` (seconds)."""
        if now < self.prev:
            return False
        elapsed_ns = round((now - self.prev) * 1e9)
        interval_ns = self.interval_ms * 1_000_000
        if self.capacity == 0 and elapsed_ns < interval_ns:
            return False
        new, remainder = divmod(elapsed_ns, interval_ns)
        self.capacity = min(MAX_BURST, self.capacity + new - 1)
        self.prev = now - remainder / 1e9
        return True


@dataclass
class DrawState:
    """The drawn state of an element."""

    lines: list[str] = field(default_factory=list)
    orphan_lines_count: int = 0
    move_cursor: bool = False
    alignment: MultiProgressAlignment = MultiProgressAlignment.TOP

    def draw_to_term(self, term: Any, last_line_count: int) -> int:
        """Paint the lines to ``term`` and return the new last line count."""
        if self.lines and self.move_cursor:
            term.move_cursor_up(last_line_count)
        else:
            n = last_line_count
            term.move_cursor_up(max(n - 1, 0))
            for i in range(n):
                term.clear_line()
                if i + 1 != n:
                    term.move_cursor_down(1)
            term.move_cursor_up(max(n - 1, 0))

        shift = 0
        if (
            self.alignment is MultiProgressAlignment.BOTTOM
            and len(self.lines) < last_line_count
        ):
            shift = last_line_count - len(self.lines)
            for _ in range(shift):
                term.write_line("")

        width = max(term.width(), 1)
        real_len = 0
        last = len(self.lines) - 1
        for idx, line in enumerate(self.lines):
            line_width = measure_text_width(line)
            # A line with no visible characters still takes one row.
            real_len += max(-(-line_width // width), 1) if line else 1
            if idx != last:
                term.write_line(line)
            else:
                term.write_str(line)
                # Pad so that the cursor sits at the right edge of the terminal.
                term.write_str(" " * max(term.width() - line_width, 0))

        term.flush()
        return real_len - self.orphan_lines_count + shift

    def reset(self) -> None:
        self.lines.clear()
        self.orphan_lines_count = 0


class DrawStateWrapper:
    """Context manager over a draw state.

    On exit, orphan lines at the head of the state are moved to the given
    orphan line list (when there is one).
    """

    def __init__(self, state: DrawState, orphan_lines: Optional[list[str]] = None) -> None:
        self.state = state
        self.orphan_lines = orphan_lines

    def __enter__(self) -> DrawState:
        return self.state

    def __exit__(self, *args: object) -> None:
        if self.orphan_lines is not None:
            count = self.state.orphan_lines_count
            self.orphan_lines.extend(self.state.lines[:count])
            del self.state.lines[:count]
            self.state.orphan_lines_count = 0


@dataclass
class _TermTarget:
    term: Any
    rate_limiter: Optional[RateLimiter]
    requires_tty: bool
    last_line_count: int = 0
    draw_state: DrawState = field(default_factory=DrawState)


@dataclass
class _RemoteTarget:
    state: Any
    idx: int


class _HiddenTarget:
    pass


class Drawable:
    """A target that is ready to be drawn to right now.

    A multi progress state used here must provide a reentrant ``lock``.
    """

    def __init__(
        self,
        *,
        target: Optional[_TermTarget] = None,
        multi: Any = None,
        idx: int = 0,
        force_draw: bool = False,
        now: float = 0.0,
    ) -> None:
        self._target = target
        self._multi = multi
        self._idx = idx
        self._force_draw = force_draw
        self._now = now

    def adjust_last_line_count(self, adjust: LineAdjust) -> None:
        if self._target is not None:
            self._target.last_line_count = adjust._apply(self._target.last_line_count)

    def state(self) -> DrawStateWrapper:
        """Return the reset draw state to be filled before drawing."""
        if self._target is not None:
            wrapper = DrawStateWrapper(self._target.draw_state)
        else:
            with self._multi.lock:
                wrapper = self._multi.draw_state(self._idx)
        wrapper.state.reset()
        return wrapper

    def clear(self) -> None:
        """Draw nothing, wiping what was drawn before."""
        if self._target is not None:
            with self.state():
                pass
            self.draw()
            return
        with self._multi.lock:
            with self.state():
                pass
            self.draw()

    def draw(self) -> None:
        if self._target is not None:
            target = self._target
            target.last_line_count = target.draw_state.draw_to_term(
                target.term, target.last_line_count
            )
            return
        with self._multi.lock:
            self._multi.draw(self._force_draw, None, self._now)


class ProgressDrawTarget:
    """Where a progress bar or multi progress paints, and how often."""

    def __init__(self, kind: _TermTarget | _RemoteTarget | _HiddenTarget) -> None:
        self._kind = kind

    @classmethod
    def stdout(cls, refresh_rate: int = 20) -> ProgressDrawTarget:
        """Draw to standard output at most ``refresh_rate`` times a second."""
        return cls.term(Term.stdout(), refresh_rate)

    @classmethod
    def stderr(cls, refresh_rate: int = 20) -> ProgressDrawTarget:
        """Draw to standard error at most ``refresh_rate`` times a second."""
        return cls.term(Term.stderr(), refresh_rate)

    @classmethod
    def term(cls, term: Term, refresh_rate: int = 20) -> ProgressDrawTarget:
        """Draw to a terminal; hidden when it is not attached to a tty."""
        limiter = RateLimiter(refresh_rate, time.monotonic())
        return cls(_TermTarget(term, limiter, requires_tty=True))

    @classmethod
    def term_like(cls, term_like: Any, refresh_rate: Optional[int] = None) -> ProgressDrawTarget:
        """Draw to any terminal-like object, rate limited when a rate is given."""
        limiter = None if refresh_rate is None else RateLimiter(refresh_rate, time.monotonic())
        return cls(_TermTarget(term_like, limiter, requires_tty=False))

    @classmethod
    def hidden(cls) -> ProgressDrawTarget:
        """A target that never draws."""
        return cls(_HiddenTarget())

    @classmethod
    def new_remote(cls, state: Any, idx: int) -> ProgressDrawTarget:
        """A target that forwards to member ``idx`` of a multi progress state."""
        return cls(_RemoteTarget(state, idx))

    def is_hidden(self) -> bool:
        kind = self._kind
        if isinstance(kind, _HiddenTarget):
            return True
        if isinstance(kind, _RemoteTarget):
            with kind.state.lock:
                return kind.state.is_hidden()
        if kind.requires_tty:
            return not kind.term.is_term()
        return False

    def width(self) -> int:
        kind = self._kind
        if isinstance(kind, _HiddenTarget):
            return 0
        if isinstance(kind, _RemoteTarget):
            with kind.state.lock:
                return kind.state.width()
        return kind.term.width()

    def mark_zombie(self) -> None:
        """Tell the owning multi progress that this bar is gone."""
        kind = self._kind
        if isinstance(kind, _RemoteTarget):
            with kind.state.lock:
                kind.state.mark_zombie(kind.idx)

    def drawable(self, force_draw: bool, now: float) -> Optional[Drawable]:
        """Return a drawable if drawing is possible and allowed at ``now``."""
        kind = self._kind
        if isinstance(kind, _TermTarget):
            if kind.requires_tty and not kind.term.is_term():
                return None
            if force_draw or kind.rate_limiter is None or kind.rate_limiter.allow(now):
                return Drawable(target=kind)
            return None
        if isinstance(kind, _RemoteTarget):
            return Drawable(multi=kind.state, idx=kind.idx, force_draw=force_draw, now=now)
        return None

    def disconnect(self, now: float) -> None:
        """Clear this target's lines from an owning multi progress."""
        kind = self._kind
        if isinstance(kind, _RemoteTarget):
            with contextlib.suppress(OSError):
                Drawable(multi=kind.state, idx=kind.idx, force_draw=True, now=now).clear()

    def remote(self) -> Optional[tuple[Any, int]]:
        """The multi progress state and member index, for remote targets."""
        kind = self._kind
        if isinstance(kind, _RemoteTarget):
            return kind.state, kind.idx
        return None

    def adjust_last_line_count(self, adjust: LineAdjust) -> None:
        kind = self._kind
        if isinstance(kind, _TermTarget):
            kind.last_line_count = adjust._apply(kind.last_line_count)

    def __repr__(self) -> str:
        return f"ProgressDrawTarget({self._kind!r})"