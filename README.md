# progline

Building blocks for drawing progress output in a terminal.

- `progline.format`: human-readable formatting of durations, byte sizes and counts
  (`HumanDuration`, `FormattedDuration`, `HumanBytes`, `DecimalBytes`, `BinaryBytes`,
  `HumanCount`, `HumanFloatCount`).
- `progline.term`: `Term`, a buffered terminal writer with cursor movement and line
  clearing, and `measure_text_width`, the display width of text with ANSI escapes ignored.
- `progline.draw_target`: `ProgressDrawTarget`, which decides where lines are painted
  (standard output, standard error, any terminal-like object, a member of a multi
  progress, or nowhere) and limits how often they are redrawn.
- `progline.multi_state` and `progline.multi`: `MultiProgress`, which keeps several
  groups of lines in order, lets members be inserted and removed, and prints log lines
  above them.
- `progline.iter`: `progress_with`, `ProgressBarIter`, `ProgressReader` and
  `ProgressWriter`, which advance a progress object as an iterable or stream is used.

## Installation

```
pip install progline
```

## Formatting

```python
from datetime import timedelta
from progline.format import FormattedDuration, HumanBytes, HumanCount, HumanDuration, HumanFloatCount

str(HumanBytes(3 * 1024 * 1024))                  # '3.00 MiB'
str(HumanDuration(timedelta(seconds=8)))           # '8 seconds'
format(HumanDuration(timedelta(seconds=8)), "#")   # '8s'
str(HumanCount(33857009))                          # '33,857,009'
str(HumanFloatCount(33857009.123456, 4))           # '33,857,009.1235'
str(FormattedDuration(timedelta(seconds=3725)))    # '01:02:05'
```

Durations may be a `timedelta` or a number of seconds. They are rounded rather than
truncated, so 1 hour 59 minutes reads as "2 hours", and a single large unit is avoided
in favour of the next smaller one ("89 seconds" rather than "1 minute").
`DecimalBytes` uses SI prefixes (`kB`, `MB`, ...); `HumanBytes` and `BinaryBytes` use
binary ones (`KiB`, `MiB`, ...). Negative values raise `ValueError`.

## Draw targets

```python
from progline.draw_target import ProgressDrawTarget

target = ProgressDrawTarget.stderr(20)   # at most 20 redraws per second, with short bursts
quiet = ProgressDrawTarget.hidden()
assert quiet.is_hidden()
```

A target built with `stdout`, `stderr` or `term` counts as hidden when its stream is
not attached to a terminal, so piping output to a file does not fill it with escape
codes. `term_like` accepts any object with the methods of `Term` (`width`,
`move_cursor_up`, `move_cursor_down`, `clear_line`, `write_line`, `write_str`,
`flush`) and is rate limited only when a refresh rate is given. A refresh rate outside
1–255 raises `ValueError`.

To paint lines, ask the target for a `Drawable`, fill its state and draw:

```python
import time

drawable = target.drawable(True, time.monotonic())   # None when hidden or rate limited
if drawable is not None:
    with drawable.state() as state:
        state.lines.append("working...")
    drawable.draw()
```

## Several groups of lines at once

```python
import time
from progline.draw_target import ProgressDrawTarget
from progline.multi import MultiProgress

multi = MultiProgress(ProgressDrawTarget.stderr(20))
first = multi.add()                 # a draw target for one member
second = multi.insert_after(first)

drawable = first.drawable(True, time.monotonic())
with drawable.state() as state:
    state.lines.append("first member")
drawable.draw()                     # redraws every member in order

multi.println("starting!")          # printed above all members
multi.remove(second)                # `second` now draws nowhere
multi.clear()
```

`MultiProgress` places members with `add`, `insert`, `insert_from_back`,
`insert_before` and `insert_after`; each returns the `ProgressDrawTarget` the member is
drawn to. `remove` frees a member (removing one twice does nothing; a target of another
multi progress raises `ValueError`). `set_alignment` with
`MultiProgressAlignment.TOP` or `BOTTOM` chooses which edge stays put when members
disappear, `set_move_cursor` redraws by moving the cursor instead of clearing lines, and
`suspend(func)` clears the display, runs `func`, redraws and returns its result.
The shared state is guarded by a lock, so members may be drawn from several threads.

## Iterables and streams

The wrappers in `progline.iter` work with any progress object that has `inc(delta)`,
`set_position(pos)`, `is_finished()` and `finish_using_style()`.

```python
from progline.iter import progress_with

class Counter:
    def __init__(self):
        self.pos, self.done = 0, False
    def inc(self, delta): self.pos += delta
    def set_position(self, pos): self.pos = pos
    def is_finished(self): return self.done
    def finish_using_style(self): self.done = True

counter = Counter()
assert [x * 2 for x in progress_with([1, 2, 3], counter)] == [2, 4, 6]
assert counter.pos == 3 and counter.done
```

`ProgressReader` and `ProgressWriter` wrap file-like objects, advance the progress by
the amount read or written, move it to the new position on `seek`, and close the stream
when used as context managers.

## What this package does not do

There is no ready-made progress bar or spinner here: no templates, styles, bar
characters, ETA or speed estimates, and no background ticking. The package provides
the drawing, layout, wrapping and formatting pieces; deciding what lines to draw is up
to the caller. It has no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```