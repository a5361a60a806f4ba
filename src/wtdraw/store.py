"""Ordered frame collection with a current-frame cursor.

The store is the single owner of every frame buffer. Frames handed in are
copied and frames handed out are read-only views, so two table entries never
share storage. Structural requests that would break the table invariants
(deleting the last frame, growing past ``MAX_FRAMES``) are rejected by
returning ``False``; they never raise.

Observers registered with :meth:`WavetableStore.subscribe` are called with the
store after every successful mutation, which is all a presentation layer
needs to re-render.
"""

import logging
import math
from collections.abc import Callable, Iterable

import numpy as np
from numpy.typing import NDArray

from wtdraw.dsp.morph import morph_table
from wtdraw.dsp.waves import generate_sine
from wtdraw.types import MAX_FRAMES, SampleBuffer, as_buffer
from wtdraw.utils import clamp_index

logger = logging.getLogger(__name__)

Listener = Callable[["WavetableStore"], None]


class WavetableStore:
    def __init__(self, frames: Iterable[NDArray[np.floating]] | None = None) -> None:
        self._frames: list[SampleBuffer] = (
            [as_buffer(frame) for frame in frames] if frames is not None else []
        )
        if not self._frames:
            self._frames = [generate_sine()]
        if len(self._frames) > MAX_FRAMES:
            raise ValueError(
                f"A wavetable holds at most {MAX_FRAMES} frames, got {len(self._frames)}"
            )

        self._current = 0
        self._listeners: list[Listener] = []

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def frames(self) -> tuple[SampleBuffer, ...]:
        """Read-only views of every frame, in table order."""
        return tuple(self._readonly(frame) for frame in self._frames)

    @property
    def current_index(self) -> int:
        return self._current

    @property
    def current_frame(self) -> SampleBuffer:
        return self._readonly(self._frames[self._current])

    @property
    def is_full(self) -> bool:
        return len(self._frames) >= MAX_FRAMES

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add_frame(self, buffer: NDArray[np.floating] | None = None) -> bool:
        """Append a copy of ``buffer`` (or of the current frame) and select it."""
        if self.is_full:
            logger.debug("Add rejected, table already has %d frames", MAX_FRAMES)
            return False

        source = self._frames[self._current] if buffer is None else buffer
        self._frames.append(as_buffer(source))
        self._current = len(self._frames) - 1
        self._notify()
        return True

    def duplicate_frame(self) -> bool:
        """Append a deep copy of the current frame and select it."""
        return self.add_frame()

    def delete_frame(self) -> bool:
        """Remove the current frame, keeping at least one frame in the table."""
        if len(self._frames) <= 1:
            logger.debug("Delete rejected, cannot remove the only frame")
            return False

        del self._frames[self._current]
        self._current = min(self._current, len(self._frames) - 1)
        self._notify()
        return True

    def set_current(self, index: int) -> int:
        """Move the cursor, clamping ``index`` into the table; returns the new cursor."""
        clamped = clamp_index(index, len(self._frames))
        if clamped != index:
            logger.debug("Frame index %d clamped to %d", index, clamped)
        if clamped != self._current:
            self._current = clamped
            self._notify()
        return self._current

    def select_from_position(self, fraction: float) -> int:
        """Select the frame at ``fraction`` (0..1) of the way through the table.

        Callers map a pointer position on their frame view to this fraction.
        """
        return self.set_current(math.floor(fraction * len(self._frames)))

    def advance(self) -> int:
        """Step the cursor to the next frame, wrapping at the end of the table."""
        return self.set_current((self._current + 1) % len(self._frames))

    def replace_current(self, buffer: NDArray[np.floating]) -> None:
        """Overwrite the current frame with a copy of ``buffer``.

        Raises:
            ValueError: If ``buffer`` is not exactly one frame long
        """
        self._frames[self._current] = as_buffer(buffer)
        self._notify()

    def morph(self) -> bool:
        """Rewrite every interior frame as a blend of the first and last frames."""
        if len(self._frames) < 3:
            logger.debug("Morph rejected, table has %d frames", len(self._frames))
            return False

        self._frames = morph_table(self._frames)
        self._notify()
        return True

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    @staticmethod
    def _readonly(frame: SampleBuffer) -> SampleBuffer:
        view = frame.view()
        view.flags.writeable = False
        return view
