"""Drag-to-reorder gesture for the sub-tab strip, independent of any widget.

The strip reports its tabs as ``TabSlot`` widths laid out left to right
from x = 0. A press arms the gesture; it is only claimed as a drag once
the pointer has travelled :data:`DRAG_THRESHOLD` units, so short clicks
still activate the tab underneath.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

LOG = logging.getLogger(__name__)

DRAG_THRESHOLD = 6.0


@dataclass(slots=True, frozen=True)
class TabSlot:
    key: str
    width: float


class TabDragController:
    def __init__(self, threshold: float = DRAG_THRESHOLD) -> None:
        self._threshold = threshold
        self._slots: list[TabSlot] = []
        self._anchor: str | None = None
        self._start_x = 0.0
        self._claimed = False

    @property
    def dragging(self) -> bool:
        return self._anchor is not None

    @property
    def claimed(self) -> bool:
        return self._claimed

    @property
    def anchor(self) -> str | None:
        return self._anchor

    @property
    def order(self) -> list[str]:
        return [slot.key for slot in self._slots]

    def press(self, slots: Sequence[TabSlot], x: float, *, on_close: bool = False) -> bool:
        """Arm a gesture at ``x``; declined on a close button or empty space."""

        self.cancel()
        if on_close:
            return False
        left = 0.0
        for slot in slots:
            if left <= x < left + slot.width:
                self._slots = list(slots)
                self._anchor = slot.key
                self._start_x = x
                return True
            left += slot.width
        return False

    def motion(self, offset_x: float) -> bool:
        """Follow the pointer; returns whether the order changed."""

        if self._anchor is None:
            return False
        if not self._claimed:
            if abs(offset_x) < self._threshold:
                return False
            self._claimed = True
            LOG.debug("Drag claimed for tab %s", self._anchor)

        pointer = self._start_x + offset_x
        index = self.order.index(self._anchor)
        dragged_mid = self._midpoint(index)

        for position, slot in enumerate(self._slots):
            if position == index:
                continue
            sibling_mid = self._midpoint(position)
            if dragged_mid > sibling_mid and pointer < sibling_mid:
                self._move(index, position)
                return True
            if dragged_mid < sibling_mid and pointer > sibling_mid:
                self._move(index, position)
                return True
        return False

    def release(self) -> list[str] | None:
        """End the gesture; the final order if it was a drag, else ``None``."""

        order = self.order if self._claimed else None
        self.cancel()
        return order

    def cancel(self) -> None:
        self._slots = []
        self._anchor = None
        self._start_x = 0.0
        self._claimed = False

    def _midpoint(self, position: int) -> float:
        left = sum(slot.width for slot in self._slots[:position])
        return left + self._slots[position].width / 2.0

    def _move(self, source: int, target: int) -> None:
        # Left moves land before ``target``, right moves land after it.
        slot = self._slots.pop(source)
        self._slots.insert(target, slot)
