"""
Concatenation of decays measured over different time ranges.

Each decay contributes the points inside its usage window. Windows of
neighbouring decays (ordered by their end time) are kept disjoint: moving the
start of one window pulls back the end of every faster decay, and moving the
end pushes forward the start of every slower one.
"""

import logging
from dataclasses import dataclass

import numpy as np

from powert_core.analysis.decay import DecaySeries

logger = logging.getLogger(__name__)

# Number of trailing points excluded from a newly added window
TAIL_EXCLUDED_POINTS = 50


@dataclass(slots=True)
class ConcatenationEntry:
    """A decay and the part of it used for concatenation."""

    name: str
    decay: DecaySeries
    use_from: float = 0.0
    use_to: float = 0.0
    scaling: float = 1.0

    @property
    def time_start(self) -> float:
        return self.decay.time_min

    @property
    def time_end(self) -> float:
        return self.decay.time_max

    @property
    def min_width(self) -> float:
        # at least one point must fall inside any window of this width
        return self.decay.time_step * 2

    def used(self) -> DecaySeries:
        return self.decay.slice(self.use_from, self.use_to) * self.scaling


class DecayConcatenation:
    """Ordered collection of decays addressed by index."""

    def __init__(self) -> None:
        self._entries: list[ConcatenationEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> ConcatenationEntry:
        return self._entries[index]

    def __iter__(self):
        return iter(self._entries)

    @property
    def entries(self) -> tuple[ConcatenationEntry, ...]:
        return tuple(self._entries)

    def _faster(self, index: int) -> list[ConcatenationEntry]:
        time_end = self._entries[index].time_end
        return [
            entry
            for i, entry in enumerate(self._entries)
            if i != index and entry.time_end < time_end
        ]

    def _slower(self, index: int) -> list[ConcatenationEntry]:
        time_end = self._entries[index].time_end
        return [
            entry
            for i, entry in enumerate(self._entries)
            if i != index and entry.time_end > time_end
        ]

    def has_time_end(self, time_end: float) -> bool:
        """Whether an entry already ends at ``time_end``; such entries share a time range."""
        return any(entry.time_end == time_end for entry in self._entries)

    def add(self, name: str, decay: DecaySeries) -> int:
        """Append a decay and choose its initial usage window.

        Returns:
            Index of the new entry
        """
        if self.has_time_end(decay.time_max):
            logger.warning(
                "Decay %s ends at %g like an existing entry; windows may overlap",
                name,
                decay.time_max,
            )
        entry = ConcatenationEntry(name=name, decay=decay)
        self._entries.append(entry)
        index = len(self._entries) - 1

        use_from = max([e.use_to for e in self._faster(index)] + [0.0])
        use_to = float(decay.times[-TAIL_EXCLUDED_POINTS:][0])
        if use_from > use_to - entry.min_width:
            use_from = use_to - entry.min_width

        # use_to first so that neighbouring windows adjust against the final end
        self.set_use_to(index, use_to)
        self.set_use_from(index, use_from)
        logger.debug(
            "Added %s with window [%g, %g)", name, entry.use_from, entry.use_to
        )
        return index

    def set_use_from(self, index: int, value: float) -> float:
        """Set the window start of an entry and pull back faster neighbours.

        Returns:
            The value actually stored after clamping
        """
        entry = self._entries[index]
        if value < 0:
            entry.use_from = 0.0
            return entry.use_from
        if value > entry.use_to - entry.min_width:
            entry.use_from = entry.use_to - entry.min_width
            return entry.use_from

        entry.use_from = float(value)
        for other in self._faster(index):
            if other.use_to > value:
                other.use_to = float(value)
        return entry.use_from

    def set_use_to(self, index: int, value: float) -> float:
        """Set the window end of an entry and push forward slower neighbours.

        Returns:
            The value actually stored after clamping
        """
        entry = self._entries[index]
        if value > entry.time_end:
            entry.use_to = entry.time_end
            return entry.use_to
        if value < entry.use_from + entry.min_width:
            entry.use_to = entry.use_from + entry.min_width
            return entry.use_to

        entry.use_to = float(value)
        for other in self._slower(index):
            if other.use_from < value:
                other.use_from = float(value)
        return entry.use_to

    def set_scaling(self, index: int, scaling: float) -> None:
        self._entries[index].scaling = float(scaling)

    def used(self, index: int) -> DecaySeries:
        """The windowed and scaled part of an entry."""
        return self._entries[index].used()

    def remove(self, index: int) -> ConcatenationEntry:
        return self._entries.pop(index)

    def clear(self) -> None:
        self._entries.clear()

    @property
    def is_ordered(self) -> bool:
        """Whether entries are sorted by their end time."""
        return all(
            prev.time_end <= curr.time_end
            for prev, curr in zip(self._entries, self._entries[1:])
        )

    def sort_by_time_end(self) -> None:
        self._entries.sort(key=lambda entry: entry.time_end)

    def concatenate(self) -> DecaySeries:
        """Join the used part of every entry in collection order."""
        if not self._entries:
            return DecaySeries.empty()
        parts = [entry.used() for entry in self._entries]
        times = np.concatenate([part.times for part in parts])
        signals = np.concatenate([part.signals for part in parts])
        return DecaySeries(times, signals)
