"""
Named decays with their current parameters.

The workspace owns the decays and their parameters; presentation layers keep
indices into it and re-derive fitted curves on demand.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

import pandas as pd

from powert_core.analysis.decay import DecaySeries
from powert_core.analysis.estimation import estimate_params
from powert_core.config import WorkspaceConfig
from powert_core.io.file_names import natural_sort_key
from powert_core.io.params_table import params_to_frame
from powert_core.types.analysis import Parameters

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WorkspaceEntry:
    name: str
    decay: DecaySeries
    params: Parameters


class DecayWorkspace:
    """Collection of decays, each paired with model parameters."""

    def __init__(
        self,
        clear_before_load: bool = True,
        sync_alpha: bool = True,
        sync_tau_t: bool = True,
    ) -> None:
        self.clear_before_load = clear_before_load
        self._entries: list[WorkspaceEntry] = []
        self._sync_alpha = sync_alpha
        self._sync_tau_t = sync_tau_t

    @classmethod
    def from_config(cls, config: WorkspaceConfig) -> "DecayWorkspace":
        return cls(
            clear_before_load=config.clear_before_load,
            sync_alpha=config.sync_alpha,
            sync_tau_t=config.sync_tau_t,
        )

    @property
    def sync_alpha(self) -> bool:
        """Keep alpha equal across entries; enabling copies the first entry's value."""
        return self._sync_alpha

    @sync_alpha.setter
    def sync_alpha(self, value: bool) -> None:
        self._sync_alpha = bool(value)
        if self._sync_alpha and self._entries:
            self._share(0, alpha=self._entries[0].params.alpha)

    @property
    def sync_tau_t(self) -> bool:
        """Keep tau_t equal across entries; enabling copies the first entry's value."""
        return self._sync_tau_t

    @sync_tau_t.setter
    def sync_tau_t(self, value: bool) -> None:
        self._sync_tau_t = bool(value)
        if self._sync_tau_t and self._entries:
            self._share(0, tau_t=self._entries[0].params.tau_t)

    def _share(self, index: int, **values: float) -> None:
        if not values:
            return
        for i, entry in enumerate(self._entries):
            if i != index:
                entry.params = entry.params.replace(**values)

    def _synced_values(self, params: Parameters) -> dict[str, float]:
        shared: dict[str, float] = {}
        if self._sync_alpha:
            shared["alpha"] = params.alpha
        if self._sync_tau_t:
            shared["tau_t"] = params.tau_t
        return shared

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __getitem__(self, key: int | str) -> WorkspaceEntry:
        if isinstance(key, str):
            return self._entries[self.index_of(key)]
        return self._entries[key]

    @property
    def names(self) -> list[str]:
        return [entry.name for entry in self._entries]

    def index_of(self, name: str) -> int:
        for idx, entry in enumerate(self._entries):
            if entry.name == name:
                return idx
        raise KeyError(name)

    def load(self, named_series: Iterable[tuple[str, DecaySeries]]) -> int:
        """Add decays and estimate their parameters.

        With syncing enabled, each added entry shares its synced values with
        the others, so the last decay loaded sets them.

        Returns:
            Number of decays added
        """
        items = list(named_series)
        if not items:
            return 0
        if self.clear_before_load:
            self._entries.clear()
        for name, decay in items:
            params = estimate_params(decay)
            self._entries.append(WorkspaceEntry(name=name, decay=decay, params=params))
            self._share(len(self._entries) - 1, **self._synced_values(params))
        logger.info("Loaded %d decays (%d in workspace)", len(items), len(self._entries))
        return len(items)

    def clear(self) -> None:
        self._entries.clear()

    def reestimate(self) -> None:
        for index, entry in enumerate(self._entries):
            entry.params = estimate_params(entry.decay)
            self._share(index, **self._synced_values(entry.params))

    def sort_by_name(self) -> None:
        self._entries.sort(key=lambda entry: natural_sort_key(entry.name))

    def set_params(self, index: int, params: Parameters) -> None:
        """Replace the parameters of one entry.

        When alpha or tau_t syncing is enabled, the edited value is copied to
        every other entry.
        """
        previous = self._entries[index].params
        self._entries[index].params = params

        shared = {
            name: value
            for name, value in self._synced_values(params).items()
            if value != getattr(previous, name)
        }
        if shared:
            self._share(index, **shared)

    def apply_pasted(self, rows: Iterable[tuple[str, Parameters]]) -> int:
        """Overwrite parameters of entries matched by name.

        Syncing is switched off first so pasted rows keep their own values.
        Rows naming an unknown decay are skipped.

        Returns:
            Number of entries updated
        """
        self._sync_alpha = self._sync_tau_t = False
        updated = 0
        for name, params in rows:
            try:
                index = self.index_of(name)
            except KeyError:
                logger.debug("Skipping pasted row for unknown decay %s", name)
                continue
            self._entries[index].params = params
            updated += 1
        return updated

    def fitted(self, index: int) -> DecaySeries:
        """Model values at the sample times of an entry."""
        entry = self._entries[index]
        return DecaySeries(entry.decay.times, entry.params.evaluate(entry.decay.times))

    def to_frame(self) -> pd.DataFrame:
        """Parameter table with one row per decay."""
        return params_to_frame((entry.name, entry.params) for entry in self._entries)
