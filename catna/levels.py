"""Level sets for categorical vectors.

A level set is the fixed, ordered collection of labels values are matched
against. It may declare one null level, stored as the ``NA_LEVEL`` singleton
regardless of which null marker the caller used (None, NaN, pd.NA, ...).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Optional, Tuple

import pandas as pd

from catna.errors import LevelSetError


class _NALevel:
    """Sentinel for a null value declared as a category level."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return '<NA>'

    def __reduce__(self):
        return (_NALevel, ())


NA_LEVEL = _NALevel()


def is_null(value: Any) -> bool:
    """True for None, NaN, pd.NA, pd.NaT and the NA_LEVEL sentinel."""
    if value is NA_LEVEL:
        return True
    # list-likes are never a null scalar, pd.isna would answer elementwise
    if pd.api.types.is_list_like(value):
        return False
    return bool(pd.isna(value))


@dataclass(frozen=True)
class LevelSet:
    """An ordered, immutable sequence of distinct labels.

    Any null marker among ``labels`` is folded into NA_LEVEL.
    """
    labels: Tuple[Any, ...]

    def __post_init__(self):
        normalized = []
        seen = set()
        for label in self.labels:
            if is_null(label):
                if NA_LEVEL in seen:
                    raise LevelSetError("A level set may declare at most one null level")
                label = NA_LEVEL
            elif label in seen:
                raise LevelSetError(f"Duplicate level {label!r} in level set")
            seen.add(label)
            normalized.append(label)
        object.__setattr__(self, 'labels', tuple(normalized))

    @classmethod
    def from_labels(cls, labels: Iterable[Hashable]) -> "LevelSet":
        return cls(tuple(labels))

    def __len__(self):
        return len(self.labels)

    def __iter__(self):
        return iter(self.labels)

    def __getitem__(self, index: int) -> Any:
        return self.labels[index]

    def __contains__(self, label) -> bool:
        return self.index_of(label) is not None

    @property
    def has_na_level(self) -> bool:
        return NA_LEVEL in self.labels

    @property
    def na_index(self) -> Optional[int]:
        if not self.has_na_level:
            return None
        return self.labels.index(NA_LEVEL)

    def index_of(self, label) -> Optional[int]:
        """Position of a concrete label, None when absent.

        Null markers are never looked up here, matching a null against the
        null level is the caller's decision.
        """
        if is_null(label):
            return None
        try:
            return self.labels.index(label)
        except ValueError:
            return None

    def concrete_labels(self) -> Tuple[Any, ...]:
        return tuple(label for label in self.labels if label is not NA_LEVEL)

    def without_na(self) -> "LevelSet":
        return LevelSet(self.concrete_labels())

    def with_na(self) -> "LevelSet":
        if self.has_na_level:
            return self
        return LevelSet(self.labels + (NA_LEVEL,))

    def __repr__(self):
        return f"LevelSet({list(self.labels)!r})"
