"""Encode raw values against a level set.

Every value becomes one of two tagged codes:
  - Level(index): matched a declared level. The level may be NA_LEVEL,
    which is explicit missingness.
  - NoMatch(raw): matched nothing, which is implicit missingness.

Keeping the two apart is the whole point, a single nullable index can't tell
"matched the null level" from "didn't match anything".
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from catna.errors import LevelSetError, UnmatchedLevelError, UnmatchedLevelWarning
from catna.levels import NA_LEVEL, LevelSet, is_null

log = logging.getLogger("catna.encoding")

ON_UNMATCHED = ("ignore", "warn", "raise")


@dataclass(frozen=True)
class Level:
    """The value matched the level at ``index``."""
    index: int


@dataclass(frozen=True)
class NoMatch:
    """The value matched no level. ``raw`` is kept for diagnostics only."""
    raw: Any = field(default=None, compare=False)

    def __repr__(self):
        return f"NoMatch({self.raw!r})"


Code = Union[Level, NoMatch]


@dataclass(frozen=True)
class EncodedVector:
    """Codes paired with the level set that produced them."""
    codes: Tuple[Code, ...]
    levels: LevelSet

    def __post_init__(self):
        object.__setattr__(self, 'codes', tuple(self.codes))
        for code in self.codes:
            if isinstance(code, Level):
                if not 0 <= code.index < len(self.levels):
                    raise LevelSetError(
                        f"Code {code!r} is out of range for {len(self.levels)} levels")
            elif not isinstance(code, NoMatch):
                raise TypeError(f"Expected Level or NoMatch, got {code!r}")

    def __len__(self):
        return len(self.codes)

    def __iter__(self):
        return iter(self.codes)

    def label_at(self, position: int) -> Any:
        code = self.codes[position]
        if isinstance(code, NoMatch):
            return None
        return self.levels[code.index]

    def resolve(self) -> List[Any]:
        """Labels for each position. NA_LEVEL for the null level, None for no match."""
        return [self.label_at(i) for i in range(len(self.codes))]

    def raw_codes(self) -> List[int]:
        """Integer codes with -1 for no match, the layout pandas uses."""
        return [code.index if isinstance(code, Level) else -1 for code in self.codes]

    def to_frame(self) -> pd.DataFrame:
        rows = []
        for code, label in zip(self.codes, self.resolve()):
            if isinstance(code, NoMatch):
                rows.append({'raw': code.raw, 'code': -1, 'label': label, 'status': 'no_match'})
            elif label is NA_LEVEL:
                rows.append({'raw': None, 'code': code.index, 'label': label, 'status': 'na_level'})
            else:
                rows.append({'raw': label, 'code': code.index, 'label': label, 'status': 'level'})
        return pd.DataFrame(rows, columns=['raw', 'code', 'label', 'status'])


def _sortable(labels: List[Any]) -> bool:
    try:
        sorted(labels)
    except TypeError:
        return False
    return True


def infer_levels(values: Sequence[Any], treat_null_as_level: bool = False) -> LevelSet:
    """Distinct non-null values, sorted when they can be.

    A null level is appended when ``treat_null_as_level`` is set and a null
    was seen.
    """
    labels: List[Any] = []
    saw_null = False
    for v in values:
        if is_null(v):
            saw_null = True
        elif v not in labels:
            labels.append(v)
    if _sortable(labels):
        labels = sorted(labels)
    if treat_null_as_level and saw_null:
        labels.append(NA_LEVEL)
    return LevelSet(tuple(labels))


def encode(values: Iterable[Any],
           levels: Optional[Union[LevelSet, Iterable[Any]]] = None,
           treat_null_as_level: bool = False,
           on_unmatched: str = "ignore") -> EncodedVector:
    """Encode ``values`` against ``levels``.

    Parameters
    ----------
    values : iterable
        Raw labels or null markers.
    levels : LevelSet or iterable, optional
        Declared levels, possibly including one null entry. Inferred from
        ``values`` when omitted.
    treat_null_as_level : bool
        Match null values against the declared null level (explicit
        missingness). When False, or when no null level is declared, nulls
        become NoMatch.
    on_unmatched : str
        What to do when a non-null value matches nothing: 'ignore' (silently
        encode NoMatch), 'warn' or 'raise'.

    Returns
    -------
    EncodedVector
    """
    if on_unmatched not in ON_UNMATCHED:
        raise ValueError(f"on_unmatched must be one of {ON_UNMATCHED}, got {on_unmatched!r}")

    values = list(values)
    if levels is None:
        level_set = infer_levels(values, treat_null_as_level)
    elif isinstance(levels, LevelSet):
        level_set = levels
    else:
        level_set = LevelSet.from_labels(levels)

    na_index = level_set.na_index if treat_null_as_level else None

    codes: List[Code] = []
    unmatched = 0
    for position, v in enumerate(values):
        if is_null(v):
            codes.append(NoMatch(v) if na_index is None else Level(na_index))
            continue
        idx = level_set.index_of(v)
        if idx is not None:
            codes.append(Level(idx))
            continue
        unmatched += 1
        if on_unmatched == "raise":
            raise UnmatchedLevelError(v, position)
        if on_unmatched == "warn":
            warnings.warn(
                f"value {v!r} at position {position} does not match any declared level",
                UnmatchedLevelWarning, stacklevel=2)
        codes.append(NoMatch(v))

    if unmatched:
        log.debug("%d of %d values matched no level in %r", unmatched, len(values), level_set)
    return EncodedVector(tuple(codes), level_set)


def to_categorical(vec: EncodedVector) -> pd.Categorical:
    """Convert to a pandas Categorical.

    pandas categories can't be null, so a declared null level has to be
    made concrete first (see ``catna.remediation.explicit_na``).
    """
    if vec.levels.has_na_level:
        raise LevelSetError(
            "pandas categories cannot be null, convert the null level with explicit_na first")
    return pd.Categorical.from_codes(vec.raw_codes(), categories=list(vec.levels))


def from_categorical(cat) -> EncodedVector:
    """Build an EncodedVector from a pandas Categorical or categorical Series.

    Missing entries have code -1 in pandas and become NoMatch. The raw value
    that failed to match is already gone by then.
    """
    if isinstance(cat, pd.Series):
        if not isinstance(cat.dtype, pd.CategoricalDtype):
            raise TypeError(f"Expected a categorical Series, got dtype {cat.dtype}")
        cat = cat.array
    if not isinstance(cat, pd.Categorical):
        raise TypeError(f"Expected a pandas Categorical, got {type(cat).__name__}")
    levels = LevelSet(tuple(cat.categories))
    codes = tuple(Level(int(c)) if c >= 0 else NoMatch() for c in cat.codes)
    return EncodedVector(codes, levels)
