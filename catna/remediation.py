"""Ways to make missingness consistent before comparing categorical data.

1. implicit_na: the library default, every null is NoMatch and the null
   level disappears. Comparisons become consistent, but a value that failed
   to match ("def" with no "def" level) now looks exactly like a null.
2. explicit_na: turn both the null level and NoMatch into one concrete
   label such as "(NA)".
3. factor_explicit: build the vector by matching nulls against a declared
   null level on purpose.
"""
from __future__ import annotations

import os
from typing import Any, Iterable, List, Optional, Union

import pandas as pd

from catna.encoding import Code, EncodedVector, Level, NoMatch, encode, infer_levels
from catna.levels import NA_LEVEL, LevelSet

DEFAULT_NA_LABEL = "(NA)"


def default_na_label() -> str:
    return os.environ.get("CATNA_NA_LABEL", DEFAULT_NA_LABEL)


def implicit_na(vec: EncodedVector) -> EncodedVector:
    """Drop the null level, every null becomes NoMatch."""
    if not vec.levels.has_na_level:
        return vec
    new_levels = vec.levels.without_na()
    codes: List[Code] = []
    for code in vec.codes:
        if isinstance(code, NoMatch):
            codes.append(code)
            continue
        label = vec.levels[code.index]
        if label is NA_LEVEL:
            codes.append(NoMatch())
        else:
            codes.append(Level(new_levels.index_of(label)))
    return EncodedVector(tuple(codes), new_levels)


def explicit_na(vec: EncodedVector, na_label: Optional[Any] = None) -> EncodedVector:
    """Map the null level and every NoMatch onto the concrete ``na_label``.

    ``na_label`` replaces NA_LEVEL in place when the level set declares one,
    reuses an existing equal label, or is appended at the end.
    """
    if na_label is None:
        na_label = default_na_label()

    labels = list(vec.levels)
    if vec.levels.has_na_level:
        labels.remove(NA_LEVEL)
        if na_label not in labels:
            labels.insert(vec.levels.na_index, na_label)
    elif na_label not in labels:
        labels.append(na_label)
    new_levels = LevelSet(tuple(labels))
    na_index = new_levels.index_of(na_label)

    codes: List[Code] = []
    for code in vec.codes:
        if isinstance(code, NoMatch):
            codes.append(Level(na_index))
            continue
        label = vec.levels[code.index]
        if label is NA_LEVEL:
            codes.append(Level(na_index))
        else:
            codes.append(Level(new_levels.index_of(label)))
    return EncodedVector(tuple(codes), new_levels)


def factor_explicit(values: Iterable[Any],
                    levels: Optional[Union[LevelSet, Iterable[Any]]] = None,
                    on_unmatched: str = "ignore") -> EncodedVector:
    """Encode with explicit missingness, declaring a null level when absent."""
    values = list(values)
    if levels is None:
        levels = infer_levels(values)
    elif not isinstance(levels, LevelSet):
        levels = LevelSet.from_labels(levels)
    return encode(values, levels.with_na(), treat_null_as_level=True, on_unmatched=on_unmatched)


def explicit_na_series(data, na_label: Optional[Any] = None):
    """pandas flavour of explicit_na for a Categorical or categorical Series.

    Adds ``na_label`` as a category when needed and fills missing entries
    with it. Returns the same kind of object it was given.
    """
    if na_label is None:
        na_label = default_na_label()
    is_series = isinstance(data, pd.Series)
    cat = data.array if is_series else data
    if not isinstance(cat, pd.Categorical):
        raise TypeError(f"Expected categorical data, got {type(data).__name__}")
    if na_label not in cat.categories:
        cat = cat.add_categories([na_label])
    filled = cat.fillna(na_label)
    if is_series:
        return pd.Series(filled, index=data.index, name=data.name)
    return filled
