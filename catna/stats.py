"""Missingness summaries for categorical vectors.

Splits null_count into its explicit part (values encoded as the declared
null level) and its implicit part (values that matched nothing).
"""
from typing import Any, Dict, TypedDict

import pandas as pd

from catna.encoding import EncodedVector, Level, NoMatch, from_categorical
from catna.levels import NA_LEVEL

MissingnessResult = TypedDict('MissingnessResult', {
    'length': int,
    'explicit_na_count': int,
    'implicit_na_count': int,
    'null_count': int,
    'value_counts': Dict[Any, int],
})


def missingness_summary(vec: EncodedVector) -> MissingnessResult:
    value_counts = {label: 0 for label in vec.levels}
    implicit = 0
    for code in vec.codes:
        if isinstance(code, NoMatch):
            implicit += 1
        elif isinstance(code, Level):
            value_counts[vec.levels[code.index]] += 1
    explicit = value_counts.get(NA_LEVEL, 0)
    return {
        'length': len(vec),
        'explicit_na_count': explicit,
        'implicit_na_count': implicit,
        'null_count': explicit + implicit,
        'value_counts': value_counts,
    }


def series_missingness_summary(ser: pd.Series) -> MissingnessResult:
    """Same summary for a pandas categorical Series.

    pandas categories can't be null, so all of its missingness is implicit.
    """
    return missingness_summary(from_categorical(ser))
