"""Compare categorical data by label instead of by code.

Two vectors built from differently ordered level sets have different codes
for the same labels, so comparing raw codes reports differences that aren't
there. Everything here resolves labels first and treats null as equal to
null.
"""
from typing import Any, List

import pandas as pd

from catna.encoding import EncodedVector
from catna.levels import NA_LEVEL, is_null


def labels_equal(a: Any, b: Any) -> bool:
    """Label equality where None equals None and NA_LEVEL equals NA_LEVEL.

    NA_LEVEL (explicit missingness) never equals None (no match).
    """
    if a is b:
        return True
    if a is NA_LEVEL or b is NA_LEVEL:
        return False
    if is_null(a) or is_null(b):
        return is_null(a) and is_null(b)
    return bool(a == b)


def _resolved(data) -> List[Any]:
    if isinstance(data, EncodedVector):
        return data.resolve()
    # pandas only has one kind of missing, fold them all into None
    return [None if is_null(v) else v for v in pd.Series(data).astype(object).tolist()]


def codes_equal(a: EncodedVector, b: EncodedVector) -> bool:
    """Compare raw codes. This is the comparison that misleads."""
    return a.raw_codes() == b.raw_codes()


def vectors_equal(a: EncodedVector, b: EncodedVector) -> bool:
    """True when both vectors resolve to the same label sequence."""
    left, right = a.resolve(), b.resolve()
    if len(left) != len(right):
        return False
    return all(labels_equal(x, y) for x, y in zip(left, right))


def diff_positions(a, b) -> List[int]:
    """Positions whose resolved labels differ.

    Accepts EncodedVectors or pandas categorical data on either side.
    """
    left, right = _resolved(a), _resolved(b)
    if len(left) != len(right):
        raise ValueError(f"Cannot compare vectors of length {len(left)} and {len(right)}")
    return [i for i, (x, y) in enumerate(zip(left, right)) if not labels_equal(x, y)]


def categorical_equal(a, b) -> bool:
    """Label comparison for pandas Categorical or Series data."""
    left, right = _resolved(a), _resolved(b)
    if len(left) != len(right):
        return False
    return all(labels_equal(x, y) for x, y in zip(left, right))


def _diff_mask(left: pd.Series, right: pd.Series) -> pd.Series:
    diffs = [not labels_equal(x, y) for x, y in zip(left.tolist(), right.tolist())]
    return pd.Series(diffs, index=left.index, dtype=bool)


def _null_diff_mask(left: pd.Series, right: pd.Series) -> pd.Series:
    """Rows where exactly one side is missing."""
    diffs = [is_null(x) != is_null(y) for x, y in zip(left.tolist(), right.tolist())]
    return pd.Series(diffs, index=left.index, dtype=bool)


def col_join_dfs(df1, df2, join_columns, how):
    """Join two DataFrames and count per-column differences by label.

    Categorical columns are compared by their labels, so two columns with
    the same values but different category lists report no differences.

    Parameters
    ----------
    df1, df2 : pd.DataFrame
        The two DataFrames to compare.
    join_columns : str or list[str]
        Column name(s) to join on.
    how : str
        Join type passed to ``pd.merge`` (e.g. 'inner', 'outer', 'left', 'right').

    Returns
    -------
    m_df : pd.DataFrame
        Merged DataFrame with a membership column and a ``<col>|eq`` column
        for every column present in both inputs.
    eqs : dict
        Per-column diff summary. Shared columns also carry
        ``null_diff_count``, the differences where only one side is missing.
    """
    if isinstance(join_columns, str):
        join_columns = [join_columns]

    df2_suffix = "|df2"
    _indicator_col = "__catna_merge"
    _sentinels = [df2_suffix, _indicator_col]
    for col in list(df1.columns) + list(df2.columns):
        if isinstance(col, str) and any(s in col for s in _sentinels):
            raise ValueError(
                f"|df2 and {_indicator_col} are sentinel column names used by this tool, "
                f"and can't be used in a dataframe passed in, {col} violates that constraint"
            )

    df1_name, df2_name = "df_1", "df_2"

    if df1[join_columns].duplicated().any():
        raise ValueError(
            f"Duplicate join keys found in df1 on columns {join_columns}. "
            "Join keys must be unique in each dataframe for a valid comparison."
        )
    if df2[join_columns].duplicated().any():
        raise ValueError(
            f"Duplicate join keys found in df2 on columns {join_columns}. "
            "Join keys must be unique in each dataframe for a valid comparison."
        )

    m_df = pd.merge(
        df1, df2, on=join_columns, how=how, suffixes=["", df2_suffix],
        indicator=_indicator_col,
    )

    # 1 = df1 only, 2 = df2 only, 3 = both
    membership_map = {"left_only": 1, "right_only": 2, "both": 3}
    m_df["membership"] = m_df[_indicator_col].map(membership_map).astype("Int8")
    m_df = m_df.drop(columns=[_indicator_col])

    col_order = df1.columns.to_list()
    for col in df2.columns:
        if col not in col_order:
            col_order.append(col)

    eqs = {}
    both_mask = m_df["membership"] == 3
    for col in col_order:
        if col in join_columns:
            eqs[col] = {"diff_count": "join_key"}
        elif col in df1.columns and col in df2.columns:
            df2_col = f"{col}{df2_suffix}"
            # pandas may coerce non-string labels to strings when adding suffixes
            m_df_col = df2_col.removesuffix(df2_suffix)
            diffs = _diff_mask(m_df[m_df_col], m_df[df2_col])
            null_diffs = _null_diff_mask(m_df[m_df_col], m_df[df2_col])
            eqs[col] = {
                "diff_count": int((diffs & both_mask).sum()),
                "null_diff_count": int((null_diffs & both_mask).sum()),
            }
            m_df[f"{m_df_col}|eq"] = ~diffs
        elif col in df1.columns:
            eqs[col] = {"diff_count": df1_name}
        else:
            eqs[col] = {"diff_count": df2_name}

    return m_df, eqs
