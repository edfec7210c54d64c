"""Polars flavour of ``catna.compare.col_join_dfs``.

Categorical and Enum columns are cast to strings before comparing, two
frames almost never share a category list. Nulls compare equal to nulls,
and differences where only one side is null are also counted separately.
"""
from typing import List

import polars as pl

DF2_SUFFIX = "|df2"
_IN_DF1 = "__catna_in_df1"
_IN_DF2 = "__catna_in_df2"

# Polars calls an outer join "full"
_HOW_MAP = {"outer": "full", "full": "full", "inner": "inner", "left": "left", "right": "right"}


def _label_expr(name: str, dtype) -> pl.Expr:
    if isinstance(dtype, (pl.Categorical, pl.Enum)):
        return pl.col(name).cast(pl.Utf8)
    return pl.col(name)


def _check_inputs(df1: pl.DataFrame, df2: pl.DataFrame, join_columns: List[str]) -> None:
    for col in df1.columns + df2.columns:
        if DF2_SUFFIX in col or col in (_IN_DF1, _IN_DF2):
            raise ValueError(
                f"{col!r} clashes with a column name col_join_dfs adds, "
                f"rename it before comparing ('{DF2_SUFFIX}' is reserved)"
            )
    for name, df in (("df1", df1), ("df2", df2)):
        if df.select(pl.struct(join_columns).is_duplicated().any()).item():
            raise ValueError(
                f"Duplicate join keys found in {name} on columns {join_columns}. "
                "Every key must identify one row for the comparison to line up."
            )


def col_join_dfs(df1, df2, join_columns, how):
    """Join two polars DataFrames and count per-column differences by label.

    Returns ``(m_df, eqs)`` shaped like the pandas version: ``m_df`` gains
    ``membership`` (1 = df1 only, 2 = df2 only, 3 = both) and a
    ``<col>|eq`` column per shared column, ``eqs`` maps each column to its
    ``diff_count`` and, for shared columns, ``null_diff_count``.
    """
    if isinstance(join_columns, str):
        join_columns = [join_columns]
    _check_inputs(df1, df2, join_columns)

    left = df1.with_columns(pl.lit(True).alias(_IN_DF1))
    right = df2.with_columns(pl.lit(True).alias(_IN_DF2))
    m_df = left.join(
        right, on=join_columns, how=_HOW_MAP.get(how, how), suffix=DF2_SUFFIX, coalesce=True,
    )
    m_df = m_df.with_columns(
        (pl.col(_IN_DF1).is_not_null().cast(pl.Int8)
         + pl.col(_IN_DF2).is_not_null().cast(pl.Int8) * 2).alias("membership")
    ).drop([_IN_DF1, _IN_DF2])

    eqs = {}
    for col in join_columns:
        eqs[col] = {"diff_count": "join_key"}

    schema = m_df.schema
    for col in df1.columns:
        if col in join_columns:
            continue
        if col not in df2.columns:
            eqs[col] = {"diff_count": "df_1"}
            continue
        a = _label_expr(col, schema[col])
        b = _label_expr(f"{col}{DF2_SUFFIX}", schema[f"{col}{DF2_SUFFIX}"])
        m_df = m_df.with_columns(a.eq_missing(b).alias(f"{col}|eq"))
        counts = m_df.filter(pl.col("membership") == 3).select(
            (~pl.col(f"{col}|eq")).sum().alias("diff_count"),
            (a.is_null() != b.is_null()).sum().alias("null_diff_count"),
        ).row(0, named=True)
        eqs[col] = {k: int(v) for k, v in counts.items()}

    for col in df2.columns:
        if col not in eqs:
            eqs[col] = {"diff_count": "df_2"}

    return m_df, eqs
