"""
Explicit vs Implicit Missingness in Categorical Data

The write-up as a sequence of sections. Each section has prose and, usually,
a demo function. Rendering shows the demo's body as a code snippet followed
by whatever it printed.
"""
import contextlib
import inspect
import io
import logging
import textwrap
import warnings
from dataclasses import dataclass
from typing import Callable, List, Optional

import pandas as pd

from catna.compare import (
    categorical_equal, codes_equal, col_join_dfs, diff_positions, vectors_equal,
)
from catna.encoding import encode, from_categorical
from catna.remediation import (
    default_na_label, explicit_na, explicit_na_series, factor_explicit, implicit_na,
)
from catna.stats import missingness_summary

log = logging.getLogger("catna.narrative")

FORMATS = ("markdown", "text")


@dataclass(frozen=True)
class Section:
    title: str
    prose: str
    demo: Optional[Callable[[str], None]] = None


# ---------------------------------------------------------------------------
# Demos
# ---------------------------------------------------------------------------

def demo_explicit_vs_implicit(na_label):
    explicit = encode(["abc", None, None], levels=["abc", None], treat_null_as_level=True)
    implicit = encode(["abc", None, None], levels=["abc"])
    print(explicit.to_frame())
    print()
    print(implicit.to_frame())


def demo_spurious_difference(na_label):
    x = encode(["abc", None, None], levels=["abc", None], treat_null_as_level=True)
    y = encode(["abc", None, None], levels=["abc"])
    print("codes equal:  ", codes_equal(x, y))
    print("labels equal: ", vectors_equal(x, y))
    print("differs at:   ", diff_positions(x, y))
    print("x:", x.resolve())
    print("y:", y.resolve())


def demo_silent_degradation(na_label):
    levels = ["abc", None]
    x = encode(["abc", None, None], levels, treat_null_as_level=True)
    y = encode(["abc", "def", None], levels, treat_null_as_level=True)
    print("x:", x.resolve())
    print("y:", y.resolve())
    print("differs at:", diff_positions(x, y))
    print(missingness_summary(y))
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        encode(["abc", "def", None], levels, treat_null_as_level=True, on_unmatched="warn")
    for w in caught:
        print("warning:", w.message)


def demo_remedy_implicit(na_label):
    x = encode(["abc", None, None], levels=["abc", None], treat_null_as_level=True)
    y = encode(["abc", None, None], levels=["abc"])
    z = encode(["abc", "def", None], levels=["abc"])
    print("x vs y:", vectors_equal(implicit_na(x), y))
    print("y vs z:", vectors_equal(y, z))


def demo_remedy_explicit_na(na_label):
    levels = ["abc", None]
    x = explicit_na(encode(["abc", None, None], levels, treat_null_as_level=True), na_label)
    y = explicit_na(encode(["abc", "def", None], levels, treat_null_as_level=True), na_label)
    print("x:", x.resolve(), list(x.levels))
    print("y:", y.resolve(), list(y.levels))
    print("labels equal:", vectors_equal(x, y))


def demo_remedy_factor_explicit(na_label):
    x = factor_explicit(["abc", None, None], levels=["abc"])
    y = factor_explicit([None, "abc", None], levels=[None, "abc"])
    print("x codes:", x.raw_codes(), "y codes:", y.raw_codes())
    print("x vs reversed y:", vectors_equal(x, factor_explicit(["abc", None, None], levels=[None, "abc"])))
    z = factor_explicit(["abc", "def", None], levels=["abc"])
    print("z:", z.resolve())
    print(missingness_summary(z))


def demo_pandas(na_label):
    cat = pd.Categorical(["abc", "def", None]).remove_categories(["def"])
    print(list(cat), cat.codes.tolist())
    print(missingness_summary(from_categorical(cat)))
    filled = explicit_na_series(cat, na_label)
    print(list(filled))
    other = pd.Categorical([na_label, "abc", na_label], categories=filled.categories)
    print("categorical equal:", categorical_equal(filled[[1, 0, 2]], other))

    df1 = pd.DataFrame({"id": [1, 2, 3],
                        "grade": pd.Categorical(["b", "a", None], categories=["a", "b"])})
    df2 = pd.DataFrame({"id": [1, 2, 3],
                        "grade": pd.Categorical(["b", None, None], categories=["b", "a"])})
    _, eqs = col_join_dfs(df1, df2, join_columns="id", how="outer")
    print(eqs)


def demo_polars(na_label):
    import polars as pl
    from catna.polars_compare import col_join_dfs as pl_col_join_dfs

    df1 = pl.DataFrame({"id": [1, 2, 3], "grade": ["b", "a", None]},
                       schema={"id": pl.Int64, "grade": pl.Categorical})
    df2 = pl.DataFrame({"id": [1, 2, 3], "grade": ["b", "c", None]},
                       schema={"id": pl.Int64, "grade": pl.Enum(["b", "c"])})
    _, eqs = pl_col_join_dfs(df1, df2, join_columns="id", how="outer")
    print(eqs)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

SECTIONS: List[Section] = [
    Section("Two kinds of missing", """
A categorical vector stores codes that point into a fixed list of levels.
Missing values can end up in that vector two ways. If the null marker is
itself one of the declared levels, a null input gets that level's code:
explicit missingness. If it isn't, or if the input doesn't match any level
at all, the value gets no code: implicit missingness.

Printed as plain values both show up as missing. The status column tells
them apart.
""", demo_explicit_vs_implicit),

    Section("A comparison that disagrees with your eyes", """
Build the same three values twice, once with a null level and once without.
Comparing the code vectors says they differ, and so does comparing labels,
because "matched the null level" and "matched nothing" are not the same
thing. Nothing in the printed values hints at why.
""", demo_spurious_difference),

    Section("Silent degradation", """
Values that aren't in the level set don't raise. "def" below is not a
declared level, so it quietly becomes a no-match, and in a vector whose
other nulls are explicit it is the only implicit one. The summary splits
null_count into the two kinds, and on_unmatched='warn' makes the
substitution visible.
""", demo_silent_degradation),

    Section("Remedy 1: everything implicit", """
Dropping the null level turns every null into a no-match, which is what
most libraries do by default. The two vectors now agree. So does a vector
where "def" failed to match, which is the price of this approach: a typo and
a genuinely missing value become indistinguishable.
""", demo_remedy_implicit),

    Section("Remedy 2: make missing a real level", """
Map both the null level and every no-match onto a concrete label such as
"(NA)". After the conversion the label sequences are equal and the level
set no longer contains a null at all.
""", demo_remedy_explicit_na),

    Section("Remedy 3: match nulls on purpose", """
Construct vectors with a declared null level and explicit matching from the
start. Level order no longer matters once comparisons go through labels, and
an unmatched "def" stays distinguishable from a real null.
""", demo_remedy_factor_explicit),

    Section("The same quirk in pandas", """
pandas categories can never be null, so every missing value in a
pd.Categorical is implicit, and a value whose category is removed silently
becomes NaN. explicit_na_series adds a concrete category and fills it in.
Comparing frames by label keeps differently ordered category lists from
showing up as differences, and null_diff_count says how many of the
differences are a value on one side against a missing value on the other.
""", demo_pandas),

    Section("Takeaways", """
- Decide up front whether null is a level. Mixing the two conventions is what
  produces the confusing comparison.
- Compare labels, not codes.
- When values might not match the level set, make the mismatch loud, or
  convert missingness to an explicit label before comparing.
"""),
]

POLARS_SECTION = Section("And in polars", """
polars keeps Categorical and Enum columns apart from plain strings, and two
frames rarely share a category list. Comparing by label works the same way:
"a" against null counts as a null difference, "a" against "c" only as a
plain difference.
""", demo_polars)


def _polars_available() -> bool:
    try:
        import polars  # noqa: F401
    except ImportError:
        return False
    return True


def default_sections() -> List[Section]:
    """All sections, with the polars one before the takeaways when polars is installed."""
    sections = list(SECTIONS)
    if _polars_available():
        sections.insert(len(sections) - 1, POLARS_SECTION)
    return sections


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def demo_source(demo: Callable[[str], None]) -> str:
    """The body of a demo function, dedented, without its def line."""
    lines = inspect.getsource(demo).splitlines()
    return textwrap.dedent("\n".join(lines[1:])).strip("\n")


def run_demo(demo: Callable[[str], None], na_label: Optional[str] = None) -> str:
    if na_label is None:
        na_label = default_na_label()
    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        demo(na_label)
    return buf.getvalue().rstrip("\n")


def render_section(section: Section, fmt: str = "markdown", na_label: Optional[str] = None) -> str:
    prose = section.prose.strip()
    parts = []
    if fmt == "markdown":
        parts.append(f"## {section.title}")
        parts.append(prose)
        if section.demo is not None:
            parts.append(f"```python\n{demo_source(section.demo)}\n```")
            parts.append(f"```\n{run_demo(section.demo, na_label)}\n```")
    else:
        parts.append(f"{section.title}\n{'-' * len(section.title)}")
        parts.append(prose)
        if section.demo is not None:
            parts.append(textwrap.indent(demo_source(section.demo), "    "))
            parts.append(textwrap.indent(run_demo(section.demo, na_label), "    | ", lambda line: True))
    return "\n\n".join(parts)


def render(fmt: str = "markdown", sections: Optional[List[Section]] = None,
           na_label: Optional[str] = None) -> str:
    """Render the write-up, running every demo and capturing its output.

    ``na_label`` is the label demos use when turning missing values into a
    level, CATNA_NA_LABEL or "(NA)" when omitted.
    """
    if fmt not in FORMATS:
        raise ValueError(f"fmt must be one of {FORMATS}, got {fmt!r}")
    if sections is None:
        sections = default_sections()
    if na_label is None:
        na_label = default_na_label()
    title = "Explicit vs implicit missingness in categorical data"
    header = f"# {title}" if fmt == "markdown" else f"{title}\n{'=' * len(title)}"
    rendered = [header]
    for section in sections:
        log.debug("rendering section %r", section.title)
        rendered.append(render_section(section, fmt, na_label))
    return "\n\n".join(rendered) + "\n"
