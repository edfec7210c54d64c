import pandas as pd
import pytest

from catna.compare import vectors_equal
from catna.encoding import Level, NoMatch, encode
from catna.levels import NA_LEVEL
from catna.remediation import (
    DEFAULT_NA_LABEL, explicit_na, explicit_na_series, factor_explicit, implicit_na,
)


def _scenario():
    levels = ["abc", None]
    x = encode(["abc", None, None], levels, treat_null_as_level=True)
    y = encode(["abc", "def", None], levels, treat_null_as_level=True)
    return x, y


# ============================================================================
# explicit_na
# ============================================================================

class TestExplicitNa:
    def test_scenario_vectors_become_equal(self):
        x, y = _scenario()
        assert not vectors_equal(x, y)
        x2, y2 = explicit_na(x), explicit_na(y)
        assert x2.resolve() == ["abc", "(NA)", "(NA)"]
        assert y2.resolve() == ["abc", "(NA)", "(NA)"]
        assert vectors_equal(x2, y2)

    def test_replaces_null_level_in_place(self):
        vec = encode(["a", None, "b"], [None, "a", "b"], treat_null_as_level=True)
        out = explicit_na(vec)
        assert out.levels.labels == ("(NA)", "a", "b")
        assert not out.levels.has_na_level
        assert out.codes == (Level(1), Level(0), Level(2))

    def test_appends_label_without_null_level(self):
        vec = encode(["a", None], ["a"])
        out = explicit_na(vec, na_label="missing")
        assert out.levels.labels == ("a", "missing")
        assert out.resolve() == ["a", "missing"]

    def test_reuses_existing_label(self):
        vec = encode(["a", "(NA)", None], ["a", "(NA)", None], treat_null_as_level=True)
        out = explicit_na(vec)
        assert out.levels.labels == ("a", "(NA)")
        assert out.resolve() == ["a", "(NA)", "(NA)"]

    def test_na_label_from_environment(self, monkeypatch):
        monkeypatch.setenv("CATNA_NA_LABEL", "<missing>")
        out = explicit_na(encode(["a", None], ["a"]))
        assert out.resolve() == ["a", "<missing>"]

    def test_input_not_mutated(self):
        x, _ = _scenario()
        before = x.resolve()
        explicit_na(x)
        assert x.resolve() == before


# ============================================================================
# implicit_na
# ============================================================================

def test_implicit_na_drops_null_level():
    x, _ = _scenario()
    out = implicit_na(x)
    assert out.levels.labels == ("abc",)
    assert out.codes == (Level(0), NoMatch(), NoMatch())


def test_implicit_na_hides_unmatched_values():
    x, y = _scenario()
    # "def" and a real null are now indistinguishable
    assert vectors_equal(implicit_na(x), implicit_na(y))


def test_implicit_na_noop_without_null_level():
    vec = encode(["a", None], ["a"])
    assert implicit_na(vec) is vec


def test_implicit_na_reindexes_after_null_level():
    vec = encode(["b", None], [None, "a", "b"], treat_null_as_level=True)
    out = implicit_na(vec)
    assert out.resolve() == ["b", None]
    assert out.raw_codes() == [1, -1]


# ============================================================================
# factor_explicit
# ============================================================================

def test_factor_explicit_adds_null_level():
    vec = factor_explicit(["abc", None], ["abc"])
    assert vec.levels.labels == ("abc", NA_LEVEL)
    assert vec.resolve() == ["abc", NA_LEVEL]


def test_factor_explicit_keeps_unmatched_distinct():
    vec = factor_explicit(["abc", "def", None], ["abc"])
    assert vec.resolve() == ["abc", None, NA_LEVEL]


def test_factor_explicit_level_order_irrelevant():
    a = factor_explicit(["abc", None, "xyz"], ["abc", "xyz", None])
    b = factor_explicit(["abc", None, "xyz"], [None, "xyz", "abc"])
    assert a.raw_codes() != b.raw_codes()
    assert vectors_equal(a, b)


def test_factor_explicit_infers_levels():
    vec = factor_explicit(["b", None, "a"])
    assert vec.levels.labels == ("a", "b", NA_LEVEL)


# ============================================================================
# explicit_na_series
# ============================================================================

def test_explicit_na_series_categorical():
    cat = pd.Categorical(["abc", "def", None]).remove_categories(["def"])
    out = explicit_na_series(cat)
    assert isinstance(out, pd.Categorical)
    assert list(out) == ["abc", DEFAULT_NA_LABEL, DEFAULT_NA_LABEL]
    assert list(out.categories) == ["abc", DEFAULT_NA_LABEL]


def test_explicit_na_series_keeps_index_and_name():
    ser = pd.Series(pd.Categorical(["a", None]), index=[10, 20], name="grade")
    out = explicit_na_series(ser, "none")
    assert isinstance(out, pd.Series)
    assert out.index.tolist() == [10, 20]
    assert out.name == "grade"
    assert out.tolist() == ["a", "none"]


def test_explicit_na_series_existing_category():
    cat = pd.Categorical(["a", None], categories=["a", "(NA)"])
    out = explicit_na_series(cat)
    assert list(out.categories) == ["a", "(NA)"]
    assert list(out) == ["a", "(NA)"]


def test_explicit_na_series_rejects_non_categorical():
    with pytest.raises(TypeError, match="categorical"):
        explicit_na_series(pd.Series(["a", None]))


def test_factor_explicit_always_declares_null_level():
    vec = factor_explicit(["a", "b"])
    assert vec.levels.labels == ("a", "b", NA_LEVEL)
    assert vec.levels.has_na_level
