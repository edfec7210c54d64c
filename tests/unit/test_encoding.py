import warnings

import numpy as np
import pandas as pd
import pytest

from catna.encoding import (
    EncodedVector, Level, NoMatch, encode, from_categorical, infer_levels, to_categorical,
)
from catna.errors import LevelSetError, UnmatchedLevelError, UnmatchedLevelWarning
from catna.levels import NA_LEVEL, LevelSet


# ============================================================================
# Null handling
# ============================================================================

class TestNullHandling:
    def test_explicit_null_level(self):
        vec = encode(["abc", None, None], ["abc", None], treat_null_as_level=True)
        assert vec.codes == (Level(0), Level(1), Level(1))
        assert vec.resolve() == ["abc", NA_LEVEL, NA_LEVEL]

    def test_nulls_never_no_match_when_level_declared(self):
        values = [None, "b", np.nan, pd.NA, "a", None]
        for levels in (["a", "b", None], [None, "a", "b"], ["b", None, "a"]):
            vec = encode(values, levels, treat_null_as_level=True)
            null_positions = [0, 2, 3, 5]
            for pos in null_positions:
                assert isinstance(vec.codes[pos], Level)
                assert vec.label_at(pos) is NA_LEVEL

    def test_flag_off_makes_nulls_implicit(self):
        vec = encode(["abc", None], ["abc", None], treat_null_as_level=False)
        assert vec.codes == (Level(0), NoMatch())
        assert vec.resolve() == ["abc", None]

    def test_no_null_level_makes_nulls_implicit(self):
        for flag in (True, False):
            vec = encode(["abc", None, np.nan], ["abc"], treat_null_as_level=flag)
            assert vec.codes[1:] == (NoMatch(), NoMatch())

    def test_absent_values_no_match_regardless_of_flag(self):
        for flag in (True, False):
            vec = encode(["abc", "def", None], ["abc", None], treat_null_as_level=flag)
            assert isinstance(vec.codes[1], NoMatch)
            assert vec.codes[1].raw == "def"


def test_concrete_scenario():
    x = encode(["abc", None, None], ["abc", None], treat_null_as_level=True)
    y = encode(["abc", "def", None], ["abc", None], treat_null_as_level=True)
    assert x.resolve() == ["abc", NA_LEVEL, NA_LEVEL]
    assert y.resolve() == ["abc", None, NA_LEVEL]
    assert x.raw_codes() == [0, 1, 1]
    assert y.raw_codes() == [0, -1, 1]


def test_no_match_equality_ignores_raw():
    assert NoMatch("def") == NoMatch()
    assert NoMatch("def") != Level(0)
    assert repr(NoMatch("def")) == "NoMatch('def')"


# ============================================================================
# on_unmatched
# ============================================================================

def test_on_unmatched_raise():
    with pytest.raises(UnmatchedLevelError) as exc_info:
        encode(["abc", "def"], ["abc"], on_unmatched="raise")
    assert exc_info.value.value == "def"
    assert exc_info.value.position == 1


def test_on_unmatched_raise_ignores_nulls():
    vec = encode(["abc", None], ["abc"], on_unmatched="raise")
    assert vec.codes == (Level(0), NoMatch())


def test_on_unmatched_warn():
    with pytest.warns(UnmatchedLevelWarning, match="'def' at position 1"):
        vec = encode(["abc", "def"], ["abc"], on_unmatched="warn")
    assert vec.codes == (Level(0), NoMatch())


def test_on_unmatched_ignore_is_silent():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        encode(["abc", "def"], ["abc"])


def test_on_unmatched_invalid():
    with pytest.raises(ValueError, match="on_unmatched"):
        encode(["abc"], ["abc"], on_unmatched="shout")


def test_unmatched_logged(caplog):
    with caplog.at_level("DEBUG", logger="catna.encoding"):
        encode(["abc", "def", "ghi"], ["abc"])
    assert "2 of 3 values matched no level" in caplog.text


# ============================================================================
# Level inference
# ============================================================================

def test_infer_levels_sorted():
    assert infer_levels(["b", "a", None, "b"]).labels == ("a", "b")


def test_infer_levels_with_null():
    assert infer_levels(["b", None, "a"], treat_null_as_level=True).labels == ("a", "b", NA_LEVEL)
    # no null seen, no null level
    assert infer_levels(["b", "a"], treat_null_as_level=True).labels == ("a", "b")


def test_infer_levels_unsortable_keeps_first_appearance():
    assert infer_levels([2, "a", 1]).labels == (2, "a", 1)


def test_encode_without_levels():
    vec = encode(["b", None, "a"], treat_null_as_level=True)
    assert vec.resolve() == ["b", NA_LEVEL, "a"]
    assert vec.raw_codes() == [1, 2, 0]


def test_encode_accepts_level_set():
    levels = LevelSet.from_labels(["x", "y"])
    vec = encode(["y", "x"], levels)
    assert vec.levels is levels


# ============================================================================
# EncodedVector
# ============================================================================

def test_out_of_range_code_rejected():
    with pytest.raises(LevelSetError, match="out of range"):
        EncodedVector((Level(3),), LevelSet(("a",)))


def test_bad_code_type_rejected():
    with pytest.raises(TypeError):
        EncodedVector((0,), LevelSet(("a",)))


def test_to_frame_status():
    vec = encode(["abc", "def", None], ["abc", None], treat_null_as_level=True)
    df = vec.to_frame()
    assert df["status"].tolist() == ["level", "no_match", "na_level"]
    assert df["code"].tolist() == [0, -1, 1]
    assert df["raw"].tolist()[:2] == ["abc", "def"]


# ============================================================================
# pandas conversion
# ============================================================================

def test_to_categorical():
    vec = encode(["b", "zzz", None, "a"], ["a", "b"])
    cat = to_categorical(vec)
    assert list(cat.categories) == ["a", "b"]
    assert cat.codes.tolist() == [1, -1, -1, 0]


def test_to_categorical_rejects_null_level():
    vec = encode(["a", None], ["a", None], treat_null_as_level=True)
    with pytest.raises(LevelSetError, match="cannot be null"):
        to_categorical(vec)


def test_from_categorical_series():
    ser = pd.Series(pd.Categorical(["abc", "def", None]).remove_categories(["def"]))
    vec = from_categorical(ser)
    assert vec.codes == (Level(0), NoMatch(), NoMatch())
    assert vec.levels.labels == ("abc",)


def test_from_categorical_rejects_other_dtypes():
    with pytest.raises(TypeError, match="categorical Series"):
        from_categorical(pd.Series(["a", "b"]))
    with pytest.raises(TypeError):
        from_categorical(["a", "b"])
