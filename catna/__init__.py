from catna._version import __version__
from catna.errors import LevelSetError, UnmatchedLevelError, UnmatchedLevelWarning
from catna.levels import NA_LEVEL, LevelSet, is_null
from catna.encoding import (
    EncodedVector, Level, NoMatch, encode, from_categorical, infer_levels, to_categorical,
)
from catna.compare import categorical_equal, codes_equal, diff_positions, vectors_equal
from catna.remediation import explicit_na, explicit_na_series, factor_explicit, implicit_na
from catna.stats import missingness_summary, series_missingness_summary
