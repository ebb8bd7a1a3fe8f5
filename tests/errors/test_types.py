import pytest

from bssmix.errors import BssMixError, ConfigurationError, ShapeError, UnequalRowsError


@pytest.mark.parametrize("exc_type", [ConfigurationError, ShapeError, UnequalRowsError])
def test_errors_share_a_value_error_base(exc_type: type) -> None:
    assert issubclass(exc_type, BssMixError)
    assert issubclass(exc_type, ValueError)


def test_unequal_rows_error_lists_counts() -> None:
    err = UnequalRowsError({"targets": 5, "tirs": 3})
    assert err.row_counts == {"targets": 5, "tirs": 3}
    assert "targets=5" in str(err)
    assert "tirs=3" in str(err)


def test_unequal_rows_error_without_counts() -> None:
    err = UnequalRowsError()
    assert err.row_counts == {}
    assert "equal number of rows" in str(err)
