import pytest

from circulation.config import _parse_epsilon, _parse_thresholds


def test_thresholds_parse_comma_list():
    assert _parse_thresholds("2,3,4,5") == (2, 3, 4, 5)
    assert _parse_thresholds(" 3 , 7 ") == (3, 7)


@pytest.mark.parametrize("raw", ["", "0,2", "2,-1", "2,2,3"])
def test_bad_thresholds_are_rejected(raw):
    with pytest.raises(ValueError):
        _parse_thresholds(raw)


def test_epsilon_parses_positive_float():
    assert _parse_epsilon("1e-6") == 1e-6


@pytest.mark.parametrize("raw", ["0", "-1e-9", "nan", "inf", "abc"])
def test_bad_epsilon_is_rejected(raw):
    with pytest.raises(ValueError):
        _parse_epsilon(raw)
