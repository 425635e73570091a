import math

import pytest

from paleolatitude import QueryParameters
from paleolatitude.exceptions import ParameterValidationError

## ==========================

valid_parameters = [
    # (kwargs, mode, (min_age, max_age))
    (dict(age=50), "single", (50, 50)),
    (dict(age_min=40, age_max=60), "range", (40, 60)),
    (dict(age=50, age_min=40, age_max=60), "range", (40, 60)),
    (dict(age=50, age_pm=5), "pm", (45, 55)),
    (dict(age=3, age_pm=5), "pm", (0, 8)),
    (dict(all_ages=True), "all", (0, math.inf)),
]

invalid_parameters = [
    dict(),  # no age at all
    dict(age=-1),
    dict(age=float("nan")),
    dict(age_min=10),
    dict(age_max=10),
    dict(age_min=60, age_max=40),
    dict(age=70, age_min=40, age_max=60),
    dict(age_pm=5),
    dict(age=50, age_pm=5, age_min=40, age_max=60),
    dict(age=50, all_ages=True),
    dict(all_ages=True, age_min=40, age_max=60),
]


@pytest.mark.parametrize("kwargs,mode,window", valid_parameters)
def test_valid_parameters(kwargs, mode, window):
    params = QueryParameters(10.0, 20.0, **kwargs)
    params.validate()
    assert params.mode == mode
    assert params.get_age_window() == window
    assert params.site == (10.0, 20.0)


@pytest.mark.parametrize("kwargs", invalid_parameters)
def test_invalid_parameters(kwargs):
    with pytest.raises(ParameterValidationError):
        QueryParameters(10.0, 20.0, **kwargs).validate()


@pytest.mark.parametrize(
    "lat,lon,valid",
    [
        (90.0, 180.0, True),
        (-90.0005, -180.0005, True),
        (90.01, 0.0, False),
        (0.0, -181.0, False),
        (float("nan"), 0.0, False),
        (0.0, float("nan"), False),
    ],
)
def test_site_coordinates(lat, lon, valid):
    params = QueryParameters(lat, lon, age=10)
    if valid:
        params.validate()
    else:
        with pytest.raises(ParameterValidationError):
            params.validate()


def test_parameter_validation_is_value_error():
    with pytest.raises(ValueError):
        QueryParameters(0.0, 0.0, age_pm=1).validate()


def test_target_ages():
    params = QueryParameters(0.0, 0.0, age=50, age_pm=5)
    assert params.get_age_in_years() == 50_000_000
    assert params.get_target_ages_in_years() == [45_000_000, 50_000_000, 55_000_000]

    params = QueryParameters(0.0, 0.0, age_min=40.5, age_max=60)
    assert params.get_age_in_years() is None
    assert params.get_target_ages_in_years() == [40_500_000, None, 60_000_000]

    assert QueryParameters(0.0, 0.0, all_ages=True).get_target_ages_in_years() == []
