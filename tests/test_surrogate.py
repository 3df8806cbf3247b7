import logging

import numpy as np
import pytest

from campaign_tools.analysis.surrogate import fit_quadratic, surrogate_curve, uncertainty_at
from campaign_tools.table import InvalidInputError, Parameter, ParameterRange, Target


def quadratic_table(make_table, xs):
    ys = [2 * x * x + 3 * x + 1 for x in xs]
    return make_table({"T1Celsius": xs}, {"Yield": ys})


def test_exact_quadratic_is_recovered():
    x = np.array([-2.0, -1.0, 0.0, 1.0, 2.0, 3.0])
    fit = fit_quadratic(x, 2 * x ** 2 + 3 * x + 1)
    assert fit.degree == 2
    assert fit.a == pytest.approx(2.0, abs=1e-9)
    assert fit.b == pytest.approx(3.0, abs=1e-9)
    assert fit.c == pytest.approx(1.0, abs=1e-9)
    assert fit.r2 == pytest.approx(1.0)


@pytest.mark.parametrize("lo, hi", [(600.0, 660.0), (1000.0, 1010.0)])
def test_quadratic_is_recovered_on_offset_ranges(lo, hi, caplog):
    x = np.linspace(lo, hi, 12)
    with caplog.at_level(logging.WARNING):
        fit = fit_quadratic(x, 2 * x ** 2 + 3 * x + 1)
    assert fit.degree == 2
    assert fit.a == pytest.approx(2.0, rel=1e-6)
    assert fit.b == pytest.approx(3.0, abs=1e-3)
    assert fit.c == pytest.approx(1.0, abs=1.0)
    assert fit.predict([hi]) == pytest.approx([2 * hi * hi + 3 * hi + 1], rel=1e-9)
    assert fit.r2 == pytest.approx(1.0)
    assert "singular" not in caplog.text


def test_least_squares_matches_numpy_polyfit():
    rng = np.random.default_rng(3)
    x = rng.uniform(0, 5, 30)
    y = 0.5 * x ** 2 - 2 * x + 3 + rng.normal(0, 0.2, 30)
    fit = fit_quadratic(x, y)
    a, b, c = np.polyfit(x, y, 2)
    assert fit.a == pytest.approx(a, rel=1e-6)
    assert fit.b == pytest.approx(b, rel=1e-6)
    assert fit.c == pytest.approx(c, rel=1e-6)


def test_two_distinct_values_fall_back_to_a_line():
    fit = fit_quadratic([1.0, 1.0, 3.0], [2.0, 2.0, 6.0])
    assert fit.degree == 1
    assert fit.a == 0
    assert fit.b == pytest.approx(2.0)
    assert fit.c == pytest.approx(0.0, abs=1e-12)


def test_constant_parameter_falls_back_to_the_mean():
    fit = fit_quadratic([4.0, 4.0, 4.0], [1.0, 2.0, 6.0])
    assert fit.degree == 0
    assert (fit.a, fit.b) == (0, 0)
    assert fit.c == pytest.approx(3.0)
    assert np.all(np.isfinite(fit.predict([0.0, 4.0, 100.0])))


def test_bounds_collapse_on_observed_points(make_table):
    table = quadratic_table(make_table, [float(x) for x in range(11)])
    # padded domain [-1, 11] sampled at every integer
    curve = surrogate_curve(table, Target.YIELD, Parameter.T1_CELSIUS, sample_points=13)
    by_x = {round(p.param_value, 9): p for p in curve.points}

    for x in range(11):
        point = by_x[float(x)]
        assert point.uncertainty == 0
        assert point.upper_bound == point.lower_bound == point.mean
        assert point.mean == pytest.approx(2 * x * x + 3 * x + 1)


def test_far_samples_keep_the_base_uncertainty(make_table):
    table = quadratic_table(make_table, [float(x) for x in range(11)])
    curve = surrogate_curve(table, Target.YIELD, Parameter.T1_CELSIUS, sample_points=13)
    edge = curve.points[0]
    assert edge.param_value == pytest.approx(-1.0)
    assert edge.uncertainty == pytest.approx(0.1)
    assert edge.upper_bound == pytest.approx(edge.mean + 0.1 * abs(edge.mean))
    assert edge.lower_bound == pytest.approx(edge.mean - 0.1 * abs(edge.mean))


def test_uncertainty_shrinks_near_observations():
    observed = np.array([0.0, 10.0])
    assert uncertainty_at(0.5, observed, 10.0) == pytest.approx(0.1 * 0.5)
    assert uncertainty_at(5.0, observed, 10.0) == pytest.approx(0.1)
    assert uncertainty_at(0.0, observed, 10.0) == 0
    assert uncertainty_at(3.0, np.array([3.0, 3.0]), 0.0) == 0


def test_default_curve_has_101_samples_over_the_padded_domain(make_table):
    table = quadratic_table(make_table, [20.0, 65.0, 110.0, 155.0, 200.0])
    curve = surrogate_curve(table, "Yield", "T1Celsius")
    assert len(curve.points) == 101
    assert curve.points[0].param_value == pytest.approx(2.0)
    assert curve.points[-1].param_value == pytest.approx(218.0)
    assert all(p.lower_bound <= p.mean <= p.upper_bound for p in curve.points)


def test_supplied_domain_sets_the_sample_span(make_table):
    table = quadratic_table(make_table, [1.0, 2.0, 3.0])
    curve = surrogate_curve(
        table, Target.YIELD, Parameter.T1_CELSIUS, sample_points=5,
        domain=ParameterRange(min=0.0, max=10.0),
    )
    assert [p.param_value for p in curve.points] == pytest.approx([-1.0, 2.0, 5.0, 8.0, 11.0])


def test_constant_parameter_curve_is_flat_and_finite(make_table):
    table = make_table({"T1Celsius": [1.0, 2.0, 3.0]}, {"Yield": [1.0, 2.0, 3.0]})
    curve = surrogate_curve(table, Target.YIELD, Parameter.CONCENTRATION_MOLAR, sample_points=3)
    assert curve.fit.degree == 0
    for point in curve.points:
        assert point.mean == pytest.approx(2.0)
        assert point.upper_bound == point.lower_bound == point.mean


def test_sample_points_must_be_positive(make_table):
    table = quadratic_table(make_table, [1.0, 2.0, 3.0])
    with pytest.raises(InvalidInputError):
        surrogate_curve(table, Target.YIELD, Parameter.T1_CELSIUS, sample_points=0)


def test_curve_is_repeatable(make_table):
    table = quadratic_table(make_table, [1.0, 2.5, 3.0, 7.5])
    first = surrogate_curve(table, Target.YIELD, Parameter.T1_CELSIUS)
    second = surrogate_curve(table, Target.YIELD, Parameter.T1_CELSIUS)
    assert first == second
