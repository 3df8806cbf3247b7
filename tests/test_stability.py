import pytest

from campaign_tools.analysis.stability import StabilityLevel, local_stability, stability_level
from campaign_tools.table import Parameter, ParameterRange, Target


PAIR = (Parameter.T1_CELSIUS, Parameter.T1_MIN)


def clustered_table(make_table, cluster_targets, outlier_target=7.0):
    # three points packed near the origin and one far away
    a = [0.0, 0.01, 0.02, 10.0]
    b = [0.0, 0.02, 0.01, 10.0]
    return make_table({"T1Celsius": a, "t1min": b}, {"Yield": list(cluster_targets) + [outlier_target]})


def test_identical_cluster_is_highly_stable(make_table):
    table = clustered_table(make_table, [5.0, 5.0, 5.0])
    points = local_stability(table, Target.YIELD, *PAIR)
    assert [p.level for p in points[:3]] == [StabilityLevel.HIGH] * 3
    assert all(p.cv == 0 for p in points[:3])
    assert all(p.neighbours == 3 for p in points[:3])


def test_isolated_point_is_unknown(make_table):
    table = clustered_table(make_table, [5.0, 5.0, 5.0])
    isolated = local_stability(table, Target.YIELD, *PAIR)[3]
    assert isolated.level is StabilityLevel.UNKNOWN
    assert isolated.neighbours == 1
    assert isolated.cv is None


def test_neighbourhood_includes_the_point_itself(make_table):
    # two close points are only two neighbours; a third makes them classifiable
    pair_only = make_table({"T1Celsius": [0.0, 0.01, 10.0], "t1min": [0.0, 0.01, 10.0]})
    assert local_stability(pair_only, Target.YIELD, *PAIR)[0].level is StabilityLevel.UNKNOWN

    table = clustered_table(make_table, [5.0, 5.0, 5.0])
    assert local_stability(table, Target.YIELD, *PAIR)[0].neighbours == 3


def test_medium_and_low_levels(make_table):
    medium = clustered_table(make_table, [1.0, 1.1, 1.2])
    assert local_stability(medium, Target.YIELD, *PAIR)[0].level is StabilityLevel.MEDIUM

    low = clustered_table(make_table, [1.0, 2.0, 3.0])
    assert local_stability(low, Target.YIELD, *PAIR)[0].level is StabilityLevel.LOW


def test_zero_mean_neighbourhood_is_low(make_table):
    table = clustered_table(make_table, [-1.0, 0.0, 1.0])
    point = local_stability(table, Target.YIELD, *PAIR)[0]
    assert point.cv == 1.0
    assert point.level is StabilityLevel.LOW


def test_radius_is_a_tenth_of_the_padded_domain(make_table):
    # range 10 -> domain width 12 -> radius 1.2 on each axis
    a = [0.0, 1.1, 1.19, 5.0, 10.0]
    b = [0.0, 0.0, 0.0, 5.0, 10.0]
    table = make_table({"T1Celsius": a, "t1min": b}, {"Yield": [2.0, 2.0, 2.0, 1.0, 1.0]})
    points = local_stability(table, Target.YIELD, *PAIR)
    assert points[0].neighbours == 3
    assert points[0].level is StabilityLevel.HIGH


def test_wider_domains_widen_the_neighbourhood(make_table):
    table = make_table({"T1Celsius": [0.0, 2.0, 4.0], "t1min": [0.0, 2.0, 4.0]}, {"Yield": [1.0, 1.0, 1.0]})
    assert all(p.level is StabilityLevel.UNKNOWN for p in local_stability(table, Target.YIELD, *PAIR))

    domains = {p: ParameterRange(min=0.0, max=100.0) for p in PAIR}
    points = local_stability(table, Target.YIELD, *PAIR, domains=domains)
    assert all(p.level is StabilityLevel.HIGH for p in points)


def test_constant_axis_leaves_every_point_unknown(make_table):
    table = make_table({"T1Celsius": [0.0, 0.01, 0.02]}, {"Yield": [1.0, 1.0, 1.0]})
    points = local_stability(table, "Yield", "T1Celsius", "ConcentrationMolar")
    assert all(p.level is StabilityLevel.UNKNOWN for p in points)
    assert all(p.neighbours == 0 for p in points)


@pytest.mark.parametrize("cv, level", [
    (0.0, StabilityLevel.HIGH),
    (0.049, StabilityLevel.HIGH),
    (0.05, StabilityLevel.MEDIUM),
    (0.099, StabilityLevel.MEDIUM),
    (0.1, StabilityLevel.LOW),
])
def test_stability_level_thresholds(cv, level):
    assert stability_level(cv) is level


def test_one_entry_per_record_in_order(make_table):
    table = clustered_table(make_table, [5.0, 5.0, 5.0])
    points = local_stability(table, Target.YIELD, *PAIR)
    assert [p.record.iteration for p in points] == [1, 2, 3, 4]
    assert points == local_stability(table, Target.YIELD, *PAIR)
