import pytest

from campaign_tools.analysis.ranking import (
    SensitivityLevel,
    control_guidance,
    rank,
    sensitivity_level,
)
from campaign_tools.analysis.sensitivity import GradientSegment, ParameterSensitivity
from campaign_tools.table import Parameter


def sensitivity_from(magnitudes, stability=0.5) -> ParameterSensitivity:
    segments = [
        GradientSegment(bin_start=i, start=float(i), end=float(i + 1), gradient=g, stability=stability)
        for i, g in enumerate(magnitudes)
    ]
    return ParameterSensitivity.classify([], segments, 0.05, 0.15)


def test_rank_sorts_by_mean_sensitivity_descending():
    sensitivities = {
        Parameter.T1_CELSIUS: sensitivity_from([0.1, 0.2]),
        Parameter.T2_CELSIUS: sensitivity_from([0.5, 0.9]),
    }
    ranked = rank(sensitivities)
    assert [r.parameter for r in ranked] == [Parameter.T2_CELSIUS, Parameter.T1_CELSIUS]
    assert ranked[0].mean_sensitivity == pytest.approx(0.7)
    assert ranked[0].max_sensitivity == pytest.approx(0.9)
    assert ranked[1].mean_sensitivity == pytest.approx(0.15)


def test_rank_uses_absolute_gradients():
    ranked = rank({Parameter.T1_MIN: sensitivity_from([-0.4, 0.2])})
    assert ranked[0].mean_sensitivity == pytest.approx(0.3)
    assert ranked[0].max_sensitivity == pytest.approx(0.4)


def test_rank_counts_intervals():
    ranked = rank({Parameter.T1_MIN: sensitivity_from([0.01, 0.3, 0.6], stability=0.1)})
    r = ranked[0]
    assert r.safe_zones_count == 1
    assert r.boundaries_count == 2
    assert r.stability_regions_count == 3


def test_rank_of_nothing_is_empty():
    assert rank({}) == []


def test_degenerate_parameters_rank_last():
    ranked = rank({
        Parameter.CONCENTRATION_MOLAR: ParameterSensitivity(),
        Parameter.T1_CELSIUS: sensitivity_from([0.3]),
    })
    assert ranked[-1].parameter is Parameter.CONCENTRATION_MOLAR
    assert ranked[-1].mean_sensitivity == 0


@pytest.mark.parametrize("value, level", [
    (0.9, SensitivityLevel.HIGH),
    (0.51, SensitivityLevel.HIGH),
    (0.5, SensitivityLevel.MEDIUM),
    (0.21, SensitivityLevel.MEDIUM),
    (0.2, SensitivityLevel.LOW),
    (0.0, SensitivityLevel.LOW),
])
def test_sensitivity_levels(value, level):
    assert sensitivity_level(value) is level


def test_control_guidance_follows_ranking():
    ranked = rank({
        Parameter.T1_CELSIUS: sensitivity_from([0.1, 0.2], stability=0.1),
        Parameter.T2_CELSIUS: sensitivity_from([0.5, 0.9]),
    })
    guidance = control_guidance(ranked)
    assert [g.parameter for g in guidance] == [Parameter.T2_CELSIUS, Parameter.T1_CELSIUS]
    assert guidance[0].priority is SensitivityLevel.HIGH
    assert not guidance[0].has_stable_regions
    assert guidance[1].priority is SensitivityLevel.LOW
    assert guidance[1].stability_regions_count == 2
    assert ranked[0].to_dict()["level"] == "high"
