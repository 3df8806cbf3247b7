"""Parameter ranking and control guidance.

Aggregates the per-parameter sensitivity breakdown into a list ordered by
mean sensitivity and buckets each parameter into a control level. The level
thresholds are part of the public contract; the wording of any advice built
on top of them is left to the caller.

Typical usage example:

    from campaign_tools.analysis import analyze_sensitivity, rank, control_guidance

    result = analyze_sensitivity(table, Target.YIELD)
    ranked = rank(result.parameters)
    guidance = control_guidance(ranked)
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import TYPE_CHECKING, Mapping

from ..table import Parameter

if TYPE_CHECKING:
    from .sensitivity import ParameterSensitivity


HIGH_SENSITIVITY = 0.5
MEDIUM_SENSITIVITY = 0.2


class SensitivityLevel(str, Enum):
    """How tightly a parameter needs to be controlled."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def sensitivity_level(mean_sensitivity: float) -> SensitivityLevel:
    """Bucket a mean sensitivity: > 0.5 high, > 0.2 medium, otherwise low."""
    if mean_sensitivity > HIGH_SENSITIVITY:
        return SensitivityLevel.HIGH
    if mean_sensitivity > MEDIUM_SENSITIVITY:
        return SensitivityLevel.MEDIUM
    return SensitivityLevel.LOW


@dataclass(frozen=True)
class RankedParameter:
    """
    Aggregate sensitivity of one parameter.

    Attributes:
        parameter (Parameter): The ranked parameter.
        mean_sensitivity (float): Mean absolute gradient over its segments.
        max_sensitivity (float): Largest absolute gradient.
        safe_zones_count (int): Number of segments below the sensitivity
            threshold.
        boundaries_count (int): Number of segments at or above it.
        stability_regions_count (int): Number of segments whose averaged
            coefficient of variation is below the stability threshold.
    """
    parameter: Parameter
    mean_sensitivity: float
    max_sensitivity: float
    safe_zones_count: int
    boundaries_count: int
    stability_regions_count: int

    @property
    def level(self) -> SensitivityLevel:
        return sensitivity_level(self.mean_sensitivity)

    def to_dict(self):
        data = asdict(self)
        data["parameter"] = self.parameter.value
        data["level"] = self.level.value
        return data


@dataclass(frozen=True)
class ControlGuidance:
    """Control priority of a parameter and whether it has stable regions."""
    parameter: Parameter
    priority: SensitivityLevel
    mean_sensitivity: float
    stability_regions_count: int

    @property
    def has_stable_regions(self) -> bool:
        return self.stability_regions_count > 0


def rank(sensitivities: Mapping[Parameter, "ParameterSensitivity"]) -> list[RankedParameter]:
    """
    Rank parameters by descending mean sensitivity.

    Args:
        sensitivities (Mapping[Parameter, ParameterSensitivity]): Sensitivity
            breakdown per parameter.

    Returns:
        list[RankedParameter]: Most sensitive parameter first.

    Note:
        The order of parameters with equal mean sensitivity is unspecified.
        The current implementation keeps their input order.
    """
    ranked = [
        RankedParameter(
            parameter=param,
            mean_sensitivity=data.mean_gradient,
            max_sensitivity=data.max_gradient,
            safe_zones_count=len(data.safe_zones),
            boundaries_count=len(data.boundaries),
            stability_regions_count=len(data.stability_regions),
        )
        for param, data in sensitivities.items()
    ]
    return sorted(ranked, key=lambda r: r.mean_sensitivity, reverse=True)


def control_guidance(ranked: list[RankedParameter]) -> list[ControlGuidance]:
    """Control priority for each ranked parameter, in ranking order."""
    return [
        ControlGuidance(
            parameter=r.parameter,
            priority=r.level,
            mean_sensitivity=r.mean_sensitivity,
            stability_regions_count=r.stability_regions_count,
        )
        for r in ranked
    ]
