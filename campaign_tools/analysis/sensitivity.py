"""Binned sensitivity analysis of a target over each parameter's range.

Each parameter's observed range is cut into equal-width bins. For every
non-empty bin the target mean, its population standard deviation and the
mean parameter value are computed. Between consecutive non-empty bins a
normalized gradient (elasticity) is derived:

    g = ((mean_next - mean_cur) / mean_cur) / ((param_next - param_cur) / param_cur)

Segments are then sorted into three interval lists:

    - safe zones:         |g| <  sensitivity threshold
    - boundaries:         |g| >= sensitivity threshold
    - stability regions:  averaged coefficient of variation < stability threshold

The last predicate is independent of the first two, so a segment can be a
boundary and a stability region at the same time.

Typical usage example:

    from campaign_tools.analysis import analyze_sensitivity

    result = analyze_sensitivity(table, Target.YIELD, sensitivity_threshold=0.05)
    temperature = result.get(Parameter.T1_CELSIUS)
    for zone in temperature.safe_zones:
        print(zone.start, zone.end)
"""

from dataclasses import dataclass, field, asdict
import logging
from typing import Iterable, Mapping

import numpy as np

from ..table import IterationTable, Parameter, ParameterRange, Target
from ..utils.metric import coefficient_of_variation, population_std
from .ranking import RankedParameter, rank


BINS = 10
DEFAULT_SENSITIVITY_THRESHOLD = 0.05
DEFAULT_STABILITY_THRESHOLD = 0.15


@dataclass(frozen=True)
class BinStatistic:
    """
    Target statistics of the records falling in one bin.

    Attributes:
        bin (int): Bin index, 0 to BINS - 1.
        count (int): Number of records in the bin.
        mean (float): Mean target value.
        std (float): Population standard deviation of the target.
        param_value (float): Mean parameter value of the records.
        stability (float): Coefficient of variation std / |mean|; +inf for a
            zero mean with spread, 0 for a zero mean without.
    """
    bin: int
    count: int
    mean: float
    std: float
    param_value: float
    stability: float


@dataclass(frozen=True)
class GradientSegment:
    """
    Normalized sensitivity between two adjacent non-empty bins.

    Attributes:
        bin_start (int): Index of the lower bin.
        start (float): Mean parameter value of the lower bin.
        end (float): Mean parameter value of the upper bin.
        gradient (float): Signed elasticity of the target.
        stability (float): Mean of the two bins' coefficients of variation.
    """
    bin_start: int
    start: float
    end: float
    gradient: float
    stability: float

    @property
    def magnitude(self) -> float:
        return abs(self.gradient)


@dataclass(frozen=True)
class Interval:
    """Parameter sub-range covered by one gradient segment."""
    start: float
    end: float
    sensitivity: float
    stability: float


@dataclass
class ParameterSensitivity:
    """
    Full sensitivity breakdown of one parameter.

    A constant parameter has no bins and no segments; its gradients are 0 and
    its interval lists are empty.

    Attributes:
        bins (list[BinStatistic]): Non-empty bins in ascending bin order.
        gradients (list[GradientSegment]): Segments between consecutive bins.
        safe_zones (list[Interval]): Segments below the sensitivity threshold.
        boundaries (list[Interval]): Segments at or above it.
        stability_regions (list[Interval]): Segments below the stability
            threshold.
    """
    bins: list[BinStatistic] = field(default_factory=list)
    gradients: list[GradientSegment] = field(default_factory=list)
    safe_zones: list[Interval] = field(default_factory=list)
    boundaries: list[Interval] = field(default_factory=list)
    stability_regions: list[Interval] = field(default_factory=list)

    @classmethod
    def classify(
        cls,
        bins: list[BinStatistic],
        gradients: list[GradientSegment],
        sensitivity_threshold: float = DEFAULT_SENSITIVITY_THRESHOLD,
        stability_threshold: float = DEFAULT_STABILITY_THRESHOLD,
    ) -> "ParameterSensitivity":
        """Partition the segments into the three interval lists."""
        def interval(g: GradientSegment) -> Interval:
            return Interval(start=g.start, end=g.end, sensitivity=g.magnitude, stability=g.stability)

        return cls(
            bins=list(bins),
            gradients=list(gradients),
            safe_zones=[interval(g) for g in gradients if g.magnitude < sensitivity_threshold],
            boundaries=[interval(g) for g in gradients if g.magnitude >= sensitivity_threshold],
            stability_regions=[interval(g) for g in gradients if g.stability < stability_threshold],
        )

    @property
    def mean_gradient(self) -> float:
        if not self.gradients:
            return 0.0
        return float(np.mean([g.magnitude for g in self.gradients]))

    @property
    def max_gradient(self) -> float:
        if not self.gradients:
            return 0.0
        return float(max(g.magnitude for g in self.gradients))

    def to_dict(self):
        data = asdict(self)
        data["mean_gradient"] = self.mean_gradient
        data["max_gradient"] = self.max_gradient
        return data


@dataclass
class SensitivityResult:
    """
    Sensitivity of one target to a set of parameters.

    Attributes:
        target (Target): The analysed target.
        parameters (dict[Parameter, ParameterSensitivity]): Breakdown per
            requested parameter.
        ranked (list[RankedParameter]): Parameters by descending mean
            sensitivity.
    """
    target: Target
    parameters: dict[Parameter, ParameterSensitivity]
    ranked: list[RankedParameter]

    def get(self, param: Parameter | str) -> ParameterSensitivity | None:
        """Breakdown of `param`, or None if it was not analysed."""
        return self.parameters.get(Parameter.from_name(param))


def bin_indices(values: np.ndarray, param_range: ParameterRange, bins: int = BINS) -> np.ndarray:
    """
    Equal-width bin of each value: clamp(floor((v - min) / width), 0, bins - 1).

    The maximum falls into the last bin. Values outside the range are clamped
    to the first or last bin.
    """
    width = param_range.range / bins
    idx = np.floor((np.asarray(values, dtype=float) - param_range.min) / width)
    return np.clip(idx, 0, bins - 1).astype(int)


def bin_statistics(
    param_values: np.ndarray,
    target_values: np.ndarray,
    param_range: ParameterRange,
    bins: int = BINS,
) -> list[BinStatistic]:
    """Statistics of every non-empty bin, in ascending bin order."""
    indices = bin_indices(param_values, param_range, bins)
    stats = []
    for b in np.unique(indices):
        mask = indices == b
        values = target_values[mask]
        stats.append(BinStatistic(
            bin=int(b),
            count=int(mask.sum()),
            mean=float(np.mean(values)),
            std=population_std(values),
            param_value=float(np.mean(param_values[mask])),
            stability=coefficient_of_variation(values),
        ))
    return stats


def normalized_gradient(current: BinStatistic, following: BinStatistic) -> float:
    """
    Relative target change per relative parameter change between two bins.

    Defined as 0 when the parameter does not move, the current target mean is
    0, or the current parameter mean is 0.
    """
    param_delta = following.param_value - current.param_value
    if param_delta == 0 or current.mean == 0 or current.param_value == 0:
        return 0.0
    target_delta = following.mean - current.mean
    return (target_delta / current.mean) / (param_delta / current.param_value)


def gradient_segments(stats: list[BinStatistic]) -> list[GradientSegment]:
    """Segments between consecutive non-empty bins."""
    return [
        GradientSegment(
            bin_start=current.bin,
            start=current.param_value,
            end=following.param_value,
            gradient=normalized_gradient(current, following),
            stability=(current.stability + following.stability) / 2,
        )
        for current, following in zip(stats, stats[1:])
        if current.count > 0 and following.count > 0
    ]


def parameter_sensitivity(
    table: IterationTable,
    target: Target | str,
    param: Parameter | str,
    param_range: ParameterRange = None,
    sensitivity_threshold: float = DEFAULT_SENSITIVITY_THRESHOLD,
    stability_threshold: float = DEFAULT_STABILITY_THRESHOLD,
) -> ParameterSensitivity:
    """
    Sensitivity breakdown of `target` over a single parameter.

    Args:
        table (IterationTable): Iterations to analyse.
        target (Target | str): Target whose response is measured.
        param (Parameter | str): Parameter to bin.
        param_range (ParameterRange, optional): Range used for binning.
            Defaults to the parameter's range over `table`.
        sensitivity_threshold (float, optional): Boundary threshold on |g|.
        stability_threshold (float, optional): Stability threshold on the
            averaged coefficient of variation.

    Returns:
        ParameterSensitivity: The breakdown; the empty form when the
            parameter is constant over `table`.
    """
    param = Parameter.from_name(param)
    x = table.values(param)
    y = table.values(Target.from_name(target))
    if param_range is None:
        param_range = table.param_range(param)

    if len(np.unique(x)) < 2 or param_range.range <= 0:
        logging.debug(f"{param.value} is constant; reporting zero sensitivity.")
        return ParameterSensitivity()

    stats = bin_statistics(x, y, param_range)
    segments = gradient_segments(stats)
    return ParameterSensitivity.classify(stats, segments, sensitivity_threshold, stability_threshold)


def analyze_sensitivity(
    table: IterationTable,
    target: Target | str,
    param_ranges: Mapping[Parameter, ParameterRange] = None,
    sensitivity_threshold: float = DEFAULT_SENSITIVITY_THRESHOLD,
    stability_threshold: float = DEFAULT_STABILITY_THRESHOLD,
    parameters: Iterable[Parameter | str] = None,
) -> SensitivityResult:
    """
    Sensitivity of `target` to each parameter, with the resulting ranking.

    Args:
        table (IterationTable): Iterations to analyse.
        target (Target | str): Target whose response is measured.
        param_ranges (Mapping[Parameter, ParameterRange], optional): Ranges
            used for binning. Defaults to the ranges over `table`. Pass the
            ranges of the full campaign to bin a prefix on the same grid.
        sensitivity_threshold (float, optional): Defaults to 0.05.
        stability_threshold (float, optional): Defaults to 0.15.
        parameters (Iterable[Parameter | str], optional): Parameters to
            analyse. Defaults to the keys of `param_ranges`, or all
            parameters.

    Returns:
        SensitivityResult: Per-parameter breakdown and ranked list.
    """
    target = Target.from_name(target)
    if param_ranges is None:
        param_ranges = table.param_ranges()
    if parameters is None:
        parameters = list(param_ranges.keys())
    parameters = [Parameter.from_name(p) for p in parameters]

    logging.info(f"Analyzing sensitivity of {target.value} over {len(table)} iterations.")
    breakdown = {
        param: parameter_sensitivity(
            table,
            target,
            param,
            param_range=param_ranges.get(param),
            sensitivity_threshold=sensitivity_threshold,
            stability_threshold=stability_threshold,
        )
        for param in parameters
    }

    return SensitivityResult(target=target, parameters=breakdown, ranked=rank(breakdown))
