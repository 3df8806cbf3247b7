"""Local stability of a target over a pair of parameters.

Every observation is compared with the observations around it in the plane
spanned by two parameters. The neighbourhood of a point holds every record
(the point itself included) whose value on each axis lies strictly within
10% of that axis' padded display domain. When the neighbourhood holds more
than two records, the coefficient of variation of the target over it decides
the point's stability level:

    CV < 0.05  -> high
    CV < 0.10  -> medium
    otherwise  -> low

Points with fewer than three neighbours are `unknown`. The computation
compares every pair of records, O(n²) in the table length, which is fine for
campaigns of a few hundred iterations.

Typical usage example:

    from campaign_tools.analysis import local_stability

    points = local_stability(table, Target.YIELD, Parameter.T1_CELSIUS, Parameter.T1_MIN)
    stable = [p.record.iteration for p in points if p.level is StabilityLevel.HIGH]
"""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Mapping

import numpy as np

from ..table import IterationRecord, IterationTable, Parameter, ParameterRange, Target
from ..utils.metric import population_std


NEIGHBOURHOOD_FRACTION = 0.1
MIN_NEIGHBOURS = 3
HIGH_STABILITY_CV = 0.05
MEDIUM_STABILITY_CV = 0.10


class StabilityLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


def stability_level(cv: float) -> StabilityLevel:
    """Bucket a neighbourhood coefficient of variation."""
    if cv < HIGH_STABILITY_CV:
        return StabilityLevel.HIGH
    if cv < MEDIUM_STABILITY_CV:
        return StabilityLevel.MEDIUM
    return StabilityLevel.LOW


@dataclass(frozen=True)
class PointStability:
    """
    Stability classification of one record.

    Attributes:
        record (IterationRecord): The classified record.
        level (StabilityLevel): Its stability level.
        neighbours (int): Neighbourhood size, the record included.
        cv (float | None): Coefficient of variation of the target over the
            neighbourhood; None when the level is unknown.
    """
    record: IterationRecord
    level: StabilityLevel
    neighbours: int
    cv: float | None = None


def local_stability(
    table: IterationTable,
    target: Target | str,
    param_a: Parameter | str,
    param_b: Parameter | str,
    domains: Mapping[Parameter, ParameterRange] = None,
) -> list[PointStability]:
    """
    Classify the local stability of every record in `table`.

    Args:
        table (IterationTable): Iterations to classify.
        target (Target | str): Target whose variability is measured.
        param_a (Parameter | str): First axis.
        param_b (Parameter | str): Second axis.
        domains (Mapping[Parameter, ParameterRange], optional): Ranges whose
            padded domains set the neighbourhood radii. Defaults to the
            ranges over `table`.

    Returns:
        list[PointStability]: One entry per record, in table order.

    Note:
        A constant axis has a zero-width domain, so no record is a neighbour
        of any other and every point is `unknown`.
    """
    target = Target.from_name(target)
    param_a = Parameter.from_name(param_a)
    param_b = Parameter.from_name(param_b)
    domains = domains or {}

    a = table.values(param_a)
    b = table.values(param_b)
    y = table.values(target)

    radius_a = NEIGHBOURHOOD_FRACTION * domains.get(param_a, table.param_range(param_a)).domain_width
    radius_b = NEIGHBOURHOOD_FRACTION * domains.get(param_b, table.param_range(param_b)).domain_width

    # (n, n) neighbour matrix; row i holds the neighbourhood of record i
    close = (np.abs(a[:, None] - a[None, :]) < radius_a) & (np.abs(b[:, None] - b[None, :]) < radius_b)

    points = []
    for record, mask in zip(table, close):
        count = int(mask.sum())
        if count < MIN_NEIGHBOURS:
            points.append(PointStability(record, StabilityLevel.UNKNOWN, count))
            continue
        values = y[mask]
        mean = float(np.mean(values))
        # a zero-mean neighbourhood counts as fully unstable
        cv = population_std(values) / abs(mean) if mean != 0 else 1.0
        points.append(PointStability(record, stability_level(cv), count, cv))

    logging.debug(
        f"Local stability of {target.value} over ({param_a.value}, {param_b.value}): "
        f"{sum(p.level is not StabilityLevel.UNKNOWN for p in points)} of {len(points)} classified."
    )
    return points
