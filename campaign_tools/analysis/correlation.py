"""Linear correlation between campaign parameters and targets.

Pearson coefficients are computed with `np.corrcoef` over the table in use.
Degenerate columns never raise: a parameter with fewer than two distinct
values, or a constant target, correlates at exactly 0.

Typical usage example:

    from campaign_tools.analysis import correlate, top_parameters

    correlations = correlate(table)
    ranked = top_parameters(correlations, Target.YIELD)
"""

from typing import Iterable

import numpy as np

from ..table import IterationTable, Parameter, Target


def pearson(x, y) -> float:
    """Pearson coefficient of two equally long samples.

    Args:
        x (array-like): First sample.
        y (array-like): Second sample.

    Returns:
        float: The off-diagonal entry of `np.corrcoef(x, y)`, or 0 when that
            is not finite or either sample has fewer than two values.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if len(x) < 2:
        return 0.0
    with np.errstate(divide="ignore", invalid="ignore"):
        r = np.corrcoef(x, y)[0, 1]
    return float(r) if np.isfinite(r) else 0.0


def correlate(
    table: IterationTable,
    targets: Iterable[Target | str] = None,
    parameters: Iterable[Parameter | str] = None,
) -> dict[Target, dict[Parameter, float]]:
    """Correlation of every parameter with every target.

    Args:
        table (IterationTable): Iterations to correlate over.
        targets (Iterable[Target | str], optional): Targets to report.
            Defaults to all targets.
        parameters (Iterable[Parameter | str], optional): Parameters to
            report. Defaults to all parameters.

    Returns:
        dict[Target, dict[Parameter, float]]: Nested mapping
            target -> parameter -> correlation in [-1, 1].
    """
    targets = [Target.from_name(t) for t in (targets or Target)]
    parameters = [Parameter.from_name(p) for p in (parameters or Parameter)]

    correlations = {}
    for target in targets:
        y = table.values(target)
        correlations[target] = {}
        for param in parameters:
            x = table.values(param)
            if len(np.unique(x)) < 2:
                correlations[target][param] = 0.0
                continue
            correlations[target][param] = pearson(x, y)

    return correlations


def top_parameters(
    correlations: dict[Target, dict[Parameter, float]],
    target: Target | str,
) -> list[tuple[Parameter, float]]:
    """Parameters ordered by descending absolute correlation with `target`.

    Returns an empty list when `target` was not correlated.
    """
    target = Target.from_name(target)
    entries = correlations.get(target, {})
    return sorted(entries.items(), key=lambda item: abs(item[1]), reverse=True)
