"""Campaign progress: best observed values and their trajectory.

Each target is either maximized or minimized (see `Target.mode`). The best
value of a target is the extreme in that direction, attributed to the first
iteration that reached it.

Typical usage example:

    from campaign_tools.analysis import best_values, best_so_far

    best = best_values(table)
    print(best[Target.YIELD].value, best[Target.YIELD].iteration)

    trajectory = best_so_far(table)   # DataFrame, one row per iteration
"""

from dataclasses import dataclass

import pandas as pd

from ..table import IterationTable, Target
from ..utils.metric import Mode


@dataclass(frozen=True)
class BestValue:
    """Best value of a target and the first iteration it was observed at."""
    target: Target
    value: float
    iteration: int


def best_values(table: IterationTable) -> dict[Target, BestValue]:
    """Best observed value of every target, respecting its mode."""
    iterations = table.iterations
    best = {}
    for target in Target:
        values = table.values(target)
        i = target.mode.best(values)
        best[target] = BestValue(target=target, value=float(values[i]), iteration=int(iterations[i]))
    return best


def best_so_far(table: IterationTable) -> pd.DataFrame:
    """
    Running best of every target after each iteration.

    Returns:
        pd.DataFrame: Columns `iteration` and one column per target name,
            holding the best value observed up to and including that
            iteration.
    """
    frame = table.to_frame()
    trajectory = pd.DataFrame({"iteration": frame["iteration"]})
    for target in Target:
        column = frame[target.value]
        trajectory[target.value] = column.cummax() if target.mode is Mode.MAX else column.cummin()
    return trajectory
