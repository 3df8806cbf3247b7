"""
# Synthetic Campaigns

This module generates reproducible synthetic iteration tables for demos and
tests. Parameter settings are drawn with a quasi-random engine from SciPy's
`qmc` module and scaled to typical reaction-condition bounds; targets drift
towards better values as the campaign advances, with occasional setbacks.

## Functions

- `synthetic_campaign`: Build an `IterationTable` of `n` iterations

## Example Usage

```python
from campaign_tools.utils.sampling import synthetic_campaign

table = synthetic_campaign(35, seed=7)
table.to_frame().to_csv("optimization.csv", index=False)
```
"""

from typing import Literal

import numpy as np
from scipy.stats import qmc

from ..table import IterationRecord, IterationTable, InvalidInputError, Parameter, Target
from .metric import Mode


PARAMETER_BOUNDS: dict[Parameter, tuple[float, float]] = {
    Parameter.T1_CELSIUS: (20.0, 200.0),
    Parameter.T1_MIN: (10.0, 60.0),
    Parameter.T2_CELSIUS: (20.0, 200.0),
    Parameter.T2_MIN: (10.0, 60.0),
    Parameter.EQUIVALENTS_REAGENT1: (1.0, 2.0),
    Parameter.EQUIVALENTS_BASE1: (1.0, 5.0),
    Parameter.CONCENTRATION_MOLAR: (0.82, 0.82),
}
"""Default sampling bounds; ConcentrationMolar is held constant."""


def _get_engine(engine: str, **kwargs):
    match engine:
        case 'sobol':
            return qmc.Sobol(**kwargs)
        case 'latin':
            return qmc.LatinHypercube(**kwargs)
        case 'halton':
            return qmc.Halton(**kwargs)
    raise ValueError(f"Unknown sampling engine: {engine}")


def synthetic_campaign(
    n: int = 35,
    seed: int = 42,
    engine: Literal['sobol', 'latin', 'halton'] = 'latin',
    bounds: dict[Parameter, tuple[float, float]] = None,
) -> IterationTable:
    """
    Generate a synthetic optimization campaign.

    Args:
        n (int, optional): Number of iterations. Defaults to 35.
        seed (int, optional): Seed for both the sampling engine and the
            target noise. Defaults to 42.
        engine (Literal['sobol', 'latin', 'halton'], optional): Quasi-random
            engine for parameter settings. Defaults to 'latin'.
        bounds (dict[Parameter, tuple[float, float]], optional): Lower and
            upper bound per parameter. Equal bounds give a constant
            parameter. Defaults to `PARAMETER_BOUNDS`.

    Returns:
        IterationTable: The generated campaign.

    Raises:
        InvalidInputError: If `n` is smaller than 1.
    """
    if n < 1:
        raise InvalidInputError(f"A campaign needs at least one iteration, got {n}.")
    bounds = {**PARAMETER_BOUNDS, **(bounds or {})}

    rng = np.random.default_rng(seed)
    params = list(Parameter)
    sampler = _get_engine(engine, d=len(params), rng=rng)
    if isinstance(sampler, qmc.Sobol):
        # Sobol balance properties need a power-of-two draw
        unit = sampler.random_base2(m=int(np.ceil(np.log2(n))))[:n]
    else:
        unit = sampler.random(n)

    lower = np.array([bounds[p][0] for p in params])
    upper = np.array([bounds[p][1] for p in params])
    settings = lower + unit * (upper - lower)  # (n, dim)

    best = {Target.YIELD: 0.2, Target.IMPURITY: 0.3, Target.IMPURITY_X_RATIO: 1.1}
    records = []
    for i in range(n):
        measured = {
            Target.YIELD: best[Target.YIELD] + rng.uniform(-0.02, 0.08),
            Target.IMPURITY: best[Target.IMPURITY] * rng.uniform(0.95, 1.05),
            Target.IMPURITY_X_RATIO: best[Target.IMPURITY_X_RATIO] * rng.uniform(0.98, 1.06),
        }
        for target, value in measured.items():
            best[target] = max(best[target], value) if target.mode is Mode.MAX else min(best[target], value)

        records.append(IterationRecord(
            iteration=i + 1,
            parameters={p: settings[i, j] for j, p in enumerate(params)},
            targets=measured,
        ))

    return IterationTable(records)
