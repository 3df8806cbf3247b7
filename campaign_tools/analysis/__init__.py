"""
# Campaign Analysis

This module turns an iteration log into structured descriptions of how the
campaign's targets respond to its parameters. Every function is a pure
function of the table and its arguments.

## Components

- **correlation**: Pearson correlation of each parameter with each target
- **sensitivity**: Binned gradient analysis with safe zones, boundaries and
  stability regions
- **ranking**: Parameters ranked by sensitivity, with control levels
- **stability**: Local stability of each observation over a parameter pair
- **surrogate**: Quadratic surrogate curve with a heuristic uncertainty band
- **progress**: Best observed values and best-so-far trajectories

## Example Usage

```python
from campaign_tools import IterationTable, Parameter, Target
from campaign_tools.analysis import (
    correlate, analyze_sensitivity, local_stability, surrogate_curve
)

table = IterationTable.from_csv("optimization.csv").head(25)

correlations = correlate(table)
sensitivity = analyze_sensitivity(table, Target.YIELD)
for ranked in sensitivity.ranked:
    print(ranked.parameter.value, ranked.mean_sensitivity, ranked.level.value)

points = local_stability(table, Target.YIELD, Parameter.T1_CELSIUS, Parameter.T1_MIN)
curve = surrogate_curve(table, Target.YIELD, Parameter.T1_CELSIUS)
```
"""

from .correlation import *
from .ranking import *
from .sensitivity import *
from .stability import *
from .surrogate import *
from .progress import *
