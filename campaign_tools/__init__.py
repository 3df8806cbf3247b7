"""
# Campaign Tools

A toolkit for analysing the iteration log of an experiment-optimization
campaign, providing functionality for:

- **Iteration Tables**: Validated, immutable logs of parameter settings and measured targets
- **Correlation**: Linear correlation of every parameter with every target
- **Sensitivity Analysis**: Binned gradients with safe zones, sensitivity boundaries and stability regions
- **Parameter Ranking**: Parameters ordered by sensitivity with control levels
- **Local Stability**: Neighbourhood variability over pairs of parameters
- **Surrogate Curves**: Quadratic fits with a heuristic uncertainty band
- **Configuration Management**: JSON-backed analysis settings
- **Results Analysis**: Report bundles serializable to JSON and CSV

## Main Components

- `IterationTable`: The campaign log and its validation
- `CampaignAnalysis`: Runs every analysis for one configuration
- `analysis`: The individual analysis functions
- `config`: Configuration management
- `utils`: Statistics, synthetic campaigns and results handling

## Example Usage

```python
from campaign_tools import CampaignAnalysis, IterationTable
from campaign_tools.config import AnalysisConfig

# Load the campaign
table = IterationTable.from_csv("optimization.csv")

# Analyse the first 25 iterations for Yield
config = AnalysisConfig(target="Yield", iterations=25)
report = CampaignAnalysis(table, config).run()

for ranked in report.sensitivity.ranked:
    print(ranked.parameter.value, ranked.level.value)
```
"""

from .table import *
from .campaign import *
