"""
# Campaign Analysis Runner

This module ties the analysis functions to one `AnalysisConfig`: it slices
the campaign to the configured number of iterations and runs every analysis
with the configured selections.

## Classes

- `CampaignAnalysis`: Runs the analyses of one configuration over a campaign

## Example Usage

```python
from campaign_tools import CampaignAnalysis, IterationTable
from campaign_tools.config import AnalysisConfig

table = IterationTable.from_csv("optimization.csv")
config = AnalysisConfig(target="Yield", iterations=20)

analysis = CampaignAnalysis(table, config)
report = analysis.run()
report.save("results/iteration_20")
```
"""

import logging

from .config import AnalysisConfig
from .table import IterationTable, Parameter, Target
from .analysis.correlation import correlate
from .analysis.sensitivity import SensitivityResult, analyze_sensitivity
from .analysis.stability import PointStability, local_stability
from .analysis.surrogate import SurrogateCurve, surrogate_curve
from .analysis.progress import BestValue, best_values
from .utils.results import AnalysisReport


class CampaignAnalysis:
    """
    Analyses of one campaign under one configuration.

    The table is sliced to the leading `config.iterations` records. Binning
    ranges for the sensitivity analysis and the neighbourhood domains for
    local stability come from the full campaign, so successive prefixes are
    analysed on the same grid. Correlations, the surrogate fit and the best
    values use the slice only.

    Each method recomputes its result from the table and configuration; the
    instance holds no results between calls.

    Attributes:
        campaign (IterationTable): The full iteration log.
        config (AnalysisConfig): Selections and thresholds.
        table (IterationTable): The analysed prefix of `campaign`.

    Example:
        ```python
        analysis = CampaignAnalysis(table, AnalysisConfig(iterations=15))
        ranked = analysis.sensitivity().ranked
        ```
    """

    def __init__(self, campaign: IterationTable, config: AnalysisConfig = None):
        """
        Initialize the CampaignAnalysis with a campaign and configuration.

        Args:
            campaign (IterationTable): The full iteration log.
            config (AnalysisConfig, optional): Selections and thresholds.
                Defaults to `AnalysisConfig()`.
        """
        self.campaign = campaign
        self.config = config or AnalysisConfig()
        if self.config.iterations is None:
            self.table = campaign
        else:
            self.table = campaign.head(self.config.iterations)

    def correlations(self) -> dict[Target, dict[Parameter, float]]:
        return correlate(self.table)

    def sensitivity(self) -> SensitivityResult:
        return analyze_sensitivity(
            self.table,
            self.config.target,
            param_ranges=self.campaign.param_ranges(),
            sensitivity_threshold=self.config.sensitivity_threshold,
            stability_threshold=self.config.stability_threshold,
        )

    def local_stability(self) -> list[PointStability]:
        param_a, param_b = self.config.param_pair
        return local_stability(
            self.table,
            self.config.target,
            param_a,
            param_b,
            domains=self.campaign.param_ranges(),
        )

    def surrogate(self) -> SurrogateCurve:
        return surrogate_curve(
            self.table,
            self.config.target,
            self.config.parameter,
            sample_points=self.config.sample_points,
        )

    def best_values(self) -> dict[Target, BestValue]:
        return best_values(self.table)

    def run(self) -> AnalysisReport:
        """
        Run every analysis and bundle the results.

        Returns:
            AnalysisReport: Correlations, sensitivity and ranking, local
                stability, surrogate curve and best values.
        """
        logging.info(
            f"Analyzing {len(self.table)} of {len(self.campaign)} iterations "
            f"for target {self.config.target.value}."
        )
        return AnalysisReport(
            iterations=len(self.table),
            correlations=self.correlations(),
            sensitivity=self.sensitivity(),
            stability=self.local_stability(),
            surrogate=self.surrogate(),
            best=self.best_values(),
        )
