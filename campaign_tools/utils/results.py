"""
# Results Management

This module provides the data structure that bundles the outputs of one
campaign analysis and serializes them for a presentation layer.

## Classes

- `AnalysisReport`: Correlations, sensitivity breakdown, ranking, local
  stability, surrogate curve and best values of one analysis

## Example Usage

```python
from campaign_tools import CampaignAnalysis

report = CampaignAnalysis(table, config).run()

# Nested, JSON-compatible dictionary
data = report.to_dict()

# Save everything: report.json plus one CSV per tabular result
report.save('/results/iteration_25')
```
"""

from dataclasses import dataclass, asdict
import json
import os

import pandas as pd

from ..table import Parameter, Target
from ..analysis.progress import BestValue
from ..analysis.sensitivity import SensitivityResult
from ..analysis.stability import PointStability
from ..analysis.surrogate import SurrogateCurve


@dataclass
class AnalysisReport:
    """
    Structured results of one analysis of a campaign.

    Attributes:
        iterations (int): Number of leading iterations analysed.
        correlations (dict[Target, dict[Parameter, float]]): Pearson
            correlation of every parameter with every target.
        sensitivity (SensitivityResult): Sensitivity breakdown and ranking of
            the selected target.
        stability (list[PointStability]): Local stability of every analysed
            record over the selected parameter pair.
        surrogate (SurrogateCurve): Surrogate curve of the selected target
            over the selected parameter.
        best (dict[Target, BestValue]): Best observed value of every target.

    Example:
        ```python
        report = CampaignAnalysis(table, config).run()

        top = report.sensitivity.ranked[0]
        print(f"{top.parameter.value}: {top.level.value} sensitivity")

        frames = report.frames()
        frames['surrogate'].plot(x='param_value', y='mean')
        ```
    """
    iterations: int
    correlations: dict[Target, dict[Parameter, float]]
    sensitivity: SensitivityResult
    stability: list[PointStability]
    surrogate: SurrogateCurve
    best: dict[Target, BestValue]

    def to_dict(self):
        """
        Convert the report to a nested dictionary keyed by plain names.

        Returns:
            dict: JSON-compatible representation. Infinite coefficients of
                variation are kept as floats and written as `Infinity`.
        """
        return {
            "iterations": self.iterations,
            "correlations": {
                target.value: {param.value: r for param, r in row.items()}
                for target, row in self.correlations.items()
            },
            "sensitivity": {
                "target": self.sensitivity.target.value,
                "parameters": {
                    param.value: data.to_dict()
                    for param, data in self.sensitivity.parameters.items()
                },
                "ranked": [r.to_dict() for r in self.sensitivity.ranked],
            },
            "stability": [
                {
                    "iteration": p.record.iteration,
                    "level": p.level.value,
                    "neighbours": p.neighbours,
                    "cv": p.cv,
                }
                for p in self.stability
            ],
            "surrogate": self.surrogate.to_dict(),
            "best": {
                target.value: {"value": b.value, "iteration": b.iteration}
                for target, b in self.best.items()
            },
        }

    def to_json(self, outfile: str):
        """
        Save the report to a JSON file.

        Args:
            outfile (str): Path to the output JSON file.

        Note:
            Uses the "+x" mode to create a new file, will fail if file already exists.
        """
        with open(outfile, "+x") as f:
            json.dump(self.to_dict(), f, indent=4)

    def frames(self) -> dict[str, pd.DataFrame]:
        """
        Tabular views of the report.

        Returns:
            dict[str, pd.DataFrame]: Keys `correlations` (targets x
                parameters), `ranking`, `stability`, `surrogate` and `best`.
        """
        correlations = pd.DataFrame({
            target.value: {param.value: r for param, r in row.items()}
            for target, row in self.correlations.items()
        })
        ranking = pd.DataFrame(
            [r.to_dict() for r in self.sensitivity.ranked],
            columns=[
                "parameter", "mean_sensitivity", "max_sensitivity", "safe_zones_count",
                "boundaries_count", "stability_regions_count", "level",
            ],
        )
        stability = pd.DataFrame(
            [
                {"iteration": p.record.iteration, "level": p.level.value,
                 "neighbours": p.neighbours, "cv": p.cv}
                for p in self.stability
            ],
            columns=["iteration", "level", "neighbours", "cv"],
        )
        surrogate = pd.DataFrame([asdict(p) for p in self.surrogate.points])
        best = pd.DataFrame(
            [{"target": t.value, "value": b.value, "iteration": b.iteration} for t, b in self.best.items()]
        )
        return {
            "correlations": correlations,
            "ranking": ranking,
            "stability": stability,
            "surrogate": surrogate,
            "best": best,
        }

    def save(self, directory: str):
        """
        Save the report to `directory`.

        Writes `report.json` and one CSV file per entry of `frames()`. The
        directory is created if needed.

        Args:
            directory (str): Output directory.

        Note:
            - `report.json` must not exist yet; if it does, nothing is written
            - Existing CSV files with the same names will be overwritten
        """
        os.makedirs(directory, exist_ok=True)
        self.to_json(os.path.join(directory, "report.json"))
        for name, data in self.frames().items():
            data.to_csv(os.path.join(directory, f"{name}.csv"), index=name == "correlations")
