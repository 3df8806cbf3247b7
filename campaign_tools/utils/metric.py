"""
# Summary Statistics

This module provides the small set of summary statistics shared by the
analysis modules, together with the optimization mode enumeration used to
decide whether a target is improving.

## Functions

- `population_std`: Population standard deviation (ddof=0)
- `coefficient_of_variation`: Scale-free variability measure
- `goodness_of_fit`: Coefficient of determination of a fitted curve

## Classes

- `Mode`: Enumeration for optimization modes (min/max)

## Example Usage

```python
from campaign_tools.utils.metric import coefficient_of_variation, Mode
import numpy as np

values = np.array([0.81, 0.80, 0.82])
cv = coefficient_of_variation(values)

Mode.from_name('max')  # Yield is maximized
Mode.from_name('min')  # Impurity is minimized
```
"""

from enum import Enum
import numpy as np

from sklearn.metrics import r2_score


def population_std(values) -> float:
    """
    Population standard deviation of a sample.

    Args:
        values (array-like): Sample values. Must not be empty.

    Returns:
        float: sqrt(mean((v - mean(v))²)). A single value has deviation 0.
    """
    return float(np.std(np.asarray(values, dtype=float), ddof=0))


def coefficient_of_variation(values, zero_mean: float = np.inf) -> float:
    """
    Coefficient of variation, std / |mean|.

    Args:
        values (array-like): Sample values. Must not be empty.
        zero_mean (float, optional): Value returned when the mean is exactly
            zero and the spread is not. Defaults to +inf.

    Returns:
        float: The coefficient of variation. A sample with zero mean and zero
            spread has no variability and yields 0.

    Example:
        ```python
        coefficient_of_variation([2.0, 2.0, 2.0])        # 0.0
        coefficient_of_variation([-1.0, 1.0])            # inf
        coefficient_of_variation([-1.0, 1.0], zero_mean=1.0)  # 1.0
        ```
    """
    values = np.asarray(values, dtype=float)
    mean = float(np.mean(values))
    std = population_std(values)
    if mean != 0:
        return std / abs(mean)
    return zero_mean if std > 0 else 0.0


def goodness_of_fit(predictions, targets) -> float:
    """
    Coefficient of determination of fitted values against observations.

    Wraps scikit-learn's `r2_score`. Constant observations give 1.0 for a
    perfect fit and 0.0 otherwise instead of an undefined value.

    Args:
        predictions (array-like): Fitted values.
        targets (array-like): Observed values.

    Returns:
        float: R² of the fit.
    """
    if len(targets) < 2:
        return 1.0 if np.allclose(predictions, targets) else 0.0
    return float(r2_score(targets, predictions))


# Optimization Modes
class Mode(str, Enum):
    """
    Enumeration for optimization modes.

    Defines whether a target should be minimized or maximized by the
    campaign. Used to find the best observed iteration of each target.

    Values:
        MAX: Maximize the target (higher values are better)
        MIN: Minimize the target (lower values are better)
    """
    MAX = "max"
    MIN = "min"

    @staticmethod
    def from_name(name: str) -> "Mode":
        """
        Create a Mode instance from a string name.

        Args:
            name (str): Mode name, case-insensitive. Must be 'min' or 'max'.

        Returns:
            Mode: Corresponding Mode enumeration value.

        Raises:
            ValueError: If name is not 'min' or 'max'.
        """
        try:
            return Mode(name.lower())
        except ValueError:
            raise ValueError(f"Unknown mode: {name}")

    def best(self, values) -> int:
        """Index of the first best value in `values` for this mode."""
        values = np.asarray(values, dtype=float)
        return int(np.argmax(values) if self is Mode.MAX else np.argmin(values))
