"""
# Iteration Table

This module defines the iteration log of an optimization campaign: the closed
sets of parameter and target names, a single immutable trial record, and the
ordered table of records the analysis modules read from.

## Classes

- `Parameter`: Enumeration of the controllable experimental inputs
- `Target`: Enumeration of the measured outcomes, each with its `Mode`
- `IterationRecord`: One trial with its parameter settings and results
- `IterationTable`: Ordered, validated sequence of records
- `ParameterRange`: Observed min/max of a parameter over a table
- `InvalidInputError`: Raised for structurally invalid input

## Example Usage

```python
from campaign_tools.table import IterationTable, Parameter, Target

table = IterationTable.from_csv("optimization.csv")

# Analyse the first 20 iterations only
observed = table.head(20)
temperatures = observed.values(Parameter.T1_CELSIUS)
ranges = observed.param_ranges()
```
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

import numpy as np
import pandas as pd

from .utils.metric import Mode


class InvalidInputError(ValueError):
    """Raised when the iteration log or configuration is structurally invalid.

    Numeric degeneracies (constant columns, zero means) never raise; they
    resolve to documented sentinel values instead.
    """


class Parameter(str, Enum):
    """Controllable experimental inputs recorded for every iteration."""
    T1_CELSIUS = "T1Celsius"
    T1_MIN = "t1min"
    T2_CELSIUS = "T2Celsius"
    T2_MIN = "t2min"
    EQUIVALENTS_REAGENT1 = "EquivalentsReagent1"
    EQUIVALENTS_BASE1 = "EquivalentsBASE1"
    CONCENTRATION_MOLAR = "ConcentrationMolar"

    @staticmethod
    def from_name(name: "str | Parameter") -> "Parameter":
        """
        Look up a parameter by its column name.

        Raises:
            InvalidInputError: If `name` is not a known parameter.
        """
        try:
            return Parameter(name)
        except ValueError:
            raise InvalidInputError(f"Unknown parameter: {name}")


class Target(str, Enum):
    """Measured outcomes of an iteration."""
    YIELD = "Yield"
    IMPURITY = "Impurity"
    IMPURITY_X_RATIO = "ImpurityXRatio"

    @property
    def mode(self) -> Mode:
        """Whether the campaign maximizes or minimizes this target."""
        return Mode.MIN if self is Target.IMPURITY else Mode.MAX

    @staticmethod
    def from_name(name: "str | Target") -> "Target":
        """
        Look up a target by its column name.

        Raises:
            InvalidInputError: If `name` is not a known target.
        """
        try:
            return Target(name)
        except ValueError:
            raise InvalidInputError(f"Unknown target: {name}")


def _column(name: "str | Parameter | Target") -> "Parameter | Target":
    if isinstance(name, (Parameter, Target)):
        return name
    try:
        return Parameter(name)
    except ValueError:
        return Target.from_name(name)


@dataclass(frozen=True)
class ParameterRange:
    """
    Observed extent of a parameter over a table.

    Attributes:
        min (float): Smallest observed value.
        max (float): Largest observed value.

    A constant parameter has `range == 0`; callers treat it as degenerate.
    """
    min: float
    max: float

    @property
    def range(self) -> float:
        return self.max - self.min

    def padded_domain(self, padding: float = 0.1) -> tuple[float, float]:
        """
        Display domain widened by `padding` times the range on each side.

        Returns:
            tuple[float, float]: (min - padding*range, max + padding*range).
        """
        pad = self.range * padding
        return (self.min - pad, self.max + pad)

    @property
    def domain_width(self) -> float:
        lo, hi = self.padded_domain()
        return hi - lo


@dataclass(frozen=True)
class IterationRecord:
    """
    One trial of the campaign.

    Attributes:
        iteration (int): 1-based position of the trial in the campaign.
        parameters (Mapping[Parameter, float]): Parameter settings.
        targets (Mapping[Target, float]): Measured outcomes.

    The mappings are read-only views; a record never changes after creation.
    """
    iteration: int
    parameters: Mapping[Parameter, float] = field(default_factory=dict)
    targets: Mapping[Target, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "parameters", MappingProxyType(
            {Parameter.from_name(k): float(v) for k, v in self.parameters.items()}
        ))
        object.__setattr__(self, "targets", MappingProxyType(
            {Target.from_name(k): float(v) for k, v in self.targets.items()}
        ))

    def __getitem__(self, name: "str | Parameter | Target") -> float:
        key = _column(name)
        if isinstance(key, Parameter):
            return self.parameters[key]
        return self.targets[key]


class IterationTable:
    """
    Ordered, immutable sequence of iteration records.

    The constructor validates the whole log so every analysis can assume a
    well-formed table:

    - at least one record,
    - iteration numbers positive and strictly increasing,
    - every record carries every `Parameter` and every `Target`,
    - all values finite.

    Column arrays are built once per table and handed out as read-only numpy
    arrays.

    Args:
        records (Iterable[IterationRecord]): Records in iteration order.

    Raises:
        InvalidInputError: If any of the invariants above is violated.

    Example:
        ```python
        records = [
            IterationRecord(1, {p: 1.0 for p in Parameter}, {t: 0.5 for t in Target}),
            IterationRecord(2, {p: 2.0 for p in Parameter}, {t: 0.6 for t in Target}),
        ]
        table = IterationTable(records)
        len(table)                          # 2
        table.values(Target.YIELD)          # array([0.5, 0.6])
        ```
    """

    def __init__(self, records: Iterable[IterationRecord]):
        self._records: tuple[IterationRecord, ...] = tuple(records)
        if not self._records:
            raise InvalidInputError("Iteration table is empty.")

        previous = 0
        for record in self._records:
            if record.iteration <= previous:
                raise InvalidInputError(
                    f"Iteration numbers must be positive and strictly increasing; "
                    f"got {record.iteration} after {previous}."
                )
            previous = record.iteration

            missing = [p.value for p in Parameter if p not in record.parameters]
            missing += [t.value for t in Target if t not in record.targets]
            if missing:
                raise InvalidInputError(
                    f"Iteration {record.iteration} is missing columns: {missing}"
                )

        self._columns: dict = {}
        for name in list(Parameter) + list(Target):
            column = np.array([record[name] for record in self._records], dtype=float)
            if not np.all(np.isfinite(column)):
                raise InvalidInputError(f"Column {name.value} contains non-finite values.")
            column.flags.writeable = False
            self._columns[name] = column

    @classmethod
    def from_dataframe(cls, data: pd.DataFrame) -> "IterationTable":
        """
        Build a table from a DataFrame with one row per iteration.

        Row order defines the iteration number (1-based). Columns other than
        the known parameter and target names are ignored.

        Args:
            data (pd.DataFrame): Parsed iteration log.

        Returns:
            IterationTable: The validated table.

        Raises:
            InvalidInputError: If required columns are missing, the frame is
                empty, or a required cell is missing or non-numeric.
        """
        required = [p.value for p in Parameter] + [t.value for t in Target]
        missing = [c for c in required if c not in data.columns]
        if missing:
            raise InvalidInputError(f"Missing required columns: {missing}")
        if data.empty:
            raise InvalidInputError("Iteration table is empty.")

        try:
            numeric = data[required].apply(pd.to_numeric, errors="raise")
        except (ValueError, TypeError) as e:
            raise InvalidInputError(f"Non-numeric value in iteration table: {e}")

        if numeric.isna().any().any():
            bad = numeric.columns[numeric.isna().any()].tolist()
            raise InvalidInputError(f"Missing values in columns: {bad}")

        records = [
            IterationRecord(
                iteration=i + 1,
                parameters={p: row[p.value] for p in Parameter},
                targets={t: row[t.value] for t in Target},
            )
            for i, row in enumerate(numeric.to_dict(orient="records"))
        ]
        return cls(records)

    @classmethod
    def from_csv(cls, infile: str, **kwargs) -> "IterationTable":
        """
        Read a comma-delimited iteration log with one header row.

        Args:
            infile (str): Path to the CSV file.
            **kwargs: Passed through to `pandas.read_csv`.

        Returns:
            IterationTable: The validated table.
        """
        try:
            data = pd.read_csv(infile, **kwargs)
        except pd.errors.EmptyDataError:
            raise InvalidInputError(f"No data in {infile}")
        return cls.from_dataframe(data)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[IterationRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> IterationRecord:
        return self._records[index]

    @property
    def records(self) -> tuple[IterationRecord, ...]:
        return self._records

    @property
    def iterations(self) -> np.ndarray:
        return np.array([r.iteration for r in self._records], dtype=int)

    def head(self, n: int) -> "IterationTable":
        """
        Contiguous prefix of the first `n` iterations.

        `n` larger than the table returns the whole table.

        Raises:
            InvalidInputError: If `n` is smaller than 1.
        """
        if n < 1:
            raise InvalidInputError(f"Slice length must be at least 1, got {n}.")
        if n >= len(self._records):
            return self
        return IterationTable(self._records[:n])

    def values(self, name: "str | Parameter | Target") -> np.ndarray:
        """Column of a parameter or target as a read-only float array."""
        return self._columns[_column(name)]

    def param_range(self, param: "str | Parameter") -> ParameterRange:
        values = self.values(Parameter.from_name(param))
        return ParameterRange(min=float(values.min()), max=float(values.max()))

    def param_ranges(self) -> dict[Parameter, ParameterRange]:
        """Observed range of every parameter over this table."""
        return {p: self.param_range(p) for p in Parameter}

    def to_frame(self) -> pd.DataFrame:
        """
        The table as a DataFrame with an `iteration` column followed by the
        parameter and target columns.
        """
        data = {"iteration": self.iterations}
        data.update({name.value: self._columns[name] for name in list(Parameter) + list(Target)})
        return pd.DataFrame(data)
