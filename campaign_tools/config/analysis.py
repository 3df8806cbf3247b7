"""Configuration for a campaign analysis run.

This module holds the selections a caller makes before analysing a
campaign: which target to study, which parameter to fit a surrogate over,
which parameter pair to inspect for local stability, the classification
thresholds and how many leading iterations to include. It supports
serialization to and from JSON format for easy persistence and loading of
analysis settings.

Typical usage example:

    from campaign_tools.config import AnalysisConfig

    config = AnalysisConfig.from_json("analysis_config.json")
    config.iterations = 20
    config.to_json("first_20.json")
"""

from dataclasses import dataclass, asdict, field
import json

from ..table import InvalidInputError, Parameter, Target


@dataclass
class AnalysisConfig:
    """Selections and thresholds for one analysis of a campaign.

    Every field is passed explicitly to the analysis functions; nothing is
    read from shared state. Names may be given as strings and are converted
    to the `Target` and `Parameter` enumerations on construction.

    Attributes:
        target (Target): Target whose response is analysed. Defaults to
            Yield.
        parameter (Parameter): Parameter the surrogate curve is fitted over.
            Defaults to T1Celsius.
        param_pair (tuple[Parameter, Parameter]): Axes of the local stability
            analysis. Defaults to (T1Celsius, t1min).
        sensitivity_threshold (float): Absolute normalized gradient at or
            above which a segment is a sensitivity boundary. Defaults to 0.05.
        stability_threshold (float): Averaged coefficient of variation below
            which a segment is a stability region. Defaults to 0.15.
        iterations (int | None): Number of leading iterations to analyse.
            None analyses the whole campaign.
        sample_points (int): Number of samples on the surrogate curve.
            Defaults to 101.

    Raises:
        InvalidInputError: If a name is unknown, a threshold is negative, the
            pair repeats a parameter, or a count is smaller than 1.

    Example:
        ```python
        config = AnalysisConfig(
            target="Impurity",
            parameter="T2Celsius",
            param_pair=("T2Celsius", "t2min"),
            sensitivity_threshold=0.1,
            iterations=30,
        )
        ```
    """

    target: Target = Target.YIELD
    parameter: Parameter = Parameter.T1_CELSIUS
    param_pair: tuple[Parameter, Parameter] = field(
        default=(Parameter.T1_CELSIUS, Parameter.T1_MIN)
    )
    sensitivity_threshold: float = 0.05
    stability_threshold: float = 0.15
    iterations: int | None = None
    sample_points: int = 101

    def __post_init__(self):
        self.target = Target.from_name(self.target)
        self.parameter = Parameter.from_name(self.parameter)

        if len(self.param_pair) != 2:
            raise InvalidInputError(f"param_pair needs exactly two parameters, got {self.param_pair}")
        self.param_pair = tuple(Parameter.from_name(p) for p in self.param_pair)
        if self.param_pair[0] is self.param_pair[1]:
            raise InvalidInputError(f"param_pair repeats {self.param_pair[0].value}")

        if self.sensitivity_threshold < 0 or self.stability_threshold < 0:
            raise InvalidInputError("Thresholds must be non-negative.")
        if self.iterations is not None and self.iterations < 1:
            raise InvalidInputError(f"iterations must be at least 1, got {self.iterations}")
        if self.sample_points < 1:
            raise InvalidInputError(f"sample_points must be at least 1, got {self.sample_points}")

    @classmethod
    def from_dict(cls, data: dict):
        """Create an AnalysisConfig from a dictionary of field values.

        Args:
            data (dict): Field names mapped to values. Missing fields take
                their defaults; enumeration fields may be plain strings.

        Returns:
            AnalysisConfig: The validated configuration.
        """
        data = dict(data)
        if "param_pair" in data:
            data["param_pair"] = tuple(data["param_pair"])
        return cls(**data)

    def to_dict(self):
        """Convert the configuration to a JSON-compatible dictionary."""
        data = asdict(self)
        data["target"] = self.target.value
        data["parameter"] = self.parameter.value
        data["param_pair"] = [p.value for p in self.param_pair]
        return data

    @classmethod
    def from_json(cls, infile: str):
        """Create an AnalysisConfig instance from a JSON file.

        Args:
            infile (str): Path to the JSON file containing the configuration
                data.

        Returns:
            AnalysisConfig: A new AnalysisConfig instance initialized with
                data from the file.

        Raises:
            FileNotFoundError: If the specified file does not exist.
            json.JSONDecodeError: If the file contains invalid JSON.
            TypeError: If the file contains unknown configuration keys.
            InvalidInputError: If a value fails validation.
        """
        with open(infile, "r") as f:
            data = json.load(f)

        return cls.from_dict(data)

    def to_json(self, outfile: str):
        """Serialize the configuration to a JSON file.

        Args:
            outfile (str): Path to the output file where the JSON will be saved.

        Raises:
            FileExistsError: If the specified file already exists.

        Note:
            The file is opened in exclusive creation mode ("+x") to prevent
            accidental overwrites.
        """
        with open(outfile, "+x") as f:
            json.dump(self.to_dict(), f, indent=4)
