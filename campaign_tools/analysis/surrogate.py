"""Quadratic surrogate curve of a target over one parameter.

A deterministic stand-in for a surrogate model's mean prediction: a
degree-2 polynomial fitted by ordinary least squares, with a heuristic
uncertainty band that narrows around observed parameter values. The band is
a visual aid only. It is not a calibrated confidence interval and no
probabilistic model is involved.

Fitting solves the normal equations of the polynomial directly through its
moment matrix, in the standardized variable u = (x - mean(x)) / std(x):

    | n     Σu    Σu²  | | c' |   | Σy   |
    | Σu    Σu²   Σu³  | | b' | = | Σuy  |
    | Σu²   Σu³   Σu⁴  | | a' |   | Σu²y |

The solution is then mapped back to coefficients in x.

When fewer than three distinct parameter values are observed, or the moment
matrix is numerically singular, the degree is lowered (linear, then
constant) until the system is solvable, so predictions are always finite.

Typical usage example:

    from campaign_tools.analysis import surrogate_curve

    curve = surrogate_curve(table, Target.YIELD, Parameter.T1_CELSIUS)
    print(curve.fit.a, curve.fit.b, curve.fit.c)
    for point in curve.points:
        print(point.param_value, point.lower_bound, point.mean, point.upper_bound)
"""

from dataclasses import dataclass, asdict
import logging

import numpy as np

from ..table import InvalidInputError, IterationTable, Parameter, ParameterRange, Target
from ..utils.metric import goodness_of_fit


DEFAULT_SAMPLE_POINTS = 101
DOMAIN_PADDING = 0.1
BASE_UNCERTAINTY = 0.1
INFLUENCE_RADIUS = 0.1


@dataclass(frozen=True)
class QuadraticFit:
    """
    Coefficients of y = a·x² + b·x + c.

    Attributes:
        a (float): Quadratic coefficient; 0 for lower-degree fits.
        b (float): Linear coefficient; 0 for a constant fit.
        c (float): Intercept.
        degree (int): Degree actually fitted (0, 1 or 2).
        r2 (float): Coefficient of determination over the fitted data.
    """
    a: float
    b: float
    c: float
    degree: int
    r2: float = float("nan")

    def predict(self, x):
        x = np.asarray(x, dtype=float)
        return self.a * x * x + self.b * x + self.c


@dataclass(frozen=True)
class SurrogatePoint:
    """One sample of the surrogate curve."""
    param_value: float
    mean: float
    upper_bound: float
    lower_bound: float
    uncertainty: float


@dataclass
class SurrogateCurve:
    """Sampled surrogate curve of `target` over `parameter`."""
    target: Target
    parameter: Parameter
    fit: QuadraticFit
    points: list[SurrogatePoint]

    def to_dict(self):
        return {
            "target": self.target.value,
            "parameter": self.parameter.value,
            "fit": asdict(self.fit),
            "points": [asdict(p) for p in self.points],
        }


def _solve_moments(u: np.ndarray, y: np.ndarray, degree: int) -> np.ndarray | None:
    """Least-squares coefficients [c, b, a][:degree + 1] in `u`, or None if singular."""
    powers = np.array([np.sum(u ** k) for k in range(2 * degree + 1)])
    moments = np.array([[powers[i + j] for j in range(degree + 1)] for i in range(degree + 1)])
    rhs = np.array([np.sum(y * u ** k) for k in range(degree + 1)])

    if np.linalg.cond(moments) > 1 / np.finfo(float).eps:
        return None
    try:
        return np.linalg.solve(moments, rhs)
    except np.linalg.LinAlgError:
        return None


def _unscale(coefficients: np.ndarray, centre: float, scale: float) -> tuple[float, float, float]:
    """Map [c', b', a'] of a fit in u = (x - centre) / scale back to (a, b, c) in x."""
    c_u, b_u, a_u = (float(v) for v in np.pad(coefficients, (0, 3 - len(coefficients))))
    a = a_u / scale ** 2
    b = b_u / scale - 2 * a_u * centre / scale ** 2
    c = c_u - b_u * centre / scale + a_u * centre ** 2 / scale ** 2
    return a, b, c


def fit_quadratic(x, y) -> QuadraticFit:
    """
    Least-squares quadratic fit of `y` against `x`.

    The normal equations are solved in u = (x - mean(x)) / std(x); only
    degenerate input fails the conditioning check, whatever the offset of x.

    Args:
        x (array-like): Parameter values.
        y (array-like): Target values, same length as `x`.

    Returns:
        QuadraticFit: Fitted coefficients in `x`. The degree is
            min(2, distinct x - 1) and is lowered further while the moment
            matrix is singular; a degree-0 fit is the mean of `y`.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)

    degree = min(2, len(np.unique(x)) - 1)
    coefficients = None
    if degree > 0:
        centre = float(np.mean(x))
        scale = float(np.std(x))
        u = (x - centre) / scale
    while degree > 0:
        coefficients = _solve_moments(u, y, degree)
        if coefficients is not None:
            break
        logging.warning(f"Degree-{degree} moment matrix is singular; lowering the fit degree.")
        degree -= 1

    if degree == 0:
        a, b, c = 0.0, 0.0, float(np.mean(y))
    else:
        a, b, c = _unscale(coefficients, centre, scale)
    r2 = goodness_of_fit(a * x * x + b * x + c, y)
    return QuadraticFit(a=a, b=b, c=c, degree=degree, r2=r2)


def uncertainty_at(x: float, observed: np.ndarray, param_range: float) -> float:
    """
    Heuristic uncertainty magnitude at `x`.

    Starts at 0.1 and is multiplied by 10·d for every observation whose
    normalized distance d = |x_obs - x| / range is below 0.1. A sample on
    top of an observation therefore has zero uncertainty; observations
    further than 10% of the range leave it unchanged. With a zero range every
    observation coincides with `x`.
    """
    if param_range == 0:
        distances = np.zeros(len(observed))
    else:
        distances = np.abs(np.asarray(observed, dtype=float) - x) / param_range

    uncertainty = BASE_UNCERTAINTY
    for d in distances[distances < INFLUENCE_RADIUS]:
        uncertainty *= d * 10
    return float(uncertainty)


def surrogate_curve(
    table: IterationTable,
    target: Target | str,
    param: Parameter | str,
    sample_points: int = DEFAULT_SAMPLE_POINTS,
    domain: ParameterRange = None,
) -> SurrogateCurve:
    """
    Sample the quadratic surrogate of `target` over `param`.

    Args:
        table (IterationTable): Observations to fit.
        target (Target | str): Fitted target.
        param (Parameter | str): Parameter on the horizontal axis.
        sample_points (int, optional): Number of evenly spaced samples over
            the padded domain, both ends included. Defaults to 101.
        domain (ParameterRange, optional): Range whose padded domain is
            sampled. Defaults to the parameter's range over `table`.

    Returns:
        SurrogateCurve: Fit and sampled points with their bounds.
    """
    if sample_points < 1:
        raise InvalidInputError(f"sample_points must be at least 1, got {sample_points}.")

    target = Target.from_name(target)
    param = Parameter.from_name(param)

    x = table.values(param)
    y = table.values(target)
    observed_range = table.param_range(param)
    if domain is None:
        domain = observed_range

    fit = fit_quadratic(x, y)
    logging.info(
        f"Fitted degree-{fit.degree} surrogate of {target.value} over {param.value} "
        f"(R²={fit.r2:.3f})."
    )

    lo, hi = domain.padded_domain(DOMAIN_PADDING)
    samples = np.linspace(lo, hi, sample_points)
    means = fit.predict(samples)

    points = []
    for sample, mean in zip(samples, means):
        uncertainty = uncertainty_at(sample, x, observed_range.range)
        spread = uncertainty * abs(mean)
        points.append(SurrogatePoint(
            param_value=float(sample),
            mean=float(mean),
            upper_bound=float(mean + spread),
            lower_bound=float(mean - spread),
            uncertainty=uncertainty,
        ))

    return SurrogateCurve(target=target, parameter=param, fit=fit, points=points)
