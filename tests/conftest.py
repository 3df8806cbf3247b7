import pytest

from campaign_tools.table import IterationRecord, IterationTable, Parameter, Target


def build_table(params: dict = None, targets: dict = None, n: int = None) -> IterationTable:
    """Table whose unspecified columns are constant 1.0."""
    params = {Parameter(k): v for k, v in (params or {}).items()}
    targets = {Target(k): v for k, v in (targets or {}).items()}
    if n is None:
        n = len(next(iter({**params, **targets}.values())))

    records = [
        IterationRecord(
            iteration=i + 1,
            parameters={p: params[p][i] if p in params else 1.0 for p in Parameter},
            targets={t: targets[t][i] if t in targets else 1.0 for t in Target},
        )
        for i in range(n)
    ]
    return IterationTable(records)


@pytest.fixture
def make_table():
    return build_table
