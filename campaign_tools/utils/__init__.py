"""
# Utilities

This module provides utility functions and classes for summary statistics,
synthetic campaigns and results management in the campaign_tools package.

## Components

- **metric**: Population statistics, coefficient of variation, fit quality
  and the optimization `Mode`
- **sampling**: Reproducible synthetic iteration tables
- **results**: The `AnalysisReport` bundle and its serialization

## Example Usage

```python
from campaign_tools.utils.metric import coefficient_of_variation, Mode
from campaign_tools.utils.sampling import synthetic_campaign

table = synthetic_campaign(35, seed=1)
cv = coefficient_of_variation(table.values('Yield'))
```
"""
