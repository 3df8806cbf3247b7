"""
# Configuration Management

This module provides the configuration class for campaign analysis runs.

## Components

- **AnalysisConfig**: Selected target, parameters, thresholds and slice length

## Example Usage

```python
from campaign_tools.config import AnalysisConfig

# Create from a dictionary
config = AnalysisConfig.from_dict({
    'target': 'Impurity',
    'parameter': 'T2Celsius',
    'param_pair': ['T2Celsius', 't2min'],
    'sensitivity_threshold': 0.05,
    'stability_threshold': 0.15,
    'iterations': 25
})

# Persist and reload
config.to_json('analysis_config.json')
config = AnalysisConfig.from_json('analysis_config.json')
```
"""

from .analysis import *
