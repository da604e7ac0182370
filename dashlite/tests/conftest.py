import sys
from pathlib import Path

import pandas as pd
import pytest

# Add both the project directory and its parent to sys.path to resolve the nested package
TEST_FILE = Path(__file__).resolve()
PROJECT_DIR = TEST_FILE.parents[1]  # directory containing 'dashlite' package dir
OUTER_DIR = PROJECT_DIR.parent
for p in (PROJECT_DIR, OUTER_DIR):
    sp = str(p)
    if sp not in sys.path:
        sys.path.insert(0, sp)


@pytest.fixture
def raw_sales():
    return pd.DataFrame({
        'date': ['2024-01-01', '2024-01-02', '2024-01-03', '2024-01-04'],
        'region': ['North', 'South', 'North', None],
        'revenue': [100, 250, 175, 50],
        'cost': ['40', '100', '', 'n/a'],
    })
