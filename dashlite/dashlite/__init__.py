"""DashLite package root.

Exposes high-level API surface for convenience.
"""
from .charts import make_chart  # noqa: F401
from .analysis.stats import MetricStats, calculate_metric_stats  # noqa: F401
from .core import (  # noqa: F401
    ColumnType,
    ConfigurationError,
    DashboardConfig,
    DashboardState,
    FilterState,
    FormulaError,
    add_chart,
    apply_formulas,
    classify,
    clean_data,
    import_records,
    process,
)
