"""Data-processing core: inference, cleaning, formulas, filtering."""
from .data_model import (  # noqa: F401
    ChartMeta,
    ColumnMapping,
    ColumnType,
    DashboardConfig,
    DashboardState,
    Dataset,
    FilterState,
)
from .inference import classify, identify_column_types  # noqa: F401
from .cleaning import clean_data, excel_serial_to_iso  # noqa: F401
from .formula import FormulaError, apply_formulas  # noqa: F401
from .operations import aggregate_for_chart, process  # noqa: F401
from .dashboard import (  # noqa: F401
    ConfigurationError,
    add_chart,
    import_records,
    remove_chart,
    toggle_saved,
)
