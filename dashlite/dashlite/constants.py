"""Central constants & enumerations."""

# Sentinel values substituted for missing or unparseable cells
UNKNOWN = "Unknown"
UNKNOWN_DATE = "Unknown date"

# X-axis choice that switches charts into grouped summary mode
SUMMARY = "SUMMARY"
GLOBAL_GROUP = "Global"
UNGROUPED = "Ungrouped"

# Spreadsheet date serial handling
EXCEL_EPOCH_OFFSET = 25569  # days between 1899-12-30 and 1970-01-01
SERIAL_DATE_MIN = 30000
SERIAL_DATE_MAX = 60000

FORMULA_DECIMALS = 2

CHART_TYPES = {
    "metric_card": "Metric card",
    "line": "Line",
    "bar": "Bar",
    "pie": "Donut",
    "area": "Area",
    "funnel": "Funnel",
    "table": "Detail table",
    "waterfall": "Waterfall",
    "ranking": "Ranking",
    "boxplot": "Box plot",
}

STRUCTURE_KEYWORDS = ("share", "contribution", "占比", "贡献")
RANKING_KEYWORDS = ("rank", "排名", "TOP")

PALETTES = {
    "Neon": [
        "#00f2ff", "#f0abfc", "#a855f7", "#4ade80", "#fb923c", "#3b82f6"
    ],
}

TABLE_ROW_LIMIT = 50
PIE_SLICE_LIMIT = 10
FUNNEL_STAGE_LIMIT = 6

__all__ = [
    "UNKNOWN",
    "UNKNOWN_DATE",
    "SUMMARY",
    "GLOBAL_GROUP",
    "UNGROUPED",
    "EXCEL_EPOCH_OFFSET",
    "SERIAL_DATE_MIN",
    "SERIAL_DATE_MAX",
    "FORMULA_DECIMALS",
    "CHART_TYPES",
    "STRUCTURE_KEYWORDS",
    "RANKING_KEYWORDS",
    "PALETTES",
    "TABLE_ROW_LIMIT",
    "PIE_SLICE_LIMIT",
    "FUNNEL_STAGE_LIMIT",
]
