"""Column names and labels shared across nicuvitals.

Single source of truth so the loader, reshaper and plotting layer agree on
naming.
"""

TIME_COL = "TIME"
HR_COL = "HR"
SPO2_COL = "SPO2.PCT"

# Columns every vital-signs table must provide.
REQUIRED_COLUMNS: tuple[str, ...] = (TIME_COL, HR_COL, SPO2_COL)

# Categorical column added by long_format.combine().
PERIOD_COL = "period"

# Human-readable axis labels for known columns.
COLUMN_LABELS: dict[str, str] = {
    TIME_COL: "Time (s)",
    HR_COL: "Heart rate (beats/min)",
    SPO2_COL: "SpO2 (%)",
}

# Post-menstrual age labels used in the workshop.
PMA_24_WEEKS = "24 weeks"
PMA_34_WEEKS = "34 weeks"
PMA_64_WEEKS = "64 weeks"


def column_label(col: str) -> str:
    """Axis label for a column, falling back to the column name."""
    return COLUMN_LABELS.get(col, col)
