import logging
from typing import Any, Dict, List
import pandas as pd

logger = logging.getLogger(__name__)

CSV_SUFFIXES = (".csv", ".txt")
EXCEL_SUFFIXES = (".xlsx", ".xls")


def _read_csv(uploaded_file) -> pd.DataFrame:
    return pd.read_csv(uploaded_file, skip_blank_lines=True)


def df_from_upload(uploaded_file):
    """Parse an uploaded CSV / spreadsheet into a raw DataFrame.

    Returns ``None`` when nothing was uploaded or the file cannot be parsed.
    """
    if uploaded_file is None:
        return None
    name = getattr(uploaded_file, "name", str(uploaded_file)).lower()
    # Reset pointer (Streamlit UploadedFile persists across reruns)
    if hasattr(uploaded_file, 'seek'):
        uploaded_file.seek(0)
    try:
        if name.endswith(EXCEL_SUFFIXES):
            df = pd.read_excel(uploaded_file, sheet_name=0)
        else:
            df = _read_csv(uploaded_file)
    except Exception:
        logger.warning("Could not parse upload %s", name, exc_info=True)
        return None
    df = df.dropna(how="all")
    df.columns = [str(c) for c in df.columns]
    return df.reset_index(drop=True)


def records_from_frame(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Raw records with missing cells as ``None``."""
    return [
        {k: (None if _is_nan(v) else v) for k, v in row.items()}
        for row in df.to_dict(orient="records")
    ]


def _is_nan(value) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
