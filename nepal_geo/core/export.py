"""Render records as JSON or CSV text."""
import json
from typing import Any, Dict, List, Sequence
import pandas as pd
from nepal_geo.core.models import ExportResult
from nepal_geo.utils.logging import log_structured


SUPPORTED_FORMATS = ("json", "csv")


def export_records(
    records: Sequence[Dict[str, Any]],
    fmt: str = "json",
    csv_columns: Dict[str, str] = None
) -> ExportResult:
    """
    Export a list of dictionaries.

    Args:
        records: Rows to export
        fmt: "json" or "csv" (case-insensitive)
        csv_columns: Ordered mapping of record key -> CSV header; all record
            keys are written when omitted

    Returns:
        ExportResult with the rendered content, or with ``error`` set for an
        unsupported format
    """
    fmt_name = fmt.lower() if isinstance(fmt, str) else str(fmt)

    if fmt_name == "json":
        return ExportResult(format=fmt_name, content=json.dumps(list(records), indent=2, ensure_ascii=False))

    if fmt_name == "csv":
        df = pd.DataFrame(list(records))
        if csv_columns:
            df = df.reindex(columns=list(csv_columns)).rename(columns=csv_columns)
        return ExportResult(format=fmt_name, content=df.to_csv(index=False))

    log_structured("warning", "Unsupported export format", format=fmt_name)
    return ExportResult(
        format=fmt_name,
        error=f"Unsupported export format: {fmt} (expected one of {', '.join(SUPPORTED_FORMATS)})",
    )


def flatten_rows(items: Sequence[Any]) -> List[Dict[str, Any]]:
    """Serialize model objects through their ``to_dict``."""
    return [item.to_dict() if hasattr(item, "to_dict") else dict(item) for item in items]
