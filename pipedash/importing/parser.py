"""Upload gate and CSV parsing for imports."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field

import pandas as pd

from pipedash.core.config import get_config
from pipedash.core.exceptions import FileRejectedError, ValidationError
from pipedash.importing.registry import detect_schema
from pipedash.schemas.imports import CsvPreview

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {"text/csv", "application/vnd.ms-excel"}


@dataclass
class ParsedCsv:
    headers: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def validate_upload(
    filename: str,
    content: bytes,
    content_type: str | None = None,
    max_bytes: int | None = None,
) -> str:
    """Reject oversized, non-CSV or non-UTF-8 uploads and return the decoded text."""
    limit = max_bytes if max_bytes is not None else get_config().import_max_bytes
    if len(content) > limit:
        logger.warning("import.file_rejected", extra={"event": "import.file_rejected", "reason": "size", "upload_name": filename})
        raise FileRejectedError(f"File size exceeds {limit // (1024 * 1024)}MB limit", reason="size")

    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if not (filename or "").lower().endswith(".csv") and media_type not in ALLOWED_CONTENT_TYPES:
        logger.warning("import.file_rejected", extra={"event": "import.file_rejected", "reason": "format", "upload_name": filename})
        raise FileRejectedError("Unsupported file format. Please upload a CSV file.", reason="format")

    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        logger.warning("import.file_rejected", extra={"event": "import.file_rejected", "reason": "encoding", "upload_name": filename})
        raise FileRejectedError("File encoding issue detected. Please save the file as UTF-8.", reason="encoding") from exc


def _unique_headers(cells: list[str]) -> list[str]:
    seen: dict[str, int] = {}
    headers = []
    for cell in cells:
        name = cell.strip()
        count = seen.get(name, 0)
        seen[name] = count + 1
        headers.append(f"{name}.{count}" if count else name)
    return headers


def parse_csv(text: str) -> ParsedCsv:
    """Parse CSV text into header names and row dictionaries of strings.

    Quoted fields and embedded commas follow the standard CSV grammar.
    Fully blank rows are dropped and header names are trimmed. A row with
    more cells than the header is rejected rather than truncated.
    """
    if not text.strip():
        return ParsedCsv()
    try:
        # The header is read as a data row so that wider rows fail tokenizing.
        frame = pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return ParsedCsv()
    except pd.errors.ParserError as exc:
        logger.warning("import.parse_failed", extra={"event": "import.parse_failed", "reason": str(exc)})
        raise ValidationError(f"Could not parse CSV: {exc}") from exc

    frame = frame.fillna("")
    headers = _unique_headers([str(cell) for cell in frame.iloc[0]])
    frame = frame.iloc[1:]
    frame.columns = headers
    if not frame.empty:
        frame = frame[~frame.apply(lambda row: all(str(cell).strip() == "" for cell in row), axis=1)]
    return ParsedCsv(headers=headers, rows=frame.to_dict(orient="records"))


def preview_csv(text: str, max_rows: int | None = None) -> CsvPreview:
    """Headers plus the first ``max_rows`` rows of the file."""
    limit = max_rows if max_rows is not None else get_config().IMPORT_PREVIEW_ROWS
    parsed = parse_csv(text)
    return CsvPreview(
        headers=parsed.headers,
        rows=parsed.rows[:limit],
        total_rows=len(parsed.rows),
        detected_schema=detect_schema(parsed.headers),
    )
