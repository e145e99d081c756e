"""Pre-mapping validation of parsed CSV rows against a target schema."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from pipedash.importing.registry import ImportSchema
from pipedash.schemas.imports import DuplicateStrategy, ValidationReport, ValidationSummary

# Header keywords that also satisfy a required field during coverage checks.
HEADER_HINTS: dict[str, tuple[str, ...]] = {
    "name": ("company", "client", "organization"),
    "client_name": ("client", "company"),
}

VALUE_FALLBACKS: dict[str, tuple[str, ...]] = {
    "name": ("company", "organization", "business", "client"),
}

DUPLICATE_KEYS = ("unique_id", "id", "name", "client_name", "company_name")
USABLE_ROW_RATIO = 0.5


def header_matches(header: str, target_field: str) -> bool:
    lowered = header.strip().lower()
    target = target_field.lower()
    if not lowered:
        return False
    if lowered == target or target in lowered or lowered in target:
        return True
    return any(hint in lowered for hint in HEADER_HINTS.get(target_field, ()))


def covering_headers(headers: Sequence[str], target_field: str) -> list[str]:
    return [header for header in headers if header_matches(header, target_field)]


def _row_value(row: Mapping[str, str], headers: Sequence[str], target_field: str) -> str:
    candidates = [target_field]
    candidates.extend(
        header
        for header in headers
        if target_field.lower() in header.lower() or header.lower() in target_field.lower()
    )
    candidates.extend(
        header
        for header in headers
        if any(keyword in header.lower() for keyword in VALUE_FALLBACKS.get(target_field, ()))
    )
    for candidate in candidates:
        value = str(row.get(candidate, "") or "").strip()
        if value:
            return value
    return ""


def _duplicate_key(row: Mapping[str, str]) -> str | None:
    lowered = {str(key).strip().lower(): value for key, value in row.items()}
    for key in DUPLICATE_KEYS:
        value = str(lowered.get(key, "") or "").strip()
        if value:
            return value.lower()
    return None


def validate_rows(headers: Sequence[str], rows: Sequence[Mapping[str, str]], schema: ImportSchema) -> ValidationReport:
    """Check required-column coverage, per-row required values and duplicates.

    Missing columns are reported as warnings because the mapping step can
    still resolve them with a batch value. A row counts as usable when every
    covered required field has a value (or, with no covered field, when the
    row has any value at all).
    """
    errors: list[str] = []
    warnings: list[str] = []
    missing_columns = [field for field in schema.required_fields if not covering_headers(headers, field)]
    covered = [field for field in schema.required_fields if field not in missing_columns]

    if missing_columns:
        warnings.append(
            f"Missing required columns: {', '.join(missing_columns)}. Map them manually or provide a batch value."
        )

    seen: set[str] = set()
    valid_rows = 0
    duplicates = 0
    missing_fields = 0
    action = "skipped" if schema.duplicate_strategy == DuplicateStrategy.SKIP else "updated"

    for index, row in enumerate(rows):
        row_number = index + 2
        row_ok = True
        for field in covered:
            if not _row_value(row, headers, field):
                errors.append(f"Row {row_number}: Missing required field '{field}'")
                missing_fields += 1
                row_ok = False
        if not covered and not any(str(value or "").strip() for value in row.values()):
            row_ok = False

        key = _duplicate_key(row)
        if key is not None:
            if key in seen:
                duplicates += 1
                warnings.append(f"Row {row_number}: Duplicate entry '{key}' (will be {action})")
            else:
                seen.add(key)

        if row_ok:
            valid_rows += 1

    total_rows = len(rows)
    return ValidationReport(
        is_valid=not errors and not missing_columns and valid_rows > 0,
        can_continue=total_rows > 0 and valid_rows >= total_rows * USABLE_ROW_RATIO,
        errors=errors,
        warnings=warnings,
        missing_columns=missing_columns,
        summary=ValidationSummary(
            total_rows=total_rows,
            valid_rows=valid_rows,
            duplicates=duplicates,
            missing_fields=missing_fields,
        ),
    )
