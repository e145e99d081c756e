"""Smart field mapping between CSV headers and import schema fields."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence

from pipedash.core.config import get_config
from pipedash.core.exceptions import MappingIncompleteError, ValidationError
from pipedash.importing.registry import DEFAULT_SYNONYMS, ImportSchema
from pipedash.schemas.imports import FieldMapping, MappedRow, MappingOverrides, MappingStatus

logger = logging.getLogger(__name__)

EXACT_SCORE = 1.0
CONTAINS_SCORE = 0.8
TOKEN_WEIGHT = 0.5
LISTING_THRESHOLD = 0.5

_WORD_SPLIT = re.compile(r"[_\s-]+")


def _normalise(value: str) -> str:
    return " ".join(value.lower().split())


def calculate_similarity(
    source: str,
    target: str,
    synonyms: Mapping[str, tuple[tuple[str, ...], float]] = DEFAULT_SYNONYMS,
) -> float:
    """Score how well a source header names a target field, in [0, 1].

    Exact match wins outright. Containment and the target's synonym keywords
    both apply and the higher score is kept; shared word tokens are the
    fallback.
    """
    source_norm = _normalise(source)
    target_norm = _normalise(target)
    if not source_norm or not target_norm:
        return 0.0
    if source_norm == target_norm:
        return EXACT_SCORE

    score = 0.0
    if target_norm in source_norm or source_norm in target_norm:
        score = CONTAINS_SCORE
    keywords, confidence = synonyms.get(target, ((), 0.0))
    if any(keyword in source_norm for keyword in keywords):
        score = max(score, confidence)
    if score:
        return score

    source_words = [word for word in _WORD_SPLIT.split(source_norm) if word]
    target_words = [word for word in _WORD_SPLIT.split(target_norm) if word]
    common = [word for word in source_words if word in target_words]
    if common:
        return len(common) / max(len(source_words), len(target_words)) * TOKEN_WEIGHT
    return 0.0


class FieldMapper:
    """Holds the proposed header-to-field mappings for one import."""

    def __init__(
        self,
        source_headers: Sequence[str],
        schema: ImportSchema,
        auto_accept_threshold: float | None = None,
    ) -> None:
        self.source_headers = list(source_headers)
        self.schema = schema
        self.auto_accept_threshold = (
            auto_accept_threshold if auto_accept_threshold is not None else get_config().AUTO_MAP_THRESHOLD
        )
        self.batch_values: dict[str, str] = {}
        self.mappings: list[FieldMapping] = self.generate_mappings()

    def _best_header(self, target_field: str) -> tuple[str, float]:
        best_header, best_score = "", 0.0
        for header in self.source_headers:
            score = calculate_similarity(header, target_field, self.schema.synonyms)
            if score > best_score:
                best_header, best_score = header, score
        return best_header, best_score

    def generate_mappings(self) -> list[FieldMapping]:
        mappings: list[FieldMapping] = []
        for target_field in self.schema.all_fields:
            header, confidence = self._best_header(target_field)
            required = self.schema.is_required(target_field)
            if confidence <= LISTING_THRESHOLD and not required:
                continue
            if header:
                status = MappingStatus.MAPPED
            elif self.schema.auto_fill_capable and not required:
                status = MappingStatus.AUTO_FILLED
            else:
                status = MappingStatus.UNMAPPED
            mappings.append(
                FieldMapping(
                    source_field=header,
                    target_field=target_field,
                    confidence=confidence,
                    required=required,
                    suggested=confidence > self.auto_accept_threshold,
                    status=status,
                )
            )
        logger.info(
            "import.mappings_generated",
            extra={
                "event": "import.mappings_generated",
                "schema": self.schema.id,
                "suggested": sum(1 for mapping in mappings if mapping.suggested),
            },
        )
        return mappings

    def get(self, target_field: str) -> FieldMapping | None:
        for mapping in self.mappings:
            if mapping.target_field == target_field:
                return mapping
        return None

    def _replace(self, updated: FieldMapping) -> None:
        for index, mapping in enumerate(self.mappings):
            if mapping.target_field == updated.target_field:
                self.mappings[index] = updated
                return
        self.mappings.append(updated)

    def _require_target(self, target_field: str) -> None:
        if target_field not in self.schema.all_fields:
            raise ValidationError(f"Unknown target field '{target_field}' for schema {self.schema.id}")

    def update_mapping(self, target_field: str, source_field: str) -> FieldMapping:
        """Manually point a target field at a header, or clear it with ``""``."""
        self._require_target(target_field)
        if source_field and source_field not in self.source_headers:
            raise ValidationError(f"Unknown source column '{source_field}'")

        self.batch_values.pop(target_field, None)
        updated = FieldMapping(
            source_field=source_field,
            target_field=target_field,
            confidence=calculate_similarity(source_field, target_field, self.schema.synonyms) if source_field else 0.0,
            required=self.schema.is_required(target_field),
            suggested=False,
            status=MappingStatus.MAPPED if source_field else MappingStatus.UNMAPPED,
        )
        self._replace(updated)
        return updated

    def apply_batch_value(self, target_field: str, value: str) -> FieldMapping:
        """Use one literal for every row instead of a source column."""
        self._require_target(target_field)
        self.batch_values[target_field] = value
        updated = FieldMapping(
            source_field="",
            target_field=target_field,
            confidence=0.0,
            required=self.schema.is_required(target_field),
            suggested=False,
            status=MappingStatus.AUTO_FILLED,
            batch_value=value,
        )
        self._replace(updated)
        return updated

    def apply_overrides(self, overrides: MappingOverrides) -> None:
        for target_field, source_field in overrides.fields.items():
            self.update_mapping(target_field, source_field)
        for target_field, value in overrides.batch_values.items():
            self.apply_batch_value(target_field, value)

    def missing_required(self) -> list[str]:
        missing = []
        for target_field in self.schema.required_fields:
            mapping = self.get(target_field)
            if mapping is None:
                missing.append(target_field)
            elif mapping.status == MappingStatus.MAPPED and mapping.source_field:
                continue
            elif mapping.status == MappingStatus.AUTO_FILLED and mapping.batch_value is not None:
                continue
            else:
                missing.append(target_field)
        return missing

    def can_proceed(self) -> bool:
        return not self.missing_required()

    def complete(self) -> list[FieldMapping]:
        """Return the confirmed mappings or raise when a required field is open."""
        missing = self.missing_required()
        if missing:
            raise MappingIncompleteError(missing)
        return [mapping.model_copy() for mapping in self.mappings]


def apply_mapping(row: Mapping[str, str], mappings: Sequence[FieldMapping]) -> MappedRow:
    """Reshape one source row onto target fields.

    Batch values replace source cells; columns no mapping consumed are kept
    in ``extras``.
    """
    values: dict[str, str] = {}
    used: set[str] = set()
    for mapping in mappings:
        if mapping.status == MappingStatus.AUTO_FILLED and mapping.batch_value is not None:
            values[mapping.target_field] = mapping.batch_value
        elif mapping.status == MappingStatus.MAPPED and mapping.source_field:
            values[mapping.target_field] = str(row.get(mapping.source_field, "") or "")
            used.add(mapping.source_field)
    extras = {str(key): str(value or "") for key, value in row.items() if key not in used}
    return MappedRow(values=values, extras=extras)
