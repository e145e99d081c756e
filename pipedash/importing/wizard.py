"""Step-by-step CSV import workflow."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from pipedash.core.config import Config, get_config
from pipedash.core.exceptions import InvalidTransitionError, ValidationError
from pipedash.importing.field_mapper import FieldMapper
from pipedash.importing.parser import ParsedCsv, parse_csv, preview_csv, validate_upload
from pipedash.importing.registry import ImportSchema, get_schema
from pipedash.importing.validation import validate_rows
from pipedash.orchestration.state_machine import StateMachine
from pipedash.schemas.imports import CsvPreview, FieldMapping, ImportResult, ValidationReport

if TYPE_CHECKING:
    from pipedash.services.import_service import ImportService

logger = logging.getLogger(__name__)


class WizardState(str, enum.Enum):
    FILE_SELECTED = "file-selected"
    PREVIEWED = "previewed"
    VALIDATED = "validated"
    MAPPED = "mapped"
    CONFIRMED = "confirmed"
    IMPORTED = "imported"


WIZARD_STATES = [state.value for state in WizardState]
WIZARD_MACHINE = StateMachine.linear(WIZARD_STATES, allow_back=True)


class ImportWizard:
    """Drive one uploaded file from selection to import.

    Steps must run in order. ``go_back`` re-enters an earlier step and drops
    everything computed after it.
    """

    def __init__(
        self,
        filename: str,
        content: bytes,
        content_type: str | None = None,
        schema_id: str | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config or get_config()
        self.filename = filename
        self.text = validate_upload(filename, content, content_type, max_bytes=self.config.import_max_bytes)
        if schema_id is not None:
            get_schema(schema_id)
        self.schema_id = schema_id
        self.state = WizardState.FILE_SELECTED.value

        self.preview_data: CsvPreview | None = None
        self.parsed: ParsedCsv | None = None
        self.report: ValidationReport | None = None
        self.mapper: FieldMapper | None = None
        self.confirmed_mappings: list[FieldMapping] | None = None
        self.result: ImportResult | None = None

    @property
    def schema(self) -> ImportSchema:
        if self.schema_id is None:
            raise ValidationError("No import schema selected and none could be detected from the headers")
        return get_schema(self.schema_id)

    def _advance(self, target: WizardState) -> None:
        WIZARD_MACHINE.assert_transition(self.state, target.value)
        logger.info(
            "import.wizard_step",
            extra={"event": "import.wizard_step", "from_state": self.state, "to_state": target.value},
        )
        self.state = target.value

    def select_schema(self, schema_id: str) -> None:
        get_schema(schema_id)
        self.schema_id = schema_id
        if WIZARD_STATES.index(self.state) > WIZARD_STATES.index(WizardState.PREVIEWED.value):
            self.go_back(WizardState.PREVIEWED)

    def preview(self, max_rows: int | None = None) -> CsvPreview:
        WIZARD_MACHINE.assert_transition(self.state, WizardState.PREVIEWED.value)
        preview = preview_csv(self.text, max_rows if max_rows is not None else self.config.IMPORT_PREVIEW_ROWS)
        if self.schema_id is None:
            self.schema_id = preview.detected_schema
        self.preview_data = preview
        self._advance(WizardState.PREVIEWED)
        return preview

    def validate(self) -> ValidationReport:
        WIZARD_MACHINE.assert_transition(self.state, WizardState.VALIDATED.value)
        schema = self.schema
        parsed = parse_csv(self.text)
        report = validate_rows(parsed.headers, parsed.rows, schema)
        self.parsed = parsed
        self.report = report
        self._advance(WizardState.VALIDATED)
        return report

    def map_fields(self) -> FieldMapper:
        WIZARD_MACHINE.assert_transition(self.state, WizardState.MAPPED.value)
        if self.report is None or self.parsed is None or not self.report.can_continue:
            raise ValidationError("At least half of the rows must contain usable data before mapping")
        self.mapper = FieldMapper(self.parsed.headers, self.schema, self.config.AUTO_MAP_THRESHOLD)
        self._advance(WizardState.MAPPED)
        return self.mapper

    def confirm(self) -> list[FieldMapping]:
        WIZARD_MACHINE.assert_transition(self.state, WizardState.CONFIRMED.value)
        self.confirmed_mappings = self.mapper.complete()
        self._advance(WizardState.CONFIRMED)
        return self.confirmed_mappings

    def execute(self, service: ImportService) -> ImportResult:
        WIZARD_MACHINE.assert_transition(self.state, WizardState.IMPORTED.value)
        self.result = service.execute(self.schema, self.parsed.rows, self.confirmed_mappings)
        self._advance(WizardState.IMPORTED)
        return self.result

    def go_back(self, target: WizardState | str) -> None:
        target_state = WizardState(target).value
        if WIZARD_STATES.index(target_state) >= WIZARD_STATES.index(self.state):
            raise InvalidTransitionError(f"Transition not allowed: {self.state} -> {target_state}")
        WIZARD_MACHINE.assert_transition(self.state, target_state)
        self.state = target_state
        self._discard_after(target_state)

    def _discard_after(self, state: str) -> None:
        position = WIZARD_STATES.index(state)
        if position < WIZARD_STATES.index(WizardState.PREVIEWED.value):
            self.preview_data = None
        if position < WIZARD_STATES.index(WizardState.VALIDATED.value):
            self.parsed = None
            self.report = None
        if position < WIZARD_STATES.index(WizardState.MAPPED.value):
            self.mapper = None
        if position < WIZARD_STATES.index(WizardState.CONFIRMED.value):
            self.confirmed_mappings = None
        if position < WIZARD_STATES.index(WizardState.IMPORTED.value):
            self.result = None
