from __future__ import annotations

import pytest

from pipedash.core.exceptions import (
    FileRejectedError,
    InvalidTransitionError,
    MappingIncompleteError,
    NotFoundError,
    ValidationError,
)
from pipedash.importing.wizard import ImportWizard, WizardState
from pipedash.models import Account
from pipedash.services.import_service import ImportService

CLIENTS_CSV = b"name,legal_name,industry\nAcme,Acme Inc,Technology\nBeta,Beta LLC,Retail\n"


def test_full_wizard_run_imports_rows(db_session):
    wizard = ImportWizard("clients.csv", CLIENTS_CSV)
    preview = wizard.preview()
    assert preview.detected_schema == "clients"
    assert wizard.schema.id == "clients"

    report = wizard.validate()
    assert report.is_valid is True

    mapper = wizard.map_fields()
    assert mapper.get("name").source_field == "name"
    wizard.confirm()
    result = wizard.execute(ImportService(db_session))

    assert wizard.state == WizardState.IMPORTED.value
    assert result.imported == 2
    assert result.success is True
    assert sorted(account.name for account in db_session.query(Account).all()) == ["Acme", "Beta"]


def test_steps_must_run_in_order():
    wizard = ImportWizard("clients.csv", CLIENTS_CSV)
    with pytest.raises(InvalidTransitionError):
        wizard.validate()
    wizard.preview()
    with pytest.raises(InvalidTransitionError):
        wizard.map_fields()
    assert wizard.state == WizardState.PREVIEWED.value


def test_go_back_discards_later_state():
    wizard = ImportWizard("clients.csv", CLIENTS_CSV)
    wizard.preview()
    wizard.validate()
    wizard.map_fields()

    wizard.go_back(WizardState.PREVIEWED)
    assert wizard.state == WizardState.PREVIEWED.value
    assert wizard.preview_data is not None
    assert wizard.report is None
    assert wizard.mapper is None

    wizard.validate()
    assert wizard.state == WizardState.VALIDATED.value


def test_go_back_cannot_move_forward():
    wizard = ImportWizard("clients.csv", CLIENTS_CSV)
    wizard.preview()
    with pytest.raises(InvalidTransitionError):
        wizard.go_back("validated")
    with pytest.raises(InvalidTransitionError):
        wizard.go_back(WizardState.PREVIEWED)


def test_selecting_a_new_schema_rewinds_to_preview():
    wizard = ImportWizard("people.csv", b"name,email\nJane,jane@example.com\n")
    wizard.preview()
    wizard.validate()
    wizard.select_schema("clients")
    assert wizard.state == WizardState.PREVIEWED.value
    assert wizard.report is None
    assert wizard.schema.id == "clients"


def test_unusable_rows_block_mapping():
    wizard = ImportWizard("clients.csv", b"name,industry\n,Tech\n,Retail\nAcme,Tech\n", schema_id="clients")
    wizard.preview()
    report = wizard.validate()
    assert report.can_continue is False
    with pytest.raises(ValidationError):
        wizard.map_fields()


def test_confirm_requires_every_required_field():
    wizard = ImportWizard("people.csv", b"name,team\nJane,Blue\n", schema_id="users")
    wizard.preview()
    wizard.validate()
    mapper = wizard.map_fields()
    with pytest.raises(MappingIncompleteError):
        wizard.confirm()
    mapper.apply_batch_value("email", "jane@example.com")
    assert wizard.confirm()
    assert wizard.state == WizardState.CONFIRMED.value


def test_undetectable_schema_must_be_selected():
    wizard = ImportWizard("misc.csv", b"foo,bar\n1,2\n")
    assert wizard.preview().detected_schema is None
    with pytest.raises(ValidationError):
        wizard.validate()
    with pytest.raises(NotFoundError):
        wizard.select_schema("invoices")


def test_file_gate_runs_on_selection():
    with pytest.raises(FileRejectedError):
        ImportWizard("clients.pdf", b"%PDF-1.4", content_type="application/pdf")
