"""Target schemas for CSV imports.

Each schema names the fields a source file can be mapped onto, the rules a
mapped row must satisfy, how cells are normalised and how duplicates of
existing records are handled.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pipedash.core.enums import DEAL_STAGES, INDUSTRY_GROUPS, PAYMENT_TERMS, UserRole
from pipedash.core.exceptions import NotFoundError
from pipedash.importing import transforms
from pipedash.schemas.imports import DuplicateStrategy, SchemaInfo

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# target field -> (header keywords, confidence)
DEFAULT_SYNONYMS: dict[str, tuple[tuple[str, ...], float]] = {
    "name": (("company", "organization", "business", "client", "account"), 0.9),
    "legal_name": (("legal", "official", "full_name", "company_name"), 0.7),
    "industry": (("sector", "category", "type", "field"), 0.6),
    "client_name": (("client", "customer", "company"), 0.9),
    "email": (("e-mail", "mail"), 0.9),
    "value": (("amount", "revenue", "price"), 0.8),
}

DEAL_SYNONYMS: dict[str, tuple[tuple[str, ...], float]] = {
    "name": (("deal", "opportunity", "title"), 0.9),
    "value": (("amount", "revenue", "price"), 0.8),
    "client_leader": (("leader", "owner"), 0.9),
    "industry_group": (("group", "segment"), 0.8),
    "created_date": (("created",), 0.8),
    "expected_close_date": (("close",), 0.8),
    "probability": (("likelihood", "chance"), 0.8),
    "notes": (("note", "comment", "description"), 0.8),
}


@dataclass(frozen=True)
class FieldRule:
    field: str
    kind: str
    message: str
    value: Any = None

    def check(self, value: Any) -> bool:
        text = "" if value is None else str(value)
        if self.kind == "required":
            return text.strip() != ""
        if not text:
            return True
        if self.kind == "email":
            return bool(EMAIL_PATTERN.match(text))
        if self.kind == "number":
            try:
                return math.isfinite(float(value if isinstance(value, (int, float)) else text))
            except (OverflowError, ValueError):
                return False
        if self.kind == "boolean":
            return isinstance(value, bool) or text.lower() in transforms.BOOLEAN_VALUES
        if self.kind == "enum":
            return text in self.value
        if self.kind == "length":
            low, high = self.value
            return low <= len(text) <= high
        return True


def _optional_group(value: Any) -> str | None:
    return transforms.map_industry_group(value) if transforms.trim(value) else None


def _boolean_flag(value: Any) -> Any:
    text = transforms.trim(value)
    if text.lower() in transforms.BOOLEAN_VALUES:
        return transforms.parse_boolean(text)
    return text


@dataclass(frozen=True)
class ImportSchema:
    id: str
    name: str
    description: str
    target: str
    required_fields: tuple[str, ...]
    optional_fields: tuple[str, ...]
    auto_fill_capable: bool
    duplicate_strategy: DuplicateStrategy
    unique_fields: tuple[str, ...]
    rules: tuple[FieldRule, ...] = ()
    transformations: Mapping[str, Callable[[Any], Any]] = field(default_factory=dict)
    synonyms: Mapping[str, tuple[tuple[str, ...], float]] = field(default_factory=lambda: DEFAULT_SYNONYMS)
    template: tuple[tuple[str, ...], ...] = ()

    @property
    def all_fields(self) -> tuple[str, ...]:
        return self.required_fields + self.optional_fields

    def is_required(self, target_field: str) -> bool:
        return target_field in self.required_fields

    def transform(self, values: dict[str, Any]) -> tuple[dict[str, Any], list[tuple[str, str]]]:
        """Run transformations over the present fields.

        Returns the transformed values and ``(field, message)`` pairs for
        cells that could not be converted; those keep their raw value.
        """
        result = dict(values)
        failures: list[tuple[str, str]] = []
        for name, transformer in self.transformations.items():
            if name not in result:
                continue
            try:
                result[name] = transformer(result[name])
            except (OverflowError, TypeError, ValueError) as exc:
                failures.append((name, f"Transformation failed: {exc}"))
        return result, failures

    def check_rules(self, values: Mapping[str, Any]) -> list[FieldRule]:
        return [rule for rule in self.rules if not rule.check(values.get(rule.field))]

    def info(self) -> SchemaInfo:
        return SchemaInfo(
            id=self.id,
            name=self.name,
            description=self.description,
            required_fields=list(self.required_fields),
            optional_fields=list(self.optional_fields),
            auto_fill_capable=self.auto_fill_capable,
            duplicate_strategy=self.duplicate_strategy,
        )


DEAL_EXPORT_COLUMNS = (
    "Deal Name",
    "Value",
    "Stage",
    "Client Leader",
    "Industry Group",
    "Created Date",
    "Expected Close Date",
    "Probability",
    "Notes",
)

IMPORT_SCHEMAS: dict[str, ImportSchema] = {
    schema.id: schema
    for schema in (
        ImportSchema(
            id="clients",
            name="Client Accounts",
            description="Import client account information. Only the company name is required.",
            target="accounts",
            required_fields=("name",),
            optional_fields=(
                "legal_name",
                "client_short",
                "platform_name",
                "industry",
                "industry_group",
                "payment_terms",
                "billing_address",
            ),
            auto_fill_capable=True,
            duplicate_strategy=DuplicateStrategy.SKIP,
            unique_fields=("name",),
            rules=(
                FieldRule("name", "required", "Account name is required"),
                FieldRule("name", "length", "Name must be between 2 and 255 characters", (2, 255)),
                FieldRule("industry_group", "enum", "Invalid industry group", tuple(INDUSTRY_GROUPS)),
                FieldRule("payment_terms", "enum", "Invalid payment terms", PAYMENT_TERMS),
            ),
            transformations={
                "name": transforms.trim,
                "legal_name": transforms.trim,
                "industry": transforms.trim,
                "industry_group": transforms.map_industry_group,
                "payment_terms": lambda value: transforms.trim(value) or "Net 30",
            },
            template=(
                ("name", "legal_name", "industry", "industry_group", "billing_address", "payment_terms"),
                ("Example Corp", "Example Corporation Inc", "Technology", "TMT", "123 Main St, City, State 12345", "Net 30"),
                ("Sample University", "Sample University", "Higher Education", "HSME", "456 College Ave, City, State 67890", "Net 45"),
            ),
        ),
        ImportSchema(
            id="projects",
            name="Project Jobs",
            description="Import project and job data; client accounts are created on demand.",
            target="jobs",
            required_fields=("name", "client_name"),
            optional_fields=(
                "unique_id",
                "project_name",
                "client_short",
                "project_short",
                "start_quarter",
                "end_quarter",
                "is_new_business",
            ),
            auto_fill_capable=True,
            duplicate_strategy=DuplicateStrategy.SKIP,
            unique_fields=("unique_id",),
            rules=(
                FieldRule("name", "required", "Project name is required"),
                FieldRule("client_name", "required", "Client name is required"),
                FieldRule("is_new_business", "boolean", "Invalid boolean value for new business flag"),
            ),
            transformations={
                "name": transforms.trim,
                "project_name": transforms.trim,
                "client_name": transforms.trim,
                "is_new_business": _boolean_flag,
                "start_quarter": transforms.parse_quarter,
                "end_quarter": transforms.parse_quarter,
            },
            template=(
                ("client_name", "project_name", "client_short", "project_short", "unique_id", "start_quarter", "end_quarter", "is_new_business"),
                ("Example Corp", "Website Redesign", "EXCORP", "WR", "EXCORPWR001", "Q125", "Q225", "false"),
                ("Sample University", "CMS Migration", "SAMPU", "CM", "SAMPUCM002", "Q225", "Q325", "true"),
            ),
        ),
        ImportSchema(
            id="users",
            name="Team Members",
            description="Import users with role validation; existing emails are updated.",
            target="users",
            required_fields=("name", "email"),
            optional_fields=("role", "industry_groups", "avatar"),
            auto_fill_capable=False,
            duplicate_strategy=DuplicateStrategy.UPDATE,
            unique_fields=("email",),
            rules=(
                FieldRule("email", "required", "Email is required"),
                FieldRule("email", "email", "Invalid email format"),
                FieldRule("name", "required", "Name is required"),
                FieldRule("role", "enum", "Invalid role", tuple(role.value for role in UserRole)),
            ),
            transformations={
                "email": transforms.lower_email,
                "name": transforms.trim,
                "role": lambda value: transforms.trim(value) or UserRole.CLIENT_LEADER.value,
                "industry_groups": transforms.parse_list,
            },
            template=(
                ("name", "email", "role", "industry_groups"),
                ("John Doe", "john.doe@company.com", "client_leader", '["TMT", "Services"]'),
                ("Jane Smith", "jane.smith@company.com", "account_owner", '["Consumer"]'),
            ),
        ),
        ImportSchema(
            id="deals",
            name="Opportunities",
            description="Import deals in the dashboard export layout.",
            target="deals",
            required_fields=("name",),
            optional_fields=(
                "value",
                "stage",
                "client_leader",
                "industry_group",
                "created_date",
                "expected_close_date",
                "probability",
                "notes",
                "priority",
                "source",
                "competitor",
            ),
            auto_fill_capable=True,
            duplicate_strategy=DuplicateStrategy.SKIP,
            unique_fields=("name",),
            rules=(
                FieldRule("name", "required", "Deal name is required"),
                FieldRule("value", "number", "Value must be a number"),
                FieldRule("probability", "number", "Probability must be a number"),
            ),
            transformations={
                "name": transforms.trim,
                "value": transforms.parse_number,
                "stage": lambda value: transforms.trim(value) or DEAL_STAGES[0],
                "client_leader": transforms.trim,
                "industry_group": _optional_group,
                "created_date": transforms.parse_date,
                "expected_close_date": transforms.parse_date,
                "probability": transforms.parse_int,
                "notes": transforms.trim,
            },
            synonyms=DEAL_SYNONYMS,
            template=(
                DEAL_EXPORT_COLUMNS,
                ("Example Deal", "50000", "Lead", "Sarah Johnson", "HSME", "2024-01-01", "2024-03-01", "10", "Initial contact made"),
            ),
        ),
    )
}


def get_schema(schema_id: str) -> ImportSchema:
    schema = IMPORT_SCHEMAS.get(schema_id)
    if schema is None:
        raise NotFoundError(f"Unknown import schema: {schema_id}")
    return schema


def available_schemas() -> list[SchemaInfo]:
    return [schema.info() for schema in IMPORT_SCHEMAS.values()]


def detect_schema(headers: Iterable[str]) -> str | None:
    """Guess the schema from well-known header pairs."""
    lowered = {header.strip().lower() for header in headers}
    if {"client_name", "project_name"} <= lowered:
        return "projects"
    if {"name", "legal_name"} <= lowered:
        return "clients"
    if {"name", "email"} <= lowered:
        return "users"
    if {column.lower() for column in DEAL_EXPORT_COLUMNS[:3]} <= lowered:
        return "deals"
    return None
