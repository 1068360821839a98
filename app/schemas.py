# app/schemas.py
# Role: Validation boundary for the JSON API.
#       Typed input models for transactions and budgets, a validate_payload()
#       helper that turns pydantic errors into field-level violations, and
#       serializers for ORM rows.

"""
Input models and validation helpers.

Routes never pass raw request bodies to storage: they call
validate_payload(Model, body) and either get a validated model back or a
list of FieldViolation objects to return as a 400 response.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

TransactionType = Literal["expense", "income"]


def _parse_datetime(value: Any) -> Any:
    # Accept plain "YYYY-MM-DD" as well as full ISO timestamps
    if isinstance(value, str):
        s = value.strip()
        if len(s) == 10:
            try:
                return datetime.strptime(s, "%Y-%m-%d")
            except ValueError:
                return s
        return s
    return value


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    # Stored dates are timezone-naive UTC
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# -------------------------------------------------------------------
# Input models
# -------------------------------------------------------------------

class TransactionIn(BaseModel):
    """Payload for POST /api/transactions."""

    model_config = ConfigDict(str_strip_whitespace=True)

    amount: float = Field(gt=0, allow_inf_nan=False)
    date: Optional[datetime] = None  # defaults to "now" when stored
    description: str = Field(min_length=1, max_length=200)
    type: TransactionType
    category: str = Field(min_length=1)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return _parse_datetime(v)

    @field_validator("date")
    @classmethod
    def drop_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _naive(v)


class TransactionUpdate(BaseModel):
    """Payload for PUT /api/transactions/{id}; every field is optional."""

    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    date: Optional[datetime] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=200)
    type: Optional[TransactionType] = None
    category: Optional[str] = Field(default=None, min_length=1)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return _parse_datetime(v)

    @field_validator("date")
    @classmethod
    def drop_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _naive(v)

    def changes(self) -> Dict[str, Any]:
        """Fields the client actually sent (explicit nulls are ignored)."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class BudgetIn(BaseModel):
    """Payload for POST /api/budgets (create or replace)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    category: str = Field(min_length=1)
    amount: float = Field(ge=0, allow_inf_nan=False)
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000)


# -------------------------------------------------------------------
# Validation result
# -------------------------------------------------------------------

@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str


@dataclass
class ValidationResult:
    value: Optional[BaseModel] = None
    errors: List[FieldViolation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def errors_as_dicts(self) -> List[Dict[str, str]]:
        return [{"field": e.field, "message": e.message} for e in self.errors]


def validate_payload(model: Type[BaseModel], data: Any) -> ValidationResult:
    """
    Validate `data` against `model`.

    Returns a ValidationResult holding either the validated model instance
    or one FieldViolation per failing field.
    """
    if not isinstance(data, dict):
        return ValidationResult(errors=[FieldViolation("body", "Expected a JSON object")])

    try:
        value = model.model_validate(data)
    except ValidationError as exc:
        violations = [
            FieldViolation(
                field=".".join(str(part) for part in err.get("loc", ())) or "body",
                message=err.get("msg", "Invalid value"),
            )
            for err in exc.errors()
        ]
        return ValidationResult(errors=violations)

    return ValidationResult(value=value)


# -------------------------------------------------------------------
# Serializers
# -------------------------------------------------------------------

def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def transaction_to_dict(t) -> Dict[str, Any]:
    return {
        "id": t.id,
        "amount": t.amount,
        "date": _iso(t.date),
        "description": t.description,
        "type": t.type,
        "category": t.category,
        "created_at": _iso(t.created_at),
        "updated_at": _iso(t.updated_at),
    }


def budget_to_dict(b) -> Dict[str, Any]:
    return {
        "id": b.id,
        "category": b.category,
        "amount": b.amount,
        "month": b.month,
        "year": b.year,
        "created_at": _iso(b.created_at),
        "updated_at": _iso(b.updated_at),
    }
