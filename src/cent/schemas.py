"""
schemas.py — Structured interchange models

Wire shapes for persistence and transport. Every numeric field is a STRING:
passing amounts through a JSON number would reintroduce binary floating point.

    FixedPointDecimal  {"amount": "-12345", "decimals": "2"}
    RationalNumber     {"p": "1", "q": "3"}
    Money              {"currency": {...} | "USD", "amount": <fixed point | rational>}
    ExchangeRate       {"base": "USD", "quote": "EUR", "rate": {...},
                        "observed_at": "2026-01-01T00:00:00+00:00", "source": "ecb"}

Validation failures surface as cent.errors.ValidationError with an `issues`
list of {"path", "message"} entries.
"""

from __future__ import annotations
from datetime import datetime
from typing import Any, Optional, TypeVar, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ErrorCode, ValidationError

INTEGER_PATTERN = r"^-?\d+$"
NATURAL_PATTERN = r"^\d+$"

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class _Schema(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class FixedPointModel(_Schema):
    amount: str = Field(pattern=INTEGER_PATTERN, description="mantissa")
    decimals: str = Field(pattern=NATURAL_PATTERN, description="scale")


class RationalModel(_Schema):
    p: str = Field(pattern=INTEGER_PATTERN)
    q: str = Field(pattern=INTEGER_PATTERN)

    @field_validator("q")
    @classmethod
    def _non_zero(cls, value: str) -> str:
        if int(value) == 0:
            raise ValueError("denominator must not be zero")
        return value


class CurrencyModel(_Schema):
    code: str = Field(min_length=1, max_length=12)
    name: str
    decimals: str = Field(pattern=NATURAL_PATTERN)
    symbol: Optional[str] = None
    fractional_unit: Optional[str] = None
    iso_4217: bool = True


class MoneyModel(_Schema):
    # compact form carries the code only
    currency: Union[CurrencyModel, str]
    amount: Union[FixedPointModel, RationalModel]


class ExchangeRateModel(_Schema):
    base: str = Field(min_length=1)
    quote: str = Field(min_length=1)
    rate: Union[FixedPointModel, RationalModel]
    observed_at: datetime
    source: Optional[str] = None


def _issues(error: pydantic.ValidationError) -> list[dict[str, str]]:
    return [
        {"path": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in error.errors()
    ]


def validate(model: type[SchemaT], data: Any) -> SchemaT:
    """
    Validate `data` (a mapping, a model instance or a JSON string) against
    `model`.

    Raises:
        ValidationError: with one issue per failing field
    """
    if isinstance(data, model):
        return data
    try:
        if isinstance(data, (str, bytes)):
            return model.model_validate_json(data)
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        issues = _issues(e)
        json_error = any(err["type"] == "json_invalid" for err in e.errors())
        raise ValidationError(
            f"Invalid {model.__name__.removesuffix('Model')} data: "
            + "; ".join(f"{i['path'] or '<root>'}: {i['message']}" for i in issues),
            issues=issues,
            code=ErrorCode.INVALID_JSON if json_error else ErrorCode.VALIDATION_ERROR,
        ) from e
