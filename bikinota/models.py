from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

from .invoice_calculations import InvoiceTotals, calculate_invoice_totals


def _decimal_to_number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# Backend expects JSON numbers, not the strings pydantic emits for Decimal.
Money = Annotated[Decimal, PlainSerializer(_decimal_to_number, return_type=Any, when_used="json")]


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"


class AdjustmentKind(str, Enum):
    ADDITION = "addition"
    DEDUCTION = "deduction"


class PlanType(str, Enum):
    FREE = "free"
    UNLIMITED = "unlimited"


class LineItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: str = ""
    description: str = ""
    quantity: int = 1
    unit_price: Money = Field(default=Decimal("0"), alias="price")

    @field_validator("name", "description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.unit_price


class Adjustment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    description: str = ""
    kind: AdjustmentKind = Field(default=AdjustmentKind.DEDUCTION, alias="type")
    amount: Money = Decimal("0")

    @property
    def signed_amount(self) -> Decimal:
        if self.kind == AdjustmentKind.ADDITION:
            return self.amount
        return -self.amount


# nested ids are client-side row keys; the backend assigns its own
_ROW_IDS = {"items": {"__all__": {"id"}}, "adjustments": {"__all__": {"id"}}}


class InvoiceDraft(BaseModel):
    """Form state of an invoice that has not been submitted yet."""

    customer_name: str = ""
    customer_email: str = ""
    due_date: Optional[str] = None
    tax_rate: Money = Decimal("0")
    status: InvoiceStatus = InvoiceStatus.DRAFT
    items: List[LineItem] = Field(default_factory=list)
    adjustments: List[Adjustment] = Field(default_factory=list)
    bank_account_id: Optional[str] = None

    @field_validator("due_date", "bank_account_id", mode="before")
    @classmethod
    def _empty_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("adjustments", mode="before")
    @classmethod
    def _adjustments_default(cls, value: Any) -> Any:
        return [] if value is None else value

    def preview_totals(self) -> InvoiceTotals:
        return calculate_invoice_totals(self.items, self.adjustments, self.tax_rate)

    def to_create_payload(self) -> dict[str, Any]:
        dumped = self.model_dump(mode="json", by_alias=True, exclude=_ROW_IDS)
        payload = {key: value for key, value in dumped.items() if key in UPDATABLE_INVOICE_FIELDS}
        if payload.get("due_date") is None:
            payload.pop("due_date", None)
        payload["bank_account_id"] = self.bank_account_id or None
        return payload


class Invoice(InvoiceDraft):
    """An invoice as persisted and returned by the backend."""

    id: str
    invoice_number: str = ""
    created_at: Optional[datetime] = None
    subtotal: Money = Decimal("0")
    tax_amount: Money = Decimal("0")
    adjustments_total: Money = Decimal("0")
    total: Money = Decimal("0")

    @property
    def totals(self) -> InvoiceTotals:
        return InvoiceTotals(
            subtotal=self.subtotal,
            tax_amount=self.tax_amount,
            adjustments_total=self.adjustments_total,
            total=self.total,
        )


UPDATABLE_INVOICE_FIELDS = frozenset(InvoiceDraft.model_fields)


def build_invoice_update_payload(updates: Mapping[str, Any]) -> dict[str, Any]:
    """Backend payload holding exactly the fields present in ``updates``."""
    unknown = set(updates) - UPDATABLE_INVOICE_FIELDS
    if unknown:
        raise ValueError(f"Unknown invoice fields: {', '.join(sorted(unknown))}")

    draft = InvoiceDraft.model_validate(dict(updates))
    dumped = draft.model_dump(mode="json", by_alias=True, exclude=_ROW_IDS)
    payload = {key: value for key, value in dumped.items() if key in updates}
    if "bank_account_id" in payload:
        payload["bank_account_id"] = payload["bank_account_id"] or None
    return payload


class BankAccount(BaseModel):
    id: str
    bank_name: str = ""
    account_name: str = ""
    account_number: str = ""
    swift_code: Optional[str] = None
    routing_number: Optional[str] = None
    is_default: bool = False


class CompanyInfo(BaseModel):
    name: str = "Your Company Name"
    address: str = "123 Business Street"
    city: str = "Business City"
    state: str = "State"
    zip_code: str = "12345"
    country: str = "Country"
    email: str = "contact@yourcompany.com"
    phone: str = "+1 (555) 123-4567"
    website: str = "www.yourcompany.com"
    logo: str = ""
    bank_accounts: List[BankAccount] = Field(default_factory=list)

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "CompanyInfo":
        # a stored company has its fields blank rather than the placeholders
        fields = {name: payload.get(name) or "" for name in cls.model_fields if name != "bank_accounts"}
        fields["bank_accounts"] = payload.get("bank_accounts") or []
        return cls.model_validate(fields)

    def default_bank_account(self) -> Optional[BankAccount]:
        return next((ba for ba in self.bank_accounts if ba.is_default), None)


ALLOWED_COMPANY_FIELDS = {
    "name",
    "address",
    "city",
    "state",
    "zip_code",
    "country",
    "email",
    "phone",
    "website",
    "logo",
}

ALLOWED_BANK_ACCOUNT_FIELDS = {
    "bank_name",
    "account_name",
    "account_number",
    "swift_code",
    "routing_number",
}
