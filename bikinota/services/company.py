from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..api import ApiClient, ApiError, ApiResponse
from ..models import (
    ALLOWED_BANK_ACCOUNT_FIELDS,
    ALLOWED_COMPANY_FIELDS,
    BankAccount,
    CompanyInfo,
)


logger = logging.getLogger(__name__)

_ENDPOINT = "/api/company"
_BANK_ACCOUNTS_ENDPOINT = "/api/company/bank-accounts"


class CompanyServiceError(Exception):
    pass


class CompanyService:
    """Company profile and bank accounts as stored by the backend."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self.company = CompanyInfo()
        self.is_loading = True

    def is_placeholder(self) -> bool:
        return self.company.name == CompanyInfo.model_fields["name"].default

    def resolve_bank_account(self, bank_account_id: str | None) -> BankAccount | None:
        """The invoice's own account if it names one, otherwise the default account."""
        if bank_account_id:
            return next((ba for ba in self.company.bank_accounts if ba.id == bank_account_id), None)
        return self.company.default_bank_account()

    def refresh(self) -> CompanyInfo:
        try:
            response = self.client.get(_ENDPOINT)
            if response.success and response.data:
                self.company = CompanyInfo.from_api(response.data)
            else:
                self.company = CompanyInfo()
        except (ApiError, ValidationError) as exc:
            logger.error("company.fetch_failed error=%s", exc)
            self.company = CompanyInfo()
        finally:
            self.is_loading = False
        return self.company

    def update_company_info(self, **fields: Any) -> CompanyInfo:
        unknown = set(fields) - ALLOWED_COMPANY_FIELDS
        if unknown:
            raise ValueError(f"Unknown company fields: {', '.join(sorted(unknown))}")
        response = self._call("update company", self.client.put, _ENDPOINT, dict(fields))
        self._adopt_company(response, "update company")
        return self.company

    def remove_logo(self) -> CompanyInfo:
        return self.update_company_info(logo="")

    def add_bank_account(
        self,
        bank_name: str,
        account_name: str,
        account_number: str,
        swift_code: str | None = None,
        routing_number: str | None = None,
    ) -> CompanyInfo:
        payload: dict[str, Any] = {
            "bank_name": bank_name,
            "account_name": account_name,
            "account_number": account_number,
        }
        if swift_code:
            payload["swift_code"] = swift_code
        if routing_number:
            payload["routing_number"] = routing_number

        response = self._call("add bank account", self.client.post, _BANK_ACCOUNTS_ENDPOINT, payload)
        if not (response.success and response.data):
            raise CompanyServiceError("Failed to add bank account")
        return self._refetch()

    def update_bank_account(self, account_id: str, **fields: Any) -> CompanyInfo:
        unknown = set(fields) - ALLOWED_BANK_ACCOUNT_FIELDS
        if unknown:
            raise ValueError(f"Unknown bank account fields: {', '.join(sorted(unknown))}")
        response = self._call(
            "update bank account",
            self.client.put,
            f"{_BANK_ACCOUNTS_ENDPOINT}/{account_id}",
            dict(fields),
        )
        if not (response.success and response.data):
            raise CompanyServiceError("Failed to update bank account")
        return self._refetch()

    def delete_bank_account(self, account_id: str) -> CompanyInfo:
        response = self._call("delete bank account", self.client.delete, f"{_BANK_ACCOUNTS_ENDPOINT}/{account_id}")
        if not response.success:
            raise CompanyServiceError("Failed to delete bank account")
        return self._refetch()

    def set_default_bank_account(self, account_id: str) -> CompanyInfo:
        response = self._call(
            "set default bank account",
            self.client.put,
            f"{_BANK_ACCOUNTS_ENDPOINT}/{account_id}/default",
            {},
        )
        self._adopt_company(response, "set default bank account")
        return self.company

    # ---------- helpers ----------

    @staticmethod
    def _call(action: str, method, *args: Any) -> ApiResponse:
        try:
            return method(*args)
        except ApiError as exc:
            logger.error("company.%s_failed status=%s error=%s", action.replace(" ", "_"), exc.status, exc)
            raise

    def _adopt_company(self, response: ApiResponse, action: str) -> None:
        if not (response.success and response.data):
            raise CompanyServiceError(f"Failed to {action}")
        try:
            self.company = CompanyInfo.from_api(response.data)
        except ValidationError as exc:
            raise CompanyServiceError(f"Failed to {action}. Please try again.") from exc

    def _refetch(self) -> CompanyInfo:
        # bank account endpoints answer with the account only
        response = self._call("refresh company", self.client.get, _ENDPOINT)
        if response.success and response.data:
            try:
                self.company = CompanyInfo.from_api(response.data)
            except ValidationError as exc:
                logger.error("company.refresh_invalid_response error=%s", exc)
        return self.company
