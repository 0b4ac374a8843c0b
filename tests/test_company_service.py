import json
import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bikinota.api import ApiClient, ApiError  # noqa: E402
from bikinota.services.company import CompanyService, CompanyServiceError  # noqa: E402


COMPANY = {
    "name": "PT Maju Jaya",
    "address": "Jl. Sudirman 1",
    "city": "Jakarta",
    "email": "halo@maju.test",
    "bank_accounts": [
        {"id": "b1", "bank_name": "BCA", "account_name": "PT Maju Jaya", "account_number": "123", "is_default": True},
        {"id": "b2", "bank_name": "Mandiri", "account_name": "PT Maju Jaya", "account_number": "456"},
    ],
}


class FakeBackend:
    def __init__(self, company: dict | None = None) -> None:
        self.company = company
        self.calls: list[tuple[str, str, object]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.method, request.url.path, body))
        if request.method == "GET":
            return httpx.Response(200, json={"success": True, "data": self.company})
        if request.url.path == "/api/company":
            self.company = {**(self.company or {}), **body}
            return httpx.Response(200, json={"success": True, "data": self.company})
        if request.url.path.endswith("/default"):
            account_id = request.url.path.split("/")[-2]
            for ba in self.company["bank_accounts"]:
                ba["is_default"] = ba["id"] == account_id
            return httpx.Response(200, json={"success": True, "data": self.company})
        if request.method == "POST":
            account = {"id": "b3", **body}
            self.company["bank_accounts"].append(account)
            return httpx.Response(201, json={"success": True, "data": account})
        if request.method == "DELETE":
            account_id = request.url.path.split("/")[-1]
            self.company["bank_accounts"] = [ba for ba in self.company["bank_accounts"] if ba["id"] != account_id]
            return httpx.Response(200, json={"success": True})
        return httpx.Response(404, json={"success": False, "message": "not found"})


def _service(backend) -> CompanyService:
    return CompanyService(ApiClient("http://backend.test", transport=httpx.MockTransport(backend)))


def _company_copy() -> dict:
    return json.loads(json.dumps(COMPANY))


def test_refresh_without_company_keeps_placeholders() -> None:
    service = _service(FakeBackend(company=None))
    service.refresh()
    assert service.is_placeholder()
    assert service.is_loading is False


def test_refresh_failure_falls_back_to_defaults() -> None:
    service = _service(lambda request: httpx.Response(500, json={"message": "down"}))
    company = service.refresh()
    assert company.name == "Your Company Name"


def test_refresh_loads_company() -> None:
    service = _service(FakeBackend(_company_copy()))
    company = service.refresh()
    assert company.name == "PT Maju Jaya"
    assert company.phone == ""
    assert not service.is_placeholder()


def test_resolve_bank_account_prefers_explicit_id() -> None:
    service = _service(FakeBackend(_company_copy()))
    service.refresh()
    assert service.resolve_bank_account("b2").bank_name == "Mandiri"
    assert service.resolve_bank_account(None).bank_name == "BCA"
    assert service.resolve_bank_account("missing") is None


def test_update_company_info_sends_only_given_fields() -> None:
    backend = FakeBackend(_company_copy())
    service = _service(backend)
    service.update_company_info(phone="+62 21 555")

    assert backend.calls[-1] == ("PUT", "/api/company", {"phone": "+62 21 555"})
    assert service.company.phone == "+62 21 555"


def test_update_company_info_rejects_unknown_fields() -> None:
    service = _service(FakeBackend(_company_copy()))
    with pytest.raises(ValueError):
        service.update_company_info(tax_id="123")


def test_remove_logo() -> None:
    backend = FakeBackend({**_company_copy(), "logo": "aGVsbG8="})
    service = _service(backend)
    service.remove_logo()
    assert backend.calls[-1] == ("PUT", "/api/company", {"logo": ""})
    assert service.company.logo == ""


def test_add_bank_account_refetches_company() -> None:
    backend = FakeBackend(_company_copy())
    service = _service(backend)
    service.add_bank_account("BNI", "PT Maju Jaya", "789", swift_code="BNINIDJA")

    method, path, body = backend.calls[0]
    assert (method, path) == ("POST", "/api/company/bank-accounts")
    assert body == {"bank_name": "BNI", "account_name": "PT Maju Jaya", "account_number": "789", "swift_code": "BNINIDJA"}
    assert backend.calls[-1][0] == "GET"
    assert [ba.id for ba in service.company.bank_accounts] == ["b1", "b2", "b3"]


def test_delete_bank_account() -> None:
    backend = FakeBackend(_company_copy())
    service = _service(backend)
    service.delete_bank_account("b2")
    assert [ba.id for ba in service.company.bank_accounts] == ["b1"]


def test_set_default_bank_account() -> None:
    service = _service(FakeBackend(_company_copy()))
    service.set_default_bank_account("b2")
    assert service.company.default_bank_account().id == "b2"


def test_update_bank_account_error_propagates() -> None:
    service = _service(FakeBackend(_company_copy()))
    with pytest.raises(ApiError):
        service.update_bank_account("b1", bank_name="BRI")


def test_failed_update_raises_service_error() -> None:
    service = _service(lambda request: httpx.Response(200, json={"success": False}))
    with pytest.raises(CompanyServiceError):
        service.update_company_info(name="X")
