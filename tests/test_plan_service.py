import json
import math
import sys
from datetime import datetime
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bikinota.api import ApiClient, ApiError  # noqa: E402
from bikinota.models import Invoice, PlanType  # noqa: E402
from bikinota.services.plan import FREE_MONTHLY_LIMIT, PlanService, PlanServiceError  # noqa: E402


NOW = datetime(2026, 10, 17, 12, 0)


def _service(handler) -> PlanService:
    return PlanService(ApiClient("http://backend.test", transport=httpx.MockTransport(handler)))


def _invoices(count: int, created_at: str = "2026-10-02T08:00:00") -> list[Invoice]:
    return [
        Invoice.model_validate({"id": str(i), "customer_name": "Acme", "created_at": created_at})
        for i in range(count)
    ]


def test_free_plan_allows_three_invoices_per_month() -> None:
    service = _service(lambda request: httpx.Response(200, json={}))
    assert service.monthly_limit == FREE_MONTHLY_LIMIT == 3
    assert service.can_create_invoice(_invoices(2), NOW)
    assert not service.can_create_invoice(_invoices(3), NOW)


def test_invoices_from_other_months_do_not_count() -> None:
    service = _service(lambda request: httpx.Response(200, json={}))
    old = _invoices(5, created_at="2026-09-15T08:00:00")
    assert service.invoices_this_month(old, NOW) == 0
    assert service.can_create_invoice(old, NOW)


def test_refresh_reads_current_plan() -> None:
    service = _service(
        lambda request: httpx.Response(200, json={"success": True, "data": {"current_plan": "unlimited"}})
    )
    assert service.refresh() == PlanType.UNLIMITED
    assert math.isinf(service.monthly_limit)
    assert service.can_create_invoice(_invoices(10), NOW)


def test_refresh_failure_falls_back_to_free() -> None:
    service = _service(lambda request: httpx.Response(503, json={"message": "maintenance"}))
    service.current_plan = PlanType.UNLIMITED
    assert service.refresh() == PlanType.FREE


def test_upgrade_sends_plan_type() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "data": {"current_plan": "unlimited"}})

    service = _service(handler)
    assert service.upgrade_to_plan("unlimited") == PlanType.UNLIMITED
    assert seen == {"method": "PUT", "body": {"plan_type": "unlimited"}}


def test_upgrade_error_keeps_plan() -> None:
    service = _service(lambda request: httpx.Response(402, json={"message": "Payment required"}))
    with pytest.raises(ApiError):
        service.upgrade_to_plan(PlanType.UNLIMITED)
    assert service.current_plan == PlanType.FREE


def test_checkout_link_returns_hosted_url() -> None:
    calls: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path))
        return httpx.Response(200, json={"success": True, "data": "https://checkout.example.test/c/abc"})

    service = _service(handler)
    assert service.checkout_link() == "https://checkout.example.test/c/abc"
    assert calls == [("GET", "/api/payment/checkout-link")]
    assert service.current_plan == PlanType.FREE


def test_checkout_link_without_data_raises() -> None:
    service = _service(lambda request: httpx.Response(200, json={"success": True, "data": None}))
    with pytest.raises(PlanServiceError, match="Failed to create checkout link"):
        service.checkout_link()


def test_checkout_link_error_propagates() -> None:
    service = _service(lambda request: httpx.Response(500, json={"message": "Checkout unavailable"}))
    with pytest.raises(ApiError, match="Checkout unavailable"):
        service.checkout_link()


def test_payment_status_without_checkout_id_is_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert _service(handler).payment_status(None) == "error"


def test_payment_status_success_once_plan_is_unlimited() -> None:
    service = _service(
        lambda request: httpx.Response(200, json={"success": True, "data": {"current_plan": "unlimited"}})
    )
    assert service.payment_status("chk_1") == "success"
    assert service.current_plan == PlanType.UNLIMITED


def test_payment_status_pending_while_plan_is_free() -> None:
    service = _service(lambda request: httpx.Response(200, json={"success": True, "data": {"current_plan": "free"}}))
    assert service.payment_status("chk_1") == "pending"
