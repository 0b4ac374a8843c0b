from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Iterable

from ..api import ApiClient, ApiError
from ..models import Invoice, PlanType
from .invoices import count_invoices_in_month


logger = logging.getLogger(__name__)

FREE_MONTHLY_LIMIT = 3
_ENDPOINT = "/api/plan"
_CHECKOUT_ENDPOINT = "/api/payment/checkout-link"


class PlanServiceError(Exception):
    pass


class PlanService:
    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self.current_plan = PlanType.FREE
        self.is_loading = True

    @property
    def monthly_limit(self) -> float:
        return FREE_MONTHLY_LIMIT if self.current_plan == PlanType.FREE else math.inf

    def invoices_this_month(self, invoices: Iterable[Invoice], now: datetime | None = None) -> int:
        return count_invoices_in_month(invoices, now)

    def can_create_invoice(self, invoices: Iterable[Invoice], now: datetime | None = None) -> bool:
        if self.current_plan == PlanType.UNLIMITED:
            return True
        return self.invoices_this_month(invoices, now) < self.monthly_limit

    def refresh(self) -> PlanType:
        try:
            response = self.client.get(_ENDPOINT)
            if response.success and response.data:
                self.current_plan = PlanType(response.data.get("current_plan"))
        except (ApiError, ValueError) as exc:
            logger.error("plan.fetch_failed error=%s", exc)
            self.current_plan = PlanType.FREE
        finally:
            self.is_loading = False
        return self.current_plan

    def upgrade_to_plan(self, plan: PlanType | str) -> PlanType:
        plan = PlanType(plan)
        try:
            response = self.client.put(_ENDPOINT, {"plan_type": plan.value})
        except ApiError as exc:
            logger.error("plan.update_failed status=%s error=%s", exc.status, exc)
            raise
        if not (response.success and response.data):
            raise PlanServiceError("Failed to update plan")
        try:
            self.current_plan = PlanType(response.data.get("current_plan"))
        except ValueError as exc:
            raise PlanServiceError("Failed to update plan. Please try again.") from exc
        logger.info("plan.updated plan=%s", self.current_plan.value)
        return self.current_plan

    def checkout_link(self) -> str:
        """Hosted checkout URL for the unlimited plan; the backend switches the plan once paid."""
        try:
            response = self.client.get(_CHECKOUT_ENDPOINT)
        except ApiError as exc:
            logger.error("plan.checkout_failed status=%s error=%s", exc.status, exc)
            raise
        if not (response.success and isinstance(response.data, str) and response.data):
            raise PlanServiceError("Failed to create checkout link")
        logger.info("plan.checkout_started")
        return response.data

    def payment_status(self, checkout_id: str | None) -> str:
        """
        State of a returning checkout: ``error`` without a checkout id,
        ``success`` once the backend reports the unlimited plan, else ``pending``.
        """
        if not checkout_id:
            return "error"
        self.refresh()
        if self.current_plan == PlanType.UNLIMITED:
            logger.info("plan.payment_confirmed checkout_id=%s", checkout_id)
            return "success"
        logger.info("plan.payment_pending checkout_id=%s", checkout_id)
        return "pending"
