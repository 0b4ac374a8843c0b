from __future__ import annotations

from .billing import render_billing
from .company_settings import render_company_settings
from .dashboard import render_dashboard
from .invoice_detail import render_invoice_detail
from .invoice_form import render_invoice_form
from .payment_success import render_payment_success
