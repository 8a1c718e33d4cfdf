"""Utilities to export an account plan as a PDF."""

from __future__ import annotations

import logging
import re
from io import BytesIO
from typing import Optional

import pdfkit
from flask import render_template

from core.models import PlanDocument

logger = logging.getLogger(__name__)


def export_filename(company_name: Optional[str]) -> str:
    company = (company_name or "").strip()
    if not company:
        return "Account_Plan.pdf"
    slug = re.sub(r"\s+", "_", company)
    return f"{slug}_Account_Plan.pdf"


def render_account_plan_html(plan: PlanDocument, company_name: Optional[str] = None) -> str:
    """Render the plan using the report template (needs an app context)."""

    return render_template("report.html", plan=plan, company_name=(company_name or "").strip())


def generate_pdf_from_account_plan(plan: PlanDocument, company_name: Optional[str] = None) -> bytes:
    """Render HTML and convert to PDF (pdfkit preferred, WeasyPrint fallback)."""

    html = render_account_plan_html(plan, company_name)

    try:
        pdf_bytes: Optional[bytes] = pdfkit.from_string(html, False)
        if pdf_bytes:
            return pdf_bytes
    except OSError:
        logger.info("wkhtmltopdf unavailable, rendering with WeasyPrint")

    # WeasyPrint needs the native pango libraries, so it is only loaded here.
    from weasyprint import HTML

    buffer = BytesIO()
    HTML(string=html).write_pdf(buffer)
    return buffer.getvalue()
