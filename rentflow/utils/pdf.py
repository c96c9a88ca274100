from datetime import date

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from .currency import format_currency


def _money(value, currency):
    return format_currency(value, currency, symbol=False)


def _latin1(text):
    # Core PDF fonts only cover latin-1
    return str(text if text is not None else "").encode("latin-1", "replace").decode("latin-1")


class _Document(FPDF):
    def __init__(self, title):
        super().__init__()
        self.set_title(title)
        self.set_auto_page_break(auto=True, margin=20)
        self.add_page()

    def line_out(self, text, size=11, style="", align="L", height=7):
        self.set_font("Helvetica", style=style, size=size)
        self.cell(0, height, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT, align=align)

    def pair(self, label, value, style=""):
        self.set_font("Helvetica", style=style, size=11)
        self.cell(120, 7, _latin1(label))
        self.cell(0, 7, _latin1(value), new_x=XPos.LMARGIN, new_y=YPos.NEXT, align="R")

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", style="I", size=8)
        self.cell(0, 10, "Generated via RentFlow Dashboard", align="C")

    def render(self) -> bytes:
        return bytes(self.output())


def render_invoice_pdf(invoice) -> bytes:
    """PDF rendering of a `rentflow.invoice.Invoice`."""
    pdf = _Document("Invoice")
    currency = invoice.currency

    pdf.line_out("INVOICE", size=22, style="B", height=12)
    pdf.line_out(f"#{invoice.number}", size=10)
    pdf.ln(4)
    pdf.line_out(invoice.company_name, style="B", align="R")
    pdf.line_out(invoice.business_address, size=10, align="R")
    if invoice.business_email:
        pdf.line_out(invoice.business_email, size=10, align="R")
    pdf.ln(6)

    pdf.line_out("BILL TO", size=9, style="B")
    pdf.line_out(invoice.tenant_name, style="B")
    pdf.line_out(invoice.property_name, size=10)
    pdf.ln(4)
    pdf.pair("Date Issued", invoice.issued_on)
    pdf.pair("Due Date", invoice.due_date)
    pdf.ln(6)

    pdf.pair("Description", "Amount", style="B")
    pdf.pair(f"Rent Payment (Period: {invoice.period})", _money(invoice.amount, currency))
    pdf.ln(4)
    pdf.pair("Subtotal", _money(invoice.amount, currency))
    pdf.pair("Total Amount", _money(invoice.amount, currency), style="B")
    pdf.pair("Paid to Date", "-" + _money(invoice.paid_amount, currency))
    pdf.pair("Balance Due", _money(invoice.balance, currency), style="B")
    pdf.ln(8)

    pdf.line_out(f"Payment Status: {invoice.status.upper()}", style="B")
    if invoice.reference:
        pdf.line_out(f"Ref: {invoice.reference}", size=9)
    if invoice.show_paid_stamp:
        pdf.ln(6)
        pdf.set_text_color(22, 163, 74)
        pdf.line_out("PAID", size=48, style="B", align="C", height=24)
        pdf.set_text_color(0, 0, 0)
    pdf.ln(6)
    pdf.line_out("Thank you for your business!", size=10, style="B", align="R")
    return pdf.render()


def render_receipt_pdf(payment, user, transactions=(), issued_on=None) -> bytes:
    """Rent receipt for a settled payment; `payment`/`user` are wire-format dicts."""
    currency = user.get("currency")
    pdf = _Document("Rent Receipt")

    pdf.line_out("RentFlow Rent Receipt", size=18, style="B", align="C", height=12)
    pdf.line_out(user.get("companyName") or "RentFlow Management", align="C")
    pdf.ln(6)
    pdf.pair("Receipt date", (issued_on or date.today()).isoformat())
    pdf.pair("Tenant", payment.get("tenantName") or payment.get("tenantId"))
    pdf.pair("Property", payment.get("propertyName") or payment.get("propertyId"))
    pdf.pair("Due", payment.get("dueDate"))
    pdf.pair("Paid", payment.get("paidDate") or "")
    pdf.pair("Method", (payment.get("method") or "").replace("_", " "))
    pdf.pair("Amount", _money(payment.get("amount"), currency))
    pdf.pair("Amount received", _money(payment.get("paidAmount"), currency), style="B")
    if transactions:
        pdf.ln(4)
        pdf.line_out("Transactions", style="B")
        for entry in transactions:
            pdf.pair(f"{entry.get('date')}  {entry.get('method') or ''}", _money(entry.get("amount"), currency))
    return pdf.render()
