# rentflow/routes/payments.py
import io

from flask import Blueprint, current_app, jsonify, request, send_file

from ..errors import Conflict, ValidationError
from ..extensions import db
from ..invoice import build_invoice
from ..models import Payment, PaymentHistory, Property, Tenant
from ..schemas import PaymentIn, TransactionIn
from ..security import current_user, current_user_id, roles_required
from ..utils.pdf import render_invoice_pdf, render_receipt_pdf

bp = Blueprint("payments", __name__)


def serialize_with_names(payments, user_id):
    """Attach tenantName / propertyName, as every payment listing shows them."""
    tenants = Tenant.names_for_user(user_id)
    properties = Property.names_for_user(user_id)
    return [
        p.serialize(
            tenant_name=tenants.get(p.tenant_id, "Unknown"),
            property_name=properties.get(p.property_id, "Unknown"),
        )
        for p in payments
    ]


def _one(payment):
    return serialize_with_names([payment], payment.user_id)[0]


@bp.get("/payments")
@roles_required("landlord")
def list_payments():
    uid = current_user_id()
    Payment.sync_overdue(uid)
    query = Payment.for_user(uid)
    for arg, column in (("status", Payment.status), ("tenantId", Payment.tenant_id),
                        ("propertyId", Payment.property_id)):
        value = request.args.get(arg)
        if value:
            query = query.filter(column == value)
    items = query.order_by(Payment.due_date.desc()).all()
    return jsonify(serialize_with_names(items, uid)), 200


@bp.get("/payments/<payment_id>")
@roles_required("landlord")
def get_payment(payment_id):
    uid = current_user_id()
    Payment.sync_overdue(uid)
    return jsonify(_one(Payment.get_for_user(payment_id, uid))), 200


@bp.post("/payments")
@roles_required("landlord")
def create_payment():
    values = PaymentIn.parse(request.get_json(silent=True) or {})
    opening = values.pop("paid_amount")
    payment = Payment(user_id=current_user_id(), paid_amount=0.0, **values)
    db.session.add(payment)
    if opening > 0:
        payment.open_balance(opening, on=values["paid_date"], method=values["method"],
                             reference=values["reference"])
    else:
        payment.refresh_status()
    db.session.commit()
    current_app.logger.info("Created payment %s (%s)", payment.id, payment.status)
    return jsonify(_one(payment)), 201


@bp.patch("/payments/<payment_id>")
@roles_required("landlord")
def update_payment(payment_id):
    payment = Payment.get_for_user(payment_id, current_user_id())
    values = PaymentIn.parse(request.get_json(silent=True) or {}, existing=payment.serialize())
    paid = values.pop("paid_amount", None)
    if paid is not None and paid != payment.paid_amount and payment.has_transactions:
        raise ValidationError("Invalid payment data",
                              details={"paidAmount": "is set by recorded transactions"})
    payment.apply(values)
    if paid is not None and paid != payment.paid_amount:
        if paid > 0:
            payment.open_balance(paid, on=payment.paid_date, method=payment.method,
                                 reference=payment.reference)
        else:
            payment.paid_amount = 0.0
    payment.refresh_status()
    db.session.commit()
    return jsonify(_one(payment)), 200


@bp.delete("/payments/<payment_id>")
@roles_required("landlord")
def delete_payment(payment_id):
    payment = Payment.get_for_user(payment_id, current_user_id())
    db.session.delete(payment)
    db.session.commit()
    return ("", 204)


@bp.get("/payments/<payment_id>/transactions")
@roles_required("landlord")
def list_transactions(payment_id):
    payment = Payment.get_for_user(payment_id, current_user_id())
    return jsonify([h.serialize() for h in payment.history]), 200


@bp.post("/payments/<payment_id>/transactions")
@roles_required("landlord")
def record_transaction(payment_id):
    payment = Payment.get_for_user(payment_id, current_user_id())
    entry = PaymentHistory(**TransactionIn.parse(request.get_json(silent=True) or {}))
    payment.record_transaction(entry)
    db.session.commit()
    current_app.logger.info(
        "Recorded %.2f against payment %s, now %s", entry.amount, payment.id, payment.status
    )
    return jsonify({"transaction": entry.serialize(), "payment": _one(payment)}), 201


@bp.get("/payments/<payment_id>/invoice")
@roles_required("landlord")
def invoice(payment_id):
    user = current_user()
    payment = Payment.get_for_user(payment_id, user.id)
    inv = build_invoice(_one(payment), user.serialize())
    if request.args.get("format") == "pdf":
        return send_file(
            io.BytesIO(render_invoice_pdf(inv)),
            mimetype="application/pdf",
            as_attachment=True,
            download_name=f"{inv.number}.pdf",
        )
    return jsonify(inv.to_dict()), 200


@bp.get("/payments/<payment_id>/receipt")
@roles_required("landlord")
def receipt(payment_id):
    user = current_user()
    payment = Payment.get_for_user(payment_id, user.id)
    if payment.status != "paid":
        raise Conflict("Receipts are only available for paid payments")
    transactions = [h.serialize() for h in payment.history]
    pdf = render_receipt_pdf(_one(payment), user.serialize(), transactions)
    return send_file(
        io.BytesIO(pdf),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=f"receipt_{payment.id}.pdf",
    )
