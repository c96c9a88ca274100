# rentflow/routes/expenses.py
from collections import defaultdict

from flask import Blueprint, jsonify, request

from ..errors import ValidationError
from ..extensions import db
from ..models import Expense, Property
from ..schemas import ExpenseIn
from ..security import current_user_id, roles_required
from ..utils.dates import parse_date

bp = Blueprint("expenses", __name__)


def _date_arg(name):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        raise ValidationError("Invalid report range", details={name: str(e)})


def _check_property(values, user_id):
    if values.get("property_id"):
        Property.get_for_user(values["property_id"], user_id)
    return values


@bp.get("/expenses")
@roles_required("landlord")
def list_expenses():
    uid = current_user_id()
    Expense.sync_overdue(uid)
    query = Expense.for_user(uid)
    for arg, column in (("status", Expense.status), ("category", Expense.category),
                        ("propertyId", Expense.property_id)):
        value = request.args.get(arg)
        if value:
            query = query.filter(column == value)
    return jsonify([e.serialize() for e in query.order_by(Expense.due_date.desc()).all()]), 200


@bp.get("/expenses/report")
@roles_required("landlord")
def expense_report():
    """Totals by category and status, optionally limited to a due-date window."""
    start, end = _date_arg("startDate"), _date_arg("endDate")
    uid = current_user_id()
    Expense.sync_overdue(uid)
    query = Expense.for_user(uid)
    if start:
        query = query.filter(Expense.due_date >= start)
    if end:
        query = query.filter(Expense.due_date <= end)

    by_category = defaultdict(float)
    by_status = defaultdict(lambda: {"count": 0, "amount": 0.0})
    total = paid = 0.0
    expenses = query.order_by(Expense.due_date).all()
    for e in expenses:
        total += e.amount
        paid += e.paid_amount or 0
        by_category[e.category] += e.amount
        by_status[e.status]["count"] += 1
        by_status[e.status]["amount"] += e.amount

    return jsonify({
        "startDate": start.isoformat() if start else None,
        "endDate": end.isoformat() if end else None,
        "count": len(expenses),
        "totalAmount": total,
        "totalPaid": paid,
        "outstanding": total - paid,
        "byCategory": dict(by_category),
        "byStatus": dict(by_status),
        "expenses": [e.serialize() for e in expenses],
    }), 200


@bp.get("/expenses/<expense_id>")
@roles_required("landlord")
def get_expense(expense_id):
    uid = current_user_id()
    Expense.sync_overdue(uid)
    return jsonify(Expense.get_for_user(expense_id, uid).serialize()), 200


@bp.post("/expenses")
@roles_required("landlord")
def create_expense():
    uid = current_user_id()
    values = _check_property(ExpenseIn.parse(request.get_json(silent=True) or {}), uid)
    expense = Expense(user_id=uid, **values)
    expense.refresh_status()
    db.session.add(expense)
    db.session.commit()
    return jsonify(expense.serialize()), 201


@bp.patch("/expenses/<expense_id>")
@roles_required("landlord")
def update_expense(expense_id):
    uid = current_user_id()
    expense = Expense.get_for_user(expense_id, uid)
    values = ExpenseIn.parse(request.get_json(silent=True) or {}, existing=expense.serialize())
    expense.apply(_check_property(values, uid))
    expense.refresh_status()
    db.session.commit()
    return jsonify(expense.serialize()), 200


@bp.delete("/expenses/<expense_id>")
@roles_required("landlord")
def delete_expense(expense_id):
    expense = Expense.get_for_user(expense_id, current_user_id())
    db.session.delete(expense)
    db.session.commit()
    return ("", 204)
