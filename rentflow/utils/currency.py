DEFAULT_CURRENCY = "KES"

CURRENCY_CONFIG = {
    "KES": {"symbol": "Ksh", "label": "Kenyan Shilling"},
    "USD": {"symbol": "$", "label": "US Dollar"},
    "EUR": {"symbol": "€", "label": "Euro"},
    "GBP": {"symbol": "£", "label": "British Pound"},
}


def normalize_currency(code):
    """Upper-cased known currency code, or the default for unset/unknown codes."""
    code = (code or "").upper()
    return code if code in CURRENCY_CONFIG else DEFAULT_CURRENCY


def get_currency_symbol(code=DEFAULT_CURRENCY):
    return CURRENCY_CONFIG[normalize_currency(code)]["symbol"]


def _to_number(amount):
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return 0.0
    # NaN never equals itself
    return value if value == value else 0.0


def format_currency(amount, code=DEFAULT_CURRENCY, symbol=True):
    """'Ksh 1,234.50'. Non-numeric amounts render as zero.

    With symbol=False the ISO code is used instead ('KES 1,234.50'), for
    renderers limited to latin-1.
    """
    code = normalize_currency(code)
    prefix = CURRENCY_CONFIG[code]["symbol"] if symbol else code
    return f"{prefix} {_to_number(amount):,.2f}"
