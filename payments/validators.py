import re

from .exceptions import PaymentValidationError

PHONE_NUMBER_RE = re.compile(r'^254[17][0-9]{8}$')

INVALID_PHONE_MESSAGE = "Invalid phone number format. Use 2547XXXXXXXX"
INVALID_AMOUNT_MESSAGE = "Amount must be a positive integer"


def validate_phone_number(phone_number):
    """Accepts Safaricom numbers in 2547XXXXXXXX / 2541XXXXXXXX form only."""
    if not isinstance(phone_number, str) or not PHONE_NUMBER_RE.match(phone_number):
        raise PaymentValidationError(INVALID_PHONE_MESSAGE)
    return phone_number


def parse_amount(amount):
    """
    Returns the amount as a positive int.

    Integers and digit-only strings are accepted. Floats are accepted only
    when they carry no fraction (JSON clients sometimes send 10.0).
    """
    if isinstance(amount, bool):
        raise PaymentValidationError(INVALID_AMOUNT_MESSAGE)

    if isinstance(amount, int):
        value = amount
    elif isinstance(amount, float) and amount.is_integer():
        value = int(amount)
    elif isinstance(amount, str) and amount.strip().isdigit():
        value = int(amount.strip())
    else:
        raise PaymentValidationError(INVALID_AMOUNT_MESSAGE)

    if value <= 0:
        raise PaymentValidationError(INVALID_AMOUNT_MESSAGE)
    return value
