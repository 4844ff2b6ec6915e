"""
Payment status store.

Maps a phone number (and, when the gateway supplies one, a
CheckoutRequestID) to the latest payment outcome reported by the M-Pesa
callback. Backed by a Django cache alias so the same code runs against
LocMem in a single process and Redis in a multi-worker deployment.
"""
from django.conf import settings
from django.core.cache import caches
from django.utils import timezone

PENDING = 'pending'
SUCCESS = 'success'
FAILED = 'failed'

STATUSES = (PENDING, SUCCESS, FAILED)


class PaymentStatusStore:
    phone_prefix = 'payment-status:phone:'
    checkout_prefix = 'payment-status:checkout:'

    def __init__(self, cache=None):
        self._cache = cache if cache is not None else caches[settings.MPESA_STATUS_CACHE]

    def get(self, phone_number):
        return self._cache.get(self.phone_prefix + str(phone_number))

    def set(self, phone_number, record):
        # Records live until the cache is flushed; last writer wins.
        self._cache.set(self.phone_prefix + str(phone_number), record, timeout=None)

    def get_by_checkout(self, checkout_request_id):
        return self._cache.get(self.checkout_prefix + str(checkout_request_id))

    def set_by_checkout(self, checkout_request_id, record):
        self._cache.set(self.checkout_prefix + str(checkout_request_id), record, timeout=None)


def _now_iso():
    return timezone.now().isoformat()


def success_record(amount=None, receipt_number=None, phone_number=None, transaction_date=None):
    return {
        "status": SUCCESS,
        "amount": amount,
        "mpesaReceiptNumber": receipt_number,
        "phoneNumber": phone_number,
        "transactionDate": transaction_date,
        "timestamp": _now_iso(),
    }


def failed_record(reason):
    return {
        "status": FAILED,
        "reason": reason,
        "timestamp": _now_iso(),
    }


def pending_record():
    return {
        "status": PENDING,
        "message": "No payment record found for this number",
    }
