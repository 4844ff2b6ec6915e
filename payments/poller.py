"""
Client side of the STK push flow.

Starts a payment through /stkpush and then polls /payment-status until the
callback has reported a final outcome, the caller cancels, or the attempt
budget runs out.
"""
import logging
import threading
from enum import Enum

import requests

from .exceptions import PaymentInitiationError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 3.0
DEFAULT_MAX_ATTEMPTS = 100
DEFAULT_SUCCESS_DELAY = 1.0
REQUEST_TIMEOUT = 15

FAILED_MESSAGE = "Payment failed. Please try again."
STATUS_ERROR_MESSAGE = "Error checking payment status."
TIMEOUT_MESSAGE = "Timed out waiting for payment confirmation."


class PaymentState(str, Enum):
    NONE = "none"
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    TIMEOUT = "timeout"

    @property
    def terminal(self):
        return self in (PaymentState.SUCCESS, PaymentState.FAILED, PaymentState.TIMEOUT)


def initiate_payment(base_url, phone_number, amount=None, package_id=None, session=None):
    """
    POSTs to /stkpush and returns the gateway response.

    Raises PaymentInitiationError when the server refuses the request or the
    response carries no CheckoutRequestID.
    """
    session = session or requests.Session()
    body = {"phoneNumber": phone_number}
    if amount is not None:
        body["amount"] = amount
    if package_id is not None:
        body["packageId"] = package_id

    try:
        r = session.post(f"{base_url.rstrip('/')}/stkpush", json=body, timeout=REQUEST_TIMEOUT)
        data = r.json()
    except (requests.RequestException, ValueError) as exc:
        raise PaymentInitiationError("Failed to initiate payment.", str(exc)) from exc

    if not data.get("CheckoutRequestID"):
        error = data.get("error") or "Failed to initiate payment. Try again."
        raise PaymentInitiationError(error, data)

    logger.info("STK push sent to %s (CheckoutRequestID=%s)", phone_number, data["CheckoutRequestID"])
    return data


class PaymentStatusPoller:
    """
    Polls the payment status endpoint for one phone number.

    States move none -> pending -> success | failed | timeout. Anything
    other than success/failed keeps the poller pending. cancel() stops the
    loop and resets local state without contacting the server.
    """

    def __init__(self, base_url, phone_number, interval=DEFAULT_INTERVAL,
                 max_attempts=DEFAULT_MAX_ATTEMPTS, success_delay=DEFAULT_SUCCESS_DELAY,
                 on_success=None, checkout_request_id=None, session=None):
        self.base_url = base_url.rstrip('/')
        self.phone_number = phone_number
        self.checkout_request_id = checkout_request_id
        self.interval = interval
        self.max_attempts = max_attempts
        self.success_delay = success_delay
        self.on_success = on_success
        self.session = session or requests.Session()

        self.state = PaymentState.NONE
        self.error = None
        self.record = None
        self.attempts = 0
        self._stop = threading.Event()

    def _params(self):
        if self.checkout_request_id:
            return {"checkoutRequestId": self.checkout_request_id}
        return {"phone": self.phone_number}

    def poll_once(self):
        """Runs one status query and applies the resulting transition."""
        self.attempts += 1
        try:
            r = self.session.get(
                f"{self.base_url}/payment-status",
                params=self._params(),
                timeout=REQUEST_TIMEOUT,
            )
            r.raise_for_status()
            record = r.json()
            if not isinstance(record, dict):
                raise ValueError(f"unexpected status payload: {record!r}")
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Error checking payment status for %s: %s", self.phone_number, exc)
            self.state = PaymentState.PENDING
            self.error = STATUS_ERROR_MESSAGE
            return self.state

        self.record = record
        status = record.get("status")
        if status == PaymentState.SUCCESS.value:
            logger.info("Payment successful for %s: %s", self.phone_number, record)
            self.state = PaymentState.SUCCESS
            self.error = None
        elif status == PaymentState.FAILED.value:
            logger.info("Payment failed for %s. Reason: %s", self.phone_number, record.get("reason"))
            self.state = PaymentState.FAILED
            self.error = record.get("reason") or FAILED_MESSAGE
        else:
            self.state = PaymentState.PENDING
            self.error = None
        return self.state

    def run(self):
        """Polls until a terminal state or cancel(); returns the final state."""
        self._stop.clear()
        self.state = PaymentState.PENDING
        self.error = None
        self.attempts = 0
        logger.info("Starting payment status polling for %s", self.phone_number)

        while not self._stop.wait(self.interval):
            state = self.poll_once()
            if state.terminal:
                break
            if self.max_attempts is not None and self.attempts >= self.max_attempts:
                logger.warning("Gave up polling payment status for %s after %d attempts",
                               self.phone_number, self.attempts)
                self.state = PaymentState.TIMEOUT
                self.error = TIMEOUT_MESSAGE
                break

        if self._stop.is_set():
            self.state = PaymentState.NONE
            self.error = None
            self.record = None
            return self.state

        if self.state is PaymentState.SUCCESS and self.on_success is not None:
            if not self._stop.wait(self.success_delay):
                self.on_success(self.record)

        return self.state

    def start(self):
        """Runs the polling loop on a daemon thread."""
        thread = threading.Thread(target=self.run, name=f"payment-poller-{self.phone_number}", daemon=True)
        thread.start()
        return thread

    def cancel(self):
        self._stop.set()
        self.state = PaymentState.NONE
        self.error = None
        self.record = None
        logger.info("Payment status polling cancelled for %s", self.phone_number)
