import base64
import datetime
import logging
import threading

import requests
from requests.auth import HTTPBasicAuth
from django.conf import settings
from django.core.cache import caches
from django.utils import timezone

from .exceptions import MpesaAuthError, MpesaRequestError

logger = logging.getLogger(__name__)

TOKEN_CACHE_KEY = 'mpesa_access_token'

# Serialises refreshes inside one process; separate workers may still
# refresh concurrently, which Daraja tolerates.
_token_lock = threading.Lock()


def _token_cache():
    return caches[settings.MPESA_TOKEN_CACHE]


def _usable(entry):
    return bool(entry) and bool(entry.get('token')) and timezone.now() < entry['expires_at']


def _error_details(exc):
    """Best description of a failed Daraja call: the response JSON, else its text, else the message."""
    response = getattr(exc, 'response', None)
    if response is not None:
        try:
            return response.json()
        except ValueError:
            if response.text:
                return response.text
    return str(exc)


def get_mpesa_access_token():
    """
    Returns a valid access token from Safaricom Daraja.

    The token is cached together with its expiry, which is the reported
    lifetime minus MPESA_TOKEN_SAFETY_MARGIN. A failed fetch raises
    MpesaAuthError and leaves the cache untouched.
    """
    cache = _token_cache()
    entry = cache.get(TOKEN_CACHE_KEY)
    if _usable(entry):
        logger.debug("Using cached M-Pesa access token")
        return entry['token']

    with _token_lock:
        # Another thread may have refreshed while we waited.
        entry = cache.get(TOKEN_CACHE_KEY)
        if _usable(entry):
            return entry['token']

        token, expires_in = _fetch_access_token()
        lifetime = max(expires_in - settings.MPESA_TOKEN_SAFETY_MARGIN, 0)
        expires_at = timezone.now() + datetime.timedelta(seconds=lifetime)
        cache.set(TOKEN_CACHE_KEY, {'token': token, 'expires_at': expires_at}, timeout=None)
        logger.info("Fetched new M-Pesa access token (valid for %ss)", lifetime)
        return token


def _fetch_access_token():
    try:
        r = requests.get(
            settings.MPESA_OAUTH_URL,
            auth=HTTPBasicAuth(settings.MPESA_CONSUMER_KEY, settings.MPESA_CONSUMER_SECRET),
            timeout=settings.MPESA_TIMEOUT,
        )
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as exc:
        details = _error_details(exc)
        logger.error("Error getting M-Pesa access token: %s", details)
        raise MpesaAuthError("Failed to generate M-Pesa access token", details) from exc

    token = data.get('access_token')
    if not token:
        logger.error("M-Pesa OAuth response had no access_token: %s", data)
        raise MpesaAuthError("Failed to generate M-Pesa access token", data)

    try:
        expires_in = int(data.get('expires_in', 3599))
    except (TypeError, ValueError):
        expires_in = 3599
    return token, expires_in


def generate_timestamp():
    """Current UTC instant as YYYYMMDDHHmmss."""
    return timezone.now().astimezone(datetime.timezone.utc).strftime('%Y%m%d%H%M%S')


def generate_password(short_code, pass_key, timestamp=None):
    """
    Generate the M-Pesa password by concatenating ShortCode + PassKey + Timestamp,
    then base64-encoding the result.

    Returns:
        (password, timestamp) as a tuple
    """
    if timestamp is None:
        timestamp = generate_timestamp()

    data_to_encode = f"{short_code}{pass_key}{timestamp}"
    encoded_string = base64.b64encode(data_to_encode.encode()).decode('utf-8')

    return encoded_string, timestamp


def build_stk_push_payload(phone_number, amount, timestamp=None):
    password, timestamp = generate_password(
        settings.MPESA_SHORTCODE, settings.MPESA_PASSKEY, timestamp
    )
    return {
        "BusinessShortCode": settings.MPESA_SHORTCODE,
        "Password": password,
        "Timestamp": timestamp,
        "TransactionType": settings.MPESA_TRANSACTION_TYPE,
        "Amount": int(amount),
        "PartyA": phone_number,  # Phone number paying
        "PartyB": settings.MPESA_TILL_NUMBER,
        "PhoneNumber": phone_number,
        "CallBackURL": settings.MPESA_CALLBACK_URL,
        "AccountReference": settings.MPESA_ACCOUNT_REFERENCE,
        "TransactionDesc": settings.MPESA_TRANSACTION_DESC,
    }


def send_stk_push(phone_number, amount):
    """
    Sends an STK push for an already validated phone number and amount.

    Returns the gateway's JSON as-is. Token failures surface as
    MpesaAuthError, everything else as MpesaRequestError.
    """
    payload = build_stk_push_payload(phone_number, amount)
    access_token = get_mpesa_access_token()

    headers = {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": "application/json"
    }

    logger.info("Sending STK push to %s for KES %s", phone_number, payload["Amount"])
    try:
        response = requests.post(
            settings.MPESA_STKPUSH_URL,
            json=payload,
            headers=headers,
            timeout=settings.MPESA_TIMEOUT,
        )
        response.raise_for_status()
        response_json = response.json()
    except (requests.RequestException, ValueError) as exc:
        details = _error_details(exc)
        logger.error("Error initiating STK push for %s: %s", phone_number, details)
        raise MpesaRequestError("Failed to initiate payment", details) from exc

    logger.info(
        "STK push accepted for %s (CheckoutRequestID=%s)",
        phone_number, response_json.get("CheckoutRequestID"),
    )
    return response_json
