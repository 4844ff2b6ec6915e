"""Shared fixtures for the payment tests."""
from unittest.mock import MagicMock

import pytest
import requests
from django.core.cache import caches
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def clear_caches():
    for alias in ('default', 'mpesa'):
        caches[alias].clear()
    yield
    for alias in ('default', 'mpesa'):
        caches[alias].clear()


@pytest.fixture(autouse=True)
def mpesa_settings(settings):
    settings.MPESA_CONSUMER_KEY = 'test-key'
    settings.MPESA_CONSUMER_SECRET = 'test-secret'
    settings.MPESA_SHORTCODE = '174379'
    settings.MPESA_PASSKEY = 'test-passkey'
    settings.MPESA_TILL_NUMBER = '5551234'
    settings.MPESA_CALLBACK_URL = 'https://example.com/callback'
    settings.MPESA_OAUTH_URL = 'https://daraja.test/oauth/v1/generate?grant_type=client_credentials'
    settings.MPESA_STKPUSH_URL = 'https://daraja.test/mpesa/stkpush/v1/processrequest'
    settings.MPESA_CALLBACK_ALLOWED_IPS = []
    settings.MPESA_CALLBACK_TOKEN = ''
    return settings


@pytest.fixture
def api_client():
    return APIClient()


def make_response(json_data=None, status_code=200, text=''):
    """A stand-in for requests.Response with json(), raise_for_status() and text."""
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Error", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def token_response():
    return make_response({"access_token": "tok-123", "expires_in": "3599"})


def stk_callback(result_code=0, result_desc="The service request is processed successfully.",
                 items=None, checkout_request_id="ws_CO_191220191020363925"):
    callback = {
        "MerchantRequestID": "29115-34620561-1",
        "CheckoutRequestID": checkout_request_id,
        "ResultCode": result_code,
        "ResultDesc": result_desc,
    }
    if items is not None:
        callback["CallbackMetadata"] = {"Item": items}
    return {"Body": {"stkCallback": callback}}


SUCCESS_ITEMS = [
    {"Name": "Amount", "Value": 10},
    {"Name": "MpesaReceiptNumber", "Value": "NLJ7RT61SV"},
    {"Name": "Balance"},
    {"Name": "TransactionDate", "Value": 20191219102115},
    {"Name": "PhoneNumber", "Value": 254712345678},
]
