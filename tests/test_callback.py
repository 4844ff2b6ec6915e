from unittest.mock import patch

import pytest

from payments.callbacks import process_stk_callback
from payments.exceptions import CallbackFormatError, MissingMetadataError
from payments.store import PaymentStatusStore
from tests.conftest import SUCCESS_ITEMS, stk_callback


def test_successful_callback_is_retrievable_by_phone(api_client):
    response = api_client.post('/callback', stk_callback(items=SUCCESS_ITEMS), format='json')
    assert response.status_code == 200
    assert response.json() == {"status": "Callback processed successfully"}

    status = api_client.get('/payment-status', {"phone": "254712345678"}).json()
    assert status["status"] == "success"
    assert status["amount"] == 10
    assert status["mpesaReceiptNumber"] == "NLJ7RT61SV"
    assert status["transactionDate"] == 20191219102115
    assert status["phoneNumber"] == 254712345678
    assert status["timestamp"]


def test_metadata_is_matched_by_name_not_position():
    items = list(reversed(SUCCESS_ITEMS))
    record = process_stk_callback(stk_callback(items=items))
    assert record["amount"] == 10
    assert record["mpesaReceiptNumber"] == "NLJ7RT61SV"


def test_failed_callback_records_reason(api_client):
    payload = stk_callback(
        result_code=1032,
        result_desc="Request cancelled by user",
        items=[{"Name": "PhoneNumber", "Value": 254712345678}],
    )
    response = api_client.post('/api/mpesa/callback', payload, format='json')
    assert response.status_code == 200

    status = api_client.get('/payment-status', {"phone": "254712345678"}).json()
    assert status["status"] == "failed"
    assert status["reason"] == "Request cancelled by user"


def test_failure_without_phone_is_still_acknowledged(api_client):
    payload = stk_callback(result_code=1, result_desc="The balance is insufficient for the transaction.")
    response = api_client.post('/callback', payload, format='json')

    assert response.status_code == 200
    assert response.json() == {"status": "Callback processed successfully"}
    status = PaymentStatusStore().get_by_checkout("ws_CO_191220191020363925")
    assert status["status"] == "failed"
    assert status["reason"] == "The balance is insufficient for the transaction."


def test_success_without_phone_is_acknowledged_but_not_stored_by_phone(api_client):
    items = [item for item in SUCCESS_ITEMS if item["Name"] != "PhoneNumber"]
    response = api_client.post('/callback', stk_callback(items=items), format='json')

    assert response.status_code == 200
    assert PaymentStatusStore().get("254712345678") is None


def test_later_callback_overwrites_earlier_one(api_client):
    api_client.post('/callback', stk_callback(items=SUCCESS_ITEMS), format='json')
    api_client.post('/callback', stk_callback(
        result_code=2001, result_desc="The initiator information is invalid.",
        items=[{"Name": "PhoneNumber", "Value": 254712345678}],
    ), format='json')

    assert PaymentStatusStore().get("254712345678")["status"] == "failed"


@pytest.mark.parametrize("result_code", ["0", True, None])
def test_only_numeric_zero_counts_as_success(result_code):
    record = process_stk_callback(stk_callback(result_code=result_code, items=SUCCESS_ITEMS))
    assert record["status"] == "failed"


@pytest.mark.parametrize("payload", [
    {},
    {"Body": {}},
    {"Body": {"stkCallback": None}},
    {"Body": "not-an-object"},
    {"stkCallback": {"ResultCode": 0}},
])
def test_malformed_envelope_is_rejected(api_client, payload):
    response = api_client.post('/callback', payload, format='json')
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid callback format"}


def test_success_without_metadata_is_rejected(api_client):
    response = api_client.post('/callback', stk_callback(), format='json')
    assert response.status_code == 400
    assert response.json() == {"error": "Missing metadata"}


def test_process_raises_structural_errors():
    with pytest.raises(CallbackFormatError):
        process_stk_callback([])
    with pytest.raises(MissingMetadataError):
        process_stk_callback(stk_callback(items=None))


def test_unexpected_error_returns_generic_message(api_client):
    with patch('payments.views.process_stk_callback', side_effect=KeyError("secret detail")):
        response = api_client.post('/callback', stk_callback(items=SUCCESS_ITEMS), format='json')

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_callback_from_unlisted_ip_is_refused(api_client, settings):
    settings.MPESA_CALLBACK_ALLOWED_IPS = ["196.201.214.200"]
    response = api_client.post('/callback', stk_callback(items=SUCCESS_ITEMS), format='json',
                               REMOTE_ADDR="10.0.0.9")

    assert response.status_code == 403
    assert PaymentStatusStore().get("254712345678") is None


def test_callback_from_allowlisted_proxy_hop_is_accepted(api_client, settings):
    settings.MPESA_CALLBACK_ALLOWED_IPS = ["196.201.214.200"]
    response = api_client.post('/callback', stk_callback(items=SUCCESS_ITEMS), format='json',
                               HTTP_X_FORWARDED_FOR="196.201.214.200, 10.0.0.1")
    assert response.status_code == 200


def test_callback_token_must_match(api_client, settings):
    settings.MPESA_CALLBACK_TOKEN = "s3cret"

    refused = api_client.post('/callback?token=wrong', stk_callback(items=SUCCESS_ITEMS), format='json')
    accepted = api_client.post('/callback?token=s3cret', stk_callback(items=SUCCESS_ITEMS), format='json')

    assert refused.status_code == 403
    assert accepted.status_code == 200


def test_body_that_is_not_json_is_a_client_error(api_client):
    response = api_client.post('/callback', data='{not json', content_type='application/json')

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid callback format"}
