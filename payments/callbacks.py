import logging

from .exceptions import CallbackFormatError, MissingMetadataError
from .store import PaymentStatusStore, failed_record, success_record

logger = logging.getLogger(__name__)


def _metadata_value(items, name):
    for item in items:
        if item.get("Name") == name:
            return item.get("Value")
    return None


def _metadata_items(stk_callback):
    metadata = stk_callback.get("CallbackMetadata")
    if not isinstance(metadata, dict):
        return None
    return metadata.get("Item")


def _result_code(stk_callback):
    # Only a JSON number counts; "0" or true is treated as a failure code.
    code = stk_callback.get("ResultCode")
    if isinstance(code, bool) or not isinstance(code, int):
        return None
    return code


def process_stk_callback(data, store=None):
    """
    Handles one M-Pesa STK push callback and records its outcome.

    Safaricom posts:
        data["Body"]["stkCallback"] -> ResultCode, ResultDesc, CheckoutRequestID
        and, for successful payments, CallbackMetadata.Item [{Name, Value}, ...]

    Returns the status record written, or None when there was no phone
    number to key it on. Raises CallbackFormatError / MissingMetadataError
    for structurally broken payloads.
    """
    store = store if store is not None else PaymentStatusStore()

    body = data.get("Body") if isinstance(data, dict) else None
    stk_callback = body.get("stkCallback") if isinstance(body, dict) else None
    if not isinstance(stk_callback, dict):
        raise CallbackFormatError("Invalid callback format")

    checkout_request_id = stk_callback.get("CheckoutRequestID")
    result_code = _result_code(stk_callback)
    result_desc = stk_callback.get("ResultDesc")
    logger.info(
        "Callback details: ResultCode=%s ResultDesc=%s CheckoutRequestID=%s",
        result_code, result_desc, checkout_request_id,
    )

    if result_code == 0:
        items = _metadata_items(stk_callback)
        if items is None:
            raise MissingMetadataError("Missing metadata")

        record = success_record(
            amount=_metadata_value(items, "Amount"),
            receipt_number=_metadata_value(items, "MpesaReceiptNumber"),
            phone_number=_metadata_value(items, "PhoneNumber"),
            transaction_date=_metadata_value(items, "TransactionDate"),
        )
        phone_number = record["phoneNumber"]
        logger.info("Payment successful: receipt=%s phone=%s", record["mpesaReceiptNumber"], phone_number)
    else:
        # Pure failures (e.g. cancelled by user) usually carry no metadata.
        items = _metadata_items(stk_callback) or []
        phone_number = _metadata_value(items, "PhoneNumber")
        record = failed_record(result_desc)
        logger.info("Payment failed: %s", result_desc)

    if checkout_request_id:
        store.set_by_checkout(checkout_request_id, record)

    if not phone_number:
        logger.warning("Callback carried no phone number; status not stored by phone")
        return None

    store.set(phone_number, record)
    return record
