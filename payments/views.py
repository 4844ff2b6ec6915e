import logging

from django.utils import timezone
from rest_framework.decorators import api_view
from rest_framework.exceptions import ParseError
from rest_framework.response import Response
from rest_framework import status

from sellerpackages.models import SellerPackage
from .callbacks import process_stk_callback
from .exceptions import (
    CallbackFormatError,
    MissingMetadataError,
    MpesaError,
    PaymentValidationError,
)
from .mpesa_utils import send_stk_push
from .security import is_trusted_callback
from .store import PaymentStatusStore, pending_record
from .validators import INVALID_PHONE_MESSAGE, parse_amount, validate_phone_number

logger = logging.getLogger(__name__)


def _resolve_amount(data):
    """Amount from the request body, or from the selected seller package when none is given."""
    amount = data.get('amount')
    package_id = data.get('packageId')

    if amount in (None, '') and package_id:
        try:
            package = SellerPackage.objects.get(slug=package_id, is_active=True)
        except SellerPackage.DoesNotExist:
            raise PaymentValidationError("Invalid or inactive package selected") from None
        return package.payment_amount

    return parse_amount(amount)


@api_view(['POST'])
def initiate_stk_push(request):
    """
    Initiates an STK push to the customer's phone.
    Expects JSON: {
        "phoneNumber": "2547XXXXXXXX",
        "amount": 10
    }
    or {"phoneNumber": ..., "packageId": "standard"} to charge a seller package.
    """
    data = request.data
    if not isinstance(data, dict):
        return Response({"error": INVALID_PHONE_MESSAGE}, status=status.HTTP_400_BAD_REQUEST)

    try:
        phone_number = validate_phone_number(data.get('phoneNumber'))
        amount = _resolve_amount(data)
    except PaymentValidationError as e:
        return Response({"error": e.message}, status=status.HTTP_400_BAD_REQUEST)

    try:
        response_json = send_stk_push(phone_number, amount)
    except MpesaError as e:
        return Response(
            {"error": "Failed to initiate payment", "details": e.details},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response(response_json, status=status.HTTP_200_OK)


@api_view(['POST'])
def mpesa_callback(request):
    """
    Handles the M-Pesa STK push callback.
    Safaricom will send transaction details in the request body.
    """
    if not is_trusted_callback(request):
        return Response({"error": "Callback source not allowed"}, status=status.HTTP_403_FORBIDDEN)

    try:
        process_stk_callback(request.data)
    except CallbackFormatError:
        logger.warning("Invalid callback format - missing stkCallback")
        return Response({"error": "Invalid callback format"}, status=status.HTTP_400_BAD_REQUEST)
    except MissingMetadataError:
        logger.warning("Successful payment but missing metadata")
        return Response({"error": "Missing metadata"}, status=status.HTTP_400_BAD_REQUEST)
    except ParseError:
        logger.warning("Callback body is not valid JSON")
        return Response({"error": "Invalid callback format"}, status=status.HTTP_400_BAD_REQUEST)
    except Exception:
        logger.exception("Error processing M-Pesa callback")
        return Response({"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({"status": "Callback processed successfully"}, status=status.HTTP_200_OK)


@api_view(['GET'])
def payment_status(request):
    """
    Latest payment outcome for ?phone=2547XXXXXXXX, or for
    ?checkoutRequestId=... when the caller kept the id from /stkpush.
    """
    phone = request.query_params.get('phone')
    checkout_request_id = request.query_params.get('checkoutRequestId')

    if not phone and not checkout_request_id:
        return Response({"error": "Phone number is required"}, status=status.HTTP_400_BAD_REQUEST)

    store = PaymentStatusStore()
    if checkout_request_id:
        record = store.get_by_checkout(checkout_request_id)
    else:
        record = store.get(phone)

    logger.debug("Current status for %s: %s", checkout_request_id or phone, record or "pending")
    if not record:
        return Response(pending_record(), status=status.HTTP_200_OK)

    return Response(record, status=status.HTTP_200_OK)


@api_view(['GET'])
def health(request):
    return Response({
        "status": "OK",
        "timestamp": timezone.now().isoformat(),
        "service": "M-Pesa API Routes"
    }, status=status.HTTP_200_OK)


@api_view(['GET'])
def route_index(request):
    return Response({
        "message": "M-Pesa routes are working",
        "timestamp": timezone.now().isoformat(),
        "availableEndpoints": [
            "POST /api/mpesa/stkpush",
            "POST /api/mpesa/callback",
            "GET /api/mpesa/payment-status",
            "GET /api/mpesa/health",
            "GET /api/mpesa/test",
        ]
    }, status=status.HTTP_200_OK)
