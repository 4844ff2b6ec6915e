import hmac
import logging

from django.conf import settings

logger = logging.getLogger(__name__)


def client_ip(request):
    """Left-most X-Forwarded-For hop, falling back to REMOTE_ADDR."""
    forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded_for:
        return forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


def is_trusted_callback(request):
    """
    Checks that an M-Pesa callback comes from where we expect.

    MPESA_CALLBACK_ALLOWED_IPS restricts the caller's address and
    MPESA_CALLBACK_TOKEN must match the ?token= on the callback URL.
    Either check is skipped when its setting is empty.
    """
    allowed_ips = settings.MPESA_CALLBACK_ALLOWED_IPS
    expected_token = settings.MPESA_CALLBACK_TOKEN

    if not allowed_ips and not expected_token:
        logger.warning("M-Pesa callback verification disabled (no IP allowlist or token configured)")
        return True

    if allowed_ips:
        ip = client_ip(request)
        if ip not in allowed_ips:
            logger.warning("Rejected M-Pesa callback from %s", ip)
            return False

    if expected_token:
        supplied = request.GET.get('token', '')
        if not hmac.compare_digest(supplied.encode(), expected_token.encode()):
            logger.warning("Rejected M-Pesa callback with bad token from %s", client_ip(request))
            return False

    return True
