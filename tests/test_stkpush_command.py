from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import CommandError, call_command

from payments.poller import PaymentState


def test_no_wait_only_sends_the_push():
    out = StringIO()
    with patch('payments.management.commands.stkpush.initiate_payment',
               return_value={"CheckoutRequestID": "ws_CO_1"}) as mock_initiate:
        call_command('stkpush', '254712345678', '--amount', '10', '--no-wait', stdout=out)

    mock_initiate.assert_called_once_with('http://localhost:8000', '254712345678', amount=10, package_id=None)
    assert "ws_CO_1" in out.getvalue()


def test_waits_for_success():
    out = StringIO()

    def finish(self):
        self.record = {"status": "success", "mpesaReceiptNumber": "NLJ7RT61SV"}
        return PaymentState.SUCCESS

    with patch('payments.management.commands.stkpush.initiate_payment',
               return_value={"CheckoutRequestID": "ws_CO_1"}), \
            patch('payments.management.commands.stkpush.PaymentStatusPoller.run', finish):
        call_command('stkpush', '254712345678', '--package', 'basic', stdout=out)

    assert "NLJ7RT61SV" in out.getvalue()


def test_invalid_phone_is_refused_locally():
    with patch('payments.management.commands.stkpush.initiate_payment') as mock_initiate:
        with pytest.raises(CommandError):
            call_command('stkpush', '0712345678', '--amount', '10')
    mock_initiate.assert_not_called()


@pytest.mark.parametrize("max_attempts", ["0", "-3"])
def test_max_attempts_below_one_is_refused(max_attempts):
    with patch('payments.management.commands.stkpush.initiate_payment') as mock_initiate:
        with pytest.raises(CommandError):
            call_command('stkpush', '254712345678', '--amount', '10', '--max-attempts', max_attempts)
    mock_initiate.assert_not_called()
