from django.core.management.base import BaseCommand, CommandError

from payments.exceptions import PaymentInitiationError, PaymentValidationError
from payments.poller import (
    DEFAULT_INTERVAL,
    DEFAULT_MAX_ATTEMPTS,
    PaymentState,
    PaymentStatusPoller,
    initiate_payment,
)
from payments.validators import parse_amount, validate_phone_number


class Command(BaseCommand):
    help = "Sends an STK push through a running backend and waits for the payment outcome."

    def add_arguments(self, parser):
        parser.add_argument('phone_number', help="Paying number, 2547XXXXXXXX")
        group = parser.add_mutually_exclusive_group(required=True)
        group.add_argument('--amount', help="Amount in KES")
        group.add_argument('--package', dest='package_id', help="Seller package id (basic, standard, premium)")
        parser.add_argument('--base-url', default='http://localhost:8000')
        parser.add_argument('--interval', type=float, default=DEFAULT_INTERVAL)
        parser.add_argument('--max-attempts', type=int, default=DEFAULT_MAX_ATTEMPTS)
        parser.add_argument('--no-wait', action='store_true', help="Return right after the push is sent")

    def handle(self, *args, **options):
        phone_number = options['phone_number']
        amount = options['amount']
        try:
            validate_phone_number(phone_number)
            if amount is not None:
                amount = parse_amount(amount)
        except PaymentValidationError as e:
            raise CommandError(e.message)
        if options['max_attempts'] < 1:
            raise CommandError("--max-attempts must be at least 1")

        try:
            response = initiate_payment(
                options['base_url'], phone_number, amount=amount, package_id=options['package_id']
            )
        except PaymentInitiationError as e:
            raise CommandError(f"{e.message} ({e.details})")

        checkout_request_id = response['CheckoutRequestID']
        self.stdout.write(f"STK push sent. CheckoutRequestID: {checkout_request_id}")
        if options['no_wait']:
            return

        poller = PaymentStatusPoller(
            options['base_url'],
            phone_number,
            interval=options['interval'],
            max_attempts=options['max_attempts'],
            success_delay=0,
            checkout_request_id=checkout_request_id,
        )
        self.stdout.write("Waiting for confirmation on the handset...")
        try:
            state = poller.run()
        except KeyboardInterrupt:
            poller.cancel()
            raise CommandError("Cancelled.")

        if state is PaymentState.SUCCESS:
            receipt = poller.record.get('mpesaReceiptNumber')
            self.stdout.write(self.style.SUCCESS(f"Payment successful. Receipt: {receipt}"))
        else:
            raise CommandError(poller.error or f"Payment ended in state {state.value}")
