"""Manual-entry check-in from a terminal at the door.

    python manage.py redeem_ticket ING-ABC12345 --user staff@example.com
"""

from django.core.management.base import BaseCommand, CommandError

from checkin.domain import RedemptionStatus
from checkin.domain.errors import InvalidRedemptionCodeError
from checkin.handlers.dependencies import get_redemption_service
from checkin.stores.django_store import DjangoAuthorizationDirectory


class Command(BaseCommand):
    help = "Redeem a ticket code on behalf of a staff user"

    def add_arguments(self, parser):
        parser.add_argument("code", help="Ticket code as printed or encoded in the QR code")
        parser.add_argument("--user", required=True, help="Email or ID of the staff user")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Only report the ticket's state, do not check it in",
        )

    def handle(self, *args, **options):
        user = DjangoAuthorizationDirectory().find_user(options["user"])
        if user is None:
            raise CommandError(f"No user matches {options['user']!r}")

        service = get_redemption_service()
        try:
            if options["dry_run"]:
                outcome = service.lookup(options["code"], user.id)
            else:
                outcome = service.redeem(options["code"], user.id)
        except InvalidRedemptionCodeError as exc:
            raise CommandError(exc.message)

        if outcome.status in (RedemptionStatus.REDEEMED, RedemptionStatus.VALID):
            style = self.style.SUCCESS
        elif outcome.status is RedemptionStatus.ALREADY_REDEEMED:
            style = self.style.WARNING
        else:
            style = self.style.ERROR

        self.stdout.write(style(f"{outcome.status.value}: {outcome.message}"))
        if outcome.ticket is not None:
            self.stdout.write(f"  Attendee: {outcome.ticket.holder_name} <{outcome.ticket.holder_email}>")
        if outcome.event is not None:
            self.stdout.write(f"  Event:    {outcome.event.title} ({outcome.event.date} {outcome.event.time})")
        if not outcome.audit_recorded:
            self.stderr.write("  Check-in record was not written; see logs")
