"""Management command to record a visit from the command line."""

from django.core.management.base import BaseCommand, CommandError

from visitman.exceptions import VisitmanError
from visitman.service import LedgerService


class Command(BaseCommand):
    help = "Record a check-in for a phone number within a business"

    def add_arguments(self, parser):
        parser.add_argument("business_id", help="Business UUID")
        parser.add_argument("phone", help="Customer phone (any punctuation)")
        parser.add_argument(
            "--staff",
            default="",
            help="Identifier of the staff member recording the visit",
        )

    def handle(self, *args, **options):
        try:
            result = LedgerService.check_in(
                options["business_id"],
                options["phone"],
                staff_user_id=options["staff"],
            )
        except VisitmanError as e:
            raise CommandError(f"{e.code}: {e.message}") from e

        customer, agg = result
        prefix = "New customer" if result.created else "Customer"
        self.stdout.write(
            self.style.SUCCESS(f"{prefix} {customer.phone}: {agg.visits} visits.")
        )
        for tier in result.rewards_earned:
            self.stdout.write(self.style.SUCCESS(f"Reward earned: {tier.description}"))
