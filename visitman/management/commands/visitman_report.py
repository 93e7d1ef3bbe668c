"""Management command to print customer visit state for a business."""

from django.core.management.base import BaseCommand, CommandError

from visitman.exceptions import VisitmanError
from visitman.service import LedgerService
from visitman.services import analytics


class Command(BaseCommand):
    help = "List customers with visits, last visit, unlocked rewards and progress"

    def add_arguments(self, parser):
        parser.add_argument("business_id", help="Business UUID")
        parser.add_argument(
            "--top",
            type=int,
            default=None,
            help="Only show the N most loyal customers",
        )

    def handle(self, *args, **options):
        try:
            pairs = LedgerService.list_customer_aggregates(options["business_id"])
        except VisitmanError as e:
            raise CommandError(f"{e.code}: {e.message}") from e

        shown = pairs
        if options["top"] is not None:
            shown = analytics.most_loyal(pairs, options["top"])

        for customer, agg in shown:
            rewards = ", ".join(tier.description for tier in agg.reward_tiers_unlocked) or "-"
            self.stdout.write(
                f"{customer.phone}  visits={agg.visits}  "
                f"last={agg.last_visit:%Y-%m-%d}  "
                f"progress={agg.progress:.0%}  rewards={rewards}"
            )

        summary = analytics.summarize(pairs)
        self.stdout.write(
            self.style.SUCCESS(
                f"{summary.unique_customers} customers, {summary.total_visits} visits, "
                f"{summary.customers_with_rewards} with rewards."
            )
        )
