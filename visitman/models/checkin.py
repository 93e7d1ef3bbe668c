"""CheckIn model - append-only visit events."""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class CheckIn(models.Model):
    """
    Immutable record of a customer visit.

    Check-ins are append-only: never modified or deleted. They are the
    audit trail and the only source of visit counts. The sequential id
    preserves write order for events sharing a checkin_time.
    """

    customer = models.ForeignKey(
        "visitman.Customer",
        on_delete=models.PROTECT,
        related_name="checkins",
        verbose_name=_("customer"),
    )
    staff_user_id = models.CharField(
        _("staff user"),
        max_length=255,
        blank=True,
        help_text=_("Identifier of the staff member who recorded the visit"),
    )
    checkin_time = models.DateTimeField(_("check-in time"), default=timezone.now, db_index=True)

    class Meta:
        db_table = "visitman_checkin"
        verbose_name = _("check-in")
        verbose_name_plural = _("check-ins")
        ordering = ["checkin_time", "id"]
        indexes = [
            models.Index(
                fields=["customer", "checkin_time"],
                name="visitman_checkin_cust_time_idx",
            ),
        ]

    def __str__(self):
        return f"{self.customer_id} @ {self.checkin_time:%Y-%m-%d %H:%M}"
