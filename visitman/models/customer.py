"""Customer model.

A customer is identified by phone within a business. Created on the first
check-in for an unseen phone; never deleted by the ledger and the phone
never changes once stored.
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Customer(models.Model):
    """Customer identity within a business."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business = models.ForeignKey(
        "visitman.Business",
        on_delete=models.PROTECT,
        related_name="customers",
        verbose_name=_("business"),
    )
    phone = models.CharField(
        _("phone"),
        max_length=20,
        help_text=_("Canonical form: (DDD) DDD-DDDD"),
    )
    created_at = models.DateTimeField(_("created at"), default=timezone.now, db_index=True)

    class Meta:
        verbose_name = _("customer")
        verbose_name_plural = _("customers")
        ordering = ["created_at", "phone"]
        constraints = [
            models.UniqueConstraint(
                fields=["business", "phone"],
                name="visitman_unique_business_phone",
            ),
        ]

    def __str__(self):
        return self.phone

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_phone = instance.__dict__.get("phone")
        return instance

    def clean(self):
        """Normalize the phone for form validation; bad input is a field error."""
        from visitman.exceptions import InvalidPhoneFormat
        from visitman.utils import normalize_phone

        try:
            self.phone = normalize_phone(self.phone)
        except InvalidPhoneFormat as e:
            raise ValidationError({"phone": e.message}, code="invalid")

        loaded_phone = getattr(self, "_loaded_phone", None)
        if not self._state.adding and loaded_phone and loaded_phone != self.phone:
            raise ValidationError({"phone": _("Customer phone cannot be changed")}, code="immutable")

    def save(self, *args, **kwargs):
        from visitman.utils import normalize_phone

        self.phone = normalize_phone(self.phone)

        loaded_phone = getattr(self, "_loaded_phone", None)
        if not self._state.adding and loaded_phone and loaded_phone != self.phone:
            from visitman.exceptions import VisitmanError

            raise VisitmanError(
                "PHONE_IMMUTABLE",
                customer_id=str(self.pk),
                phone=loaded_phone,
            )

        super().save(*args, **kwargs)
        self._loaded_phone = self.phone
