import django.core.validators
import django.db.models.deletion
import uuid6
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "kind",
                    models.CharField(
                        choices=[("usb", "USB"), ("course", "Course")], max_length=10
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.01"))
                        ],
                    ),
                ),
                ("phone_number", models.CharField(max_length=32)),
                ("full_name", models.CharField(max_length=255)),
                ("scheduled_day", models.DateField()),
                ("scheduled_hour", models.CharField(max_length=20)),
                (
                    "photo",
                    models.CharField(
                        blank=True, default=None, max_length=500, null=True
                    ),
                ),
                ("description", models.TextField()),
                (
                    "additional_notes",
                    models.TextField(blank=True, default=None, null=True),
                ),
                (
                    "confirmation_status",
                    models.CharField(
                        choices=[
                            ("call_confirmed", "Call confirmed"),
                            ("call_not_response", "No response"),
                            ("phone_closed", "Phone closed"),
                        ],
                        default="call_not_response",
                        max_length=20,
                    ),
                ),
                ("call_attempts", models.PositiveIntegerField(default=0)),
                ("rendezvous_date", models.DateField(blank=True, null=True)),
                (
                    "rendezvous_hour",
                    models.CharField(blank=True, default="", max_length=20),
                ),
                (
                    "fulfillment_status",
                    models.CharField(
                        choices=[
                            ("not_processed_yet", "Not processed yet"),
                            ("user_response", "User responded"),
                            ("user_phone_closed", "User phone closed"),
                            ("retrying", "Retrying"),
                        ],
                        default="not_processed_yet",
                        max_length=20,
                    ),
                ),
                ("is_retrying", models.BooleanField(default=False)),
                (
                    "outcome",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("sold", "Sold"),
                            ("interested_later", "Interested later"),
                            ("not_sold", "Not sold"),
                        ],
                        max_length=20,
                        null=True,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("online_payment", "Online payment"),
                            ("cash_on_delivery", "Cash on delivery"),
                        ],
                        max_length=20,
                        null=True,
                    ),
                ),
                (
                    "reason_not_sold",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("price_high", "Price too high"),
                            ("needs_time", "Needs time"),
                            ("afraid_scam", "Afraid of scam"),
                            ("not_interested", "Not interested"),
                            ("no_decision", "No decision"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                        null=True,
                    ),
                ),
                ("custom_reason", models.TextField(blank=True, default="")),
                ("follow_up_date", models.DateField(blank=True, null=True)),
                (
                    "follow_up_time",
                    models.CharField(blank=True, default="", max_length=20),
                ),
                (
                    "assigned_buyer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="buying_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "assigned_confirmer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="confirming_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "orders",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["-created_at"], name="orders_created_idx"),
                    models.Index(
                        fields=["assigned_confirmer"], name="orders_confirmer_idx"
                    ),
                    models.Index(fields=["assigned_buyer"], name="orders_buyer_idx"),
                    models.Index(fields=["kind"], name="orders_kind_idx"),
                    models.Index(
                        fields=["scheduled_day"], name="orders_scheduled_day_idx"
                    ),
                ],
            },
        ),
    ]
