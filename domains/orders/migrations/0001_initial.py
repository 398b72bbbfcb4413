import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(db_column="order_id", default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("customer_name", models.CharField(blank=True, default="", max_length=120)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=32)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("CONFIRMED", "Confirmed"), ("PROCESSING", "Processing"), ("CANCELLED", "Cancelled"), ("SHIPPED", "Shipped"), ("DELIVERED", "Delivered"), ("RETURNED", "Returned"), ("RESCHEDULED", "Rescheduled")], default="PENDING", max_length=20)),
                ("shipping_provider", models.CharField(blank=True, choices=[("TRANS_EXPRESS", "Trans Express"), ("ROYAL_EXPRESS", "Royal Express"), ("FARDA_EXPRESS", "Farda Express")], max_length=20, null=True)),
                ("tracking_number", models.CharField(blank=True, max_length=64, null=True)),
                ("delivered_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("product", models.ForeignKey(blank=True, db_column="product_id", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="orders", to="catalog.product")),
                ("tenant", models.ForeignKey(db_column="tenant_id", on_delete=django.db.models.deletion.CASCADE, related_name="orders", to="tenants.tenant")),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="orders", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "orders",
                "indexes": [
                    models.Index(fields=["tenant", "status"], name="orders_tenant_status_idx"),
                    models.Index(fields=["status", "delivered_at"], name="orders_status_deliv_idx"),
                    models.Index(fields=["tracking_number"], name="orders_tracking_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(shipping_provider__isnull=True, tracking_number__isnull=True)
                            | models.Q(shipping_provider__isnull=False, tracking_number__isnull=False)
                        ),
                        name="ck_order_provider_tracking_pair",
                    ),
                    models.CheckConstraint(
                        condition=(
                            models.Q(status="DELIVERED", delivered_at__isnull=False)
                            | (~models.Q(status="DELIVERED") & models.Q(delivered_at__isnull=True))
                        ),
                        name="ck_order_delivered_at_iff_delivered",
                    ),
                ],
            },
        ),
    ]
