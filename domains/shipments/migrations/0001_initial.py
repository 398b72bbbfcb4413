import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="TrackingUpdate",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("IN_TRANSIT", "In Transit"), ("OUT_FOR_DELIVERY", "Out For Delivery"), ("DELIVERED", "Delivered"), ("RETURNED", "Returned"), ("EXCEPTION", "Exception"), ("RESCHEDULED", "Rescheduled")], max_length=24)),
                ("provider", models.CharField(blank=True, default="", max_length=20)),
                ("tracking_number", models.CharField(blank=True, default="", max_length=64)),
                ("description", models.TextField(blank=True, default="")),
                ("location", models.CharField(blank=True, default="", max_length=200)),
                ("timestamp", models.DateTimeField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="tracking_updates", to="orders.order")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="tracking_updates", to="tenants.tenant")),
            ],
            options={
                "db_table": "tracking_updates",
                "indexes": [
                    models.Index(fields=["order", "timestamp"], name="trk_upd_order_ts_idx"),
                    models.Index(fields=["tenant", "timestamp"], name="trk_upd_tenant_ts_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderStatusHistory",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("status", models.CharField(max_length=64)),
                ("status_code", models.CharField(max_length=64)),
                ("description", models.TextField(blank=True, default="")),
                ("location", models.CharField(blank=True, default="", max_length=200)),
                ("timestamp", models.DateTimeField()),
                ("is_current", models.BooleanField(default=False)),
                ("position", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="status_history", to="orders.order")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="status_history", to="tenants.tenant")),
            ],
            options={
                "db_table": "order_status_history",
                "ordering": ["order", "position"],
                "indexes": [
                    models.Index(fields=["order", "timestamp"], name="status_hist_order_ts_idx"),
                    models.Index(fields=["status_code"], name="status_hist_code_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderFinancialInfo",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("total_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("shipping_cost", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("discount_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("payment_status", models.CharField(blank=True, default="", max_length=40)),
                ("payment_method", models.CharField(blank=True, default="", max_length=40)),
                ("currency", models.CharField(default="LKR", max_length=3)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("order", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="financial_info", to="orders.order")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="financial_infos", to="tenants.tenant")),
            ],
            options={
                "db_table": "order_financial_info",
                "indexes": [models.Index(fields=["payment_status"], name="fin_info_payment_idx")],
            },
        ),
        migrations.CreateModel(
            name="CarrierTrackingDetail",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("provider", models.CharField(max_length=20)),
                ("tracking_number", models.CharField(max_length=64)),
                ("status", models.CharField(blank=True, default="", max_length=64)),
                ("description", models.TextField(blank=True, default="")),
                ("current_location", models.CharField(blank=True, default="", max_length=200)),
                ("event_at", models.DateTimeField(blank=True, null=True)),
                ("raw_payload", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="carrier_tracking_details", to="orders.order")),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="carrier_tracking_details", to="tenants.tenant")),
            ],
            options={
                "db_table": "carrier_tracking_details",
                "indexes": [
                    models.Index(fields=["order", "created_at"], name="carrier_trk_order_idx"),
                    models.Index(fields=["tracking_number"], name="carrier_trk_number_idx"),
                ],
            },
        ),
    ]
