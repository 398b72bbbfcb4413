import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=120)),
                ("description", models.TextField(blank=True)),
                ("category", models.CharField(choices=[("DELIVERY", "Delivery"), ("RETURN", "Return"), ("RESCHEDULE", "Reschedule"), ("SYSTEM", "System")], default="SYSTEM", max_length=20)),
                ("order_id", models.UUIDField(blank=True, db_index=True, null=True)),
                ("is_read", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("tenant", models.ForeignKey(db_column="tenant_id", on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to="tenants.tenant")),
            ],
            options={
                "db_table": "notifications",
                "indexes": [models.Index(fields=["tenant", "is_read", "created_at"], name="notif_tenant_read_idx")],
            },
        ),
    ]
