import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Tenant",
            fields=[
                ("id", models.UUIDField(db_column="tenant_id", default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=120)),
                ("trans_express_api_key", models.CharField(blank=True, default="", max_length=255)),
                ("royal_express_api_key", models.CharField(blank=True, default="", max_length=255)),
                ("farda_express_client_id", models.CharField(blank=True, default="", max_length=64)),
                ("farda_express_api_key", models.CharField(blank=True, default="", max_length=255)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "tenants",
                "indexes": [models.Index(fields=["is_active"], name="tenants_is_acti_5f1c2e_idx")],
            },
        ),
    ]
