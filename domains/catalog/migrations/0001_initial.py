import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(db_column="product_id", default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("sku", models.CharField(blank=True, default="", max_length=64)),
                ("price", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("stock", models.IntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("tenant", models.ForeignKey(db_column="tenant_id", on_delete=django.db.models.deletion.CASCADE, related_name="products", to="tenants.tenant")),
            ],
            options={
                "db_table": "products",
                "indexes": [models.Index(fields=["tenant", "name"], name="products_tenant_name_idx")],
            },
        ),
        migrations.CreateModel(
            name="StockAdjustment",
            fields=[
                ("id", models.UUIDField(db_column="adjustment_id", default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("quantity", models.IntegerField()),
                ("reason", models.CharField(max_length=255)),
                ("previous_stock", models.IntegerField()),
                ("new_stock", models.IntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("product", models.ForeignKey(blank=True, db_column="product_id", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="adjustments", to="catalog.product")),
                ("tenant", models.ForeignKey(db_column="tenant_id", on_delete=django.db.models.deletion.CASCADE, related_name="stock_adjustments", to="tenants.tenant")),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="stock_adjustments", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "stock_adjustments",
                "indexes": [
                    models.Index(fields=["product", "created_at"], name="stock_adj_product_idx"),
                    models.Index(fields=["tenant", "created_at"], name="stock_adj_tenant_idx"),
                ],
            },
        ),
    ]
