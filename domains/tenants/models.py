from __future__ import annotations

import uuid

from django.db import models


class Tenant(models.Model):
    """
    상점(테넌트). 택배사별 API 자격증명을 테넌트 단위로 보관한다.
    - royal_express_api_key 는 "email:password" 형식의 복합 키
    - 값이 비어 있으면 해당 택배사 연동이 설정되지 않은 것으로 본다
    """

    id = models.UUIDField(
        primary_key=True, default=uuid.uuid4, editable=False, db_column="tenant_id"
    )
    name = models.CharField(max_length=120)

    trans_express_api_key = models.CharField(max_length=255, blank=True, default="")
    royal_express_api_key = models.CharField(max_length=255, blank=True, default="")
    farda_express_client_id = models.CharField(max_length=64, blank=True, default="")
    farda_express_api_key = models.CharField(max_length=255, blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "tenants"
        indexes = [models.Index(fields=["is_active"], name="tenants_is_acti_5f1c2e_idx")]

    def __str__(self) -> str:
        return self.name or f"Tenant {self.pk}"
