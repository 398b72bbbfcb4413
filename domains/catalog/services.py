from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction

from .models import Product, StockAdjustment

logger = logging.getLogger(__name__)


class StockRowMissing(Exception):
    """재고를 조정할 상품 행이 존재하지 않을 때"""

    pass


# -----------------------------
# 재고 조작 함수
# -----------------------------
@transaction.atomic
def restock_product(
    product_id,
    qty: int,
    *,
    reason: str,
    tenant_id,
    user_id=None,
) -> Optional[StockAdjustment]:
    """
    재고 복구(+qty) 후 감사 로그 1행을 남긴다.
    - 상품 행을 select_for_update 로 잠근 뒤 이전/이후 스냅샷을 기록
    - 상품이 없으면 StockRowMissing
    - qty <= 0 이면 아무것도 하지 않고 None
    바깥 트랜잭션 안에서 호출되면 그 트랜잭션과 함께 커밋/롤백된다.
    """
    if qty <= 0:
        return None

    product = Product.objects.select_for_update().filter(pk=product_id).first()
    if product is None:
        raise StockRowMissing(f"product not found: {product_id}")

    previous = int(product.stock)
    product.stock = previous + qty
    product.save(update_fields=["stock", "updated_at"])

    adjustment = StockAdjustment.objects.create(
        product=product,
        tenant_id=tenant_id,
        user_id=user_id,
        quantity=qty,
        reason=reason,
        previous_stock=previous,
        new_stock=product.stock,
    )
    logger.info(
        "restocked product=%s qty=%s stock %s -> %s (%s)",
        product_id, qty, previous, product.stock, reason,
    )
    return adjustment

