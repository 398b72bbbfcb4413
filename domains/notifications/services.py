from __future__ import annotations

import logging
from typing import Optional

from .models import Notification, NotificationCategory

logger = logging.getLogger(__name__)


def create_notification(
    tenant_id,
    title: str,
    description: str,
    category: str = NotificationCategory.SYSTEM,
    order_id=None,
) -> Optional[Notification]:
    """
    알림 1건 생성. 실패해도 호출부 흐름을 막지 않는다(None 반환).
    """
    try:
        return Notification.objects.create(
            tenant_id=tenant_id,
            title=title,
            description=description,
            category=category,
            order_id=order_id,
        )
    except Exception:
        logger.exception("Failed to create notification tenant=%s order=%s", tenant_id, order_id)
        return None
