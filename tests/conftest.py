# tests/conftest.py
from uuid import uuid4

from django.conf import settings
from django.contrib.auth import get_user_model

import pytest
from rest_framework.test import APIClient

from domains.catalog.models import Product
from domains.orders.models import Order, OrderStatus, ShippingProvider
from domains.shipments.adapters import CarrierAdapter, EnhancedTrackingResult
from domains.shipments.adapters import provider as adapter_provider
from domains.shipments.models import ShipmentStatus
from domains.tenants.models import Tenant

User = get_user_model()

CRON_SECRET = "test-cron-secret"


# ─────────────────────────────────────────────────────────────
# 전역 테스트 환경 (해싱/동기화 설정)
# ─────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True, scope="session")
def _fast_password_hasher(django_db_setup, django_db_blocker):
    """
    해시 느린 기본 해셔 대신 MD5 해셔 사용
    """
    with django_db_blocker.unblock():
        settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture(autouse=True)
def _reconcile_settings(settings):
    """
    테스트 트랜잭션 안에서 돌도록 순차 실행 + 고정 크론 시크릿
    """
    settings.RECONCILE_MAX_WORKERS = 1
    settings.CRON_SECRET_KEY = CRON_SECRET
    settings.CARRIER_HTTP_TIMEOUT = 3
    settings.CELERY_TASK_ALWAYS_EAGER = True


# ─────────────────────────────────────────────────────────────
# 클라이언트 & 인증
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user(db):
    password = "Test1234!A"
    u = User.objects.create_user(username=f"user_{uuid4().hex[:6]}", password=password)
    # 로그인 테스트용 원문 비밀번호 보관
    u.raw_password = password
    return u


@pytest.fixture
def staff(db):
    password = "Test1234!A"
    u = User.objects.create_user(
        username=f"staff_{uuid4().hex[:6]}", password=password, is_staff=True
    )
    u.raw_password = password
    return u


def _jwt_client(u):
    c = APIClient()
    resp = c.post(
        "/api/v1/auth/token/",
        {"username": u.username, "password": u.raw_password},
        format="json",
    )
    assert resp.status_code == 200, getattr(resp, "data", resp.content)
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['access']}")
    return c


@pytest.fixture
def auth_client(user):
    """일반 사용자 JWT 클라이언트"""
    return _jwt_client(user)


@pytest.fixture
def staff_client(staff):
    """운영자 JWT 클라이언트"""
    return _jwt_client(staff)


@pytest.fixture
def cron_client():
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {CRON_SECRET}")
    return c


# ─────────────────────────────────────────────────────────────
# 기본 리소스
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def tenant(db):
    return Tenant.objects.create(
        name="Acme Lanka",
        trans_express_api_key="trans-key",
        royal_express_api_key="ops@acme.lk:s3cret",
        farda_express_client_id="client-1",
        farda_express_api_key="farda-key",
    )


@pytest.fixture
def product(db, tenant):
    return Product.objects.create(tenant=tenant, name="Ceylon Tea 500g", sku="TEA-500", stock=10)


@pytest.fixture
def order_factory(db, tenant, product):
    """
    사용법: order_factory(tracking_number="TX-1", quantity=3, provider=...)
    기본값은 SHIPPED + Trans Express
    """

    def _make(**kw):
        kw.setdefault("tenant", tenant)
        kw.setdefault("product", product)
        kw.setdefault("quantity", 1)
        kw.setdefault("status", OrderStatus.SHIPPED)
        kw["shipping_provider"] = kw.pop("provider", kw.get("shipping_provider", ShippingProvider.TRANS_EXPRESS))
        kw.setdefault("tracking_number", f"TX-{uuid4().hex[:8]}")
        return Order.objects.create(**kw)

    return _make


# ─────────────────────────────────────────────────────────────
# 가짜 택배사 어댑터 (레지스트리 교체)
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def fake_carrier(monkeypatch):
    """
    Trans Express 자리에 끼우는 기본 조회 전용 가짜 어댑터.
      fake_carrier.statuses["TX-1"] = ShipmentStatus.DELIVERED
      fake_carrier.statuses["TX-2"] = ProviderError("boom")
    """

    class FakeCarrier(CarrierAdapter):
        code = ShippingProvider.TRANS_EXPRESS
        name = "Fake Express"
        statuses = {}
        calls = []

        @classmethod
        def from_tenant(cls, tenant):
            return cls()

        def track_shipment(self, tracking_number):
            self.calls.append(("basic", tracking_number))
            value = self.statuses.get(tracking_number, ShipmentStatus.IN_TRANSIT)
            if isinstance(value, Exception):
                raise value
            return value

    monkeypatch.setitem(adapter_provider._REGISTRY, "trans_express", FakeCarrier)
    return FakeCarrier


@pytest.fixture
def fake_enhanced_carrier(monkeypatch):
    """
    Royal Express 자리에 끼우는 확장 조회 지원 가짜 어댑터.
      fake_enhanced_carrier.enhanced["RX-1"] = EnhancedTrackingResult(...) 또는 예외
      fake_enhanced_carrier.basic["RX-1"] = ShipmentStatus.* 또는 예외
    """

    class FakeEnhancedCarrier(CarrierAdapter):
        code = ShippingProvider.ROYAL_EXPRESS
        name = "Fake Royal"
        supports_enhanced = True
        enhanced = {}
        basic = {}
        calls = []

        @classmethod
        def from_tenant(cls, tenant):
            return cls()

        def track_shipment(self, tracking_number):
            self.calls.append(("basic", tracking_number))
            value = self.basic.get(tracking_number, ShipmentStatus.IN_TRANSIT)
            if isinstance(value, Exception):
                raise value
            return value

        def track_shipment_enhanced(self, tracking_number):
            self.calls.append(("enhanced", tracking_number))
            value = self.enhanced.get(tracking_number)
            if value is None:
                return EnhancedTrackingResult(basic_status=ShipmentStatus.IN_TRANSIT)
            if isinstance(value, Exception):
                raise value
            return value

    monkeypatch.setitem(adapter_provider._REGISTRY, "royal_express", FakeEnhancedCarrier)
    return FakeEnhancedCarrier
