"""
domains/shipments/adapters 테스트 (requests 는 전부 patch)
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import requests

from domains.shipments.adapters import (
    FardaExpressAdapter,
    RoyalExpressAdapter,
    TransExpressAdapter,
    build_adapter,
    get_adapter_class,
)
from domains.shipments.adapters.base import split_composite_key
from domains.shipments.adapters.royal_express import ENHANCED_STATUS_MAP, map_enhanced_status
from domains.shipments.errors import ConfigurationError, ProviderError, UnsupportedProviderError
from domains.shipments.models import ShipmentStatus
from domains.tenants.models import Tenant

REQUEST = "domains.shipments.adapters.base.requests.request"


def _resp(payload=None, status_code=200, text=None):
    r = MagicMock()
    r.status_code = status_code
    r.text = text if text is not None else str(payload)
    if isinstance(payload, Exception):
        r.json.side_effect = payload
    else:
        r.json.return_value = payload
    return r


def _router(routes):
    """url 접미사 → 응답(또는 예외) 매핑으로 requests.request 대체"""
    seen = []

    def _request(method, url, **kwargs):
        seen.append((method, url, kwargs))
        for suffix, value in routes.items():
            if url.endswith(suffix):
                if isinstance(value, Exception):
                    raise value
                return value
        raise AssertionError(f"unexpected url {url}")

    _request.seen = seen
    return _request


# ─────────────────────────────────────────────────────────────
# 레지스트리
# ─────────────────────────────────────────────────────────────
class TestRegistry:
    def test_lookup_by_order_provider_code(self):
        assert get_adapter_class("TRANS_EXPRESS") is TransExpressAdapter
        assert get_adapter_class("ROYAL_EXPRESS") is RoyalExpressAdapter
        assert get_adapter_class("FARDA_EXPRESS") is FardaExpressAdapter

    def test_aliases_and_normalisation(self):
        assert get_adapter_class("royal-express") is RoyalExpressAdapter
        assert get_adapter_class(" Curfox ") is RoyalExpressAdapter
        assert get_adapter_class("transexpress") is TransExpressAdapter

    @pytest.mark.parametrize("code", ["DHL", "", None])
    def test_unknown_provider(self, code):
        with pytest.raises(UnsupportedProviderError):
            get_adapter_class(code)


# ─────────────────────────────────────────────────────────────
# 자격증명 검증 (택배사 호출 전에 실패해야 함)
# ─────────────────────────────────────────────────────────────
class TestCredentials:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("ops@acme.lk:pw", ("ops@acme.lk", "pw")),
            ("ops@acme.lk:pw:with:colons", ("ops@acme.lk", "pw:with:colons")),
            ("no-colon", None),
            (":pw", None),
            ("ops@acme.lk:", None),
            ("", None),
            (None, None),
        ],
    )
    def test_split_composite_key(self, raw, expected):
        assert split_composite_key(raw) == expected

    @pytest.mark.parametrize("bad_key", ["no-colon", ":secret", "ops@acme.lk:", "   "])
    def test_royal_invalid_key_makes_no_http_call(self, bad_key):
        tenant = Tenant(name="t", royal_express_api_key=bad_key)
        with patch(REQUEST) as m:
            with pytest.raises(ConfigurationError):
                build_adapter("ROYAL_EXPRESS", tenant)
        m.assert_not_called()

    def test_trans_missing_key(self):
        with pytest.raises(ConfigurationError):
            build_adapter("TRANS_EXPRESS", Tenant(name="t"))

    def test_farda_needs_both_parts(self):
        with pytest.raises(ConfigurationError):
            build_adapter("FARDA_EXPRESS", Tenant(name="t", farda_express_api_key="k"))

    def test_credentials_read_per_call(self):
        a = build_adapter("TRANS_EXPRESS", Tenant(name="a", trans_express_api_key="key-a"))
        b = build_adapter("TRANS_EXPRESS", Tenant(name="b", trans_express_api_key="key-b"))
        assert (a.api_key, b.api_key) == ("key-a", "key-b")


# ─────────────────────────────────────────────────────────────
# Trans Express
# ─────────────────────────────────────────────────────────────
class TestTransExpress:
    @pytest.mark.parametrize(
        "carrier_status, expected",
        [
            ("Processing", ShipmentStatus.PENDING),
            ("Picked Up", ShipmentStatus.IN_TRANSIT),
            ("Out for Delivery", ShipmentStatus.OUT_FOR_DELIVERY),
            ("Delivered", ShipmentStatus.DELIVERED),
            ("Returned to Sender", ShipmentStatus.RETURNED),
            ("Return to Client", ShipmentStatus.RETURNED),
            ("Rescheduled", ShipmentStatus.RESCHEDULED),
            ("Failed Delivery", ShipmentStatus.EXCEPTION),
            ("Something New", ShipmentStatus.EXCEPTION),
        ],
    )
    def test_status_mapping(self, settings, carrier_status, expected):
        with patch(REQUEST, return_value=_resp({"data": {"current_status": carrier_status}})) as m:
            assert TransExpressAdapter("k").track_shipment("TX-1") == expected

        method, url = m.call_args.args
        assert method == "POST"
        assert url.endswith("/tracking")
        assert m.call_args.kwargs["timeout"] == settings.CARRIER_HTTP_TIMEOUT
        assert m.call_args.kwargs["json"] == {"waybill_id": "TX-1"}
        assert m.call_args.kwargs["headers"]["Authorization"] == "Bearer k"

    def test_no_tracking_data_yet(self):
        with patch(REQUEST, return_value=_resp({"data": []})):
            assert TransExpressAdapter("k").track_shipment("TX-1") == ShipmentStatus.PENDING

    def test_carrier_error_body(self):
        with patch(REQUEST, return_value=_resp({"error": "invalid waybill"})):
            with pytest.raises(ProviderError, match="invalid waybill"):
                TransExpressAdapter("k").track_shipment("TX-1")

    def test_http_error(self):
        with patch(REQUEST, return_value=_resp({"message": "down"}, status_code=503)):
            with pytest.raises(ProviderError, match="503") as exc:
                TransExpressAdapter("k").track_shipment("TX-1")
        assert exc.value.status_code == 503

    def test_timeout(self):
        with patch(REQUEST, side_effect=requests.Timeout("slow")):
            with pytest.raises(ProviderError, match="timed out"):
                TransExpressAdapter("k").track_shipment("TX-1")

    def test_connection_error(self):
        with patch(REQUEST, side_effect=requests.ConnectionError("refused")):
            with pytest.raises(ProviderError):
                TransExpressAdapter("k").track_shipment("TX-1")

    def test_invalid_json(self):
        with patch(REQUEST, return_value=_resp(ValueError("not json"), text="<html>")):
            with pytest.raises(ProviderError, match="invalid JSON"):
                TransExpressAdapter("k").track_shipment("TX-1")


# ─────────────────────────────────────────────────────────────
# Royal Express
# ─────────────────────────────────────────────────────────────
LOGIN_OK = _resp({"message": "success", "token": "tok-1", "user": {}})

STATUS_ROWS = {
    "status": True,
    "message": "ok",
    "data": [
        {"status": "Picked Up", "status_id": 7, "created_at": "2025-01-20 09:00:00"},
        {"status": "Returned to Sender", "status_id": 17, "created_at": "2025-01-24 15:30:00",
         "description": "Customer refused"},
        {"status": "In Transit", "status_id": 8, "created_at": "2025-01-21 10:00:00"},
        # 중복 행
        {"status": "In Transit", "status_id": 8, "created_at": "2025-01-21 10:00:00"},
    ],
}

TRACKING_ROWS = {
    "status": True,
    "message": "ok",
    "data": [
        {"tracking_number": "RX-1", "status": {"name": "Returned to Sender"},
         "location": "Colombo Hub", "timestamp": "2025-01-24 15:30:00"},
    ],
}

FINANCIAL = {
    "status": True,
    "message": "ok",
    "data": {
        "order_id": "RX-1",
        "total_amount": 4500.5,
        "shipping_cost": 380,
        "tax_amount": 0,
        "discount_amount": 100,
        "payment_status": "COD_PENDING",
        "payment_method": "COD",
        "currency": "LKR",
    },
}


class TestRoyalExpress:
    def test_basic_uses_latest_tracking_entry(self):
        router = _router({"/merchant/login": LOGIN_OK, "/merchant/order/tracking-info": _resp(TRACKING_ROWS)})
        with patch(REQUEST, side_effect=router):
            status = RoyalExpressAdapter("ops@acme.lk", "pw").track_shipment("RX-1")

        assert status == ShipmentStatus.RETURNED
        login = router.seen[0]
        assert login[2]["json"] == {"email": "ops@acme.lk", "password": "pw"}
        assert login[2]["headers"]["X-tenant"] == "royalexpress"
        tracking = router.seen[1]
        assert tracking[2]["params"] == {"waybill_number": "RX-1"}
        assert tracking[2]["headers"]["Authorization"] == "Bearer tok-1"

    def test_login_rejected(self):
        bad_login = _resp({"message": "invalid credentials", "token": None})
        with patch(REQUEST, side_effect=_router({"/merchant/login": bad_login})):
            with pytest.raises(ProviderError, match="Authentication failed"):
                RoyalExpressAdapter("ops@acme.lk", "pw").track_shipment("RX-1")

    def test_token_reused_within_instance(self):
        router = _router({"/merchant/login": LOGIN_OK, "/merchant/order/tracking-info": _resp(TRACKING_ROWS)})
        adapter = RoyalExpressAdapter("ops@acme.lk", "pw")
        with patch(REQUEST, side_effect=router):
            adapter.track_shipment("RX-1")
            adapter.track_shipment("RX-1")
        logins = [s for s in router.seen if s[1].endswith("/merchant/login")]
        assert len(logins) == 1

    def test_enhanced_full(self):
        router = _router(
            {
                "/merchant/login": LOGIN_OK,
                "/merchant/order/RX-1/status": _resp(STATUS_ROWS),
                "/merchant/order/tracking-info": _resp(TRACKING_ROWS),
                "/merchant/order/financial-info": _resp(FINANCIAL),
            }
        )
        with patch(REQUEST, side_effect=router):
            result = RoyalExpressAdapter("ops@acme.lk", "pw").track_shipment_enhanced("RX-1")

        assert result.basic_status == ShipmentStatus.RETURNED
        # 최신순 + 중복 제거
        assert [e.status for e in result.status_history] == [
            "Returned to Sender",
            "In Transit",
            "Picked Up",
        ]
        assert result.status_history[0].is_current is True
        assert not any(e.is_current for e in result.status_history[1:])
        assert result.status_history[0].description == "Customer refused"
        assert result.status_history[0].location == "Colombo Hub"
        assert result.current_location == "Colombo Hub"
        assert result.financial_info.total_amount == Decimal("4500.5")
        assert result.financial_info.payment_method == "COD"
        assert len(result.tracking_info) == 1

    def test_enhanced_tolerates_optional_failures(self):
        router = _router(
            {
                "/merchant/login": LOGIN_OK,
                "/merchant/order/RX-1/status": _resp(STATUS_ROWS),
                "/merchant/order/tracking-info": _resp({"message": "boom"}, status_code=500),
                "/merchant/order/financial-info": requests.ConnectionError("reset"),
            }
        )
        with patch(REQUEST, side_effect=router):
            result = RoyalExpressAdapter("ops@acme.lk", "pw").track_shipment_enhanced("RX-1")

        assert result.basic_status == ShipmentStatus.RETURNED
        assert result.financial_info is None
        assert result.tracking_info == []

    def test_enhanced_requires_status_endpoint(self):
        router = _router(
            {
                "/merchant/login": LOGIN_OK,
                "/merchant/order/RX-1/status": _resp({"status": False, "message": "not found", "data": []}),
            }
        )
        with patch(REQUEST, side_effect=router):
            with pytest.raises(ProviderError, match="Order Status API"):
                RoyalExpressAdapter("ops@acme.lk", "pw").track_shipment_enhanced("RX-1")

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Order Placed", ShipmentStatus.PENDING),
            ("Arrived at Hub", ShipmentStatus.IN_TRANSIT),
            ("Return in Transit", ShipmentStatus.IN_TRANSIT),
            ("Delivery Attempted", ShipmentStatus.OUT_FOR_DELIVERY),
            ("Delivery Confirmed", ShipmentStatus.DELIVERED),
            ("Returned to Hub", ShipmentStatus.RETURNED),
            ("Rescheduled", ShipmentStatus.RESCHEDULED),
            ("Refund Completed", ShipmentStatus.EXCEPTION),
            ("Unheard Of", ShipmentStatus.EXCEPTION),
        ],
    )
    def test_enhanced_vocabulary(self, label, expected):
        assert map_enhanced_status(label) == expected

    @pytest.mark.parametrize("label", sorted(label.title() for label in ENHANCED_STATUS_MAP))
    def test_basic_and_enhanced_agree(self, label):
        """폴백(기본 조회)으로 내려가도 같은 상태 라벨은 같은 정규화 상태"""
        router = _router(
            {
                "/merchant/login": LOGIN_OK,
                "/merchant/order/RX-1/status": _resp(
                    {"status": True, "data": [{"status": label, "created_at": "2025-01-24 15:30:00"}]}
                ),
                "/merchant/order/tracking-info": _resp(
                    {"status": True, "data": [{"status": {"name": label}, "location": "Hub"}]}
                ),
                "/merchant/order/financial-info": _resp({"status": True, "data": None}),
            }
        )
        with patch(REQUEST, side_effect=router):
            basic = RoyalExpressAdapter("ops@acme.lk", "pw").track_shipment("RX-1")
            enhanced = RoyalExpressAdapter("ops@acme.lk", "pw").track_shipment_enhanced("RX-1")

        assert basic == enhanced.basic_status == map_enhanced_status(label)

    def test_expired_token_dropped_on_401(self):
        adapter = RoyalExpressAdapter("ops@acme.lk", "pw")
        expired = _router(
            {
                "/merchant/login": LOGIN_OK,
                "/merchant/order/tracking-info": _resp({"message": "Unauthenticated."}, status_code=401),
            }
        )
        with patch(REQUEST, side_effect=expired):
            with pytest.raises(ProviderError) as exc:
                adapter.track_shipment("RX-1")
        assert exc.value.status_code == 401
        assert adapter._token is None

        router = _router({"/merchant/login": LOGIN_OK, "/merchant/order/tracking-info": _resp(TRACKING_ROWS)})
        with patch(REQUEST, side_effect=router):
            assert adapter.track_shipment("RX-1") == ShipmentStatus.RETURNED
        assert [s[1].endswith("/merchant/login") for s in router.seen] == [True, False]

    def test_server_error_keeps_token(self):
        adapter = RoyalExpressAdapter("ops@acme.lk", "pw")
        router = _router(
            {
                "/merchant/login": LOGIN_OK,
                "/merchant/order/tracking-info": _resp({"message": "boom"}, status_code=503),
            }
        )
        with patch(REQUEST, side_effect=router):
            with pytest.raises(ProviderError) as exc:
                adapter.track_shipment("RX-1")
        assert exc.value.status_code == 503
        assert adapter._token == "tok-1"


# ─────────────────────────────────────────────────────────────
# Farda Express
# ─────────────────────────────────────────────────────────────
class TestFardaExpress:
    @pytest.mark.parametrize(
        "payload, expected",
        [
            ({"data": {"status_code": "4"}}, ShipmentStatus.DELIVERED),
            ({"data": {"status_code": 5}}, ShipmentStatus.RETURNED),
            ({"data": {"current_status": "Out for Delivery"}}, ShipmentStatus.OUT_FOR_DELIVERY),
            ({"current_status": "Rescheduled"}, ShipmentStatus.RESCHEDULED),
            ({"data": {}}, ShipmentStatus.PENDING),
        ],
    )
    def test_status_mapping(self, payload, expected):
        with patch(REQUEST, return_value=_resp(payload)) as m:
            assert FardaExpressAdapter("c1", "k1").track_shipment("FD-1") == expected
        sent = m.call_args.kwargs["data"]
        assert sent == {"client_id": "c1", "api_key": "k1", "waybill_id": "FD-1"}

    def test_error_status(self):
        with patch(REQUEST, return_value=_resp({"status": "error", "message": "bad key"})):
            with pytest.raises(ProviderError, match="bad key"):
                FardaExpressAdapter("c1", "k1").track_shipment("FD-1")
