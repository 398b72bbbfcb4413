# domains/shipments/errors.py
from __future__ import annotations


class ReconciliationError(Exception):
    """주문 단위 동기화 실패의 공통 부모. code 는 응답/로그용 짧은 분류값."""

    code = "reconciliation"


class ConfigurationError(ReconciliationError):
    """테넌트의 택배사 자격증명이 없거나 형식이 잘못됨 (재시도 없음)"""

    code = "configuration"


class ProviderError(ReconciliationError):
    """택배사 API 호출 실패: 네트워크/인증/타임아웃/응답 형식 오류"""

    code = "provider"

    def __init__(self, message: str = "", *, status_code: int | None = None):
        super().__init__(message)
        # 2xx 가 아닌 HTTP 응답이면 그 상태 코드, 그 밖의 실패는 None
        self.status_code = status_code


class PersistenceError(ReconciliationError):
    """DB 쓰기/트랜잭션 실패. 부분 반영 없이 롤백된 상태를 뜻한다."""

    code = "persistence"


class UnsupportedProviderError(ReconciliationError):
    """주문의 택배사에 대응하는 어댑터가 없음"""

    code = "unsupported_provider"
