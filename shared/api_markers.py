# shared/api_markers.py
"""
API 문서화용 마커 시리얼라이저

@extend_schema 에서 요청 바디가 없거나 응답 형태만 알리고 싶을 때 사용한다.
"""
from rest_framework import serializers


class EmptySerializer(serializers.Serializer):
    """본문이 없는 요청에 쓰는 더미 시리얼라이저"""

    pass


class ErrorSerializer(serializers.Serializer):
    """{"error": "..."} 형태의 오류 응답"""

    error = serializers.CharField()
