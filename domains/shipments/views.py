# domains/shipments/views.py
import logging

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from shared.api_markers import ErrorSerializer
from shared.permissions import cron_secret_matches

from .serializers import ReconciliationRunSerializer
from .services import run_reconciliation

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------
# GET /api/v1/cron/tracking-updates/
# 스케줄러 전용: Authorization: Bearer <CRON_SECRET_KEY>
# 응답 형태: { "processed": n, "updates": [...] }
# --------------------------------------------------------------------
class TrackingUpdatesCronAPI(APIView):
    # JWT 인증을 타지 않고 시크릿 헤더만 본다
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="Authorization",
                location=OpenApiParameter.HEADER,
                required=True,
                type=str,
                description="Bearer <CRON_SECRET_KEY>",
            ),
        ],
        responses={200: ReconciliationRunSerializer, 401: ErrorSerializer, 500: ErrorSerializer},
    )
    def get(self, request):
        if not cron_secret_matches(request):
            return Response({"error": "Unauthorized"}, status=status.HTTP_401_UNAUTHORIZED)

        try:
            run = run_reconciliation()
        except Exception:
            logger.exception("Error processing tracking updates")
            return Response(
                {"error": "Failed to process tracking updates"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(run.as_dict(), status=status.HTTP_200_OK)
