from django.urls import path

from .views import TrackingUpdatesCronAPI

app_name = "shipments"

urlpatterns = [
    # 스케줄러 트리거 (트레일링 슬래시 필수)
    path("tracking-updates/", TrackingUpdatesCronAPI.as_view(), name="tracking-updates"),
]
