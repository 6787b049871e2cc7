"""URL routing for courts."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import CourtViewSet

router = SimpleRouter()
router.register(r"", CourtViewSet, basename="court")

urlpatterns = [
    path("", include(router.urls)),
]
