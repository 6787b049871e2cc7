"""API views for courts."""

from __future__ import annotations

from django.db.models import ProtectedError  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from .models import Court
from .serializers import CourtSerializer


class IsStaffOrReadOnly(permissions.BasePermission):
    """Anyone may browse courts; only staff edit them."""

    def has_permission(self, request, view):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_staff)


class CourtViewSet(viewsets.ModelViewSet):
    serializer_class = CourtSerializer
    permission_classes = [IsStaffOrReadOnly]
    filterset_fields = ["is_active"]

    def get_queryset(self):  # type: ignore
        qs = Court.objects.all()
        if not self.request.user.is_staff:
            qs = qs.active()
        return qs

    def destroy(self, request, *args, **kwargs):  # type: ignore
        court = self.get_object()
        try:
            court.delete()
        except ProtectedError:
            return Response(
                {"detail": "Court has bookings and cannot be deleted; deactivate it instead."},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)
