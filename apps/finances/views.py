"""API views for refunds.

Customers see the refunds of their own bookings; staff see all of them
and complete or reject pending ones.
"""

from __future__ import annotations

from rest_framework import mixins, permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.actors import Actor

from . import services
from .models import Refund
from .serializers import RefundDecisionSerializer, RefundSerializer


class RefundViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Viewset for listing refunds and deciding on them."""

    queryset = Refund.objects.select_related("booking").all()
    serializer_class = RefundSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["status", "method"]
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        return qs.filter(booking__user=user)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAdminUser])
    def complete(self, request, pk=None):  # type: ignore
        refund = services.complete_refund(Actor.from_user(request.user), int(pk))
        return Response(RefundSerializer(refund).data)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAdminUser])
    def reject(self, request, pk=None):  # type: ignore
        serializer = RefundDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        refund = services.reject_refund(Actor.from_user(request.user), int(pk), serializer.validated_data["note"])
        return Response(RefundSerializer(refund).data)
