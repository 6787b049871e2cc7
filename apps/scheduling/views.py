"""API views for the schedule grid and staff overrides."""

from __future__ import annotations

from django.shortcuts import get_object_or_404  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.courts.models import Court
from shared.domain.actors import Actor

from . import availability, synchronizer
from .serializers import OverrideSerializer, ScheduleSerializer, SlotQuerySerializer, WeekQuerySerializer


class ScheduleViewSet(viewsets.ViewSet):
    """Day and week grids, single-slot lookups and maintenance/holiday blocks."""

    permission_classes = [permissions.IsAuthenticatedOrReadOnly]

    def list(self, request):  # type: ignore
        query = SlotQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        court = get_object_or_404(Court, pk=query.validated_data["court"])
        day = query.validated_data["date"]
        return Response({"court": court.pk, "date": day, "slots": availability.day_grid(court, day)})

    @action(detail=False, methods=["get"])
    def week(self, request):  # type: ignore
        query = WeekQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        court = get_object_or_404(Court, pk=query.validated_data["court"])
        start = query.validated_data.get("start") or timezone.localdate()
        grid = availability.week_grid(court, start, query.validated_data.get("days"))
        return Response({"court": court.pk, "start": start, "days": grid})

    @action(detail=False, methods=["get"])
    def resolve(self, request):  # type: ignore
        query = SlotQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        if "start_time" not in data:
            return Response({"start_time": ["This field is required."]}, status=status.HTTP_400_BAD_REQUEST)
        result = availability.resolve(data["court"], data["date"], data["start_time"])
        return Response({
            "status": result.status.value,
            "owner_display_name": result.owner_display_name,
            "raw_status": result.raw_status,
        })

    @action(detail=False, methods=["post"], permission_classes=[permissions.IsAdminUser])
    def block(self, request):  # type: ignore
        serializer = OverrideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        row = synchronizer.set_override(
            Actor.from_user(request.user),
            data["court"],
            data["date"],
            data["start_time"],
            data.get("status", "maintenance"),
            data.get("note", ""),
        )
        return Response(ScheduleSerializer(row).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], permission_classes=[permissions.IsAdminUser])
    def unblock(self, request):  # type: ignore
        serializer = OverrideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        row = synchronizer.clear_override(
            Actor.from_user(request.user), data["court"], data["date"], data["start_time"],
        )
        if row is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(ScheduleSerializer(row).data)
