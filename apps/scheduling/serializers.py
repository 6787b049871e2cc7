"""Serializers for the schedule API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.derivation import OVERRIDE_STATUSES
from .models import Schedule


class ScheduleSerializer(serializers.ModelSerializer):
    shown_status = serializers.CharField(source="shown_status.value", read_only=True)

    class Meta:
        model = Schedule
        fields = [
            "id",
            "court",
            "date",
            "start_time",
            "end_time",
            "status",
            "shown_status",
            "display_name",
            "note",
            "booking",
            "updated_at",
        ]
        read_only_fields = fields


class SlotQuerySerializer(serializers.Serializer):
    court = serializers.IntegerField()
    date = serializers.DateField()
    start_time = serializers.TimeField(required=False)


class WeekQuerySerializer(serializers.Serializer):
    court = serializers.IntegerField()
    start = serializers.DateField(required=False)
    days = serializers.IntegerField(required=False, min_value=1, max_value=31)


class OverrideSerializer(serializers.Serializer):
    court = serializers.IntegerField()
    date = serializers.DateField()
    start_time = serializers.TimeField()
    status = serializers.ChoiceField(
        choices=sorted(status.value for status in OVERRIDE_STATUSES),
        required=False,
    )
    note = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
