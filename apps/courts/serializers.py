"""Serializers for courts."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Court


class CourtSerializer(serializers.ModelSerializer):
    class Meta:
        model = Court
        fields = [
            "id",
            "name",
            "description",
            "hourly_rate",
            "opening_hour",
            "closing_hour",
            "is_active",
        ]

    def validate(self, attrs):  # type: ignore
        opening = attrs.get("opening_hour", getattr(self.instance, "opening_hour", None))
        closing = attrs.get("closing_hour", getattr(self.instance, "closing_hour", None))
        if opening is not None and closing is not None and closing <= opening:
            raise serializers.ValidationError("Closing hour must be after opening hour.")
        return attrs
