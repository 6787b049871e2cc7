"""Scheduling app package.

Owns the per-hour ``Schedule`` projection of bookings, the slot calendar,
the availability resolver and the synchronizer that keeps the projection
in line with the booking lifecycle.
"""
