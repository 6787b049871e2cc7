"""Bookings app package.

This app encapsulates the booking lifecycle: creating a hold on court
slots, recording payment, confirmation, cancellation with refunds and
finishing. Every transition runs inside one database transaction together
with the schedule rows it projects, and emits domain events after commit.
"""
