"""Notifications app package.

Stores the in-app notifications customers see when their bookings,
payments and refunds change. Notifications are created asynchronously
from domain events after the change behind them has committed; each one
can be marked as read.
"""
