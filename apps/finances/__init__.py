"""Finances app package.

Tracks refunds owed to customers whose paid bookings were cancelled and
lets staff complete or reject them.
"""
