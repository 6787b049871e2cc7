"""
Shared Kernel

Base classes and utilities shared by the courts, scheduling, bookings,
finances and notifications contexts: domain building blocks, the error
taxonomy, the unit of work and the in-process message bus.
"""
