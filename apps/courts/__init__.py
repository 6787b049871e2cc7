"""Courts app package.

Holds the bookable courts: their hourly rate and operating window. Courts
are edited by staff only and are never deleted while bookings reference
them.
"""
