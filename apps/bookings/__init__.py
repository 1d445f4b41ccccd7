"""Bookings app package.

This app encapsulates the room booking scheduler: the Booking aggregate,
the command handlers that validate and conflict-check reservation
intervals under a per-room lock, and the event hub that streams
booking changes to connected clients. Intervals are half-open, so
back-to-back bookings on the same room never collide.
"""
