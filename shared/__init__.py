"""
Shared kernel

Domain base classes, error types and the application plumbing (message
bus, unit of work) that the rooms, users and bookings apps build on.
"""
