"""Rooms app package.

This app manages the room inventory of the coworking space
(workspaces and conference rooms) and exposes the room directory
used by the booking scheduler to resolve room ids.
"""
