"""Emotion check-in package.

Feature modules (users, checkins, dashboard, ...) each expose a thin Flask
controller on top of service and repository layers.
"""
