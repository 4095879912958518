"""Attendance Tracker package.

Organized by feature modules (attendance, absence, users, reports) with a thin
Flask controller layer on top of service/repository layers. The status and
absence-reconciliation rules live in ``attendance`` and ``absence``.
"""
