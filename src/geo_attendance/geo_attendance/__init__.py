"""Geo Attendance package.

Turns location samples into ENTER/EXIT attendance events. Organized by
feature modules (geometry, boundaries, policy, attendance, offline, sync,
tracking) with a thin Flask controller layer over service/repository layers.
"""
