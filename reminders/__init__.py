"""Medication reminder application.

This package contains models, serializers, views and route registrations
for patients, doctors, medication schedules and consumption history.
"""
