"""Timesheet calculation engine.

This package is organized by feature modules (events, timesheets, summaries,
batch, scheduler, ...) with a thin Flask controller layer over service and
repository layers.
"""
