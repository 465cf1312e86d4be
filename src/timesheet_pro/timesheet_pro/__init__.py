"""Timesheet Pro package.

Organized by feature modules (timesheets, leaves, projects, ...) around an
approval-and-aggregation core, with a thin Flask controller layer on top of
service/store layers.
"""
