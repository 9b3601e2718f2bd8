"""Payroll Admin package.

This package is organized by feature modules (users, roles, permissions,
employees, payroll, activity, ...) with a thin Flask controller layer on top of
service/repository layers.
"""
