"""Visitor Management System package.

This package is organized by feature modules (visitors, organization, employees, ...)
with a thin Flask controller layer and service/repository layers behind it.
"""
