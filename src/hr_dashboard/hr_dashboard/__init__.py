"""HR Dashboard attendance engine.

This package is organized by feature modules (attendance, reports, ...)
with a thin Flask controller layer and service/repository layers.
"""
