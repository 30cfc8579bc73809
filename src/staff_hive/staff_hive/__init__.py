"""Staff Hive Central backend package.

This package is organized by feature modules (attendance, payroll, employees,
users) with a thin Flask controller layer over service/repository layers.
"""
