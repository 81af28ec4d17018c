"""Textile factory payroll package.

Organized by feature modules (employees, attendance, payroll) with a thin
Flask controller layer over service/repository layers. All salary arithmetic
lives in ``payroll.calculator`` and is shared by the preview and the
persisting code paths.
"""
