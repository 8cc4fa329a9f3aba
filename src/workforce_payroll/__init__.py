"""Workforce payroll: pay periods, hours and gross pay calculation."""

__version__ = "0.1.0"
