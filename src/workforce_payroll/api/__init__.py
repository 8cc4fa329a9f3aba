"""HTTP API for workforce payroll."""
