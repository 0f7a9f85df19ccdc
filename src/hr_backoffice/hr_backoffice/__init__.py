"""HR back office package.

Feature modules (attendance, payroll, loans, deductions, ...) each carry a
domain model, a repository interface with its MySQL implementation, a service
and a thin Flask controller.
"""
