"""Staff attendance service.

Feature modules (attendance, holidays, users, reports) each keep a plain
domain model, a repository protocol with a MySQL implementation, a service
holding the business rules and a thin Flask controller.
"""
