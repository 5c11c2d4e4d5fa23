"""HR workflow package.

Feature modules (attendance, leaves, notifications, employees) each carry a
domain model, a repository interface, a MySQL repository and a service. A thin
Flask controller layer sits on top of the services.
"""
