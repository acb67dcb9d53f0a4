"""AttendSync package.

Feature modules (users, classes, students, attendance, permissions) each keep
their model, repository interface, MySQL repository and service side by side.
Flask controllers live in ``web`` and stay thin.
"""
