"""Users app package.

This module initializes the users app: a custom user model carrying a
``User`` or ``Admin`` role, registration and login issuing JWTs, and
admin user management. Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project.
"""
