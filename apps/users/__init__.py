"""Users app package.

Defines the local principal record that authenticated requests resolve
to. Roles are ``member`` and ``admin``; every role or ownership check
in the project goes through ``apps.users.authorization``. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout the
project.
"""
