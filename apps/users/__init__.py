"""Users app package.

Defines the custom user model with platform roles (buyer, partner,
employee, admin). Partners own excursions; employees redeem tickets on a
partner's behalf. Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project.
"""
