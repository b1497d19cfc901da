"""
Token authentication backend.

Kept in its own module so that Django REST framework can import it
during initialisation without pulling in any views.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """Legacy token authentication using the ``Token`` keyword.

    Clients that prefer JWT send ``Authorization: Bearer <access>``
    instead, which is handled by simplejwt's authentication class.
    """

    keyword = 'Token'
