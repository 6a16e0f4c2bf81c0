"""
Identity module - user identity for the record store key.
"""
from fitdash.services.identity.provider import (
    AnonymousIdentityProvider,
    Identity,
    IdentityError,
    IdentityProvider,
)

__all__ = [
    "AnonymousIdentityProvider",
    "Identity",
    "IdentityError",
    "IdentityProvider",
]
