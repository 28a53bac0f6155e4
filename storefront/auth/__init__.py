"""Identity handling for the storefront session."""
from .identity import Identity, IdentityProvider, bind_supabase_auth, identity_from_session

__all__ = [
    "Identity",
    "IdentityProvider",
    "bind_supabase_auth",
    "identity_from_session",
]
