"""Error handling utilities."""


class IDRHubError(Exception):
    """Base exception for the IDRHub client."""
    pass


class ConfigError(IDRHubError):
    """Missing or invalid configuration."""
    pass


class SupabaseError(IDRHubError):
    """Supabase operation error."""
    pass


class PreconditionError(IDRHubError):
    """Input rejected before any remote call was made."""
    pass


class AuthenticationRequired(PreconditionError):
    """Operation needs a signed-in user."""
    pass
