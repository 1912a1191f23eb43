from supabase import create_client, Client
from app.config.settings import settings


class SystemContextUnavailable(RuntimeError):
    """Raised when a system-context client is requested without a service role key."""


class SupabaseClient:
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        """Fresh anon client. Auth calls store the session on the client, so one is never shared across requests."""
        return create_client(settings.supabase_url, settings.supabase_key)

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Only for system-context paths."""
        if cls._service_client is None:
            if not settings.supabase_service_role_key:
                raise SystemContextUnavailable(
                    "SUPABASE_SERVICE_ROLE_KEY is not configured"
                )
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client

    @classmethod
    def get_user_client(cls, access_token: str) -> Client:
        """Anon client whose PostgREST requests carry the caller's JWT, so RLS applies."""
        client = cls.get_client()
        client.postgrest.auth(access_token)
        return client

    @classmethod
    def reset_client(cls):
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()
