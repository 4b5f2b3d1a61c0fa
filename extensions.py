from flask import current_app, g
from flask_wtf.csrf import CSRFProtect

from rest_client import RestClient


class RestBackend:
    """Flask extension that owns the backend client."""

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        if not app.config.get("SUPABASE_URL"):
            app.logger.warning("SUPABASE_URL is not set; backend calls will fail")

        app.config.setdefault("LIST_CACHE_MAX_ENTRIES", 64)
        app.extensions["rest_backend"] = RestClient(
            base_url=app.config.get("SUPABASE_URL", ""),
            api_key=app.config.get("SUPABASE_ANON_KEY", ""),
            timeout=app.config.get("BACKEND_TIMEOUT_SECONDS", 15),
        )


backend = RestBackend()
csrf = CSRFProtect()


def get_client():
    return current_app.extensions["rest_backend"]


def get_cache():
    """Select results memoized for the current request only."""
    if "list_cache" not in g:
        from modules.vehicles.services import ListCache

        g.list_cache = ListCache(max_entries=current_app.config["LIST_CACHE_MAX_ENTRIES"])
    return g.list_cache
