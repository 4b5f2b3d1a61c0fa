import os


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key')

    # Supabase project URL, e.g. https://xyzcompany.supabase.co
    SUPABASE_URL = (os.environ.get('SUPABASE_URL') or '').strip().rstrip('/')
    SUPABASE_ANON_KEY = (os.environ.get('SUPABASE_ANON_KEY') or '').strip()

    BACKEND_TIMEOUT_SECONDS = float(os.environ.get('BACKEND_TIMEOUT_SECONDS', '15'))

    MAKE_TABLE = os.environ.get('MAKE_TABLE', 'VehicleMake')
    MODEL_TABLE = os.environ.get('MODEL_TABLE', 'VehicleModel')

    # per-request memo of backend selects
    LIST_CACHE_MAX_ENTRIES = int(os.environ.get('LIST_CACHE_MAX_ENTRIES', '64'))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-key'
    WTF_CSRF_ENABLED = False
    SUPABASE_URL = 'https://backend.test'
    SUPABASE_ANON_KEY = 'test-anon-key'
