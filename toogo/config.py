import os


class Config:
    """Base configuration. Shared across all environments."""

    # --- Required ---
    SECRET_KEY = os.environ.get("SECRET_KEY")

    # Handle DATABASE_URL: some PaaS providers (Railway, Heroku) use
    # "postgres://" which SQLAlchemy 1.4+ doesn't accept.
    _db_url = os.environ.get("DATABASE_URL", "")
    if _db_url.startswith("postgres://"):
        _db_url = _db_url.replace("postgres://", "postgresql://", 1)
    SQLALCHEMY_DATABASE_URI = _db_url or None

    # --- Hosting provider (Vercel) ---
    VERCEL_API_TOKEN = os.environ.get("VERCEL_API_TOKEN")
    VERCEL_PROJECT_ID = os.environ.get("VERCEL_PROJECT_ID")
    VERCEL_TEAM_ID = os.environ.get("VERCEL_TEAM_ID")  # optional team scope

    # --- API access ---
    # Bearer token expected on /api/domains/* (admin dashboard + scheduler).
    SETUP_API_KEY = os.environ.get("SETUP_API_KEY")

    # --- Domain setup tuning ---
    # Seconds to wait for Vercel to register www.<domain> before the redirect.
    DOMAIN_SETUP_REDIRECT_DELAY = float(
        os.environ.get("DOMAIN_SETUP_REDIRECT_DELAY", 2.0)
    )
    DNS_RETRY_MAX_ATTEMPTS = int(os.environ.get("DNS_RETRY_MAX_ATTEMPTS", 10))

    # --- Supabase (auth admin lookup) ---
    SUPABASE_URL = os.environ.get("SUPABASE_URL")                # e.g. https://xyz.supabase.co
    SUPABASE_SERVICE_KEY = os.environ.get("SUPABASE_SERVICE_KEY") # service_role key

    # --- Email (SMTP) ---
    MAIL_SMTP_HOST = os.environ.get("MAIL_SMTP_HOST", "smtp.gmail.com")
    MAIL_SMTP_PORT = int(os.environ.get("MAIL_SMTP_PORT", 587))
    MAIL_USERNAME = os.environ.get("MAIL_USERNAME")
    MAIL_PASSWORD = os.environ.get("MAIL_PASSWORD")
    MAIL_FROM_NAME = os.environ.get("MAIL_FROM_NAME", "Toogo")
    MAIL_FROM_ADDRESS = os.environ.get("MAIL_FROM_ADDRESS")  # defaults to MAIL_USERNAME

    # --- SQLAlchemy ---
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }

    @staticmethod
    def validate():
        """Fail fast if required env vars are missing."""
        required = [
            "SECRET_KEY",
            "DATABASE_URL",
            "VERCEL_API_TOKEN",
            "VERCEL_PROJECT_ID",
            "SETUP_API_KEY",
        ]
        missing = [v for v in required if not os.environ.get(v)]
        if missing:
            raise RuntimeError(
                f"Missing required environment variables: {', '.join(missing)}"
            )


class DevConfig(Config):
    """Local development."""

    DEBUG = True


class TestConfig(Config):
    """Testing: in-memory SQLite, no network credentials, no delays."""

    TESTING = True
    DEBUG = True
    SECRET_KEY = "test-secret-key-not-for-production"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    VERCEL_API_TOKEN = "vercel_test_token"
    VERCEL_PROJECT_ID = "prj_test"
    VERCEL_TEAM_ID = "team_test"
    SETUP_API_KEY = "setup-test-key"
    DOMAIN_SETUP_REDIRECT_DELAY = 0
    DNS_RETRY_MAX_ATTEMPTS = 10
    SUPABASE_URL = None
    SUPABASE_SERVICE_KEY = None
    MAIL_USERNAME = None
    MAIL_PASSWORD = None
    RATELIMIT_ENABLED = False  # disable rate limiting in tests
    SERVER_NAME = "localhost"

    @staticmethod
    def validate():
        """Skip validation in test mode, everything is hardcoded."""
        pass


class ProdConfig(Config):
    """Production."""

    DEBUG = False


config_by_name = {
    "development": DevConfig,
    "production": ProdConfig,
    "testing": TestConfig,
}
