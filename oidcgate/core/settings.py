"""Application settings loaded from environment variables."""

from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from oidcgate.core.errors import ConfigMissingError

ENV_PREFIX = "AUTH0_"
HTTP_TIMEOUT_DEFAULT = 10.0
STATE_COOKIE_MAX_AGE_DEFAULT = 600

# Checked in this order; the first one absent is reported.
REQUIRED_FIELDS = ("client_secret", "domain", "client_id", "redirect_uri")


class DatabaseSettings(BaseSettings):
    """Key-value store connection settings."""

    model_config = SettingsConfigDict(env_prefix="AUTH_DB_")

    url: str = "sqlite+aiosqlite:///.data/oidcgate.db"
    echo: bool = False


class AuthSettings(BaseSettings):
    """Identity provider and cookie settings."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)

    domain: str
    client_id: str
    client_secret: SecretStr
    redirect_uri: str
    scope: str = "openid profile email"
    http_timeout: float = HTTP_TIMEOUT_DEFAULT
    state_cookie_max_age: int = STATE_COOKIE_MAX_AGE_DEFAULT
    cookie_secure: bool = True
    static_dir: str = "static"

    @property
    def issuer(self) -> str:
        """Issuer value the provider puts in its ID tokens."""
        return f"https://{self.domain}/"


def _env_var(field: str) -> str:
    return f"{ENV_PREFIX}{field}".upper()


def load_settings() -> AuthSettings:
    """Load AuthSettings, failing when any provider setting is absent."""
    try:
        settings = AuthSettings()
    except ValidationError as exc:
        missing = {err["loc"][0] for err in exc.errors() if err["type"] == "missing"}
        for field in REQUIRED_FIELDS:
            if field in missing:
                raise ConfigMissingError(_env_var(field)) from exc
        raise

    values = {
        "client_secret": settings.client_secret.get_secret_value(),
        "domain": settings.domain,
        "client_id": settings.client_id,
        "redirect_uri": settings.redirect_uri,
    }
    for field in REQUIRED_FIELDS:
        if not values[field].strip():
            raise ConfigMissingError(_env_var(field))
    return settings
