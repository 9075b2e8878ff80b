import os
from typing import List, Tuple


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(
            f"Missing required environment variable '{name}'. "
            "Set it in the environment or the container .env."
        )
    return value


# PUBLIC_INTERFACE
def secret_key() -> str:
    """Key used to sign JWTs. Required; there is no default."""
    return _required_env("SECRET_KEY")


# PUBLIC_INTERFACE
def jwt_algorithm() -> str:
    return os.getenv("JWT_ALGORITHM", "HS256")


# PUBLIC_INTERFACE
def jwt_exp_minutes() -> int:
    return int(os.getenv("JWT_EXPIRES_MINUTES", "1440"))  # default: 1 day


# PUBLIC_INTERFACE
def bcrypt_rounds() -> int:
    # 4 is the bcrypt minimum; tests set it to keep hashing fast.
    return int(os.getenv("BCRYPT_ROUNDS", "12"))


# PUBLIC_INTERFACE
def database_dsn() -> str:
    """
    Build DSN from the standardized database env vars.

    Uses:
      - POSTGRES_URL (optional full DSN; if provided, it wins)
      - POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_DB, POSTGRES_PORT, POSTGRES_HOST
    """
    url = os.getenv("POSTGRES_URL")
    if url:
        return url

    user = _required_env("POSTGRES_USER")
    password = _required_env("POSTGRES_PASSWORD")
    db = _required_env("POSTGRES_DB")
    port = os.getenv("POSTGRES_PORT", "5432")
    host = os.getenv("POSTGRES_HOST", "localhost")
    return f"postgresql://{user}:{password}@{host}:{port}/{db}"


# PUBLIC_INTERFACE
def pool_size() -> Tuple[int, int]:
    """(min, max) connections for the pool."""
    return int(os.getenv("DB_POOL_MIN", "1")), int(os.getenv("DB_POOL_MAX", "10"))


# PUBLIC_INTERFACE
def cors_origins() -> List[str]:
    """Allowed CORS origins; comma separated CORS_ALLOW_ORIGINS, all by default."""
    env_val = os.getenv("CORS_ALLOW_ORIGINS")
    if not env_val:
        return ["*"]
    return [o.strip() for o in env_val.split(",") if o.strip()]


# PUBLIC_INTERFACE
def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
