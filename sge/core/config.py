# sge/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from loguru import logger
from pathlib import Path
import warnings

DEFAULT_SECRET_KEY = "!!!GENERATE_A_STRONG_SECRET_KEY_32_BYTES_HEX!!!"


def find_dotenv_path(filename: str = '.env', usecwd: bool = False) -> str | None:
    """Walks up from the package directory (then CWD) looking for a dotenv file."""
    start_dir = Path.cwd() if usecwd else Path(__file__).resolve().parent
    current_dir = start_dir
    for _ in range(10):
        env_path = current_dir / filename
        if env_path.is_file():
            logger.debug(f"Found {filename} file at: {env_path}")
            return str(env_path)
        parent_dir = current_dir.parent
        if parent_dir == current_dir:
            break
        current_dir = parent_dir
    if not usecwd:
        env_path_cwd = Path.cwd() / filename
        if env_path_cwd.is_file():
            logger.debug(f"Found {filename} file at CWD: {env_path_cwd}")
            return str(env_path_cwd)
    return None


class Settings(BaseSettings):
    PROJECT_NAME: str = "YF Consultoria SGE"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database
    MONGODB_URI: str = "mongodb://localhost:27017/sge_db"
    MONGODB_DB_NAME: str | None = None

    # Security
    SECRET_KEY: str = DEFAULT_SECRET_KEY  # For JWT
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Frontend (React dashboard)
    FRONTEND_ORIGIN: str = "http://localhost:5173"

    # Rate limiting (login/register)
    RATE_LIMIT_ENABLED: bool = True
    AUTH_RATE_LIMIT: str = "20/minute"

    model_config = SettingsConfigDict(
        # .env primeiro, .env.local pode sobrescrever
        env_file=tuple(p for p in (find_dotenv_path('.env'), find_dotenv_path('.env.local')) if p),
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() in ("development", "dev", "local")


@lru_cache()
def get_settings() -> Settings:
    """Carrega e valida as configurações da aplicação."""
    logger.info("Loading application settings...")
    env_files_found = [p for p in [find_dotenv_path('.env'), find_dotenv_path('.env.local')] if p]
    if env_files_found:
        logger.info(f"Loading environment variables from: {', '.join(env_files_found)}")
    else:
        logger.debug("No .env file found. Loading settings from system environment variables only.")

    try:
        settings_instance = Settings()
    except ValueError as val_err:
        logger.critical(f"CRITICAL ERROR in settings validation: {val_err}")
        raise SystemExit(f"Settings validation failed: {val_err}")

    if settings_instance.SECRET_KEY == DEFAULT_SECRET_KEY:
        logger.warning("SECURITY WARNING: Using default SECRET_KEY. Generate a strong key (e.g., `openssl rand -hex 32`) and set it in your environment!")
        if not settings_instance.is_development:
            warnings.warn("SECURITY WARNING: Using default SECRET_KEY outside development!")

    logger.info(f"Settings loaded for environment '{settings_instance.ENVIRONMENT}'.")
    return settings_instance


settings = get_settings()
