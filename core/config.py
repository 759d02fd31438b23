# Файл конфігурації, завантажує змінні з .env
from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    model_config = ConfigDict(extra="ignore", env_file=".env")

    # 1. Firebase / Firestore
    # Якщо шлях не задано: використовуються Application Default Credentials
    FIREBASE_SERVICE_ACCOUNT_KEY_PATH: str | None = None
    FIREBASE_PROJECT_ID: str | None = None

    # 2. Fleet service (номери реєстрації вантажівок)
    FLEET_SERVICE_URL: str = "http://localhost:3002"
    FLEET_LOOKUP_TIMEOUT_SECONDS: float = 3.0

    # 3. CORS
    FRONTEND_ORIGIN: str = ""

    # 4. Логування
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = "finance.log"
    ERROR_LOG_FILE: str | None = "finance-error.log"

    SERVICE_NAME: str = "finance-service"


settings = Settings()
