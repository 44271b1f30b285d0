# settings.py
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class TCSConfig(BaseModel):
    """Snapshot of the TCS credentials, captured once per adapter."""
    model_config = ConfigDict(frozen=True)

    client_id: str = ""
    base_url: str = ""
    username: str = ""
    password: str = ""
    tracking_url: str = ""
    timeout: float = 45.0


class LCSConfig(BaseModel):
    """Snapshot of the LCS credentials, captured once per adapter."""
    model_config = ConfigDict(frozen=True)

    mode: str = "sandbox"
    staging_url: str = "https://merchantapistaging.leopardscourier.com/api/"
    production_url: str = "https://merchantapi.leopardscourier.com/api/"
    api_key: str = ""
    password: str = ""
    courier_name: str = ""
    courier_code: str = ""
    strict_batch_validation: bool = False
    storage_dir: str = "storage"
    public_base_url: str = "http://localhost:8000/storage"
    timeout: float = 45.0

    @property
    def base_url(self) -> str:
        return self.staging_url if self.mode == "sandbox" else self.production_url


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DEFAULT_COURIER: str = "tcs"
    HTTP_TIMEOUT: float = 45.0
    LOG_LEVEL: str = "INFO"

    # TCS
    TCS_CLIENT_ID: str = ""
    TCS_BASE_URL: str = ""
    TCS_USERNAME: str = ""
    TCS_PASSWORD: str = ""
    TCS_TRACKING_URL: str = ""

    # LCS
    LCS_MODE: str = "sandbox"
    LCS_STAGING_URL: str = "https://merchantapistaging.leopardscourier.com/api/"
    LCS_PRODUCTION_URL: str = "https://merchantapi.leopardscourier.com/api/"
    LCS_API_KEY: str = ""
    LCS_PASSWORD: str = ""
    LCS_COURIER_NAME: str = ""
    LCS_COURIER_CODE: str = ""
    # batch items failing validation are still submitted unless this is on
    LCS_STRICT_BATCH_VALIDATION: bool = False

    # Load sheet PDFs
    STORAGE_DIR: str = "storage"
    PUBLIC_BASE_URL: str = "http://localhost:8000/storage"

    def tcs_config(self) -> TCSConfig:
        return TCSConfig(
            client_id=self.TCS_CLIENT_ID,
            base_url=self.TCS_BASE_URL,
            username=self.TCS_USERNAME,
            password=self.TCS_PASSWORD,
            tracking_url=self.TCS_TRACKING_URL,
            timeout=self.HTTP_TIMEOUT,
        )

    def lcs_config(self) -> LCSConfig:
        return LCSConfig(
            mode=(self.LCS_MODE or "sandbox").lower(),
            staging_url=self.LCS_STAGING_URL,
            production_url=self.LCS_PRODUCTION_URL,
            api_key=self.LCS_API_KEY,
            password=self.LCS_PASSWORD,
            courier_name=self.LCS_COURIER_NAME,
            courier_code=self.LCS_COURIER_CODE,
            strict_batch_validation=self.LCS_STRICT_BATCH_VALIDATION,
            storage_dir=self.STORAGE_DIR,
            public_base_url=self.PUBLIC_BASE_URL,
            timeout=self.HTTP_TIMEOUT,
        )

    def courier_config(self, courier_key: str) -> Optional[BaseModel]:
        key = (courier_key or "").strip().lower()
        if key == "tcs":
            return self.tcs_config()
        if key == "lcs":
            return self.lcs_config()
        return None


settings = Settings()
