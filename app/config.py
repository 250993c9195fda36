from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Downstream SOW drafting service (called by /api/generate-sow)
    sow_api_url: str = Field(
        "http://172.29.100.196:8000/api/SOW_consultancy",
        alias="SOW_API_URL",
    )
    sow_timeout_seconds: float = Field(30.0, alias="SOW_TIMEOUT_SECONDS")

    # Where the synchronous client finds the proxy route
    sow_proxy_url: str = Field(
        "http://localhost:8000/api/generate-sow",
        alias="SOW_PROXY_URL",
    )

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# Convenience accessor for settings
settings = get_settings()


# -----------------------------
# Static boilerplate used by the RFP document assembler
# -----------------------------
ORG_NAME = "Gujarat Mineral Development Corporation Limited"
ORG_SHORT = "GMDC"
ORG_ADDRESS_LINES = [
    "Khanij Bhavan, 132-ft Ring Road, Gujarat University Ground, Vastrapur,",
    "Ahmedabad- 380052, India",
]
ORG_CONTACT_LINES = [
    "Address: Khanij Bhavan, 132 ft Ring road, Gujarat University Ground, Vastrapur, Ahmedabad",
    "Land Lines : 079-27913443",
    "Board Lines : 079-27913501, 079-27913200",
]
ORG_WEBSITE = "https://www.gmdcltd.com"
ORG_TENDER_PORTAL = "https://gmdctender.nprocure.com"

BANK_DETAILS = [
    "Bank Name: ICICI Bank, Ahmedabad Branch",
    "Account Number: 002405019379",
    "IFS Code: ICIC0000024",
    "SWIFT Code: ICICINBBXXX",
]

DOCUMENT_CREATOR = "GMDC Tender Generation System"
