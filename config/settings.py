from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # FHE: encrypted price width (euint32 on the deployed contract)
    FHE_VALUE_BITS: int = 32

    # Transaction status auto-clear delays (seconds)
    STATUS_SUCCESS_CLEAR_SECONDS: float = 2.0
    STATUS_ERROR_CLEAR_SECONDS: float = 3.0

    # Market stats
    RECENT_ACTIVITY_WINDOW_SECONDS: int = 60 * 60 * 24

    # Orders
    ORDER_ID_PREFIX: str = "order-"

    # Local dev chain (in-memory contract + local FHE capability)
    LOCAL_CONTRACT_ADDRESS: str = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
    LOCAL_FHE_SECRET: str = "local-dev-only"

    # App
    APP_NAME: str = "NFT Dark Pool"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev


settings = Settings()
