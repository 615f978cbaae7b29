from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # App
    APP_NAME: str = "Mint Market Core"
    LOG_LEVEL: str = "INFO"

    # Transaction orchestration (reference behaviour: 1s poll, 20% gas buffer)
    TX_POLL_INTERVAL_SECONDS: float = 1.0
    TX_GAS_BUFFER_BPS: int = 2000
    TX_MIN_CONFIRMATIONS: int = 1
    TX_CONFIRMATION_TIMEOUT_SECONDS: float = 300.0

    # JSON-RPC endpoints. Overrides are layered over the network registry,
    # e.g. RPC_URL_OVERRIDES='{"1": "https://mainnet.infura.io/v3/<key>"}'
    RPC_REQUEST_TIMEOUT_SECONDS: float = 30.0
    RPC_URL_OVERRIDES: dict[int, str] = {}

    # Account session: per-subscriber event queue bound (oldest dropped when full)
    SESSION_EVENT_QUEUE_SIZE: int = 256

    # Asset registry
    DEFAULT_ROYALTY_BPS: int = 250  # 2.5%

    # Content pinning: credentials have no default, set them in .env
    PINATA_API_URL: str = "https://api.pinata.cloud"
    PINATA_API_KEY: str = ""
    PINATA_API_SECRET: str = ""
    IPFS_GATEWAY_URL: str = "https://gateway.pinata.cloud/ipfs/"


settings = Settings()
