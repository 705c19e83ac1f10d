"""Application settings and configuration.

This module defines all configuration options for the Frenzy Stage application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Frenzy Stage", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    port: int = Field(default=3005, alias="PORT")

    # Database configuration (inventory only; chat state lives in memory)
    database_url: str = Field(default="sqlite:///./frenzy.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Chat rate limiting
    rate_limit_window_seconds: float = Field(default=60.0, alias="RATE_LIMIT_WINDOW_SECONDS")
    max_messages_per_window: int = Field(default=30, alias="MAX_MESSAGES_PER_WINDOW")

    # Chat history
    max_messages_history: int = Field(default=1000, alias="MAX_MESSAGES_HISTORY")
    chat_history_replay: int = Field(default=50, alias="CHAT_HISTORY_REPLAY")

    # Per-connection outbound buffer; events beyond this are dropped for that client
    outbound_queue_size: int = Field(default=256, alias="OUTBOUND_QUEUE_SIZE")

    # Fishing game economy
    starting_bait: int = Field(default=10, alias="STARTING_BAIT")
    starting_fishing_rods: int = Field(default=1, alias="STARTING_FISHING_RODS")
    starting_money: int = Field(default=1000, alias="STARTING_MONEY")
    bait_price: int = Field(default=5, alias="BAIT_PRICE")
    rod_price: int = Field(default=100, alias="ROD_PRICE")
    rod_break_chance: float = Field(default=0.05, alias="ROD_BREAK_CHANCE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=[
            "https://basedfrenzy.com",
            "https://play.basedfrenzy.com",
            "https://gameverse.basedfrenzy.com",
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
