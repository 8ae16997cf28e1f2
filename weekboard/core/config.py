"""Configuration management for weekboard."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google Sheets Configuration
    sheets_api_url: str = Field(
        default="https://sheets.googleapis.com/v4/spreadsheets", description="Google Sheets REST API base URL"
    )
    sheets_spreadsheet_id: str | None = Field(default=None, description="ID of the backing spreadsheet")
    sheets_access_token: str | None = Field(
        default=None, description="OAuth bearer token for the Sheets API (issued by the service account flow)"
    )
    tasks_tab: str = Field(default="Tasks", description="Sheet tab holding task rows")
    members_tab: str = Field(default="Members", description="Sheet tab holding member rows")
    categories_tab: str = Field(default="Categories", description="Sheet tab holding category rows")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="production", description="Deployment environment name")

    # Identity Configuration
    require_auth: bool = Field(
        default=True, description="Reject requests without an identity-provider principal header"
    )

    # Capacity Configuration
    default_capacity: int = Field(default=15, description="Weekly point budget for members without maxPoints")
    trend_weeks: int = Field(default=5, description="Number of weeks shown in the weekly trend")

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # API Configuration
    API_TIMEOUT_SECONDS: int = 30

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_BAD_REQUEST: int = 400
    HTTP_NOT_FOUND: int = 404
    HTTP_SERVER_ERROR: int = 500

    # Store Defaults
    DEFAULT_CATEGORY: str = "other"
    DEFAULT_WORK_WEEK: str = "2024-01-01"  # Fallback for rows written before the workWeek column existed
    DEFAULT_CATEGORY_POINTS: int = 1
    TRUE_CELL: str = "TRUE"
    FALSE_CELL: str = "FALSE"

    # Priority ranks for active ordering (absent priority ranks 0)
    PRIORITY_RANKS: dict[str, int] = {"high": 3, "mid": 2, "low": 1}  # noqa: RUF012

    # Capacity Indicator (usage rate percent)
    USAGE_WARNING_PERCENT: int = 80
    USAGE_OVER_PERCENT: int = 100

    # Workload Chart (absolute points)
    WORKLOAD_WARNING_POINTS: int = 10
    WORKLOAD_OVER_POINTS: int = 15


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
