"""Application configuration from environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Sheet id the dashboard falls back to when no sheet name is requested
DEFAULT_SHEET_GID = 683750936


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Google Sheets
    google_spreadsheet_id: str = Field(default="", description="Spreadsheet holding the treasury data")
    google_service_account_key: str | None = Field(
        default=None, description="Service account JSON (inline)"
    )
    google_credentials_path: str | None = Field(
        default=None, description="Path to service account JSON file"
    )
    google_api_key: str | None = Field(default=None, description="API key for public sheets")
    default_sheet_gid: int = Field(
        default=DEFAULT_SHEET_GID, description="Sheet id used when no sheet name is requested"
    )
    value_render_option: str = Field(
        default="FORMATTED_VALUE", description="How the Sheets API renders cell values"
    )

    # Cash ledger sheet
    ledger_sheet: str = Field(default="Kas", description="Sheet with cash transactions")
    ledger_date_column: str = "Tanggal"
    ledger_description_column: str = "Keterangan"
    ledger_category_column: str = "Kategori"
    ledger_income_column: str = "Pemasukan"
    ledger_expense_column: str = "Pengeluaran"

    # Dues sheet
    dues_sheet: str = Field(default="Iuran", description="Sheet with resident dues")
    dues_id_column: str = "No"
    dues_name_column: str = "Nama"
    dues_block_column: str = "Blok"
    dues_unit_column: str = "No Rumah"
    dues_start_column: str = "Mulai"
    special_entry_labels: dict[int, str] = Field(
        default_factory=lambda: {13: "Iuran Rapat"},
        description="Display labels for special (non-monthly) ordinals",
    )
    default_special_label: str = "Iuran Khusus"

    # API
    api_title: str = Field(default="Kas Warga API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Log file path")

    @property
    def dues_identity_columns(self) -> frozenset[str]:
        """Columns of the dues sheet that describe the resident, not a payment."""
        return frozenset(
            {
                self.dues_id_column,
                self.dues_name_column,
                self.dues_block_column,
                self.dues_unit_column,
                self.dues_start_column,
            }
        )

    def special_label(self, ordinal: int) -> str:
        """Get the display label for a special entry ordinal."""
        return self.special_entry_labels.get(ordinal, self.default_special_label)


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()
