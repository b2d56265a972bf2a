"""Application configuration."""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Loads and validates application settings from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    LOG_LEVEL: str = "INFO"

    ELECTRIC_RATE: Decimal = Decimal("5000")  # VND per kWh
    WATER_RATE: Decimal = Decimal("10000")  # VND per m³

    REMINDER_HOUR: int = 8
    REMINDER_MINUTE: int = 0

    LANDLORD_NAME: str = "Nhà Trọ Hạnh Phúc"
    LANDLORD_ADDRESS: str = "123 Đường ABC, Phường XYZ, Quận 1, TP. Hồ Chí Minh"
    LANDLORD_PHONE: str = "0987 654 321"
    BANK_NAME: str = "Ngân hàng Vietcombank"
    BANK_BIN: str = "970436"
    BANK_ACCOUNT: str = "1234567890"
    ACCOUNT_HOLDER: str = "CHỦ NHÀ TRỌ"


settings = Settings()
