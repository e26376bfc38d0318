from pydantic import BaseModel, ValidationError, field_validator

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class SettingsSchema(BaseModel):
    db_path: str = "exercises.db"
    log_level: str = "INFO"
    default_unit: str = "kg"
    default_limit: int = 0

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value}")
        return value

    @field_validator("default_unit")
    @classmethod
    def _known_unit(cls, value: str) -> str:
        if value not in ("kg", "lb"):
            raise ValueError("default_unit must be 'kg' or 'lb'")
        return value

    @field_validator("default_limit")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("default_limit must not be negative")
        return value


def validate_settings(data: dict) -> SettingsSchema:
    try:
        return SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
