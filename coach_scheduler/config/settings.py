from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchedulerSettings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    log_json: bool = Field(
        default=False,
        validation_alias="LOG_JSON",
        description="Write the file sink as JSON lines instead of text",
    )

    # Slot search window, in local wall-clock hours of the proposed day
    working_day_start_hour: int = Field(
        default=6,
        ge=0,
        le=23,
        validation_alias="WORKING_DAY_START_HOUR",
        description="First hour (inclusive) scanned by the slot finder",
    )
    working_day_end_hour: int = Field(
        default=22,
        ge=1,
        le=24,
        validation_alias="WORKING_DAY_END_HOUR",
        description="Hour (exclusive) at which the slot finder stops scanning",
    )
    slot_step_minutes: int = Field(
        default=30,
        gt=0,
        validation_alias="SLOT_STEP_MINUTES",
        description="Distance between two candidate slots",
    )
    past_slot_buffer_minutes: int = Field(
        default=5,
        ge=0,
        validation_alias="PAST_SLOT_BUFFER_MINUTES",
        description="Grace period before 'now' under which a slot is still offered",
    )

    weekly_occurrences: int = Field(
        default=4,
        gt=0,
        validation_alias="WEEKLY_OCCURRENCES",
        description="Number of instances produced for a weekly proposal",
    )

    meeting_link_base_url: str = Field(
        default="https://meet.jit.si",
        validation_alias="MEETING_LINK_BASE_URL",
    )
    database_url: str = Field(default="sqlite:///:memory:", validation_alias="DATABASE_URL")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("meeting_link_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @model_validator(mode="after")
    def validate_working_day(self) -> "SchedulerSettings":
        """Working day must be a non-empty window."""
        if self.working_day_start_hour >= self.working_day_end_hour:
            raise ValueError(
                f"WORKING_DAY_START_HOUR ({self.working_day_start_hour}) must be before "
                f"WORKING_DAY_END_HOUR ({self.working_day_end_hour})"
            )
        return self


settings = SchedulerSettings()
