from pydantic import BaseModel, Field, ValidationError


class SettingsSchema(BaseModel):
    weight_unit: str = "lbs"
    strict_session_start: bool = True
    weekly_window_days: int = Field(7, ge=1)
    monthly_window_days: int = Field(30, ge=1)
    weight_history_limit: int = Field(30, ge=1)
    rest_timer_seconds: int = Field(90, ge=0)


DEFAULT_SETTINGS = SettingsSchema().model_dump()


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
