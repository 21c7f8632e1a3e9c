from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from errors import ValidationError
from models import AppearanceMode, DistanceUnit, WeightUnit


class SettingsSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_name: str = "User"
    weekly_workout_goal: int = Field(3, ge=1, le=7)
    monthly_xp_goal: int = Field(1000, gt=0)
    weight_unit: WeightUnit = WeightUnit.KG
    distance_unit: DistanceUnit = DistanceUnit.KM
    notifications_enabled: bool = True
    daily_reminder_time: str = Field("19:00", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    workout_reminders: bool = True
    appearance_mode: AppearanceMode = AppearanceMode.SYSTEM
    haptic_feedback: bool = True
    language: str = Field("en", pattern=r"^(en|ja)$")


SETTING_KEYS = tuple(SettingsSchema.model_fields)
DEFAULT_SETTINGS = SettingsSchema().model_dump(mode="json")


def first_error_message(exc: PydanticValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err["loc"])
    return f"{loc}: {err['msg']}" if loc else err["msg"]


def validate_settings(data: dict) -> dict:
    """Return ``data`` merged over the defaults and normalized to JSON types."""
    try:
        return SettingsSchema.model_validate(data).model_dump(mode="json")
    except PydanticValidationError as e:
        raise ValidationError(first_error_message(e))
