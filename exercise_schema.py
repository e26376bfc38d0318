import datetime

from pydantic import BaseModel, Field, ValidationError, field_validator

from errors import ExerciseValidationError

FIELDS = ("name", "reps", "weight", "unit", "date")


class ExerciseSchema(BaseModel):
    name: str
    reps: int = Field(ge=-2**63, lt=2**63)
    weight: float
    unit: str
    date: str

    @field_validator("date", mode="before")
    @classmethod
    def _date_to_text(cls, value):
        if isinstance(value, (datetime.date, datetime.datetime)):
            return value.isoformat()
        return value

    @field_validator("name", "unit", "date")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


def validate_exercise(**fields) -> dict:
    """Return the normalised exercise fields or raise ``ExerciseValidationError``."""
    try:
        return ExerciseSchema(**fields).model_dump()
    except ValidationError as e:
        raise ExerciseValidationError(str(e)) from e
