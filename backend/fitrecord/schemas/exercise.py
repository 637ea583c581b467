from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from fitrecord.models import MuscleGroup

NameStr = Annotated[str, Field(max_length=120)]
RestSeconds = Annotated[int, Field(ge=1, le=3600)]

class ExerciseBase(BaseModel):
    name: NameStr
    muscle_group: MuscleGroup
    is_bodyweight: bool = False
    description: Annotated[str, Field(max_length=2000)] | None = None
    default_rest_seconds: RestSeconds | None = None

    @field_validator("name")
    @classmethod
    def name_non_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("name cannot be blank")
        return v2

class ExerciseCreate(ExerciseBase):
    pass

class ExerciseUpdate(ExerciseBase):
    pass

class ExerciseRead(ExerciseBase):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
