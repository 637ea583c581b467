from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, StringConstraints

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]
PhoneStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=40)]
NotesStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=2000)]
GymTimeStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=60)]

class ClientBase(BaseModel):
    name: NameStr
    email: EmailStr | None = Field(default=None, max_length=255)
    phone: PhoneStr | None = None
    notes: NotesStr | None = None
    gym_time: GymTimeStr | None = None

class ClientCreate(ClientBase):
    pass

class ClientUpdate(ClientBase):
    pass  # full replacement, like the create form

class ClientRead(ClientBase):
    # stored rows are not re-validated as e-mail addresses
    email: str | None = None
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
