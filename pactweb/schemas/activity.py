from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, conint, constr

from pactweb.schemas.common import FORM_CONFIG, BackendRecord

ActivityNameStr = constr(min_length=1, max_length=100)
DescriptionStr = constr(max_length=2000)


class Activity(BackendRecord):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    pact_id: str
    user_id: str
    name: str
    description: str | None = None
    number_of_days: int
    is_primary: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ActivityCreateRequest(BaseModel):
    model_config = FORM_CONFIG

    name: ActivityNameStr
    description: DescriptionStr | None = None
    number_of_days: conint(ge=1, le=7) = 1
    is_primary: bool = False


class ActivityCreatePayload(ActivityCreateRequest):
    pact_id: str
    user_id: str
