from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, confloat, conint, constr

from pactweb.schemas.activity import Activity
from pactweb.schemas.common import FORM_CONFIG, BackendRecord

TitleStr = constr(min_length=3, max_length=100)
DescriptionStr = constr(max_length=2000)
DaysPerWeek = conint(ge=1, le=7)
FineAmount = confloat(ge=0)


class Participant(BackendRecord):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str = ""
    email: str = ""
    phone: str = ""


class Pact(BackendRecord):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    title: str
    description: str | None = None
    participants: list[Participant] = Field(default_factory=list)
    status: Literal["active", "completed", "cancelled"] = "active"
    start_date: str | None = None
    end_date: str | None = None
    min_days_per_week: DaysPerWeek
    max_activities_per_user: conint(ge=1)
    skip_fine: float
    leave_fine: float
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def has_participant(self, user_id: str | None) -> bool:
        if not user_id:
            return False
        return any(p.id == user_id for p in self.participants)


class PactCreateRequest(BaseModel):
    model_config = FORM_CONFIG

    title: TitleStr
    description: DescriptionStr | None = None
    min_days_per_week: DaysPerWeek = 1
    max_activities_per_user: conint(ge=1) = 1
    skip_fine: FineAmount = 0
    leave_fine: FineAmount = 0


class JoinPactRequest(BaseModel):
    model_config = FORM_CONFIG

    user_id: str
    pact_id: str
    activity_ids: list[str]


class PactProgressOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    target_days: int
    activity_days: int


class PactCardOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    id: str
    title: str
    description: str
    href: str
    participants_label: str
    days_per_week_label: str
    date_range_label: str | None = None
    skip_fine_label: str
    leave_fine_label: str
    progress: PactProgressOut | None = None


class PactListResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    your_pacts: list[PactCardOut]
    explore_pacts: list[PactCardOut]
    empty_message: str | None = None


class PactOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    id: str
    title: str
    description: str | None
    status: str
    min_days_per_week: int
    max_activities_per_user: int
    participant_count: int
    start_date_label: str | None
    skip_fine_label: str
    leave_fine_label: str


class PactDetailResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    pact: PactOut
    activities: list[Activity]
    can_add_more_activities: bool
    show_confirm_join: bool
    action_label: str
    slots_message: str
