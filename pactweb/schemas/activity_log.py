from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, constr

from pactweb.schemas.common import BackendRecord

DateKeyStr = constr(pattern=r"^\d{4}-\d{2}-\d{2}$")
NotesStr = constr(max_length=2000)


class LogSummary(BackendRecord):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    activity_id: str | None = None
    occurred_at: datetime | None = None
    notes: str | None = None
    verified: bool = False


class DayLogs(BackendRecord):
    date: str
    logs: list[LogSummary] = Field(default_factory=list)


class UserLogsByPact(BackendRecord):
    pact_id: str
    user_id: str
    days: list[DayLogs] = Field(default_factory=list)


class MediaFile(BackendRecord):
    name: str
    mime_type: str
    size_bytes: int | None = None
    web_view_link: str | None = None
    web_content_link: str | None = None

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


class ActivityLog(BackendRecord):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    pact_id: str | None = None
    activity_id: str | None = None
    user_id: str | None = None
    occurred_at: datetime | None = None
    notes: str | None = None
    verified: bool = False


class ActivityLogDetail(ActivityLog):
    images: list[MediaFile] = Field(default_factory=list)


class ProgressItem(BackendRecord):
    pact_id: str
    target_days: int
    activity_days: int


class UserProgress(BackendRecord):
    results: list[ProgressItem] = Field(default_factory=list)


class MediaLinkOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    name: str
    mime_type: str
    view_link: str | None
    content_link: str | None


class ActivityLogDetailResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    id: str
    activity_id: str | None
    occurred_at: datetime | None
    occurred_label: str
    notes: str | None
    verified: bool
    images: list[MediaLinkOut]
    files: list[MediaLinkOut]
    back_href: str
