from typing import Literal

from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Records coming back from the pacts backend use camelCase keys and Mongo-style `_id`.
BACKEND_RECORD_CONFIG = ConfigDict(
    extra="ignore",
    populate_by_name=True,
    alias_generator=AliasGenerator(validation_alias=to_camel),
)

# Form bodies accept the page's camelCase field names and are forwarded to the backend as camelCase.
FORM_CONFIG = ConfigDict(
    extra="forbid",
    strict=True,
    populate_by_name=True,
    alias_generator=AliasGenerator(validation_alias=to_camel, serialization_alias=to_camel),
)


class BackendRecord(BaseModel):
    model_config = BACKEND_RECORD_CONFIG


class BackendErrorBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str | list[str] | None = None


class RedirectOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    redirect_to: str


class PageError(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    detail: str
    kind: Literal["transport", "http", "precondition"]
    presentation: Literal["inline", "alert"] = "inline"
