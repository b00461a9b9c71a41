# storyshare/schemas/common.py
# Общие кусочки схем: camelCase-алиасы для фронта и UTC-даты с суффиксом Z.

from datetime import datetime

from pydantic import BaseModel, AfterValidator, PlainSerializer
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

from storyshare.utils.clock import to_naive_utc, iso_utc

# Внутри — naive UTC, наружу — "2026-01-01T10:00:00Z"
UtcDatetime = Annotated[
    datetime,
    AfterValidator(to_naive_utc),
    PlainSerializer(iso_utc, return_type=str, when_used="json"),
]


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
