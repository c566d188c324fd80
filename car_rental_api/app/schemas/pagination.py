"""Pagination summary returned in ``meta.pagination`` of list responses."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Pagination(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    page_count: int
    page_size: int
    count: int
