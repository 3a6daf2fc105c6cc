# app/schemas/common.py
from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Booking UI speaks camelCase; Python side stays snake_case."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
