"""
Base classes for API DTOs.

The JSON API speaks camelCase while documents and Python code use
snake_case. CamelModel generates the camelCase aliases; handlers accept
either spelling on input and FastAPI serialises responses by alias.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
