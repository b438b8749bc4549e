"""Pydantic request/response schemas.

Learn: JSON on the wire is camelCase (dueDate, ownerId); Python code is
snake_case. CamelModel handles the translation in both directions, and
accepts snake_case input too.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
