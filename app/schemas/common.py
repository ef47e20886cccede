"""Shared schema base class."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case keys and serializes as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)
