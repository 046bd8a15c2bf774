"""Base models with camelCase serialization for stream and API output."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every wire/API model; dumps camelCase with ``by_alias=True``."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FrozenCamelModel(CamelModel):
    """Immutable CamelModel — updates go through ``model_copy(update=...)``."""

    model_config = ConfigDict(frozen=True)
