"""Base models for Pub/Sub wire payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelCaseModel(BaseModel):
    """Base model that uses camelCase aliases to match the Pub/Sub JSON API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> bytes:
        """Serialize to compact camelCase JSON, omitting unset optional fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
