"""Base pydantic model for API payloads.

Python attributes stay snake_case; JSON in and out is camelCase
(``created_at`` <-> ``createdAt``). ORM rows validate directly.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        protected_namespaces=(),
    )

    def to_json(self) -> dict:
        """JSON-safe dict keyed by the camelCase aliases."""
        return self.model_dump(by_alias=True, mode="json")
