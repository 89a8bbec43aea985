from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseRecord(BaseModel):
    """Stored entity. Serialized to the browser with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
