"""Shapes of the CRM (HubSpot) payloads the portal consumes.

Only the fields the portal reads are declared; everything else is ignored.
Empty strings in property bags are turned into None so the services only
ever see one "missing" value.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator


class HubSpotModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class CrmObject(HubSpotModel):
    id: str
    properties: dict[str, str | None] = Field(default_factory=dict)

    @field_validator("properties", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if not value:
            return {}
        return {
            key: (None if item is None or str(item).strip() == "" else str(item))
            for key, item in value.items()
        }

    def prop(self, name: str) -> str | None:
        return self.properties.get(name)


class ContactSearchResponse(HubSpotModel):
    total: int = 0
    results: list[CrmObject] = Field(default_factory=list)


class AssociationType(HubSpotModel):
    category: str | None = None
    type_id: str = Field(..., alias="typeId")
    label: str | None = None


class Association(HubSpotModel):
    to_object_id: str = Field(..., alias="toObjectId")
    association_types: list[AssociationType] = Field(default_factory=list, alias="associationTypes")

    def has_type(self, type_id: str) -> bool:
        return any(assoc_type.type_id == type_id for assoc_type in self.association_types)


class AssociationListResponse(HubSpotModel):
    results: list[Association] = Field(default_factory=list)


class BatchReadResponse(HubSpotModel):
    results: list[CrmObject] = Field(default_factory=list)
