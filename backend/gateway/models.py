"""
Endpoint Metadata Models

Pydantic models describing the endpoints a route module registers.
These are used for documentation and discovery only.
"""

from __future__ import annotations
from typing import Any, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================
# Descriptors
# ============================================

class ParamDescriptor(BaseModel):
    """
    A request parameter accepted by an endpoint.

    Open shape: route modules may declare any keys, and only the keys they
    set are serialised back.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    name: Optional[str] = None
    type: Optional[str] = None
    required: Optional[bool] = None
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return self.model_dump(exclude_unset=True)


class EndpointDescriptor(BaseModel):
    """Metadata record for one HTTP endpoint"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    name: str
    path: str
    method: str = "GET"
    description: str = ""
    response_binary: bool = Field(False, alias="responseBinary")
    params: List[ParamDescriptor] = Field(default_factory=list)

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()

    def summary(self) -> dict:
        """Condensed form used by the API index."""
        return {"name": self.name, "path": self.path, "method": self.method}

    def to_dict(self) -> dict:
        """Full record, extra keys included, params as declared."""
        data = self.model_dump(by_alias=True)
        data["params"] = [p.to_dict() for p in self.params]
        return data


MetadataExport = Union[EndpointDescriptor, dict, Sequence[Union[EndpointDescriptor, dict]]]


def normalize_metadata(metadata: Any) -> List[EndpointDescriptor]:
    """
    Turn a route module's ``metadata`` export into an ordered descriptor list.

    Accepts a single descriptor (model or dict) or a sequence of them.
    Raises pydantic.ValidationError / TypeError on malformed input.
    """
    if metadata is None:
        return []
    if isinstance(metadata, (EndpointDescriptor, dict)):
        items = [metadata]
    elif isinstance(metadata, (list, tuple)):
        items = list(metadata)
    else:
        raise TypeError(f"Unsupported metadata type: {type(metadata).__name__}")

    return [
        item if isinstance(item, EndpointDescriptor) else EndpointDescriptor.model_validate(item)
        for item in items
    ]
