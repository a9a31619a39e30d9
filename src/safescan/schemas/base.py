"""Base schema configuration for all Pydantic models.

This module provides centralized base classes with consistent configuration.
All API and domain schemas should inherit from the appropriate base class.

Usage:
    - APIRequest: For incoming API request bodies
    - APIResponse: For outgoing API response bodies
    - DomainModel: For immutable values passed between engine components
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _BaseSchema(BaseModel):
    """Private base schema with common configuration.

    Do not use directly - inherit from one of the public subclasses.
    """

    model_config = ConfigDict(
        # Alias configuration for camelCase serialization
        alias_generator=to_camel,
        populate_by_name=True,  # Accept both snake_case and camelCase
        # Validation settings
        validate_default=True,
        # Always serialize to camelCase
        serialize_by_alias=True,
    )


class APIRequest(_BaseSchema):
    """Base class for incoming API request schemas.

    Configured to ignore extra fields - clients may send additional
    properties that we don't recognize, and that's okay.
    """

    model_config = ConfigDict(
        extra="ignore",
        use_enum_values=True,
    )


class APIResponse(_BaseSchema):
    """Base class for outgoing API response schemas.

    Configured to forbid extra fields - we should only return
    properties that are explicitly defined in the schema.
    """

    model_config = ConfigDict(
        extra="forbid",
        use_enum_values=True,
    )


class DomainModel(_BaseSchema):
    """Base class for immutable engine values.

    Enums are kept as enum members (not raw values) so that ordering
    helpers such as ``RiskLevel.rank`` keep working after validation.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )
