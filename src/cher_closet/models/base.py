# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Base Pydantic model configuration for all domain models.

Entities are immutable and strictly validated. JSON uses camelCase keys,
while Python code and database rows use snake_case field names; both are
accepted on input.
"""

from beartype import beartype
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


@beartype
class BaseModelConfig(BaseModel):
    """Base model with strict configuration for all domain entities.

    Enforces:
    - Immutability (frozen=True)
    - No extra fields allowed (extra="forbid")
    - Validation on assignment
    - Automatic whitespace stripping
    - camelCase aliases for JSON
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


@beartype
class PartialUpdateModel(BaseModelConfig):
    """Base for PATCH payloads where every field is optional."""

    def changes(self) -> dict[str, object]:
        """Non-null fields the client actually sent, keyed by field name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
