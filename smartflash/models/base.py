"""
Strict Base Models for API Request/Response Validation

This module provides base classes with strict validation settings to harden
the contract between this client and the REST backend.

MOTIVATION:
    The backend speaks camelCase JSON while Python code uses snake_case.
    Both bases generate camelCase aliases so models can be built from either
    spelling and always serialize the wire spelling.
    - Unknown request fields are rejected (extra="forbid")
    - Unknown response fields are ignored (extra="ignore")

Usage:
    # For request bodies (strictest validation)
    class CardCreate(StrictRequest):
        question: str
        difficulty_level: DifficultyLevel

    CardCreate(question="Q", difficulty_level="basic").to_payload()
    # -> {"question": "Q", "difficultyLevel": "basic"}

    # For response bodies (allows extra fields from the backend)
    class CardResponse(StrictResponse):
        id: str

    CardResponse.model_validate({"id": "c1", "createdAt": "..."})
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictRequest(BaseModel):
    """
    Base model for request bodies sent to the backend.

    Features:
        - extra="forbid": Unknown fields raise ValidationError
        - validate_default=True: Validates default values
        - str_strip_whitespace=True: Trims whitespace from strings
        - alias_generator=to_camel: Wire names are camelCase
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialize to a JSON-ready dict, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class StrictResponse(BaseModel):
    """
    Base model for response bodies received from the backend.

    More lenient than StrictRequest: the backend may add fields at any time
    and the client should keep working.

    Features:
        - extra="ignore": Silently ignores extra fields
        - alias_generator=to_camel: Accepts camelCase wire names
        - populate_by_name=True: Tests and callers may use snake_case
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,  # Some backends send numeric ids
    )
