"""
Shared Pydantic building blocks for request and response bodies.

The wire format is camelCase (``vehicleId``, ``kwhDeliveredDc``) while
Python attributes stay snake_case; :class:`CamelModel` maps between them.

CHANGELOG:
- 2026-10-15: Add strict finite Measurement type (STORY-012)
- 2026-10-08: Initial creation (STORY-007)

TODO:
- None
"""

from typing import Annotated

from pydantic import AllowInfNan, BaseModel, ConfigDict, Strict, StringConstraints
from pydantic.alias_generators import to_camel

# Non-empty identifier; surrounding whitespace is stripped first.
DeviceId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Finite JSON number. Numeric strings, booleans, NaN and Infinity are rejected.
Measurement = Annotated[float, Strict(), AllowInfNan(False)]


class CamelModel(BaseModel):
    """Base model with camelCase JSON aliases.

    Accepts either the alias or the attribute name on input so services
    can build responses from snake_case dicts.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
