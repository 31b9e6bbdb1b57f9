"""Query and Subscription schemas.

A Query selects Records by type discriminator and optionally orders
them by a single field. A Subscription is a stored interest in Records
matching a Query.
"""

from pydantic import BaseModel, ConfigDict, Field

from recordbase.schemas.enums import SortOrder


class Sort(BaseModel):
    """Field and order to sort a Query result by."""

    model_config = ConfigDict(frozen=True)

    field_path: str = Field(..., min_length=1)
    order: SortOrder = Field(default=SortOrder.ASCENDING)


class Predicate(BaseModel):
    """Placeholder for a condition over Record fields.

    Carries no conditions yet, so it accepts every Record whose type
    already matched.
    """

    model_config = ConfigDict(frozen=True)


class Query(BaseModel):
    """Type-scoped query with optional single-key sorting.

    At most one Sort is supported; the executor rejects more rather
    than silently ignoring the extras.
    """

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., min_length=1, description="Record type to select")
    predicate: Predicate = Field(default_factory=Predicate)
    sorts: tuple[Sort, ...] = Field(default=())


class Subscription(BaseModel):
    """Registered interest in Records matching a Query."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1)
    query: Query
