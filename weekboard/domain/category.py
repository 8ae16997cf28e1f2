"""Category domain model."""

from pydantic import BaseModel, ConfigDict, Field


class Category(BaseModel):
    """Task category. Seeded externally and read-only for the application."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Category ID referenced by tasks")
    name: str = Field(default="", description="Display name")
    default_points: int = Field(default=1, alias="defaultPoints", description="Suggested weight for new tasks")
