"""Pydantic models for Jenkins JSON API responses.

These mirror the untrusted remote schema. Every field may be absent, so
every field is optional; the repository adapter decides what is required
before promoting a build to a ``GameRelease``. Null entries inside
lists are kept as ``None`` so one bad element does not reject the
whole document.
"""

from pydantic import BaseModel, ConfigDict, Field


class Artifact(BaseModel):
    """A file archived by a Jenkins build."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: str | None = Field(default=None, alias="fileName")
    relative_path: str | None = Field(default=None, alias="relativePath")


class Build(BaseModel):
    """A single Jenkins build record."""

    number: int | None = None
    url: str | None = None
    timestamp: int | None = None
    result: str | None = None
    artifacts: list[Artifact | None] | None = None


class ApiResult(BaseModel):
    """Model for the ``/job/{job}/api/json`` response."""

    builds: list[Build | None] | None = None
