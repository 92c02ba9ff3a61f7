"""Plugin source descriptors - Where a plugin is fetched from.

A descriptor is an immutable tagged value: either a registry (one or more
remotes) or a git endpoint with an optional ref or branch. Invalid
combinations are refused at construction.
"""

from collections.abc import Mapping
from typing import Annotated
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError
from pydantic import model_validator

from .exceptions import InvalidOptionError


class RegistrySource(BaseModel):
    """Package registry source with one or more remotes."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["registry"] = "registry"
    remotes: tuple[str, ...] = Field(min_length=1)

    def __str__(self) -> str:
        return f"registry({', '.join(self.remotes)})"


class GitSource(BaseModel):
    """Git repository source, optionally pinned to a ref or tracking a branch."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["git"] = "git"
    uri: str = Field(min_length=1)
    ref: str | None = None
    branch: str | None = None

    @model_validator(mode="after")
    def _check_ref_or_branch(self) -> "GitSource":
        if self.ref is not None and self.branch is not None:
            raise ValueError("ref and branch can't be both specified")
        return self

    def __str__(self) -> str:
        if self.ref:
            return f"{self.uri}@{self.ref}"
        if self.branch:
            return f"{self.uri} (branch {self.branch})"
        return self.uri


SourceDescriptor = Annotated[RegistrySource | GitSource, Field(discriminator="kind")]


def _as_remotes(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def source_from_options(options: Mapping[str, Any], default_remotes: list[str] | None = None) -> RegistrySource | GitSource:
    """Build the single source descriptor an option set describes.

    Args:
        options: Validated installation options
        default_remotes: Configured registry remotes used when no source option is given

    Returns:
        GitSource when a git URI is present, RegistrySource otherwise

    Raises:
        InvalidOptionError: If the options describe no usable source
    """
    try:
        if "git" in options:
            return GitSource(uri=options["git"], ref=options.get("ref"), branch=options.get("branch"))

        remotes = _as_remotes(options.get("source")) or list(default_remotes or [])
        return RegistrySource(remotes=tuple(remotes))
    except ValidationError as e:
        raise InvalidOptionError(
            f"Invalid plugin source: {e.errors()[0]['msg']}",
            context={"options": sorted(options)},
        ) from e
