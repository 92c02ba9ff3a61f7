"""Installation option validation.

Checks user-supplied options for conflicting sources before any resolution
work begins. Pure and synchronous: no network or filesystem access.
"""

import logging
from collections.abc import Mapping
from collections.abc import Sequence
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from .exceptions import ConflictingSourceError
from .exceptions import InvalidOptionError

logger = logging.getLogger(__name__)

DEFAULT_VERSION = (">= 0",)


def validate_options(options: dict[str, Any]) -> dict[str, Any]:
    """
    Validate installation options, rewriting deprecated aliases in place.

    Checks (in order):
    1. git and local_git both given -> ConflictingSourceError
    2. local_git is rewritten to git (deprecation notice logged once)
    3. source and git both given -> ConflictingSourceError
    4. branch or ref without git -> InvalidOptionError
    5. branch and ref both given -> InvalidOptionError

    Args:
        options: Mapping of option names to values (mutated for the alias rewrite)

    Returns:
        The same mapping, validated

    Raises:
        ConflictingSourceError: If mutually exclusive sources are given
        InvalidOptionError: If branch/ref are misused
    """
    if "git" in options and "local_git" in options:
        raise ConflictingSourceError(
            "Remote and local plugin git sources can't be both specified",
            context={"options": ["git", "local_git"]},
        )

    # local_git is an alias for git
    if "local_git" in options:
        logger.warning("--local_git is deprecated, use --git")
        options["git"] = options.pop("local_git")

    if "source" in options and "git" in options:
        raise ConflictingSourceError(
            "Only one of --source, or --git may be specified",
            context={"options": ["source", "git"]},
        )

    if ("branch" in options or "ref" in options) and "git" not in options:
        flag = "branch" if "branch" in options else "ref"
        raise InvalidOptionError(f"--{flag} can only be used with git sources", context={"option": flag})

    if "branch" in options and "ref" in options:
        raise InvalidOptionError("--branch and --ref can't be both specified", context={"options": ["branch", "ref"]})

    return options


class InstallRequest(BaseModel):
    """One installation call: plugin names, shared version constraint and validated options."""

    model_config = ConfigDict(frozen=True)

    names: tuple[str, ...] = Field(min_length=1)
    version: tuple[str, ...] = DEFAULT_VERSION
    options: Mapping[str, Any] = Field(default_factory=dict)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        if value is None:
            return DEFAULT_VERSION
        if isinstance(value, str):
            return (value,)
        return value

    @field_validator("options", mode="after")
    @classmethod
    def _freeze_options(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @classmethod
    def from_call(cls, names: Sequence[str], options: dict[str, Any]) -> "InstallRequest":
        """Validate options and snapshot them into a request.

        Raises:
            ConflictingSourceError: If mutually exclusive sources are given
            InvalidOptionError: If options are malformed or no names are given
        """
        if isinstance(names, str):
            raise InvalidOptionError("Plugin names must be a sequence of names, not a string", context={"names": names})
        validate_options(options)
        if not names:
            raise InvalidOptionError("At least one plugin name is required")
        return cls(names=tuple(names), version=options.get("version"), options=dict(options))
