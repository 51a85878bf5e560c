"""Configuration for classification and rendering.

Configuration can be built directly, from a mapping, or from TOML: either
a dedicated ``usemerge.toml`` whose keys sit at the top level, or a
``pyproject.toml`` with a ``[tool.usemerge]`` table::

    [tool.usemerge]
    extend_core_names = ["tokio"]
    local_names = ["my_crate"]
    granularity = "crate"
    absorb_unaliased = false
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Mapping

from usemerge.core.errors import ConfigError
from usemerge.tree.segments import IDENT_RE, KEYWORD_KINDS

# Python 3.11+ has tomllib built-in
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

DEFAULT_CORE_NAMES = frozenset({"std", "alloc", "core", "proc_macro", "test"})

CONFIG_FILENAME = "usemerge.toml"


class Granularity(Enum):
    """How merged leaves are split into statements."""

    CRATE = "crate"
    MODULE = "module"
    ITEM = "item"


@dataclass(frozen=True)
class UseMergeConfig:
    """Settings shared by every merge in a batch.

    Attributes
    ----------
    core_names : frozenset[str]
        First segments classified as Core.
    local_names : frozenset[str]
        Extra first segments classified as Local, besides ``self``,
        ``super`` and ``crate``.
    granularity : Granularity
        Statement layout used by the renderer.
    absorb_unaliased : bool
        Drop ``use a::b;`` when ``use a::b as c;`` is also present.

    Raises
    ------
    ConfigError
        If a name list holds empty, non-identifier or reserved entries, or
        the same name is both core and local.
    """

    core_names: frozenset[str] = DEFAULT_CORE_NAMES
    local_names: frozenset[str] = field(default_factory=frozenset)
    granularity: Granularity = Granularity.MODULE
    absorb_unaliased: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "core_names", _validate_names(self.core_names, "core_names"))
        object.__setattr__(self, "local_names", _validate_names(self.local_names, "local_names"))
        overlap = self.core_names & self.local_names
        if overlap:
            raise ConfigError(
                f"names cannot be both core and local: {', '.join(sorted(overlap))}",
                key="local_names",
            )
        if not isinstance(self.granularity, Granularity):
            object.__setattr__(self, "granularity", _parse_granularity(self.granularity))
        if not isinstance(self.absorb_unaliased, bool):
            raise ConfigError("expected a boolean", key="absorb_unaliased")

    def with_core_names(self, *names: str) -> UseMergeConfig:
        """Return a copy recognising ``names`` as core in addition to the current set."""
        return replace(self, core_names=self.core_names | frozenset(names))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UseMergeConfig:
        """Build a config from a mapping of option names to values.

        ``extend_core_names`` adds to the default core names, while
        ``core_names`` replaces them.
        """
        known = {"core_names", "extend_core_names", "local_names", "granularity", "absorb_unaliased"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown option(s): {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        core = frozenset(_name_list(data, "core_names")) if "core_names" in data else DEFAULT_CORE_NAMES
        if "extend_core_names" in data:
            core |= frozenset(_name_list(data, "extend_core_names"))
        kwargs["core_names"] = core
        if "local_names" in data:
            kwargs["local_names"] = frozenset(_name_list(data, "local_names"))
        if "granularity" in data:
            kwargs["granularity"] = _parse_granularity(data["granularity"])
        if "absorb_unaliased" in data:
            kwargs["absorb_unaliased"] = data["absorb_unaliased"]
        return cls(**kwargs)

    @classmethod
    def from_toml(cls, path: str | Path) -> UseMergeConfig:
        """Load the config from ``usemerge.toml`` or ``pyproject.toml``.

        Parameters
        ----------
        path : str | Path
            A TOML file, or a directory searched for ``usemerge.toml`` and
            then ``pyproject.toml``. A pyproject without a
            ``[tool.usemerge]`` table gives the defaults.
        """
        path = Path(path)
        if path.is_dir():
            for name in (CONFIG_FILENAME, "pyproject.toml"):
                if (path / name).is_file():
                    path = path / name
                    break
            else:
                return cls()

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise ConfigError(f"cannot read {path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"invalid TOML in {path}: {e}") from e

        if path.name == "pyproject.toml":
            data = data.get("tool", {}).get("usemerge", {})
            if not isinstance(data, dict):
                raise ConfigError("expected a table", key="tool.usemerge")
        return cls.from_dict(data)


def _name_list(data: Mapping[str, Any], key: str) -> list[str]:
    value = data[key]
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigError("expected a list of names", key=key)
    return list(value)


def _validate_names(names: Iterable[Any], key: str) -> frozenset[str]:
    if isinstance(names, str):
        raise ConfigError("expected a collection of names, not a string", key=key)
    checked = set()
    for name in names:
        if not isinstance(name, str):
            raise ConfigError(f"expected a string, found {name!r}", key=key)
        if not name.strip():
            raise ConfigError("empty name", key=key)
        if name in KEYWORD_KINDS:
            raise ConfigError(f"{name!r} is a path keyword, not a crate name", key=key)
        if not IDENT_RE.match(name):
            raise ConfigError(f"{name!r} is not a valid identifier", key=key)
        checked.add(name)
    return frozenset(checked)


def _parse_granularity(value: Any) -> Granularity:
    try:
        return Granularity(value)
    except ValueError:
        choices = ", ".join(g.value for g in Granularity)
        raise ConfigError(f"unknown granularity {value!r}, expected one of: {choices}", key="granularity") from None
