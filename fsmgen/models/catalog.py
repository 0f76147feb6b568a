"""Capability interfaces that state actions call into.

The embedder registers its interfaces up front in a CapabilityCatalog; the
model builder resolves every action reference against it. There is no
implicit discovery and no process-wide cache.
"""

from __future__ import annotations

import keyword
import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

_QUALIFIED_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def _is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


@dataclass(frozen=True)
class CapabilityMethod:
    """
    A zero-argument method on a capability interface.

    Attributes:
        name: Method name as called from generated code
        signature: Stable lookup key, "Name()" for zero-argument methods
    """

    name: str
    signature: str = ""

    def __post_init__(self) -> None:
        if not _is_identifier(self.name):
            raise ValueError(f"Invalid method name: {self.name!r}")
        if not self.signature:
            object.__setattr__(self, "signature", f"{self.name}()")

    @property
    def invoke(self) -> str:
        """Call expression used in generated code."""
        return f"{self.name}()"


@dataclass(frozen=True)
class CapabilityInterface:
    """
    A named contract of zero-argument methods supplied by the embedder.

    Attributes:
        qualified_name: Dotted name, e.g. "telephone.ITelephone"
        methods: Methods the interface exposes
    """

    qualified_name: str
    methods: tuple[CapabilityMethod, ...] = ()

    def __post_init__(self) -> None:
        if not _QUALIFIED_NAME.match(self.qualified_name) or any(
            keyword.iskeyword(part) for part in self.qualified_name.split(".")
        ):
            raise ValueError(f"Invalid interface name: {self.qualified_name!r}")
        object.__setattr__(self, "methods", tuple(self.methods))

    @property
    def short_name(self) -> str:
        """Last segment of the qualified name."""
        return self.qualified_name.rsplit(".", 1)[-1]

    def find_method(self, signature: str) -> Optional[CapabilityMethod]:
        """Look up a method by signature; a bare name also matches."""
        for method in self.methods:
            if method.signature == signature:
                return method
        for method in self.methods:
            if method.name == signature:
                return method
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.qualified_name,
            "methods": [m.name for m in self.methods],
        }

    @classmethod
    def from_dict(cls, data: dict) -> CapabilityInterface:
        """Create from dictionary."""
        methods = []
        for entry in data.get("methods", []):
            if isinstance(entry, dict):
                methods.append(
                    CapabilityMethod(
                        name=entry["name"],
                        signature=entry.get("signature", ""),
                    )
                )
            else:
                methods.append(CapabilityMethod(name=str(entry)))
        return cls(qualified_name=data["name"], methods=tuple(methods))


@dataclass(frozen=True)
class CapabilityCatalog:
    """Registry of the capability interfaces available to a graph."""

    interfaces: tuple[CapabilityInterface, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        interfaces = tuple(self.interfaces)
        seen: set[str] = set()
        for iface in interfaces:
            if iface.qualified_name in seen:
                raise ValueError(
                    f"Duplicate capability interface: {iface.qualified_name}"
                )
            seen.add(iface.qualified_name)
        object.__setattr__(self, "interfaces", interfaces)

    @classmethod
    def of(cls, interfaces: Iterable[CapabilityInterface]) -> CapabilityCatalog:
        """Build a catalog from any iterable of interfaces."""
        return cls(interfaces=tuple(interfaces))

    def find(self, qualified_name: str) -> Optional[CapabilityInterface]:
        """Look up an interface by qualified name."""
        for iface in self.interfaces:
            if iface.qualified_name == qualified_name:
                return iface
        return None

    def __iter__(self) -> Iterator[CapabilityInterface]:
        return iter(self.interfaces)

    def __len__(self) -> int:
        return len(self.interfaces)
