"""Identifier derivation for generated source.

State and event names become enum members by dropping whitespace.
Capability interfaces get two derived names from their short name: a
"property" form used as the context attribute, and a "parameter" form used
in the default-context factory signature.
"""

from __future__ import annotations

import keyword

from fsmgen.models.catalog import CapabilityInterface

DEFAULT_CLASS_NAME = "GeneratedFsm"

# Member names enum.Enum refuses outright
RESERVED_MEMBERS = frozenset({"mro"})


def enum_member(name: str) -> str:
    """State/event enum member for a declared name ("Off Hook" -> "OffHook")."""
    return "".join(name.split())


def is_valid_member(identifier: str) -> bool:
    """Usable as an enum member: identifier, not a keyword or reserved, no leading underscore."""
    return (
        identifier.isidentifier()
        and not keyword.iskeyword(identifier)
        and not identifier.startswith("_")
        and identifier not in RESERVED_MEMBERS
    )


def _interface_stem(iface: CapabilityInterface) -> str:
    name = iface.short_name
    if len(name) > 1 and name[0] == "I":
        return name[1:]
    return name


def property_name(iface: CapabilityInterface) -> str:
    """Context attribute name: "IAudioControl" -> "AudioControl"."""
    stem = _interface_stem(iface)
    return stem[0].upper() + stem[1:]


def parameter_name(iface: CapabilityInterface) -> str:
    """Factory parameter name: "IAudioControl" -> "audioControl"."""
    stem = _interface_stem(iface)
    return stem[0].lower() + stem[1:]


def class_name(name: str) -> str:
    """Generated class name with spaces removed."""
    cleaned = name.replace(" ", "")
    return cleaned or DEFAULT_CLASS_NAME
