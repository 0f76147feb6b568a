"""Tests for identifier derivation."""
from __future__ import annotations

import pytest

from fsmgen.generator import naming
from fsmgen.models import CapabilityInterface


def _iface(name: str) -> CapabilityInterface:
    return CapabilityInterface.from_dict({"name": name, "methods": ["Run"]})


class TestEnumMember:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Off Hook", "OffHook"),
            ("  Ringing ", "Ringing"),
            ("On\tHold", "OnHold"),
            ("Connected", "Connected"),
        ],
    )
    def test_whitespace_removed(self, name: str, expected: str) -> None:
        assert naming.enum_member(name) == expected

    @pytest.mark.parametrize("identifier", ["", "1st", "class", "_private", "a-b", "mro"])
    def test_invalid_members(self, identifier: str) -> None:
        assert not naming.is_valid_member(identifier)

    def test_valid_member(self) -> None:
        assert naming.is_valid_member("OffHook")


class TestInterfaceNames:
    def test_leading_i_dropped(self) -> None:
        iface = _iface("telephone.IAudioControl")

        assert naming.property_name(iface) == "AudioControl"
        assert naming.parameter_name(iface) == "audioControl"

    def test_without_leading_i(self) -> None:
        iface = _iface("game.rumble")

        assert naming.property_name(iface) == "Rumble"
        assert naming.parameter_name(iface) == "rumble"

    def test_single_letter_i_kept(self) -> None:
        iface = _iface("app.I")

        assert naming.property_name(iface) == "I"
        assert naming.parameter_name(iface) == "i"


class TestClassName:
    def test_spaces_removed(self) -> None:
        assert naming.class_name("Telephone Fsm") == "TelephoneFsm"

    def test_empty_falls_back_to_default(self) -> None:
        assert naming.class_name("  ") == naming.DEFAULT_CLASS_NAME
