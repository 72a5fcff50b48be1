"""Shared test fixtures for chanlist.

Fixtures defined here are available to all tests in the suite without
needing an explicit import.  Sample files are written under pytest's
``tmp_path`` so every test gets its own copy.
"""
from __future__ import annotations

import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

REFERENCE_CSV = (
    "#chanlist-ref,1\n"
    "TV;tv;1;Das Erste HD;S19.2E-1-1019-10301;0;0x1\n"
    "TV;tv;2;ZDF HD;S19.2E-1-1011-11110;0x4;0\n"
    "TV;tv;2;arte HD;S19.2E-1-1019-10302;1;0\n"
    "Radio;radio;;Bayern 3;S19.2E-1-1093-28403;;\n"
    "Radio;radio;0x10;SWR3;S19.2E-1-1093-28404;2;3\n"
)

CHANNELS_XML = """<?xml version='1.0' encoding='utf-8'?>
<ChannelList formatVersion="1.1" model="UE55">
  <List caption="Satellite TV" shortCaption="Sat">
    <Channel uid="S-1" name="Das Erste HD" prNr="1" type="tv" deleted="0" hidden="0" skip="0" lock="1" favorites="0x3"/>
    <Channel uid="S-2" name="ZDF HD" prNr="2" type="tv" deleted="1" hidden="0" skip="0" lock="0" favorites="0x0"/>
    <Channel uid="S-3" name="Shop TV" prNr="3" type="tv" deleted="0" hidden="1" skip="1" lock="0" favorites="0x0"/>
  </List>
  <List caption="Radio" shortCaption="Radio">
    <Channel uid="R-1" name="Bayern 3" prNr="0x10" type="radio" deleted="0" hidden="0" skip="0" lock="0" favorites="0"/>
  </List>
</ChannelList>
"""


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "chanlist"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string."""
    return "0.1.0"


@pytest.fixture()
def make_zip(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing a zip archive from ``{entry: text}``."""

    def _make(name: str = "channels.zip", **entries: str) -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as archive:
            for entry, text in entries.items():
                archive.writestr(entry.replace("__", "/"), text)
        return path

    return _make


@pytest.fixture()
def reference_csv(tmp_path: Path) -> Path:
    """A valid ``#chanlist-ref`` file with two lists."""
    path = tmp_path / "reference.csv"
    path.write_bytes(REFERENCE_CSV.encode("iso-8859-9"))
    return path


@pytest.fixture()
def zip_xml(make_zip: Callable[..., Path]) -> Path:
    """A valid zipped XML list with an extra logo entry."""
    return make_zip(**{"channels.xml": CHANNELS_XML, "logos__ard.txt": "logo"})
