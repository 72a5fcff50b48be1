"""XML channel list packaged in a zip archive.

The archive holds ``channels.xml`` and any number of other entries
(logos, device databases) that are carried over unchanged on save::

    <ChannelList formatVersion="1.1" model="UE55">
      <List caption="Satellite TV" shortCaption="Sat">
        <Channel uid="S19.2E-1-1019-10301" name="Das Erste HD" prNr="1"
                 type="tv" deleted="0" hidden="0" skip="0" lock="0"
                 favorites="0x3"/>
      </List>
    </ChannelList>

Deleted channels stay in the file flagged ``deleted="1"`` and lose their
program number.  Device settings live in an optional YAML sidecar next
to the archive (``<stem>.settings.yaml``) and travel with it on backup.
"""
from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path
from typing import Any

import yaml

from chanlist.errors import FormatError, UnsupportedVersionError
from chanlist.features import ChannelNameEditMode, DeleteMode, Favorites, FavoritesMode
from chanlist.model import ChannelInfo, ChannelList, SignalSource
from chanlist.serializer import SerializerBase

logger = logging.getLogger(__name__)

XML_ENTRY = "channels.xml"
ROOT_TAG = "ChannelList"
SUPPORTED_VERSIONS = ("1.0", "1.1")
SETTINGS_SUFFIX = ".settings.yaml"


def _flag(element: ET.Element, name: str) -> bool:
    return element.get(name, "0").strip() not in ("", "0", "false")


class ZipXmlSerializer(SerializerBase):
    """Reads and writes zip archives holding ``channels.xml``."""

    format_name = "Zipped XML list"
    file_patterns = ("*.zip",)

    def __init__(self, input_file: str | os.PathLike[str], **kwargs: Any) -> None:
        super().__init__(input_file, **kwargs)
        self.device_settings: dict[str, Any] = {}

        features = self.features
        features.channel_name_edit = ChannelNameEditMode.DIGITAL
        features.can_clean_up_channel_data = True
        features.delete_mode = DeleteMode.FLAG_WITHOUT_PR_NR
        features.enforce_tv_before_radio_before_data = True
        features.favorites_mode = FavoritesMode.ORDERED_PER_SOURCE
        features.max_favorite_lists = 4
        features.can_edit_fav_list_names = True

    @property
    def settings_file_name(self) -> str:
        path = Path(self.file_name)
        return str(path.with_name(path.stem + SETTINGS_SUFFIX))

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def load(self) -> None:
        if not zipfile.is_zipfile(self.file_name):
            raise FormatError(self.file_name, "not a zip archive")
        try:
            with zipfile.ZipFile(self.file_name) as archive:
                names = archive.namelist()
        except zipfile.BadZipFile as exc:
            raise FormatError(self.file_name, f"damaged zip archive: {exc}") from exc
        if XML_ENTRY not in names:
            raise FormatError(self.file_name, f"no {XML_ENTRY} entry")

        staged = self._unzip_file_to_temp_folder()
        try:
            root = self._read_root(staged / XML_ENTRY)
        except FormatError:
            self._delete_temp_path()
            raise
        version = root.get("formatVersion", "")
        self.file_format_version = version
        self.tv_model_name = root.get("model", "")

        self.data_root.clear()
        for list_element in root.iter("List"):
            caption = list_element.get("caption", "")
            channel_list = ChannelList(caption, list_element.get("shortCaption", ""))
            for channel_element in list_element.iter("Channel"):
                channel_list.add_channel(self._read_channel(channel_element))
            self.data_root.add_channel_list(channel_list)

        self._load_device_settings()
        logger.debug(
            "Loaded %s %s with %d channel(s)",
            self.format_name,
            version,
            self.data_root.channel_count,
        )

    def _read_root(self, xml_path: Path) -> ET.Element:
        try:
            root = ET.parse(xml_path).getroot()
        except ET.ParseError as exc:
            raise FormatError(self.file_name, f"malformed {XML_ENTRY}: {exc}") from exc
        if root.tag != ROOT_TAG:
            raise FormatError(self.file_name, f"unexpected root element <{root.tag}>")
        version = root.get("formatVersion", "")
        if version not in SUPPORTED_VERSIONS:
            raise UnsupportedVersionError(f"{self.format_name} {version or '(none)'}", self.file_name)
        return root

    def _read_channel(self, element: ET.Element) -> ChannelInfo:
        deleted = _flag(element, "deleted")
        pr_nr_text = element.get("prNr", "")
        program_nr = None if deleted or not pr_nr_text.strip() else self._parse_int(pr_nr_text)
        try:
            source = SignalSource(element.get("type", "tv"))
        except ValueError:
            source = SignalSource.TV
        mask = int(self.features.supported_favorites)
        return ChannelInfo(
            uid=element.get("uid", ""),
            name=element.get("name", ""),
            short_name=element.get("shortName", ""),
            old_program_nr=program_nr,
            signal_source=source,
            is_deleted=deleted,
            hidden=_flag(element, "hidden"),
            skip=_flag(element, "skip"),
            lock=_flag(element, "lock"),
            encrypted=_flag(element, "encrypted"),
            favorites=Favorites(self._parse_int(element.get("favorites")) & mask),
        )

    def _load_device_settings(self) -> None:
        path = Path(self.settings_file_name)
        if not path.exists():
            self.device_settings = {}
            return
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            logger.warning("Ignoring unreadable device settings %s: %s", path, exc)
            data = None
        self.device_settings = data if isinstance(data, dict) else {}

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self) -> None:
        staged = self.temp_path
        if staged is None:
            staged = self._unzip_file_to_temp_folder()

        root = ET.Element(
            ROOT_TAG,
            formatVersion=self.file_format_version or SUPPORTED_VERSIONS[-1],
        )
        if self.tv_model_name:
            root.set("model", self.tv_model_name)
        for channel_list in self.data_root.channel_lists:
            list_element = ET.SubElement(
                root, "List", caption=channel_list.caption, shortCaption=channel_list.short_caption
            )
            for channel in channel_list.channels:
                list_element.append(self._channel_element(channel))

        tree = ET.ElementTree(root)
        ET.indent(tree)
        tree.write(staged / XML_ENTRY, encoding="utf-8", xml_declaration=True)
        self._zip_to_output_file(compress=self.compress_archives)
        logger.debug("Saved %s", self.output_file_name)

    @staticmethod
    def _channel_element(channel: ChannelInfo) -> ET.Element:
        program_nr = None if channel.is_deleted else channel.new_program_nr
        element = ET.Element(
            "Channel",
            uid=channel.uid,
            name=channel.name,
            prNr="" if program_nr is None else str(program_nr),
            type=channel.signal_source.value,
            deleted="1" if channel.is_deleted else "0",
            hidden="1" if channel.hidden else "0",
            skip="1" if channel.skip else "0",
            lock="1" if channel.lock else "0",
            favorites=hex(int(channel.favorites)),
        )
        if channel.short_name:
            element.set("shortName", channel.short_name)
        if channel.encrypted:
            element.set("encrypted", "1")
        return element

    # ------------------------------------------------------------------
    # Optional behaviour
    # ------------------------------------------------------------------

    def get_data_file_paths(self) -> list[str]:
        paths = [self.file_name]
        if Path(self.settings_file_name).exists():
            paths.append(self.settings_file_name)
        return paths

    def clean_up_channel_data(self) -> str:
        """Drop channels flagged as deleted and renumber nothing else."""
        report: list[str] = []
        for index, channel_list in enumerate(self.data_root.channel_lists):
            kept = [channel for channel in channel_list.channels if not channel.is_deleted]
            removed = len(channel_list.channels) - len(kept)
            if not removed:
                continue
            self.data_root.channel_lists[index] = ChannelList(
                channel_list.caption, channel_list.short_caption, kept
            )
            report.append(f"{channel_list.short_caption}: removed {removed} deleted channel(s)")
        return "\n".join(report)


__all__ = ["ZipXmlSerializer", "XML_ENTRY", "SUPPORTED_VERSIONS", "SETTINGS_SUFFIX"]
