"""Tests for EDID parsing and the sysfs EDID lookup."""

import pytest

from ddc_brightness.transport.edid import EdidError, parse_edid, read_edid_for_bus


class TestParseEdid:
    def test_decodes_identification_fields(self, make_edid):
        metadata = parse_edid(make_edid())
        assert metadata.manufacturer_id == "DEL"
        assert metadata.model_id == 0xA0F3
        assert metadata.serial == 0x4C4B4A30
        assert metadata.manufacture_week == 12
        assert metadata.manufacture_year == 30
        assert metadata.model_name == "DELL U2720Q"

    def test_ignores_extension_blocks(self, make_edid):
        data = make_edid() + bytes(128)
        assert parse_edid(data).manufacturer_id == "DEL"

    def test_missing_name_descriptor(self, make_edid):
        metadata = parse_edid(make_edid(name=None))
        assert metadata.model_name is None
        assert metadata.label == "Unknown Model"

    def test_zero_serial_is_unknown(self, make_edid):
        assert parse_edid(make_edid(serial=0)).serial is None

    @pytest.mark.parametrize("week", [0, 0xFF])
    def test_unspecified_week_is_unknown(self, make_edid, week):
        assert parse_edid(make_edid(week=week)).manufacture_week is None

    def test_too_short(self, make_edid):
        with pytest.raises(EdidError, match="too short"):
            parse_edid(make_edid()[:100])

    def test_bad_header(self, make_edid):
        data = bytearray(make_edid())
        data[0] = 0x42
        with pytest.raises(EdidError, match="header"):
            parse_edid(bytes(data))

    def test_bad_checksum(self, make_edid):
        data = bytearray(make_edid())
        data[127] = (data[127] + 1) % 256
        with pytest.raises(EdidError, match="checksum"):
            parse_edid(bytes(data))


class TestReadEdidForBus:
    def _connector(self, root, name, bus, edid):
        i2c = root / "devices" / f"i2c-{bus}"
        i2c.mkdir(parents=True)
        connector = root / name
        connector.mkdir()
        (connector / "ddc").symlink_to(i2c)
        (connector / "edid").write_bytes(edid)
        return connector

    def test_finds_connector_by_bus(self, tmp_path, make_edid):
        self._connector(tmp_path, "card0-DP-1", 5, make_edid(manufacturer="GSM"))
        self._connector(tmp_path, "card0-HDMI-A-1", 7, make_edid(manufacturer="DEL"))

        data = read_edid_for_bus(7, drm_root=tmp_path)

        assert parse_edid(data).manufacturer_id == "DEL"

    def test_no_match_returns_none(self, tmp_path, make_edid):
        self._connector(tmp_path, "card0-DP-1", 5, make_edid())
        assert read_edid_for_bus(9, drm_root=tmp_path) is None

    def test_empty_edid_is_skipped(self, tmp_path):
        self._connector(tmp_path, "card0-DP-1", 5, b"")
        assert read_edid_for_bus(5, drm_root=tmp_path) is None
