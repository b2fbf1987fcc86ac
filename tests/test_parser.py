"""Tests for the EasyEDA record parser, field helpers and header parsing."""
import pytest

from easykicad.easyeda import parse, parse_header, parse_shapes
from easykicad.easyeda.fields import field, parse_bool, parse_points, safe_float, safe_int
from easykicad.easyeda.models import (
    FootprintText, Hole, Model3D, Pad, Pin, SolidRegion, SymbolRect,
    SymbolText, Track, Via,
)


class TestFieldHelpers:
    """Tests for the total field coercion helpers."""

    def test_field_out_of_range_is_empty(self):
        assert field(["a", "b"], 1) == "b"
        assert field(["a", "b"], 5) == ""

    def test_parse_bool(self):
        assert parse_bool("Y") is True
        assert parse_bool("1") is True
        assert parse_bool("0") is False
        assert parse_bool("N") is False
        assert parse_bool("") is False
        assert parse_bool(None) is False

    def test_safe_float_defaults(self):
        assert safe_float("1.5") == 1.5
        assert safe_float("") == 0.0
        assert safe_float("abc", 2.0) == 2.0
        assert safe_float("nan", 3.0) == 3.0
        assert safe_float(None, 4.0) == 4.0

    def test_safe_float_tolerates_unit_suffix(self):
        """Font sizes arrive as "7pt"."""
        assert safe_float("7pt") == 7.0

    def test_safe_int_accepts_float_syntax(self):
        assert safe_int("3.0") == 3
        assert safe_int("x", 1) == 1

    def test_parse_points(self):
        assert parse_points("1 2 3 4") == ((1.0, 2.0), (3.0, 4.0))
        assert parse_points("1,2,3") == ((1.0, 2.0),)
        assert parse_points("") == ()
        assert parse_points("1 2 1e400 4 5 6") == ((1.0, 2.0), (5.0, 6.0))


class TestRecordParsing:
    """Tests for single-record decoding."""

    def test_parse_pad(self):
        pad = parse("PAD~RECT~400~300~6~4~1~GND~1~0~~90~gge1~0~~Y~0")
        assert isinstance(pad, Pad)
        assert pad.shape == "RECT"
        assert (pad.x, pad.y) == (400.0, 300.0)
        assert (pad.width, pad.height) == (6.0, 4.0)
        assert pad.number == "1"
        assert pad.net == "GND"
        assert pad.rotation == 90.0
        assert pad.is_smd
        assert pad.is_plated

    def test_unplated_pad(self):
        pad = parse("PAD~ELLIPSE~390~300~6~6~11~~1~1.8~~0~gge1~0~~N~0")
        assert not pad.is_plated
        assert not pad.is_smd

    def test_pad_hole_radius_is_a_radius(self):
        """The hole field already carries a radius and must not be halved."""
        pad = parse("PAD~ELLIPSE~390~300~6~6~11~~1~1.8~~0~gge1~0~~Y~0")
        assert pad.hole_radius == 1.8
        assert not pad.is_smd
        assert pad.is_plated

    def test_pad_slot_orientation_from_hole_points(self):
        pad = parse("PAD~OVAL~400~300~6~10~11~~1~1~~0~gge1~6~400 297 400 303~Y~0")
        assert pad.hole_length == 6.0
        assert pad.hole_orientation == pytest.approx(90.0)

    def test_via_drill_radius(self):
        via = parse("VIA~400~310~2.4~GND~0.6~gge3~0")
        assert isinstance(via, Via)
        assert via.drill_radius == 0.6

    def test_via_without_drill_uses_half_diameter(self):
        via = parse("VIA~400~310~2.4~~~gge3~0")
        assert via.drill_radius == pytest.approx(1.2)

    def test_parse_hole(self):
        hole = parse("HOLE~400~290~1.5~gge4~0")
        assert isinstance(hole, Hole)
        assert hole.radius == 1.5

    def test_parse_track(self):
        track = parse("TRACK~1~3~~385 295 415 295~gge5~0")
        assert isinstance(track, Track)
        assert track.layer == 3
        assert track.points == ((385.0, 295.0), (415.0, 295.0))

    def test_track_with_single_point_is_dropped(self):
        assert parse("TRACK~1~3~~385 295~gge5~0") is None

    def test_parse_pin(self):
        pin = parse(
            "P~show~1~1~380~290~180~gge9~0^^380~290^^M 380 290 h 3~#880000"
            "^^1~384~294~0~IN~start~~~#0000FF^^1~379~289~0~1~end~~~#0000FF"
            "^^1~384~290^^0~M 0 0"
        )
        assert isinstance(pin, Pin)
        assert pin.number == "1"
        assert pin.name == "IN"
        assert pin.electrical_type == "1"
        assert pin.rotation == 180.0
        assert pin.pin_length == 3.0
        assert pin.has_inverted_bubble
        assert not pin.has_clock_triangle

    def test_pin_length_defaults_without_stub(self):
        pin = parse("P~show~0~1~390~300~180~gge1~0")
        assert pin.pin_length == 10.0

    def test_parse_symbol_rect(self):
        rect = parse("R~395~297~~~10~6~#880000~1~0~none~gge3~0")
        assert isinstance(rect, SymbolRect)
        assert (rect.width, rect.height) == (10.0, 6.0)
        assert rect.style.stroke_color == "#880000"
        assert rect.style.fill_color == "none"

    def test_parse_symbol_text(self):
        text = parse("T~N~395~310~0~#000080~Arial~7pt~normal~~~comment~10k~1~start~gge5~0")
        assert isinstance(text, SymbolText)
        assert text.text == "10k"
        assert text.mark == "N"
        assert text.font_size == 7.0
        assert not text.is_pin_related
        assert text.visible

    def test_hidden_symbol_text(self):
        text = parse("T~L~395~285~0~#000080~Arial~7pt~normal~~~comment~Note~0~start~gge9~0")
        assert not text.visible

    def test_parse_footprint_text(self):
        text = parse("TEXT~L~400~290~0.6~0~0~3~~4~Label~M 0 0~~gge8~0")
        assert isinstance(text, FootprintText)
        assert text.text == "Label"
        assert text.layer == 3
        assert text.displayed

    def test_parse_solid_region(self):
        region = parse("SOLIDREGION~1~~M 0 0 L 10 0 L 10 10 Z~solid~gge9~0")
        assert isinstance(region, SolidRegion)
        assert region.fill_kind == "solid"

    def test_parse_svg_node_model(self):
        model = parse(
            'SVGNODE~{"gId":"g1","nodeName":"g","layerid":"19",'
            '"attrs":{"uuid":"abc123","title":"R0603"},"childNodes":[]}'
        )
        assert isinstance(model, Model3D)
        assert model.uuid == "abc123"
        assert model.title == "R0603"

    def test_unknown_and_short_records(self):
        assert parse("FOO~1~2") is None
        assert parse("PAD~RECT~1") is None
        assert parse("") is None
        assert parse(None) is None


def test_parse_shapes_keeps_order_and_counts_skips():
    """N usable records and M malformed ones give N shapes and M skip records."""
    records = [
        "HOLE~400~290~1.5~gge4~0",
        "PAD~RECT~1",
        "VIA~400~310~2.4~~~gge3~0",
        "FOO~1~2",
        "",
        "TRACK~1~3~~385 295 415 295~gge5~0",
    ]
    result = parse_shapes(records)

    assert [type(s) for s in result.shapes] == [Hole, Via, Track]
    assert [s.index for s in result.shapes] == [0, 2, 5]
    assert [s.index for s in result.skipped] == [1, 3, 4]
    assert result.skipped[0].reason == "malformed record"
    assert result.skipped[1].reason == "unrecognized tag"
    assert result.skipped[2].reason == "empty record"


class TestHeader:
    """Tests for document header parsing."""

    def test_header_from_dict(self):
        header = parse_header({
            "x": "400", "y": 300,
            "c_para": {"pre": "R?", "name": "10k", "package": "R0603",
                       "BOM_Supplier Part": "C25804", "BOM_Tolerance": "1%"},
        })
        assert header.origin == (400.0, 300.0)
        assert header.metadata.prefix == "R"
        assert header.metadata.package == "R0603"
        assert header.metadata.lcsc_id == "C25804"
        assert dict(header.metadata.attributes) == {"Tolerance": "1%"}

    def test_header_from_backtick_string(self):
        header = parse_header({"x": 0, "y": 0, "c_para": "pre`U?`name`NE555`BOM_Manufacturer`TI`"})
        assert header.metadata.name == "NE555"
        assert header.metadata.prefix == "U"
        assert header.metadata.manufacturer == "TI"

    def test_external_metadata_overrides(self):
        header = parse_header(
            {"x": 0, "y": 0, "c_para": {"BOM_Supplier Part": "C1"}},
            lcsc_id="C2", description="Thick film resistor",
        )
        assert header.metadata.lcsc_id == "C2"
        assert header.metadata.description == "Thick film resistor"

    def test_missing_origin(self):
        assert parse_header({"c_para": {}}).origin is None
        assert parse_header({"x": "abc", "y": 1}).origin is None
        assert parse_header(None).origin is None
