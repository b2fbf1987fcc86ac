"""Tests for SVG and PNG rendering of generated footprints and symbols."""
from xml.etree import ElementTree as ET

import pytest

from easykicad.kicad import FootprintConverter, FootprintOptions, SymbolConverter
from easykicad.svg import FootprintSVG, SymbolSVG
from easykicad.svg.elements import _arc_flags, _circle_from_three_points, create_pad_element
from easykicad.svg.models import GraphicArc, PadGraphic


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _group(root: ET.Element, group_id: str) -> ET.Element:
    for element in root.iter():
        if _local(element.tag) == "g" and element.get("id") == group_id:
            return element
    raise AssertionError(f"no group {group_id!r}")


@pytest.fixture
def resistor_text(resistor_footprint):
    return FootprintConverter(FootprintOptions(use_templates=False)).convert(resistor_footprint)


@pytest.fixture
def connector_text(connector_footprint):
    return FootprintConverter(FootprintOptions(use_templates=False)).convert(connector_footprint)


@pytest.fixture
def symbol_text(resistor_symbol):
    return SymbolConverter().convert(resistor_symbol)


class TestFootprintSVG:
    """Tests for footprint SVG generation."""

    def test_drawing_reads_pads(self, resistor_text):
        drawing = FootprintSVG(resistor_text).drawing

        assert [p.number for p in drawing.pads] == ["1", "2"]
        assert drawing.pads[0].x == pytest.approx(-1.0)
        assert drawing.pads[0].shape == "roundrect"
        assert drawing.pads[0].roundrect_ratio == pytest.approx(0.25)
        assert {g.layer for g in drawing.graphics} >= {"F.SilkS", "F.CrtYd"}

    def test_generate_is_well_formed(self, resistor_text):
        root = ET.fromstring(FootprintSVG(resistor_text).generate())

        assert _local(root.tag) == "svg"
        assert root.get("width").endswith("mm")
        assert len(_group(root, "pads")) == 2
        assert len(_group(root, "pad-labels")) == 2
        assert len(_group(root, "drill-holes")) == 0
        assert _group(root, "layer-F-SilkS") is not None

    def test_drill_holes_and_unlabelled_pads(self, connector_text):
        root = ET.fromstring(FootprintSVG(connector_text).generate())

        # Two numbered pads, one via and one mechanical hole
        assert len(_group(root, "pads")) == 4
        assert len(_group(root, "drill-holes")) == 4
        assert len(_group(root, "pad-labels")) == 2

    def test_margin_grows_view_box(self, resistor_text):
        svg = FootprintSVG(resistor_text)
        small = ET.fromstring(svg.generate(margin=0.5)).get("viewBox").split()
        large = ET.fromstring(svg.generate(margin=2.0)).get("viewBox").split()
        assert float(large[2]) == pytest.approx(float(small[2]) + 3.0)


class TestSymbolSVG:
    """Tests for symbol SVG generation."""

    def test_pins_flip_to_screen_space(self, symbol_text):
        drawing = SymbolSVG(symbol_text).drawing
        pins = {p.number: p for p in drawing.pins}

        assert pins["1"].x == pytest.approx(-2.54)
        assert pins["1"].end_x == pytest.approx(0.0, abs=1e-9)
        assert pins["2"].end_x == pytest.approx(0.0, abs=1e-9)

    def test_generate_is_well_formed(self, symbol_text):
        root = ET.fromstring(SymbolSVG(symbol_text).generate())

        # Line, connection dot and number per pin
        assert len(_group(root, "pins")) == 6
        assert len(_group(root, "body")) >= 1


class TestElements:
    """Tests for SVG element helpers."""

    def test_circle_from_three_points(self):
        cx, cy, r = _circle_from_three_points(1, 0, 0, 1, -1, 0)
        assert (cx, cy, r) == pytest.approx((0.0, 0.0, 1.0))
        assert _circle_from_three_points(0, 0, 1, 1, 2, 2) is None

    def test_arc_flags_follow_mid_point(self):
        # Y-down screen space: (1, 0) -> (0, 1) -> (-1, 0) runs clockwise on screen
        arc = GraphicArc(1, 0, 0, 1, -1, 0, 0.1, "F.SilkS")
        large, sweep = _arc_flags(arc, 0.0, 0.0)
        assert large == 0
        assert sweep == 1

    def test_pad_shapes(self):
        base = dict(number="1", x=0.0, y=0.0, width=1.0, height=2.0, angle=0.0, layers=["F.Cu"])

        assert create_pad_element(PadGraphic(shape="circle", **base)).tag == "circle"
        assert create_pad_element(PadGraphic(shape="oval", **base)).tag == "ellipse"
        assert create_pad_element(PadGraphic(shape="rect", **base)).tag == "polygon"
        rotated = PadGraphic(shape="oval", **{**base, "angle": 45.0})
        assert create_pad_element(rotated).tag == "polygon"


@pytest.mark.render
def test_render_footprint_to_png(resistor_text, tmp_path):
    """PNG output needs cairosvg and the cairo system library."""
    try:
        from easykicad.svg.render import render_footprint_to_png
    except (ImportError, OSError) as e:
        pytest.skip(f"cairo not available: {e}")

    image = render_footprint_to_png(resistor_text, tmp_path / "r0603.png", scale=10.0)

    assert image.width > 0
    assert image.height > 0
    assert (tmp_path / "r0603.png").exists()


@pytest.mark.render
def test_render_symbol_to_png(symbol_text):
    try:
        from easykicad.svg.render import render_symbol_to_png
    except (ImportError, OSError) as e:
        pytest.skip(f"cairo not available: {e}")

    image = render_symbol_to_png(symbol_text, scale=5.0)
    assert image.width > 0
