"""Tests for KiCad symbol generation."""
import math
from dataclasses import replace

import pytest

from easykicad.easyeda import load_symbol
from easykicad.errors import MissingOriginError, NoPinsError
from easykicad.kicad import (
    SymbolConverter, SymbolOptions, merge_into_library, render_library,
    sanitize_name,
)


@pytest.fixture
def converter():
    return SymbolConverter(SymbolOptions(library="MyLib", footprint_ref="MyLib:R0603"))


def test_sanitize_name():
    assert sanitize_name("10k") == "10k"
    assert sanitize_name("LM358 (DIP/8)") == "LM358__DIP_8_"
    assert sanitize_name("  ") == "UNNAMED"


def test_symbol_library_structure(converter, resistor_symbol):
    output = converter.render(resistor_symbol)

    assert output.name == "10k"
    assert output.reference == "MyLib:10k"
    assert output.text.startswith("(kicad_symbol_lib\n")
    assert "(version 20241209)" in output.text
    assert '(generator "easykicad")' in output.text
    assert '(symbol "10k"\n' in output.text
    assert '(symbol "10k_0_1"' in output.text
    assert '(symbol "10k_1_1"' in output.text
    assert output.text.endswith(")\n")


def test_symbol_properties(converter, resistor_symbol):
    text = converter.convert(resistor_symbol)

    assert '(property "Reference" "R"' in text
    assert '(property "Value" "10k"' in text
    assert '(property "Footprint" "MyLib:R0603"' in text
    assert '(property "LCSC" "C25804"' in text
    assert '(property "Manufacturer" "Yageo"' in text
    assert '(property "MPN" "RC0603FR-0710KL"' in text
    assert '(property "Tolerance" "1%"' in text


def test_pin_orientation_and_position(converter, resistor_symbol):
    """Pins point inward from the body in KiCad's Y-up space."""
    text = converter.convert(resistor_symbol)

    assert "(pin unspecified line\n\t\t\t\t(at -2.54 0 0)" in text
    assert "(pin unspecified line\n\t\t\t\t(at 2.54 0 180)" in text
    assert text.count("(length 2.54)") == 2


def test_inverted_pin_length(inverter_symbol):
    """A pin drawn 3 units long with an inverted bubble."""
    text = SymbolConverter().convert(inverter_symbol)

    assert "(pin input inverted" in text
    assert "(length 0.762)" in text
    assert '(name "IN"' in text


def test_body_rectangle_and_text(converter, resistor_symbol):
    text = converter.convert(resistor_symbol)

    assert "(rectangle" in text
    assert "(start -1.27 0.762)" in text
    assert "(end 1.27 -0.762)" in text
    assert '(text "Hello"' in text
    # Name and prefix marks are carried by the properties instead
    assert '(text "10k"' not in text


def test_stroke_width_has_a_floor(converter, resistor_symbol):
    text = converter.convert(resistor_symbol)
    assert "(width 0.254)" in text


def test_no_pins_raises():
    document = load_symbol({"x": 0, "y": 0}, ["R~0~0~~~10~6~#880000~1~0~none~gge3~0"])
    with pytest.raises(NoPinsError):
        SymbolConverter().render(document)


def test_missing_origin_raises(resistor_symbol):
    document = replace(resistor_symbol, header=replace(resistor_symbol.header, origin=None))
    with pytest.raises(MissingOriginError):
        SymbolConverter().render(document)


def test_unparsable_arc_is_skipped(resistor_records):
    head, shapes, _, _ = resistor_records
    document = load_symbol(head, shapes + ["A~M 400 300 A 0 0 0 0 1 410 300~~#880000~1~0~none~gge9~0"])
    output = SymbolConverter().render(document)
    assert [s.tag for s in output.skipped] == ["SymbolArc"]
    assert output.skipped[0].index == len(shapes)


def test_hidden_text_is_not_drawn(resistor_records):
    head, shapes, _, _ = resistor_records
    hidden = "T~L~395~285~0~#000080~Arial~7pt~normal~~~comment~HiddenText~0~start~gge9~0"
    text = SymbolConverter().convert(load_symbol(head, shapes + [hidden]))

    assert '(text "Hello"' in text
    assert "HiddenText" not in text


def test_vertical_pin_points_at_its_stub():
    """A pin drawn downward from the body ends where its stub ends."""
    head = {"x": 400, "y": 300, "c_para": {"pre": "U?", "name": "PWR"}}
    bottom = (
        "P~show~0~3~400~320~90~gge12~0^^400~320^^M 400 320 v -10~#880000"
        "^^1~403~313~270~GND~start~~~#0000FF^^1~398~317~270~3~end~~~#0000FF"
        "^^0~400~317^^0~M 397 317 L 400 314 L 403 317"
    )
    top = (
        "P~show~0~4~400~280~270~gge13~0^^400~280^^M 400 280 v 10~#880000"
        "^^1~403~287~90~VCC~start~~~#0000FF^^1~398~283~90~4~end~~~#0000FF"
        "^^0~400~283^^0~M 397 283 L 400 286 L 403 283"
    )
    output = SymbolConverter().render(load_symbol(head, [bottom, top]))
    pins = {node[6][1]: node for node in output.node[-2][2:]}

    assert pins["3"][3] == ["at", 0, -5.08, 90]
    assert pins["4"][3] == ["at", 0, 5.08, 270]
    # Connection point plus the length along the angle lands on the stub end
    for number, stub_end_y in (("3", -2.54), ("4", 2.54)):
        _, x, y, angle = pins[number][3]
        length = pins[number][4][1]
        assert x + length * math.cos(math.radians(angle)) == pytest.approx(0, abs=1e-9)
        assert y + length * math.sin(math.radians(angle)) == pytest.approx(stub_end_y)


class TestTemplates:
    """Tests for fixed passive symbol layouts."""

    def test_templates_are_off_by_default(self, resistor_symbol):
        text = SymbolConverter().convert(resistor_symbol)
        assert "(pin passive" not in text

    def test_resistor_template(self, resistor_symbol):
        output = SymbolConverter(SymbolOptions(use_templates=True)).render(resistor_symbol)
        text = output.text

        assert "(start -1.016 2.54)" in text
        assert "(end 1.016 -2.54)" in text
        assert "(type background)" in text
        assert "(pin passive line\n\t\t\t\t(at 0 3.81 270)" in text
        assert "(pin passive line\n\t\t\t\t(at 0 -3.81 90)" in text
        assert '(property "Reference" "R"\n\t\t\t(at 2.54 0 90)' in text
        assert '(property "Value" "10k"\n\t\t\t(at -1.778 0 90)' in text
        # The source body rectangle and free text are replaced
        assert '(text "Hello"' not in text
        assert output.skipped == ()

    def test_pin_one_goes_on_top(self, resistor_records):
        head, shapes, _, _ = resistor_records
        document = load_symbol(head, [shapes[1], shapes[0]])
        output = SymbolConverter(SymbolOptions(use_templates=True)).render(document)
        pins = output.node[-2][2:]

        assert [(p[6][1], p[3][2]) for p in pins] == [("1", 3.81), ("2", -3.81)]

    def test_capacitor_template(self, resistor_records):
        _, shapes, _, _ = resistor_records
        head = {"x": 400, "y": 300, "c_para": {"pre": "C?", "name": "100nF 50V X7R"}}
        text = SymbolConverter(SymbolOptions(use_templates=True)).convert(load_symbol(head, shapes))

        assert text.count("(polyline") == 2
        assert "(xy -1.27 0.635)" in text
        assert "(at 0 2.54 270)" in text
        assert '(property "Value" "100n/50V"' in text

    def test_inductor_template(self, resistor_records):
        _, shapes, _, _ = resistor_records
        head = {"x": 400, "y": 300, "c_para": {"pre": "L?", "name": "10uH"}}
        text = SymbolConverter(SymbolOptions(use_templates=True)).convert(load_symbol(head, shapes))

        assert text.count("(arc") == 4
        assert "(mid 0.635 1.905)" in text
        assert "(end 0 -2.54)" in text

    def test_non_passive_keeps_source_layout(self, inverter_symbol):
        text = SymbolConverter(SymbolOptions(use_templates=True)).convert(inverter_symbol)
        assert "(pin input inverted" in text


class TestLibraryMerge:
    """Tests for merging symbols into existing library text."""

    def test_merge_into_empty_library(self, converter, resistor_symbol):
        output = converter.render(resistor_symbol)
        assert merge_into_library(None, output) == output.text
        assert merge_into_library("  ", output) == output.text

    def test_merge_replaces_same_name(self, converter, resistor_symbol):
        output = converter.render(resistor_symbol)
        merged = merge_into_library(output.text, output)
        assert merged == output.text
        assert merged.count('(symbol "10k"\n') == 1

    def test_merge_appends_new_symbol(self, converter, resistor_symbol, inverter_symbol):
        resistor = converter.render(resistor_symbol)
        inverter = converter.render(inverter_symbol)

        merged = merge_into_library(resistor.text, inverter)

        assert '(symbol "10k"\n' in merged
        assert '(symbol "INV"\n' in merged
        assert merged.rstrip().endswith(")")
        assert merged.count("(kicad_symbol_lib") == 1

    def test_render_library_combines_outputs(self, converter, resistor_symbol, inverter_symbol):
        text = render_library([converter.render(resistor_symbol), converter.render(inverter_symbol)])
        assert text.index('(symbol "10k"\n') < text.index('(symbol "INV"\n')
