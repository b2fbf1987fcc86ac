"""Tests for KiCad footprint generation."""
import re
from dataclasses import replace

import pytest

from easykicad.easyeda import load_footprint
from easykicad.easyeda.models import Pad
from easykicad.errors import NoPadsError
from easykicad.kicad import FootprintConverter, FootprintOptions, infer_polygon_drill
from easykicad.kicad.layers import MULTI_LAYER_ID


@pytest.fixture
def verbatim():
    """Converter that never substitutes templates."""
    return FootprintConverter(FootprintOptions(library="MyLib", use_templates=False))


def test_resistor_verbatim_geometry(verbatim, resistor_footprint):
    """Without templates the pads keep their source geometry."""
    output = verbatim.render(resistor_footprint)
    text = output.text

    assert output.name == "R0603"
    assert output.reference == "MyLib:R0603"
    assert output.template_id is None
    assert text.startswith('(footprint "R0603"\n')
    assert '(pad "1" smd roundrect\n\t\t(at -1 0)\n\t\t(size 0.5 0.5)' in text
    assert '(pad "2" smd roundrect\n\t\t(at 1 0)\n\t\t(size 0.5 0.5)' in text
    assert '(layers "F.Cu" "F.Paste" "F.Mask")' in text
    assert "(roundrect_rratio 0.25)" in text
    assert "(attr smd)" in text


def test_resistor_template_substitution(resistor_footprint):
    """Two-pad chip resistors are replaced by the curated land pattern."""
    verbatim_text = FootprintConverter(FootprintOptions(use_templates=False)).convert(resistor_footprint)
    output = FootprintConverter().render(resistor_footprint)

    assert output.template_id == "Resistor_SMD:R_0603_1608Metric"
    assert output.text != verbatim_text
    assert "(at -0.825 0)" in output.text
    assert "(at 0.825 0)" in output.text
    assert "(size 0.8 0.95)" in output.text
    assert "(at -1 0)" not in output.text
    assert '(descr "R0603 (Resistor_SMD:R_0603_1608Metric)")' in output.text


def test_header_and_footer(verbatim, resistor_footprint):
    text = verbatim.convert(resistor_footprint)

    assert "(version 20241209)" in text
    assert '(generator "easykicad")' in text
    assert '(property "Reference" "REF**"' in text
    assert '(property "Value" "R0603"' in text
    assert '(layer "F.CrtYd")' in text
    assert '(fp_text user "${REFERENCE}"' in text
    assert "(embedded_fonts no)" in text
    assert text.endswith(")\n")


def test_silkscreen_track_becomes_line(verbatim, resistor_footprint):
    text = verbatim.convert(resistor_footprint)
    assert "(fp_line" in text
    assert '(layer "F.SilkS")' in text


def test_through_hole_pads(verbatim, connector_footprint):
    text = verbatim.convert(connector_footprint)

    assert "(attr through_hole)" in text
    assert '(pad "1" thru_hole circle' in text
    assert '(pad "2" thru_hole rect' in text
    assert "(size 1.524 1.524)" in text
    # A 1.8 unit hole radius is a 0.9144 mm drill, not half of it
    assert "(drill 0.9144)" in text
    assert '(layers "*.Cu" "*.Mask")' in text


def test_via_and_mechanical_hole(verbatim, connector_footprint):
    text = verbatim.convert(connector_footprint)

    assert '(pad "" thru_hole circle' in text
    assert "(drill 0.6096)" in text
    assert '(pad "" np_thru_hole circle' in text
    assert "(drill 0.762)" in text


def test_hidden_layers_are_not_emitted(verbatim, connector_footprint):
    text = verbatim.convert(connector_footprint)
    # One silkscreen track and one circle; the layer 99 track is dropped
    assert text.count("(fp_line") == 1
    assert text.count("(fp_circle") == 1


def test_slotted_pad_drill():
    document = load_footprint(
        {"x": 0, "y": 0, "c_para": {"package": "SLOT"}},
        ["PAD~OVAL~0~0~6~10~11~~1~1~~0~gge1~6~0 -3 0 3~Y~0"],
    )
    text = FootprintConverter().convert(document)
    assert "(drill oval 0.508 1.524)" in text


def test_polygon_pad_is_custom(verbatim):
    document = load_footprint(
        {"x": 0, "y": 0, "c_para": {"package": "POLY"}},
        ["PAD~POLYGON~0~0~4~4~1~~1~0~-2 -2 2 -2 2 2 -2 2~0~gge1~0~~Y~0"],
    )
    text = verbatim.convert(document)
    assert '(pad "1" smd custom' in text
    assert "(gr_poly" in text
    assert "(xy -0.508 -0.508)" in text



def test_plated_polygon_pad_gets_a_drill(verbatim):
    """A multi-layer plated polygon pad without a hole is drilled from its outline."""
    document = load_footprint(
        {"x": 0, "y": 0, "c_para": {"package": "POLY"}},
        ["PAD~POLYGON~0~0~4~4~11~~1~0~-2 -2 2 -2 2 2 -2 2~0~gge1~0~~Y~0"],
    )
    text = verbatim.convert(document)

    assert '(pad "1" thru_hole custom' in text
    # 60% of the 1.016 mm outline
    assert "(drill 0.6096)" in text
    assert '(layers "*.Cu" "*.Mask")' in text
    assert "(attr through_hole)" in text


def test_polygon_drill_needs_a_plated_multi_layer_pad():
    pad = Pad(
        "POLYGON", 0, 0, 1, 1, MULTI_LAYER_ID, "1", 0,
        ((0, 0), (2, 0), (2, 1), (0, 1)), 0, 0, 0, True,
    )
    assert infer_polygon_drill(pad).hole_radius == pytest.approx(0.3)
    assert infer_polygon_drill(replace(pad, is_plated=False)) == replace(pad, is_plated=False)
    assert infer_polygon_drill(replace(pad, layer=1)).hole_radius == 0
    assert infer_polygon_drill(replace(pad, shape="RECT")).hole_radius == 0
    assert infer_polygon_drill(replace(pad, hole_radius=0.2)).hole_radius == 0.2


def test_numbered_unplated_pad_beside_mechanical_hole(verbatim):
    document = load_footprint(
        {"x": 400, "y": 300, "c_para": {"package": "MOUNT"}},
        [
            "PAD~ELLIPSE~390~300~6~6~11~~1~1.8~~0~gge1~0~~N~0",
            "HOLE~410~300~1.5~gge2~0",
        ],
    )
    text = verbatim.convert(document)

    assert '(pad "1" np_thru_hole circle' in text
    assert '(pad "" np_thru_hole circle' in text
    assert "(drill 0.9144)" in text
    assert "(drill 0.762)" in text
    assert "thru_hole circle" not in text.replace("np_thru_hole circle", "")


def test_courtyard_covers_mechanical_holes(verbatim, resistor_records):
    _, _, head, shapes = resistor_records
    document = load_footprint(head, shapes + ["HOLE~400~320~2~gge9~0"])
    text = verbatim.convert(document)

    match = re.search(r"\(fp_rect\n\t\t\(start \S+ \S+\)\n\t\t\(end \S+ (\S+)\)", text)
    assert match is not None
    # Hole bottom at 5.08 + 0.508 mm plus the courtyard margin
    assert float(match.group(1)) == pytest.approx(5.838)


def test_no_pads_raises():
    document = load_footprint(
        {"x": 0, "y": 0, "c_para": {"package": "LOGO"}},
        ["TRACK~1~3~~0 0 10 0~gge1~0"],
    )
    with pytest.raises(NoPadsError):
        FootprintConverter().render(document)


def test_degenerate_arc_is_skipped(verbatim, resistor_records):
    _, _, head, shapes = resistor_records
    document = load_footprint(head, shapes + ["ARC~1~3~~M 0 0 A 0 0 0 0 1 10 0~gge9~0"])
    output = verbatim.render(document)
    assert [s.tag for s in output.skipped] == ["FootprintArc"]
    assert "(pad" in output.text
    assert output.skipped[0].index == len(shapes)


def test_overflowing_arc_is_skipped(verbatim, resistor_records):
    _, _, head, shapes = resistor_records
    document = load_footprint(head, shapes + ["ARC~1~3~~M 0 0 A 1e400 10 0 0 1 10 0~gge77~0"])
    output = verbatim.render(document)
    assert [s.tag for s in output.skipped] == ["FootprintArc"]
    assert '(pad "1" smd' in output.text


def test_circular_arc_emitted_as_fp_arc(verbatim, resistor_records):
    _, _, head, shapes = resistor_records
    document = load_footprint(head, shapes + ["ARC~1~3~~M 410 300 A 10 10 0 0 1 400 310~gge9~0"])
    text = verbatim.convert(document)
    assert "(fp_arc" in text
    assert "(start 2.54 0)" in text
    assert "(end 0 2.54)" in text


def test_model_reference(resistor_records):
    _, _, head, shapes = resistor_records
    shapes.append('SVGNODE~{"gId":"g1","attrs":{"uuid":"abc123","title":"R0603"}}')
    document = load_footprint(head, shapes)

    options = FootprintOptions(use_templates=False, model_path="models/{uuid}.wrl")
    output = FootprintConverter(options).render(document)

    assert output.model_uuid == "abc123"
    assert '(model "models/abc123.wrl"' in output.text

    # Without a path template the uuid is reported but no model block is written
    plain = FootprintConverter(FootprintOptions(use_templates=False)).render(document)
    assert plain.model_uuid == "abc123"
    assert "(model" not in plain.text
