"""Tests for the two-pad template substitution policy."""
from easykicad.easyeda import load_footprint
from easykicad.easyeda.models import ComponentMetadata
from easykicad.kicad import CHIP_GEOMETRY, decide, find_template
from easykicad.kicad.mapper import passive_class, size_code


def test_size_code():
    assert size_code("R0603") == "0603"
    assert size_code("C0402_C") == "0402"
    assert size_code("0805") == "0805"
    assert size_code("SOT-23") is None
    assert size_code("R06031") is None
    assert size_code("") is None


def test_passive_class():
    assert passive_class(ComponentMetadata(prefix="R")) == "R"
    assert passive_class(ComponentMetadata(prefix="FB")) == "L"
    assert passive_class(ComponentMetadata(package="C0805")) == "C"
    assert passive_class(ComponentMetadata(category="Ferrite Beads")) == "L"
    assert passive_class(ComponentMetadata(prefix="U", package="SOIC-8")) is None


def test_find_template():
    template = find_template("R", "0603")
    assert template.template_id == "Resistor_SMD:R_0603_1608Metric"
    assert template.geometry is CHIP_GEOMETRY["0603"]
    assert find_template("C", "0402").template_id == "Capacitor_SMD:C_0402_1005Metric"
    assert find_template("R", "9999") is None
    assert find_template("D", "0603") is None


def test_two_pad_resistor_uses_template(resistor_footprint):
    decision = decide(resistor_footprint)
    assert decision.use_template
    assert decision.template_id == "Resistor_SMD:R_0603_1608Metric"
    assert decision.geometry.pad_offset == 0.825


def test_through_hole_pads_are_never_substituted(connector_footprint):
    metadata = ComponentMetadata(prefix="R", package="R0603")
    decision = decide(connector_footprint, metadata)
    assert not decision.use_template
    assert decision.reason == "through-hole pads"


def test_pad_count_other_than_two_is_never_substituted():
    """A three-pad part with a passive-looking package still stays verbatim."""
    document = load_footprint(
        {"x": 0, "y": 0, "c_para": {"package": "R0603", "pre": "R?"}},
        [
            "PAD~RECT~-4~0~2~2~1~~1~0~~0~g1~0~~Y~0",
            "PAD~RECT~0~0~2~2~1~~2~0~~0~g2~0~~Y~0",
            "PAD~RECT~4~0~2~2~1~~3~0~~0~g3~0~~Y~0",
        ],
    )
    decision = decide(document)
    assert not decision.use_template
    assert decision.template_id is None
    assert decision.reason == "3 pads"


def test_unknown_package_stays_verbatim(resistor_footprint):
    decision = decide(resistor_footprint, ComponentMetadata(prefix="U", package="SOD-123"))
    assert not decision.use_template
