"""Pytest configuration and sample EasyEDA documents for easykicad tests."""
import pytest

from easykicad.easyeda import load_footprint, load_symbol


# Raw offset that lands exactly 1 mm from the origin (1 / 0.254)
MM = 3.937007874


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "render: needs the cairo system library (skipped when it is missing)"
    )


# 0603 chip resistor: pads at (+-1.0, 0) mm, 0.5 x 0.5 mm, no holes
RESISTOR_FOOTPRINT_HEAD = {
    "x": 400,
    "y": 300,
    "c_para": {"package": "R0603", "pre": "R?", "name": "R0603"},
}

RESISTOR_FOOTPRINT_SHAPES = [
    f"PAD~RECT~{400 - MM}~300~{MM / 2}~{MM / 2}~1~~1~0~~0~gge5~0~~Y~0",
    f"PAD~RECT~{400 + MM}~300~{MM / 2}~{MM / 2}~1~~2~0~~0~gge6~0~~Y~0",
    "TRACK~0.6~3~~397 297 403 297~gge7~0",
    "PAD~RECT~1",  # Too short
    "FOO~1~2",  # Unknown tag
]

RESISTOR_SYMBOL_HEAD = {
    "x": 400,
    "y": 300,
    "c_para": {
        "pre": "R?",
        "name": "10k",
        "package": "R0603",
        "BOM_Manufacturer": "Yageo",
        "BOM_Manufacturer Part": "RC0603FR-0710KL",
        "BOM_Supplier Part": "C25804",
        "BOM_Tolerance": "1%",
    },
}

RESISTOR_SYMBOL_SHAPES = [
    "P~show~0~1~390~300~180~gge1~0^^390~300^^M 390 300 h 10~#880000"
    "^^1~393~304~0~1~start~~~#0000FF^^1~389~299~0~1~end~~~#0000FF"
    "^^0~393~300^^0~M 393 297 L 396 300 L 393 303",
    "P~show~0~2~410~300~0~gge2~0^^410~300^^M 410 300 h -10~#880000"
    "^^1~407~304~0~2~end~~~#0000FF^^1~411~299~0~2~start~~~#0000FF"
    "^^0~407~300^^0~M 407 297 L 404 300 L 407 303",
    "R~395~297~~~10~6~#880000~1~0~none~gge3~0",
    "T~L~395~290~0~#000080~Arial~7pt~normal~~~comment~Hello~1~start~gge4~0",
    "T~N~395~310~0~#000080~Arial~7pt~normal~~~comment~10k~1~start~gge5~0",
]

# Logic symbol with a single inverted input pin of length 3 units
INVERTER_SYMBOL_HEAD = {"x": 400, "y": 300, "c_para": "pre`U?`name`INV`package`SOT-23-5"}

INVERTER_SYMBOL_SHAPES = [
    "P~show~1~1~380~290~180~gge9~0^^380~290^^M 380 290 h 3~#880000"
    "^^1~384~294~0~IN~start~~~#0000FF^^1~379~289~0~1~end~~~#0000FF"
    "^^1~384~290^^0~M 0 0",
    "R~383~285~~~20~10~#880000~1~0~none~gge10~0",
]

# Two-pin through-hole connector with a via, a mechanical hole and silkscreen
CONNECTOR_FOOTPRINT_HEAD = {
    "x": 400,
    "y": 300,
    "c_para": {"package": "CONN-TH_2P", "pre": "J?", "name": "Header 2P"},
}

CONNECTOR_FOOTPRINT_SHAPES = [
    "PAD~ELLIPSE~390~300~6~6~11~~1~1.8~~0~gge1~0~~Y~0",
    "PAD~RECT~410~300~6~6~11~~2~1.8~~0~gge2~0~~Y~0",
    "VIA~400~310~2.4~~~gge3~0",
    "HOLE~400~290~1.5~gge4~0",
    "TRACK~1~3~~385 295 415 295~gge5~0",
    "CIRCLE~400~300~12~0.5~3~gge6~0",
    "TRACK~1~99~~385 305 415 305~gge7~0",
]


@pytest.fixture
def resistor_footprint():
    """Normalized 0603 resistor footprint document."""
    return load_footprint(RESISTOR_FOOTPRINT_HEAD, RESISTOR_FOOTPRINT_SHAPES)


@pytest.fixture
def resistor_symbol():
    """Normalized two-pin resistor symbol document."""
    return load_symbol(RESISTOR_SYMBOL_HEAD, RESISTOR_SYMBOL_SHAPES)


@pytest.fixture
def inverter_symbol():
    """Normalized symbol with one inverted input pin."""
    return load_symbol(INVERTER_SYMBOL_HEAD, INVERTER_SYMBOL_SHAPES)


@pytest.fixture
def connector_footprint():
    """Normalized through-hole connector footprint document."""
    return load_footprint(CONNECTOR_FOOTPRINT_HEAD, CONNECTOR_FOOTPRINT_SHAPES)


@pytest.fixture
def reference_footprint_svg():
    """Reference rendering of the resistor footprint as the source service draws it."""
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="390 290 20 20">'
        f'<g c_partid="part_pad" number="1" layerid="1" c_origin="{400 - MM},300">'
        f'<rect x="{400 - MM * 1.25}" y="{300 - MM / 4}" width="{MM / 2}" height="{MM / 2}"/>'
        "</g>"
        f'<g c_partid="part_pad" number="2" layerid="1" c_origin="{400 + MM},300">'
        f'<rect x="{400 + MM * 0.75}" y="{300 - MM / 4}" width="{MM / 2}" height="{MM / 2}"/>'
        "</g>"
        "</svg>"
    )


@pytest.fixture
def reference_symbol_svg():
    """Reference rendering of the resistor symbol."""
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="380 290 40 20">'
        '<g c_partid="part_pin" c_spicepin="1" c_origin="390,300">'
        '<path d="M 390 300 h 10"/><text x="393" y="304">1</text></g>'
        '<g c_partid="part_pin" c_spicepin="2" c_origin="410,300">'
        '<path d="M 410 300 h -10"/><text x="407" y="304">2</text></g>'
        "</svg>"
    )


@pytest.fixture
def resistor_records():
    """Raw (symbol head, symbol shapes, footprint head, footprint shapes) of the resistor."""
    return (
        RESISTOR_SYMBOL_HEAD, list(RESISTOR_SYMBOL_SHAPES),
        RESISTOR_FOOTPRINT_HEAD, list(RESISTOR_FOOTPRINT_SHAPES),
    )
