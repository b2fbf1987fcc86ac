"""SVG to PNG rendering utilities."""
from io import BytesIO
from pathlib import Path

import cairosvg
from PIL import Image


def render_svg_to_png(
    svg_content: str,
    output_path: str | Path | None = None,
    scale: float = 10.0,
) -> Image.Image:
    """
    Render SVG content to a PNG image.

    Args:
        svg_content: SVG document as a string
        output_path: Optional path to save the PNG file
        scale: Scale factor for rendering (default 10x for detail)

    Returns:
        PIL Image object
    """
    png_bytes = cairosvg.svg2png(bytestring=svg_content.encode("utf-8"), scale=scale)
    image = Image.open(BytesIO(png_bytes))
    if output_path:
        image.save(str(output_path))
    return image


def render_footprint_to_png(
    footprint_text: str,
    output_path: str | Path | None = None,
    scale: float = 10.0,
) -> Image.Image:
    """Render generated ``.kicad_mod`` text to PNG."""
    from .generator import FootprintSVG

    return render_svg_to_png(FootprintSVG(footprint_text).generate(), output_path, scale)


def render_symbol_to_png(
    symbol_text: str,
    output_path: str | Path | None = None,
    scale: float = 10.0,
) -> Image.Image:
    """Render generated ``.kicad_sym`` text to PNG."""
    from .generator import SymbolSVG

    return render_svg_to_png(SymbolSVG(symbol_text).generate(), output_path, scale)
