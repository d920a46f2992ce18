"""
Deep Zoom XML descriptor.
"""

DEEPZOOM_NAMESPACE = "http://schemas.microsoft.com/deepzoom/2008"


def build_descriptor(
    tile_size: int,
    overlap: int,
    tile_format: str,
    width: int,
    height: int,
) -> str:
    """
    Render the XML manifest that tells a viewer how the pyramid is laid out.

    Values are rendered as given, without validation.

    Args:
        tile_size: Nominal tile size
        overlap: Tile overlap in pixels
        tile_format: Tile file extension
        width: Total image width at the finest level
        height: Total image height at the finest level

    Returns:
        XML document as a string
    """
    return (
        "<?xml version='1.0' encoding='UTF-8'?>\n"
        f"<Image TileSize='{tile_size}'\n"
        f"       Overlap='{overlap}'\n"
        f"       Format='{tile_format}'\n"
        f"       xmlns='{DEEPZOOM_NAMESPACE}'>\n"
        f"    <Size Width='{width}' Height='{height}'/>\n"
        "</Image>\n"
    )
