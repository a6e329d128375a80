"""
Display-space to PDF-space transforms for rotated pages.

Display space is what a viewer shows: top-left origin, y down, page rotation
already applied. PDF space is the raw content stream frame: bottom-left
origin, y up, never rotated. Every function here takes the raw (unrotated)
page width and height and handles each rotation in its own branch so the
edge anchoring of each case can be read off directly:

	rotation   pdf x         pdf y         glyph rotation
	0          x             raw_h - y     0
	90         raw_w - y     raw_h - x     -90
	180        raw_w - x     y             180
	270        y             x             90

At 90 the display bottom edge is the raw left edge; at 270 it is the raw
right edge; at 180 it is the raw top edge.
"""

# Standard Library
import dataclasses
import typing

# local repo modules
import flyer_rebrand as frb
import flyer_rebrand.geometry


Rect = frb.geometry.Rect
UnsupportedRotation = frb.geometry.UnsupportedRotation


class TextAnchor(typing.NamedTuple):
	x: float
	y: float
	rotation: int


@dataclasses.dataclass(frozen=True)
class ImagePlacement:
	# anchor is the image's own lower-left corner after rotation
	x: float
	y: float
	width: float
	height: float
	rotation: int


#============================================
def display_point_to_pdf(
	x: float,
	y: float,
	rotation: int,
	raw_width: float,
	raw_height: float,
) -> tuple[float, float]:
	"""
	Map a single display-space point into PDF space.

	Args:
		x: Display x.
		y: Display y (down from the top).
		rotation: Page rotation.
		raw_width: Raw page width.
		raw_height: Raw page height.

	Returns:
		Tuple of (pdf_x, pdf_y).
	"""
	if rotation == 0:
		return (x, raw_height - y)
	if rotation == 90:
		return (raw_width - y, raw_height - x)
	if rotation == 180:
		return (raw_width - x, y)
	if rotation == 270:
		return (y, x)
	raise UnsupportedRotation(rotation)


#============================================
def transform_rect(
	display_rect: Rect,
	rotation: int,
	raw_width: float,
	raw_height: float,
) -> Rect:
	"""
	Map a display-space rectangle into a PDF-space rectangle.

	Args:
		display_rect: Rectangle anchored top-left in display space.
		rotation: Page rotation.
		raw_width: Raw page width.
		raw_height: Raw page height.

	Returns:
		Rectangle anchored bottom-left in PDF space.
	"""
	x, y, width, height = display_rect.as_tuple()
	if rotation == 0:
		# display bottom -> raw bottom
		return Rect(x, raw_height - y - height, width, height)
	if rotation == 90:
		# display bottom -> raw left, display left -> raw top
		return Rect(raw_width - y - height, raw_height - x - width, height, width)
	if rotation == 180:
		# display bottom -> raw top, display left -> raw right
		return Rect(raw_width - x - width, y, width, height)
	if rotation == 270:
		# display bottom -> raw right, display left -> raw bottom
		return Rect(y, x, height, width)
	raise UnsupportedRotation(rotation)


#============================================
def transform_text_anchor(
	display_x: float,
	baseline_y: float,
	rotation: int,
	raw_width: float,
	raw_height: float,
) -> TextAnchor:
	"""
	Map a text baseline start point into PDF space.

	The returned rotation is applied to the glyph run so the text reads
	upright in the viewer.

	Args:
		display_x: Left edge of the glyph run in display space.
		baseline_y: Baseline y in display space.
		rotation: Page rotation.
		raw_width: Raw page width.
		raw_height: Raw page height.

	Returns:
		TextAnchor of (pdf_x, pdf_y, rotation_degrees).
	"""
	if rotation == 0:
		return TextAnchor(display_x, raw_height - baseline_y, 0)
	if rotation == 90:
		return TextAnchor(raw_width - baseline_y, raw_height - display_x, -90)
	if rotation == 180:
		return TextAnchor(raw_width - display_x, baseline_y, 180)
	if rotation == 270:
		return TextAnchor(baseline_y, display_x, 90)
	raise UnsupportedRotation(rotation)


#============================================
def transform_image_placement(
	display_rect: Rect,
	rotation: int,
	raw_width: float,
	raw_height: float,
) -> ImagePlacement:
	"""
	Compute a rotated image draw call for a display-space block.

	The draw call takes the image's intrinsic (display) width and height
	plus a rotation about the anchor. For 90 and 270 this is the PDF-space
	footprint with its width and height swapped back.

	Args:
		display_rect: Image block rectangle in display space.
		rotation: Page rotation.
		raw_width: Raw page width.
		raw_height: Raw page height.

	Returns:
		ImagePlacement whose drawn footprint equals transform_rect().
	"""
	x, y, width, height = display_rect.as_tuple()
	if rotation == 0:
		return ImagePlacement(x, raw_height - y - height, width, height, 0)
	if rotation == 90:
		return ImagePlacement(raw_width - y - height, raw_height - x, width, height, -90)
	if rotation == 180:
		return ImagePlacement(raw_width - x, y + height, width, height, 180)
	if rotation == 270:
		return ImagePlacement(y + height, x, width, height, 90)
	raise UnsupportedRotation(rotation)
