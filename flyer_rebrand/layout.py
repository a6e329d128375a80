"""
Initial block layout inside the bottom mask band.
"""

# Standard Library
import itertools
import typing

# local repo modules
import flyer_rebrand as frb
import flyer_rebrand.blocks
import flyer_rebrand.config
import flyer_rebrand.geometry
import flyer_rebrand.mask


Rect = frb.geometry.Rect
DisplaySize = frb.geometry.DisplaySize
MaskRects = frb.mask.MaskRects
TextBlock = frb.blocks.TextBlock
ImageBlock = frb.blocks.ImageBlock
TextField = frb.blocks.TextField
ImageField = frb.blocks.ImageField
ResolvedProfile = frb.blocks.ResolvedProfile

LAYOUT_MARGIN_TOP = frb.config.LAYOUT_MARGIN_TOP
LAYOUT_MARGIN_BOTTOM = frb.config.LAYOUT_MARGIN_BOTTOM
LAYOUT_MARGIN_X = frb.config.LAYOUT_MARGIN_X
LAYOUT_COLUMN_GAP = frb.config.LAYOUT_COLUMN_GAP
LAYOUT_IMAGE_GAP = frb.config.LAYOUT_IMAGE_GAP
LAYOUT_CELL_GAP = frb.config.LAYOUT_CELL_GAP
LAYOUT_ROW_GAP = frb.config.LAYOUT_ROW_GAP
LAYOUT_TITLE_GAP = frb.config.LAYOUT_TITLE_GAP
LAYOUT_LINE_PADDING = frb.config.LAYOUT_LINE_PADDING
LAYOUT_IMAGE_SLOT_RATIO = frb.config.LAYOUT_IMAGE_SLOT_RATIO
LAYOUT_REFERENCE_HEIGHT = frb.config.LAYOUT_REFERENCE_HEIGHT
COMPANY_NAME_FONT_SIZE = frb.config.COMPANY_NAME_FONT_SIZE
COMPANY_NAME_MIN_FONT_SIZE = frb.config.COMPANY_NAME_MIN_FONT_SIZE
SMALL_FONT_SIZE = frb.config.SMALL_FONT_SIZE
SMALL_MIN_FONT_SIZE = frb.config.SMALL_MIN_FONT_SIZE

EPSILON = 1e-6


#============================================
def compute_font_sizes(band_height: float) -> tuple[float, float]:
	"""
	Scale the title and body font sizes with the band height.

	Args:
		band_height: Height of the bottom mask band.

	Returns:
		Tuple of (title_size, small_size).
	"""
	scale = min(1.0, band_height / LAYOUT_REFERENCE_HEIGHT)
	title_size = max(COMPANY_NAME_MIN_FONT_SIZE, float(int(COMPANY_NAME_FONT_SIZE * scale + 0.5)))
	small_size = max(SMALL_MIN_FONT_SIZE, float(int(SMALL_FONT_SIZE * scale + 0.5)))
	return (title_size, small_size)


#============================================
def compute_usable_rect(band: Rect) -> Rect | None:
	"""
	Inset the bottom band by the layout margins.

	Args:
		band: Bottom mask band in display space.

	Returns:
		Usable rectangle, or None if the margins consume the band.
	"""
	width = band.width - 2.0 * LAYOUT_MARGIN_X
	height = band.height - LAYOUT_MARGIN_TOP - LAYOUT_MARGIN_BOTTOM
	if width <= 0.0 or height <= 0.0:
		return None
	return Rect(band.x + LAYOUT_MARGIN_X, band.y + LAYOUT_MARGIN_TOP, width, height)


#============================================
def generate_initial_blocks(
	display_size: DisplaySize,
	mask_rects: MaskRects,
	profile: ResolvedProfile,
	next_id: typing.Callable[[], int] | None = None,
) -> list:
	"""
	Lay out the company identity blocks for a freshly opened page.

	Image slots go to the outer edges of the band, two text columns share
	the space between them. Rows that would spill out of the band are
	dropped, so every block lies inside the band and none overlap.

	Args:
		display_size: Page display size.
		mask_rects: Display-space mask rectangles of the page.
		profile: Resolved company profile.
		next_id: Id source, defaults to a fresh counter per call.

	Returns:
		List of TextBlock and ImageBlock.
	"""
	if next_id is None:
		next_id = itertools.count(1).__next__
	band = mask_rects.bottom
	page_rect = display_size.as_rect()
	usable = compute_usable_rect(band)
	if usable is None or not page_rect.contains(usable):
		return []

	title_size, small_size = compute_font_sizes(band.height)
	title_height = title_size + LAYOUT_LINE_PADDING
	small_height = small_size + LAYOUT_LINE_PADDING

	blocks: list = []
	text_left = usable.x
	text_right = usable.right
	side = min(usable.height, usable.height * LAYOUT_IMAGE_SLOT_RATIO)
	slot_y = usable.y + (usable.height - side) / 2.0

	if frb.blocks.resolve_image(profile, ImageField.LOGO) is not None and side <= text_right - text_left:
		blocks.append(ImageBlock(next_id(), ImageField.LOGO, text_left, slot_y, side, side))
		text_left += side + LAYOUT_IMAGE_GAP
	if frb.blocks.resolve_image(profile, ImageField.LINE_QR) is not None and side <= text_right - text_left:
		blocks.append(ImageBlock(next_id(), ImageField.LINE_QR, text_right - side, slot_y, side, side))
		text_right -= side + LAYOUT_IMAGE_GAP

	column_width = (text_right - text_left - LAYOUT_COLUMN_GAP) / 2.0
	if column_width <= 0.0:
		return blocks
	cell_width = (column_width - LAYOUT_CELL_GAP) / 2.0

	def fits(y: float, height: float) -> bool:
		return y + height <= usable.bottom + EPSILON

	def text_block(field: TextField, x: float, y: float, width: float, height: float, size: float, weight: str) -> TextBlock:
		return TextBlock(next_id(), field, x, y, width, height, size, weight, "left")

	# left column: name, license, then the optional fee rows
	left_x = text_left
	rows = [
		([TextField.COMPANY_NAME], title_height, title_size, "bold", LAYOUT_TITLE_GAP),
		([TextField.LICENSE_NUMBER], small_height, small_size, "normal", LAYOUT_ROW_GAP),
	]
	if profile.fee_ratio_landlord is not None:
		rows.append(([TextField.FEE_RATIO_LANDLORD, TextField.FEE_RATIO_TENANT], small_height, small_size, "normal", LAYOUT_ROW_GAP))
	if profile.fee_distribution_motoduke is not None:
		rows.append(([TextField.FEE_DISTRIBUTION_MOTODUKE, TextField.FEE_DISTRIBUTION_KYAKUZUKE], small_height, small_size, "normal", LAYOUT_ROW_GAP))

	y = usable.y
	for fields, height, size, weight, gap in rows:
		if not fits(y, height):
			break
		if len(fields) == 1:
			blocks.append(text_block(fields[0], left_x, y, column_width, height, size, weight))
		elif cell_width > 0.0:
			blocks.append(text_block(fields[0], left_x, y, cell_width, height, size, weight))
			blocks.append(text_block(fields[1], left_x + cell_width + LAYOUT_CELL_GAP, y, cell_width, height, size, weight))
		y += height + gap

	# right column: contact details
	right_x = text_left + column_width + LAYOUT_COLUMN_GAP
	y = usable.y
	for field in (TextField.ADDRESS, TextField.PHONE, TextField.EMAIL):
		if not fits(y, small_height):
			break
		blocks.append(text_block(field, right_x, y, column_width, small_height, small_size, "normal"))
		y += small_height + LAYOUT_ROW_GAP

	return blocks
