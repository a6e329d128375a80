"""
Shared configuration and constants.
"""

import dataclasses


DEFAULT_BOTTOM_HEIGHT = 100.0
DEFAULT_LEFT_WIDTH = 0.0
DEFAULT_ENABLE_L_SHAPE = False

LAYOUT_MARGIN_TOP = 8.0
LAYOUT_MARGIN_BOTTOM = 8.0
LAYOUT_MARGIN_X = 10.0
LAYOUT_COLUMN_GAP = 10.0
LAYOUT_IMAGE_GAP = 8.0
LAYOUT_CELL_GAP = 4.0
LAYOUT_ROW_GAP = 2.0
LAYOUT_TITLE_GAP = 4.0
LAYOUT_LINE_PADDING = 6.0
LAYOUT_IMAGE_SLOT_RATIO = 0.9
LAYOUT_REFERENCE_HEIGHT = 100.0

COMPANY_NAME_FONT_SIZE = 16.0
COMPANY_NAME_MIN_FONT_SIZE = 11.0
SMALL_FONT_SIZE = 10.0
SMALL_MIN_FONT_SIZE = 8.0

BLOCK_MIN_WIDTH = 20.0
BLOCK_MIN_HEIGHT = 10.0
BLOCK_MIN_FONT_SIZE = 8.0

DESCENDER_OFFSET = 2.0
FONT_NAME_PREFIX = "FlyerRebrand"
PRODUCER = "flyer_rebrand"
OUTPUT_NAME_PREFIX = "帯替え済み"

MASK_FILL_RGB = (1.0, 1.0, 1.0)
TEXT_FILL_RGB = (0.0, 0.0, 0.0)

FEE_LABELS = {
	"fee_ratio_landlord": "貸主負担",
	"fee_ratio_tenant": "借主負担",
	"fee_distribution_motoduke": "元付配分",
	"fee_distribution_kyakuzuke": "客付配分",
}


@dataclasses.dataclass(frozen=True)
class EngineConfig:
	font_name_prefix: str
	mask_fill_rgb: tuple[float, float, float]
	text_fill_rgb: tuple[float, float, float]
	descender_offset: float
	fee_labels: dict[str, str]
	image_mask: str | None
	producer: str
	creation_date: str | None


#============================================
def build_engine_config(**overrides) -> EngineConfig:
	"""
	Build the default engine configuration.

	The configuration is resolved once by the caller and passed explicitly
	into every export; nothing in the engine reads a global at draw time.

	Args:
		**overrides: Field values replacing the defaults.

	Returns:
		EngineConfig.
	"""
	config = EngineConfig(
		font_name_prefix=FONT_NAME_PREFIX,
		mask_fill_rgb=MASK_FILL_RGB,
		text_fill_rgb=TEXT_FILL_RGB,
		descender_offset=DESCENDER_OFFSET,
		fee_labels=dict(FEE_LABELS),
		image_mask="auto",
		producer=PRODUCER,
		creation_date=None,
	)
	if overrides:
		config = dataclasses.replace(config, **overrides)
	return config
