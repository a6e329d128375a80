"""
Mask band calculation in display space.
"""

# Standard Library
import dataclasses

# local repo modules
import flyer_rebrand as frb
import flyer_rebrand.config
import flyer_rebrand.errors
import flyer_rebrand.geometry


Rect = frb.geometry.Rect
DisplaySize = frb.geometry.DisplaySize
MaskOutOfBounds = frb.errors.MaskOutOfBounds

DEFAULT_BOTTOM_HEIGHT = frb.config.DEFAULT_BOTTOM_HEIGHT
DEFAULT_LEFT_WIDTH = frb.config.DEFAULT_LEFT_WIDTH
DEFAULT_ENABLE_L_SHAPE = frb.config.DEFAULT_ENABLE_L_SHAPE


@dataclasses.dataclass
class MaskSettings:
	bottom_height: float = DEFAULT_BOTTOM_HEIGHT
	left_width: float = DEFAULT_LEFT_WIDTH
	enable_l_shape: bool = DEFAULT_ENABLE_L_SHAPE


@dataclasses.dataclass
class MaskRects:
	bottom: Rect
	left: Rect | None = None
	warnings: list[MaskOutOfBounds] = dataclasses.field(default_factory=list)

	def drawable(self) -> list[Rect]:
		"""
		List the rectangles worth painting, bottom band first.

		Returns:
			Rectangles with positive area.
		"""
		rects = [self.bottom]
		if self.left is not None:
			rects.append(self.left)
		return [rect for rect in rects if rect.width > 0.0 and rect.height > 0.0]


#============================================
def scale_mask_settings(settings: MaskSettings, ratio: float) -> MaskSettings:
	"""
	Scale mask settings authored at another zoom.

	Args:
		settings: Authored settings.
		ratio: Natural display width divided by authored display width.

	Returns:
		New MaskSettings.
	"""
	return MaskSettings(
		bottom_height=settings.bottom_height * ratio,
		left_width=settings.left_width * ratio,
		enable_l_shape=settings.enable_l_shape,
	)


#============================================
def _clamp_extent(name: str, value: float, limit: float, warnings: list[MaskOutOfBounds]) -> float:
	if value < 0.0:
		warnings.append(MaskOutOfBounds(f"{name} {value:g} is negative, clamped to 0"))
		return 0.0
	if value > limit:
		warnings.append(MaskOutOfBounds(f"{name} {value:g} exceeds page extent {limit:g}, clamped"))
		return limit
	return value


#============================================
def compute_mask_rects(display_size: DisplaySize, settings: MaskSettings) -> MaskRects:
	"""
	Compute the display-space mask rectangles for one page.

	The bottom band hugs the page bottom. With the L-shape enabled the left
	band runs the full page height and the bottom band starts where the left
	band ends, so the corner is covered exactly once.

	Args:
		display_size: Page display size.
		settings: Mask settings in the same frame as display_size.

	Returns:
		MaskRects with any clamping warnings.
	"""
	warnings: list[MaskOutOfBounds] = []
	width = display_size.width
	height = display_size.height
	bottom_height = _clamp_extent("bottom_height", settings.bottom_height, height, warnings)

	left_width = 0.0
	if settings.enable_l_shape:
		left_width = _clamp_extent("left_width", settings.left_width, width, warnings)

	if left_width > 0.0:
		bottom = Rect(left_width, height - bottom_height, width - left_width, bottom_height)
		left = Rect(0.0, 0.0, left_width, height)
		return MaskRects(bottom=bottom, left=left, warnings=warnings)

	bottom = Rect(0.0, height - bottom_height, width, bottom_height)
	return MaskRects(bottom=bottom, left=None, warnings=warnings)
