"""
Value types for page geometry.
"""

# Standard Library
import dataclasses

# local repo modules
import flyer_rebrand as frb
import flyer_rebrand.errors


UnsupportedRotation = frb.errors.UnsupportedRotation

SUPPORTED_ROTATIONS = (0, 90, 180, 270)
EPSILON = 1e-6


@dataclasses.dataclass(frozen=True)
class Rect:
	x: float
	y: float
	width: float
	height: float

	@property
	def right(self) -> float:
		return self.x + self.width

	@property
	def bottom(self) -> float:
		# y-down frames call this the bottom edge, y-up frames the top edge
		return self.y + self.height

	@property
	def area(self) -> float:
		return self.width * self.height

	def as_tuple(self) -> tuple[float, float, float, float]:
		return (self.x, self.y, self.width, self.height)

	def scaled(self, ratio: float) -> "Rect":
		return Rect(self.x * ratio, self.y * ratio, self.width * ratio, self.height * ratio)

	def contains(self, other: "Rect", epsilon: float = EPSILON) -> bool:
		"""
		Check whether another rectangle lies inside this one.

		Args:
			other: Candidate inner rectangle.
			epsilon: Tolerance for float noise.

		Returns:
			True if other is fully inside.
		"""
		return (
			other.x >= self.x - epsilon
			and other.y >= self.y - epsilon
			and other.right <= self.right + epsilon
			and other.bottom <= self.bottom + epsilon
		)

	def intersects(self, other: "Rect", epsilon: float = EPSILON) -> bool:
		"""
		Check whether two rectangles overlap with positive area.

		Touching edges do not count as overlap.

		Args:
			other: Second rectangle.
			epsilon: Tolerance for float noise.

		Returns:
			True if the rectangles overlap.
		"""
		left = max(self.x, other.x)
		right = min(self.right, other.right)
		top = max(self.y, other.y)
		bottom = min(self.bottom, other.bottom)
		return right - left > epsilon and bottom - top > epsilon


@dataclasses.dataclass(frozen=True)
class PageSize:
	raw_width: float
	raw_height: float


@dataclasses.dataclass(frozen=True)
class DisplaySize:
	width: float
	height: float

	def as_rect(self) -> Rect:
		return Rect(0.0, 0.0, self.width, self.height)


#============================================
def check_rotation(rotation: int) -> int:
	"""
	Reject any rotation outside the four supported values.

	Args:
		rotation: Rotation in degrees.

	Returns:
		The rotation unchanged.
	"""
	if isinstance(rotation, bool) or rotation not in SUPPORTED_ROTATIONS:
		raise UnsupportedRotation(rotation)
	return int(rotation)


#============================================
def normalize_rotation(value: float) -> int:
	"""
	Normalize a declared page rotation into 0, 90, 180 or 270.

	Args:
		value: Declared rotation, possibly negative or above 360.

	Returns:
		Normalized rotation.
	"""
	try:
		degrees = float(value)
	except (TypeError, ValueError) as error:
		raise UnsupportedRotation(value) from error
	if not degrees.is_integer():
		raise UnsupportedRotation(value)
	normalized = int(degrees) % 360
	if normalized % 90 != 0:
		raise UnsupportedRotation(value)
	return normalized


#============================================
def display_size_for(page_size: PageSize, rotation: int) -> DisplaySize:
	"""
	Compute the size a viewer renders for a page.

	Args:
		page_size: Raw unrotated page size.
		rotation: Page rotation.

	Returns:
		DisplaySize with the raw dimensions swapped for 90 and 270.
	"""
	check_rotation(rotation)
	if rotation in (90, 270):
		return DisplaySize(page_size.raw_height, page_size.raw_width)
	return DisplaySize(page_size.raw_width, page_size.raw_height)
