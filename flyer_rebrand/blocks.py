"""
Block model, company profile fields, and the per-page block store.
"""

# Standard Library
import dataclasses
import enum
import typing

# local repo modules
import flyer_rebrand as frb
import flyer_rebrand.config
import flyer_rebrand.errors
import flyer_rebrand.geometry


Rect = frb.geometry.Rect
DisplaySize = frb.geometry.DisplaySize
BlockValidationError = frb.errors.BlockValidationError

BLOCK_MIN_WIDTH = frb.config.BLOCK_MIN_WIDTH
BLOCK_MIN_HEIGHT = frb.config.BLOCK_MIN_HEIGHT
BLOCK_MIN_FONT_SIZE = frb.config.BLOCK_MIN_FONT_SIZE
FEE_LABELS = frb.config.FEE_LABELS

FONT_WEIGHTS = ("normal", "bold")
TEXT_ALIGNS = ("left", "center", "right")


class TextField(str, enum.Enum):
	COMPANY_NAME = "company_name"
	ADDRESS = "address"
	PHONE = "phone"
	FAX = "fax"
	EMAIL = "email"
	CONTACT_PERSON = "contact_person"
	LICENSE_NUMBER = "license_number"
	FEE_RATIO_LANDLORD = "fee_ratio_landlord"
	FEE_RATIO_TENANT = "fee_ratio_tenant"
	FEE_DISTRIBUTION_MOTODUKE = "fee_distribution_motoduke"
	FEE_DISTRIBUTION_KYAKUZUKE = "fee_distribution_kyakuzuke"


class ImageField(str, enum.Enum):
	LOGO = "logo"
	LINE_QR = "line_qr"


FEE_FIELDS = frozenset({
	TextField.FEE_RATIO_LANDLORD,
	TextField.FEE_RATIO_TENANT,
	TextField.FEE_DISTRIBUTION_MOTODUKE,
	TextField.FEE_DISTRIBUTION_KYAKUZUKE,
})


@dataclasses.dataclass(frozen=True)
class TextBlock:
	id: int
	field: TextField
	x: float
	y: float
	width: float
	height: float
	font_size: float
	font_weight: str = "normal"
	text_align: str = "left"

	@property
	def rect(self) -> Rect:
		return Rect(self.x, self.y, self.width, self.height)


@dataclasses.dataclass(frozen=True)
class ImageBlock:
	id: int
	field: ImageField
	x: float
	y: float
	width: float
	height: float

	@property
	def rect(self) -> Rect:
		return Rect(self.x, self.y, self.width, self.height)


Block = TextBlock | ImageBlock


@dataclasses.dataclass(frozen=True)
class ImageSource:
	# key identifies the image for embedding (URL or file name); data None means missing
	key: str
	data: bytes | None


@dataclasses.dataclass
class ResolvedProfile:
	company_name: str | None = None
	address: str | None = None
	phone: str | None = None
	fax: str | None = None
	email: str | None = None
	contact_person: str | None = None
	license_number: str | None = None
	logo: ImageSource | None = None
	line_qr: ImageSource | None = None
	fee_ratio_landlord: float | None = None
	fee_ratio_tenant: float | None = None
	fee_distribution_motoduke: float | None = None
	fee_distribution_kyakuzuke: float | None = None


TEXT_RESOLVERS: dict[TextField, typing.Callable[[ResolvedProfile], str | float | None]] = {
	TextField.COMPANY_NAME: lambda profile: profile.company_name,
	TextField.ADDRESS: lambda profile: profile.address,
	TextField.PHONE: lambda profile: profile.phone,
	TextField.FAX: lambda profile: profile.fax,
	TextField.EMAIL: lambda profile: profile.email,
	TextField.CONTACT_PERSON: lambda profile: profile.contact_person,
	TextField.LICENSE_NUMBER: lambda profile: profile.license_number,
	TextField.FEE_RATIO_LANDLORD: lambda profile: profile.fee_ratio_landlord,
	TextField.FEE_RATIO_TENANT: lambda profile: profile.fee_ratio_tenant,
	TextField.FEE_DISTRIBUTION_MOTODUKE: lambda profile: profile.fee_distribution_motoduke,
	TextField.FEE_DISTRIBUTION_KYAKUZUKE: lambda profile: profile.fee_distribution_kyakuzuke,
}

IMAGE_RESOLVERS: dict[ImageField, typing.Callable[[ResolvedProfile], ImageSource | None]] = {
	ImageField.LOGO: lambda profile: profile.logo,
	ImageField.LINE_QR: lambda profile: profile.line_qr,
}


#============================================
def format_fee(label: str, value: float) -> str:
	"""
	Format a fee percentage for drawing.

	Args:
		label: Human readable fee label.
		value: Percentage value.

	Returns:
		String like "貸主負担: 50%".
	"""
	if float(value).is_integer():
		number = str(int(value))
	else:
		number = f"{value:g}"
	return f"{label}: {number}%"


#============================================
def resolve_text(
	profile: ResolvedProfile,
	field: TextField,
	fee_labels: dict[str, str] | None = None,
) -> str | None:
	"""
	Resolve the string a text block draws.

	Args:
		profile: Resolved company profile.
		field: Text field of the block.
		fee_labels: Labels for fee fields, keyed by field value.

	Returns:
		Text to draw, or None when the block is suppressed.
	"""
	field = TextField(field)
	value = TEXT_RESOLVERS[field](profile)
	if value is None:
		return None
	if field in FEE_FIELDS:
		labels = FEE_LABELS if fee_labels is None else fee_labels
		return format_fee(labels.get(field.value, field.value), value)
	text = str(value)
	if not text:
		return None
	return text


#============================================
def resolve_image(profile: ResolvedProfile, field: ImageField) -> ImageSource | None:
	"""Resolve the image source an image block draws."""
	return IMAGE_RESOLVERS[ImageField(field)](profile)


#============================================
def block_from_dict(data: dict) -> Block:
	"""
	Build a block from its JSON form.

	Args:
		data: Dict with a "type" of "text" or "image".

	Returns:
		TextBlock or ImageBlock.
	"""
	kind = data.get("type", "text")
	try:
		if kind == "image":
			return ImageBlock(
				id=int(data["id"]),
				field=ImageField(data["field"]),
				x=float(data["x"]),
				y=float(data["y"]),
				width=float(data["width"]),
				height=float(data["height"]),
			)
		if kind == "text":
			return TextBlock(
				id=int(data["id"]),
				field=TextField(data["field"]),
				x=float(data["x"]),
				y=float(data["y"]),
				width=float(data["width"]),
				height=float(data["height"]),
				font_size=float(data["font_size"]),
				font_weight=data.get("font_weight", "normal"),
				text_align=data.get("text_align", "left"),
			)
	except (KeyError, ValueError) as error:
		raise BlockValidationError(f"Malformed block {data!r}: {error}") from error
	raise BlockValidationError(f"Unknown block type: {kind!r}")


#============================================
def block_to_dict(block: Block) -> dict:
	"""Serialize a block to its JSON form."""
	data = dataclasses.asdict(block)
	data["field"] = block.field.value
	data["type"] = "image" if isinstance(block, ImageBlock) else "text"
	return data


#============================================
def validate_block(block: Block, display_size: DisplaySize) -> None:
	"""
	Check a block against the page it sits on.

	Blocks may leave the mask band but never the page.

	Args:
		block: Block to check.
		display_size: Page display size.
	"""
	if block.width <= 0.0 or block.height <= 0.0:
		raise BlockValidationError(f"Block {block.id} has non-positive size")
	if not display_size.as_rect().contains(block.rect):
		raise BlockValidationError(
			f"Block {block.id} {block.rect.as_tuple()} lies outside the page "
			f"{display_size.width:g}x{display_size.height:g}"
		)
	if isinstance(block, TextBlock):
		if block.font_size <= 0.0:
			raise BlockValidationError(f"Block {block.id} has non-positive font size")
		if block.font_weight not in FONT_WEIGHTS:
			raise BlockValidationError(f"Block {block.id} has unknown font weight {block.font_weight!r}")
		if block.text_align not in TEXT_ALIGNS:
			raise BlockValidationError(f"Block {block.id} has unknown alignment {block.text_align!r}")


class BlockStore:
	"""
	Blocks of one page, keyed by monotonically assigned ids.

	Blocks are frozen; every edit swaps in a new value. Iteration follows
	insertion order, which is also the draw order.
	"""

	def __init__(self, display_size: DisplaySize):
		self.display_size = display_size
		self._blocks: dict[int, Block] = {}
		self._next_id = 1

	def __iter__(self) -> typing.Iterator[Block]:
		return iter(list(self._blocks.values()))

	def __len__(self) -> int:
		return len(self._blocks)

	def __contains__(self, block_id: int) -> bool:
		return block_id in self._blocks

	def next_id(self) -> int:
		block_id = self._next_id
		self._next_id += 1
		return block_id

	def blocks(self) -> list[Block]:
		return list(self._blocks.values())

	def load(self, blocks: list[Block]) -> None:
		"""
		Replace the contents with a freshly generated block list.

		Args:
			blocks: Blocks with unique ids.
		"""
		seen: set[int] = set()
		for block in blocks:
			if block.id in seen:
				raise BlockValidationError(f"Duplicate block id {block.id}")
			seen.add(block.id)
			validate_block(block, self.display_size)
		self._blocks = {block.id: block for block in blocks}
		if seen:
			self._next_id = max(self._next_id, max(seen) + 1)

	def add(self, block: Block) -> Block:
		if block.id in self._blocks:
			raise BlockValidationError(f"Duplicate block id {block.id}")
		validate_block(block, self.display_size)
		self._blocks[block.id] = block
		self._next_id = max(self._next_id, block.id + 1)
		return block

	def get(self, block_id: int) -> Block:
		return self._blocks[block_id]

	def replace(self, block: Block) -> Block:
		if block.id not in self._blocks:
			raise KeyError(block.id)
		validate_block(block, self.display_size)
		self._blocks[block.id] = block
		return block

	def delete(self, block_id: int) -> None:
		del self._blocks[block_id]

	def move(self, block_id: int, x: float, y: float) -> Block:
		"""
		Move a block, clamping it inside the page like a drag does.

		Args:
			block_id: Block id.
			x: Requested left edge.
			y: Requested top edge.

		Returns:
			The moved block.
		"""
		block = self._blocks[block_id]
		x = max(0.0, min(self.display_size.width - block.width, x))
		y = max(0.0, min(self.display_size.height - block.height, y))
		return self.replace(dataclasses.replace(block, x=x, y=y))

	def resize(self, block_id: int, width: float, height: float) -> Block:
		"""
		Resize a block, keeping the minimum size and the page bounds.

		Args:
			block_id: Block id.
			width: Requested width.
			height: Requested height.

		Returns:
			The resized block.
		"""
		block = self._blocks[block_id]
		width = min(max(BLOCK_MIN_WIDTH, width), self.display_size.width - block.x)
		height = min(max(BLOCK_MIN_HEIGHT, height), self.display_size.height - block.y)
		return self.replace(dataclasses.replace(block, width=width, height=height))

	def set_font_size(self, block_id: int, font_size: float) -> Block:
		block = self._blocks[block_id]
		if not isinstance(block, TextBlock):
			raise BlockValidationError(f"Block {block_id} is not a text block")
		return self.replace(dataclasses.replace(block, font_size=max(BLOCK_MIN_FONT_SIZE, font_size)))

	def validate(self) -> None:
		for block in self._blocks.values():
			validate_block(block, self.display_size)
