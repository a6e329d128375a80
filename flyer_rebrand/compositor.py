"""
Per-page compositing: page geometry, draw planning, and overlay drawing.
"""

# Standard Library
import dataclasses
import io

# PIP3 modules
import pypdf
import pypdf.errors
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import flyer_rebrand as frb
import flyer_rebrand.blocks
import flyer_rebrand.config
import flyer_rebrand.errors
import flyer_rebrand.geometry
import flyer_rebrand.mask
import flyer_rebrand.rotation


Rect = frb.geometry.Rect
PageSize = frb.geometry.PageSize
DisplaySize = frb.geometry.DisplaySize
MaskSettings = frb.mask.MaskSettings
MaskRects = frb.mask.MaskRects
TextBlock = frb.blocks.TextBlock
ImageBlock = frb.blocks.ImageBlock
ResolvedProfile = frb.blocks.ResolvedProfile
TextAnchor = frb.rotation.TextAnchor
ImagePlacement = frb.rotation.ImagePlacement
EngineConfig = frb.config.EngineConfig
SourcePageUnreadable = frb.errors.SourcePageUnreadable


@dataclasses.dataclass(frozen=True)
class PageGeometry:
	page_size: PageSize
	rotation: int
	origin: tuple[float, float] = (0.0, 0.0)

	@property
	def display_size(self) -> DisplaySize:
		return frb.geometry.display_size_for(self.page_size, self.rotation)

	def scale_ratio(self, authored_width: float | None) -> float:
		"""
		Ratio from the authored display frame to the natural display frame.

		Args:
			authored_width: Display width the blocks and mask were authored at.

		Returns:
			Scale ratio, 1.0 when authored at natural size.
		"""
		if authored_width is None:
			return 1.0
		if authored_width <= 0.0:
			raise ValueError(f"Authored display width must be positive, got {authored_width}")
		return self.display_size.width / authored_width


@dataclasses.dataclass(frozen=True)
class FontNames:
	regular: str
	bold: str


@dataclasses.dataclass(frozen=True)
class TextDraw:
	block_id: int
	text: str
	font_name: str
	font_size: float
	anchor: TextAnchor


@dataclasses.dataclass(frozen=True)
class ImageDraw:
	block_id: int
	image_key: str
	placement: ImagePlacement


@dataclasses.dataclass
class PagePlan:
	geometry: PageGeometry
	scale_ratio: float
	display_masks: MaskRects
	mask_fills: list[Rect]
	images: list[ImageDraw]
	texts: list[TextDraw]
	skipped: int
	warnings: list[str]


#============================================
def open_source(source_pdf: bytes) -> pypdf.PdfReader:
	"""
	Parse a source PDF.

	Args:
		source_pdf: Source document bytes.

	Returns:
		PdfReader.
	"""
	if not source_pdf:
		raise SourcePageUnreadable("Source PDF is empty")
	try:
		reader = pypdf.PdfReader(io.BytesIO(source_pdf))
		if reader.is_encrypted:
			raise SourcePageUnreadable("Source PDF is encrypted")
		if len(reader.pages) == 0:
			raise SourcePageUnreadable("Source PDF has no pages")
	except (pypdf.errors.PyPdfError, ValueError, KeyError, OSError) as error:
		raise SourcePageUnreadable(f"Source PDF could not be read: {error}") from error
	return reader


#============================================
def get_source_page(reader: pypdf.PdfReader, page_number: int) -> pypdf.PageObject:
	"""
	Fetch a 1-based page from a parsed source.

	Args:
		reader: Parsed source document.
		page_number: 1-based page number.

	Returns:
		PageObject.
	"""
	page_count = len(reader.pages)
	if page_number < 1 or page_number > page_count:
		raise SourcePageUnreadable(f"Page {page_number} out of range (document has {page_count} pages)")
	return reader.pages[page_number - 1]


#============================================
def page_geometry(page: pypdf.PageObject) -> PageGeometry:
	"""
	Resolve raw size, origin, and rotation of a source page.

	Args:
		page: Source page.

	Returns:
		PageGeometry.
	"""
	try:
		box = page.mediabox
		left = float(box.left)
		bottom = float(box.bottom)
		width = float(box.width)
		height = float(box.height)
		declared_rotation = page.rotation
	except (pypdf.errors.PyPdfError, ValueError, KeyError, TypeError) as error:
		raise SourcePageUnreadable(f"Source page geometry could not be read: {error}") from error
	if width <= 0.0 or height <= 0.0:
		raise SourcePageUnreadable(f"Source page has an empty media box {width}x{height}")
	rotation = frb.geometry.normalize_rotation(declared_rotation)
	return PageGeometry(PageSize(width, height), rotation, (left, bottom))


#============================================
def read_page_geometry(source_pdf: bytes, page_number: int) -> PageGeometry:
	"""Resolve the geometry of one page straight from document bytes."""
	reader = open_source(source_pdf)
	return page_geometry(get_source_page(reader, page_number))


#============================================
def align_text_x(x: float, block_width: float, text_width: float, align: str) -> float:
	"""
	Offset the glyph run start for the block alignment.

	Args:
		x: Block left edge.
		block_width: Block width.
		text_width: Measured glyph run width.
		align: One of left, center, right.

	Returns:
		Start x of the glyph run.
	"""
	if align == "center":
		return x + (block_width - text_width) / 2.0
	if align == "right":
		return x + block_width - text_width
	return x


#============================================
def plan_page(
	geometry: PageGeometry,
	mask: MaskSettings,
	blocks: list,
	profile: ResolvedProfile,
	fonts: FontNames,
	image_keys: set[str],
	config: EngineConfig,
	authored_width: float | None = None,
) -> PagePlan:
	"""
	Compute every PDF-space draw call for one page.

	Nothing is drawn here; the plan is pure data so it can be inspected
	before the overlay is rendered.

	Args:
		geometry: Resolved page geometry.
		mask: Mask settings in the authored frame.
		blocks: Blocks in the authored frame.
		profile: Resolved company profile.
		fonts: Registered font names.
		image_keys: Keys of the images embedded for this export.
		config: Engine configuration.
		authored_width: Display width blocks and mask were authored at.

	Returns:
		PagePlan.
	"""
	raw_width = geometry.page_size.raw_width
	raw_height = geometry.page_size.raw_height
	rotation = geometry.rotation
	display = geometry.display_size
	ratio = geometry.scale_ratio(authored_width)
	authored_display = DisplaySize(display.width / ratio, display.height / ratio)

	display_masks = frb.mask.compute_mask_rects(display, frb.mask.scale_mask_settings(mask, ratio))
	warnings = [str(warning) for warning in display_masks.warnings]
	mask_fills = [
		frb.rotation.transform_rect(rect, rotation, raw_width, raw_height)
		for rect in display_masks.drawable()
	]

	seen_ids: set[int] = set()
	for block in blocks:
		if block.id in seen_ids:
			raise frb.errors.BlockValidationError(f"Duplicate block id {block.id}")
		seen_ids.add(block.id)
		frb.blocks.validate_block(block, authored_display)

	skipped = 0
	images: list[ImageDraw] = []
	for block in blocks:
		if not isinstance(block, ImageBlock):
			continue
		source = frb.blocks.resolve_image(profile, block.field)
		if source is None:
			skipped += 1
			continue
		if source.key not in image_keys:
			warnings.append(f"Image {block.field.value} ({source.key}) is missing, block {block.id} skipped")
			skipped += 1
			continue
		placement = frb.rotation.transform_image_placement(
			block.rect.scaled(ratio),
			rotation,
			raw_width,
			raw_height,
		)
		images.append(ImageDraw(block.id, source.key, placement))

	texts: list[TextDraw] = []
	for block in blocks:
		if not isinstance(block, TextBlock):
			continue
		content = frb.blocks.resolve_text(profile, block.field, config.fee_labels)
		if not content:
			skipped += 1
			continue
		font_name = fonts.bold if block.font_weight == "bold" else fonts.regular
		font_size = block.font_size * ratio
		text_width = reportlab.pdfbase.pdfmetrics.stringWidth(content, font_name, font_size)
		text_x = align_text_x(block.x * ratio, block.width * ratio, text_width, block.text_align)
		baseline_y = (block.y + block.height - config.descender_offset) * ratio
		anchor = frb.rotation.transform_text_anchor(text_x, baseline_y, rotation, raw_width, raw_height)
		texts.append(TextDraw(block.id, content, font_name, font_size, anchor))

	return PagePlan(
		geometry=geometry,
		scale_ratio=ratio,
		display_masks=display_masks,
		mask_fills=mask_fills,
		images=images,
		texts=texts,
		skipped=skipped,
		warnings=warnings,
	)


#============================================
def draw_image(
	pdf: reportlab.pdfgen.canvas.Canvas,
	image_reader: reportlab.lib.utils.ImageReader,
	placement: ImagePlacement,
	image_mask: str | None,
) -> None:
	"""
	Draw an image at a rotated placement.

	Args:
		pdf: ReportLab canvas.
		image_reader: ImageReader instance.
		placement: Anchor, intrinsic size, and rotation.
		image_mask: ReportLab transparency mask mode.
	"""
	pdf.saveState()
	pdf.translate(placement.x, placement.y)
	if placement.rotation:
		pdf.rotate(placement.rotation)
	pdf.drawImage(
		image_reader,
		0.0,
		0.0,
		width=placement.width,
		height=placement.height,
		mask=image_mask,
		preserveAspectRatio=False,
		anchor="sw",
	)
	pdf.restoreState()


#============================================
def draw_text(
	pdf: reportlab.pdfgen.canvas.Canvas,
	text: TextDraw,
	color: tuple[float, float, float],
) -> None:
	"""
	Draw a single glyph run at its anchor.

	Args:
		pdf: ReportLab canvas.
		text: Planned text draw.
		color: Fill color as RGB floats.
	"""
	pdf.saveState()
	pdf.setFillColorRGB(color[0], color[1], color[2])
	pdf.setFont(text.font_name, text.font_size)
	pdf.translate(text.anchor.x, text.anchor.y)
	if text.anchor.rotation:
		pdf.rotate(text.anchor.rotation)
	pdf.drawString(0.0, 0.0, text.text)
	pdf.restoreState()


#============================================
def draw_page_plan(
	pdf: reportlab.pdfgen.canvas.Canvas,
	plan: PagePlan,
	image_cache: dict[str, reportlab.lib.utils.ImageReader],
	config: EngineConfig,
) -> None:
	"""
	Render one planned page as an overlay page of the raw page size.

	Masks go first, then images, then text.

	Args:
		pdf: ReportLab canvas shared by all overlay pages.
		plan: Page plan.
		image_cache: Embedded images keyed by image key.
		config: Engine configuration.
	"""
	page_size = plan.geometry.page_size
	pdf.setPageSize((page_size.raw_width, page_size.raw_height))

	fill = config.mask_fill_rgb
	pdf.setFillColorRGB(fill[0], fill[1], fill[2])
	for rect in plan.mask_fills:
		pdf.rect(rect.x, rect.y, rect.width, rect.height, stroke=0, fill=1)

	for image in plan.images:
		draw_image(pdf, image_cache[image.image_key], image.placement, config.image_mask)

	for text in plan.texts:
		draw_text(pdf, text, config.text_fill_rgb)

	pdf.showPage()
