"""
Document assembly: fonts, images, page merging, and diagnostics.
"""

# Standard Library
import dataclasses
import hashlib
import io

# PIP3 modules
import PIL.Image
import pypdf
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfbase.ttfonts
import reportlab.pdfgen.canvas

# local repo modules
import flyer_rebrand as frb
import flyer_rebrand.blocks
import flyer_rebrand.compositor
import flyer_rebrand.config
import flyer_rebrand.errors
import flyer_rebrand.geometry
import flyer_rebrand.layout
import flyer_rebrand.mask


Rect = frb.geometry.Rect
DisplaySize = frb.geometry.DisplaySize
MaskSettings = frb.mask.MaskSettings
ResolvedProfile = frb.blocks.ResolvedProfile
ImageField = frb.blocks.ImageField
FontNames = frb.compositor.FontNames
PageGeometry = frb.compositor.PageGeometry
PagePlan = frb.compositor.PagePlan
EngineConfig = frb.config.EngineConfig
FontEmbedFailure = frb.errors.FontEmbedFailure
ImageEmbedFailure = frb.errors.ImageEmbedFailure


@dataclasses.dataclass
class PageJob:
	source_pdf: bytes
	page_number: int
	mask: MaskSettings = dataclasses.field(default_factory=MaskSettings)
	blocks: list | None = None
	authored_width: float | None = None


@dataclasses.dataclass(frozen=True)
class FontSet:
	regular: bytes
	bold: bytes


@dataclasses.dataclass
class PageDiagnostics:
	page_index: int
	source_page_number: int
	raw_width: float
	raw_height: float
	rotation: int
	display_width: float
	display_height: float
	scale_ratio: float
	mask_rects: list[Rect]
	blocks_drawn: int
	blocks_skipped: int
	warnings: list[str]

	def to_dict(self) -> dict:
		data = dataclasses.asdict(self)
		data["mask_rects"] = [list(rect.as_tuple()) for rect in self.mask_rects]
		return data


@dataclasses.dataclass
class CompositionResult:
	pdf_bytes: bytes
	pages: list[PageDiagnostics]

	@property
	def warnings(self) -> list[str]:
		return [warning for page in self.pages for warning in page.warnings]


#============================================
def register_font(data: bytes, prefix: str) -> str:
	"""
	Register a TrueType font under a content-addressed name.

	ReportLab keeps one process-wide font registry; naming the font by a
	digest of its bytes keeps independent exports from clobbering each
	other.

	Args:
		data: TrueType font bytes.
		prefix: Font name prefix.

	Returns:
		Registered font name.
	"""
	if not data:
		raise FontEmbedFailure("Font data is empty")
	digest = hashlib.sha256(data).hexdigest()[:16]
	font_name = f"{prefix}-{digest}"
	if font_name in reportlab.pdfbase.pdfmetrics.getRegisteredFontNames():
		return font_name
	try:
		font = reportlab.pdfbase.ttfonts.TTFont(font_name, io.BytesIO(data))
	except (reportlab.pdfbase.ttfonts.TTFError, OSError, ValueError, KeyError) as error:
		raise FontEmbedFailure(f"Font could not be embedded: {error}") from error
	reportlab.pdfbase.pdfmetrics.registerFont(font)
	return font_name


#============================================
def register_fonts(fonts: FontSet, config: EngineConfig) -> FontNames:
	"""
	Register the regular and bold fonts.

	Args:
		fonts: Font byte buffers.
		config: Engine configuration.

	Returns:
		FontNames.
	"""
	regular = register_font(fonts.regular, config.font_name_prefix)
	bold = register_font(fonts.bold, config.font_name_prefix)
	return FontNames(regular=regular, bold=bold)


#============================================
def build_image_cache(profile: ResolvedProfile) -> dict[str, reportlab.lib.utils.ImageReader]:
	"""
	Decode every distinct profile image once.

	Images without bytes are left out; their blocks are skipped at draw
	time. Bytes that do not decode are fatal.

	Args:
		profile: Resolved company profile.

	Returns:
		Cache of ImageReader instances keyed by image key.
	"""
	image_cache: dict[str, reportlab.lib.utils.ImageReader] = {}
	for field in ImageField:
		source = frb.blocks.resolve_image(profile, field)
		if source is None or source.data is None:
			continue
		if source.key in image_cache:
			continue
		try:
			image = PIL.Image.open(io.BytesIO(source.data))
			image.load()
		except (PIL.UnidentifiedImageError, OSError, ValueError) as error:
			raise ImageEmbedFailure(f"Image {source.key} could not be embedded: {error}") from error
		image_cache[source.key] = reportlab.lib.utils.ImageReader(image)
	return image_cache


#============================================
def resolve_blocks(job: PageJob, geometry: PageGeometry, profile: ResolvedProfile) -> list:
	"""
	Use the job's blocks, or lay out fresh ones in the authored frame.

	Args:
		job: Page job.
		geometry: Resolved PageGeometry.
		profile: Resolved company profile.

	Returns:
		List of blocks.
	"""
	if job.blocks is not None:
		return list(job.blocks)
	ratio = geometry.scale_ratio(job.authored_width)
	display = geometry.display_size
	authored = DisplaySize(display.width / ratio, display.height / ratio)
	mask_rects = frb.mask.compute_mask_rects(authored, job.mask)
	return frb.layout.generate_initial_blocks(authored, mask_rects, profile)


#============================================
def build_diagnostics(index: int, job: PageJob, plan: PagePlan) -> PageDiagnostics:
	geometry = plan.geometry
	display = geometry.display_size
	return PageDiagnostics(
		page_index=index,
		source_page_number=job.page_number,
		raw_width=geometry.page_size.raw_width,
		raw_height=geometry.page_size.raw_height,
		rotation=geometry.rotation,
		display_width=display.width,
		display_height=display.height,
		scale_ratio=plan.scale_ratio,
		mask_rects=list(plan.mask_fills),
		blocks_drawn=len(plan.images) + len(plan.texts),
		blocks_skipped=plan.skipped,
		warnings=list(plan.warnings),
	)


#============================================
def print_page_diagnostics(page: PageDiagnostics) -> None:
	"""Print one page's diagnostics."""
	print(
		f"[export] page {page.page_index + 1}: raw {page.raw_width:g}x{page.raw_height:g} "
		f"rotation {page.rotation} scale {page.scale_ratio:.3f} "
		f"drawn {page.blocks_drawn} skipped {page.blocks_skipped}"
	)
	for rect in page.mask_rects:
		print(f"[export]   mask {rect.x:.2f},{rect.y:.2f} {rect.width:.2f}x{rect.height:.2f}")
	for warning in page.warnings:
		print(f"[export]   WARNING: {warning}")


#============================================
def compose_document(
	jobs: list[PageJob],
	profile: ResolvedProfile,
	fonts: FontSet,
	config: EngineConfig | None = None,
	verbose: bool = False,
) -> CompositionResult:
	"""
	Mask, rebrand, and merge the requested pages into one PDF.

	Every page is planned before anything is written, and any fatal error
	propagates before output exists, so a failed export returns nothing.

	Args:
		jobs: Pages to export, in output order.
		profile: Resolved company profile.
		fonts: Regular and bold font bytes.
		config: Engine configuration, defaults to build_engine_config().
		verbose: Print per-page diagnostics.

	Returns:
		CompositionResult.
	"""
	if not jobs:
		raise ValueError("No pages to export")
	if config is None:
		config = frb.config.build_engine_config()

	font_names = register_fonts(fonts, config)
	image_cache = build_image_cache(profile)
	image_keys = set(image_cache)

	# one reader per distinct source document; a page requested twice gets
	# its own reader so the writer clones it as a separate page
	readers: dict[str, pypdf.PdfReader] = {}
	used_pages: set[tuple[str, int]] = set()
	source_pages: list[pypdf.PageObject] = []
	plans: list[PagePlan] = []
	for job in jobs:
		digest = hashlib.sha256(job.source_pdf).hexdigest()
		if digest not in readers:
			readers[digest] = frb.compositor.open_source(job.source_pdf)
		reader = readers[digest]
		if (digest, job.page_number) in used_pages:
			reader = frb.compositor.open_source(job.source_pdf)
		used_pages.add((digest, job.page_number))
		page = frb.compositor.get_source_page(reader, job.page_number)
		geometry = frb.compositor.page_geometry(page)
		blocks = resolve_blocks(job, geometry, profile)
		plan = frb.compositor.plan_page(
			geometry,
			job.mask,
			blocks,
			profile,
			font_names,
			image_keys,
			config,
			authored_width=job.authored_width,
		)
		source_pages.append(page)
		plans.append(plan)

	overlay_buffer = io.BytesIO()
	first_size = plans[0].geometry.page_size
	pdf = reportlab.pdfgen.canvas.Canvas(
		overlay_buffer,
		pagesize=(first_size.raw_width, first_size.raw_height),
		invariant=1,
	)
	for plan in plans:
		frb.compositor.draw_page_plan(pdf, plan, image_cache, config)
	pdf.save()
	overlay_buffer.seek(0)
	overlay = pypdf.PdfReader(overlay_buffer)

	writer = pypdf.PdfWriter()
	diagnostics: list[PageDiagnostics] = []
	for index, (job, source_page, plan) in enumerate(zip(jobs, source_pages, plans)):
		writer.add_page(source_page)
		page = writer.pages[-1]
		origin_x, origin_y = plan.geometry.origin
		transform = pypdf.Transformation().translate(origin_x, origin_y)
		page.merge_transformed_page(overlay.pages[index], transform)
		page_diagnostics = build_diagnostics(index, job, plan)
		diagnostics.append(page_diagnostics)
		if verbose:
			print_page_diagnostics(page_diagnostics)

	metadata = {"/Producer": config.producer}
	if config.creation_date is not None:
		metadata["/CreationDate"] = config.creation_date
	writer.add_metadata(metadata)

	output = io.BytesIO()
	writer.write(output)
	return CompositionResult(pdf_bytes=output.getvalue(), pages=diagnostics)
