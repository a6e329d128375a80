"""
CLI entry point for rebranding property flyer PDFs.
"""

# Standard Library
import argparse
import datetime
import json
import pathlib
import time

# local repo modules
import flyer_rebrand as frb
import flyer_rebrand.assembler
import flyer_rebrand.blocks
import flyer_rebrand.config
import flyer_rebrand.errors
import flyer_rebrand.mask


PageJob = frb.assembler.PageJob
FontSet = frb.assembler.FontSet
CompositionResult = frb.assembler.CompositionResult
MaskSettings = frb.mask.MaskSettings
ResolvedProfile = frb.blocks.ResolvedProfile
ImageSource = frb.blocks.ImageSource

OUTPUT_NAME_PREFIX = frb.config.OUTPUT_NAME_PREFIX
PROFILE_TEXT_KEYS = (
	"company_name",
	"address",
	"phone",
	"fax",
	"email",
	"contact_person",
	"license_number",
)
PROFILE_FEE_KEYS = (
	"fee_ratio_landlord",
	"fee_ratio_tenant",
	"fee_distribution_motoduke",
	"fee_distribution_kyakuzuke",
)


#============================================
def default_output_name(today: datetime.date | None = None) -> str:
	"""
	Build the default download name for an export.

	Args:
		today: Date to stamp, defaults to today.

	Returns:
		File name like "帯替え済み_2026-01-14.pdf".
	"""
	if today is None:
		today = datetime.date.today()
	return f"{OUTPUT_NAME_PREFIX}_{today.isoformat()}.pdf"


#============================================
def load_image_source(value: str | None, base_dir: pathlib.Path) -> ImageSource | None:
	"""
	Read a profile image from disk.

	A path that does not exist still yields a source, with no data, so the
	export reports the missing image and skips its block.

	Args:
		value: Image path from the job file.
		base_dir: Directory relative paths resolve against.

	Returns:
		ImageSource or None.
	"""
	if not value:
		return None
	path = base_dir / value
	if not path.is_file():
		return ImageSource(key=str(value), data=None)
	return ImageSource(key=str(value), data=path.read_bytes())


#============================================
def build_profile(data: dict, base_dir: pathlib.Path) -> ResolvedProfile:
	"""
	Build the resolved profile from the job's "profile" object.

	Args:
		data: Profile dict.
		base_dir: Directory relative image paths resolve against.

	Returns:
		ResolvedProfile.
	"""
	values: dict = {}
	for key in PROFILE_TEXT_KEYS:
		value = data.get(key)
		values[key] = None if value is None else str(value)
	for key in PROFILE_FEE_KEYS:
		value = data.get(key)
		values[key] = None if value is None else float(value)
	values["logo"] = load_image_source(data.get("logo"), base_dir)
	values["line_qr"] = load_image_source(data.get("line_qr"), base_dir)
	return ResolvedProfile(**values)


#============================================
def build_page_jobs(pages: list[dict], base_dir: pathlib.Path) -> list[PageJob]:
	"""
	Build page jobs from the job's "pages" list.

	Args:
		pages: Page entries.
		base_dir: Directory relative source paths resolve against.

	Returns:
		List of PageJob.
	"""
	source_cache: dict[pathlib.Path, bytes] = {}
	jobs: list[PageJob] = []
	for index, entry in enumerate(pages):
		try:
			source_path = base_dir / entry["source"]
			mask_data = entry.get("mask", {})
			mask = MaskSettings(
				bottom_height=float(mask_data.get("bottom_height", frb.config.DEFAULT_BOTTOM_HEIGHT)),
				left_width=float(mask_data.get("left_width", frb.config.DEFAULT_LEFT_WIDTH)),
				enable_l_shape=bool(mask_data.get("enable_l_shape", frb.config.DEFAULT_ENABLE_L_SHAPE)),
			)
			page_number = int(entry.get("page_number", 1))
			authored_width = entry.get("authored_width")
			if authored_width is not None:
				authored_width = float(authored_width)
			blocks = None
			if entry.get("blocks") is not None:
				blocks = [frb.blocks.block_from_dict(block) for block in entry["blocks"]]
		except (KeyError, TypeError, AttributeError) as error:
			raise ValueError(f"Malformed page entry {index + 1}: {error!r}") from error
		if source_path not in source_cache:
			source_cache[source_path] = source_path.read_bytes()
		jobs.append(
			PageJob(
				source_pdf=source_cache[source_path],
				page_number=page_number,
				mask=mask,
				blocks=blocks,
				authored_width=authored_width,
			)
		)
	return jobs


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	job_path: pathlib.Path,
	output_path: pathlib.Path,
	result: CompositionResult,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		job_path: Job description path.
		output_path: Written PDF path.
		result: Composition result.
	"""
	data = {
		"job": str(job_path),
		"output": str(output_path),
		"page_count": len(result.pages),
		"pages": [page.to_dict() for page in result.pages],
		"warnings": result.warnings,
	}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True, ensure_ascii=False)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Mask and rebrand the footer band of property flyer PDFs.")
	parser.add_argument("job", help="Job description JSON.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	font_group = parser.add_argument_group("Fonts")
	font_group.add_argument("-r", "--regular-font", dest="regular_font", required=True, help="Regular TrueType font.")
	font_group.add_argument("-b", "--bold-font", dest="bold_font", required=True, help="Bold TrueType font.")

	args = parser.parse_args(argv)
	return args


#============================================
def run_pipeline(args: argparse.Namespace) -> CompositionResult:
	"""
	Run one export from job file to output PDF.

	Args:
		args: Parsed argparse namespace.

	Returns:
		CompositionResult.
	"""
	job_path = pathlib.Path(args.job)
	output_path = pathlib.Path(args.output_path or default_output_name())
	manifest_path = pathlib.Path(args.manifest_path or f"{output_path}.json")
	print("Flyer rebrand export")
	print(f"Job: {job_path}")
	print(f"Output PDF: {output_path}")

	start_time = time.perf_counter()
	with job_path.open("r", encoding="utf-8") as handle:
		job = json.load(handle)
	base_dir = job_path.parent
	profile = build_profile(job.get("profile", {}), base_dir)
	jobs = build_page_jobs(job.get("pages", []), base_dir)
	fonts = FontSet(
		regular=pathlib.Path(args.regular_font).read_bytes(),
		bold=pathlib.Path(args.bold_font).read_bytes(),
	)
	print(f"Pages requested: {len(jobs)}")

	compose_start = time.perf_counter()
	result = frb.assembler.compose_document(jobs, profile, fonts, verbose=True)
	compose_end = time.perf_counter()

	output_path.write_bytes(result.pdf_bytes)
	write_manifest(manifest_path, job_path, output_path, result)
	print(f"Pages written: {len(result.pages)}")
	if result.warnings:
		print(f"Warnings: {len(result.warnings)}")
	print(f"Manifest written: {manifest_path}")
	total_time = time.perf_counter() - start_time
	print(
		"Timing: compose={:.2f}s total={:.2f}s".format(
			compose_end - compose_start,
			total_time,
		)
	)
	return result


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	try:
		run_pipeline(args)
	except (frb.errors.EngineError, ValueError, KeyError, TypeError, OSError) as error:
		print(f"PDF export failed: {error}")
		raise SystemExit(1) from error
