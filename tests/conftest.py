"""
Pytest configuration for local imports and shared fixtures.
"""

# Standard Library
import io
import os
import pathlib
import sys

# PIP3 modules
import PIL.Image
import pypdf
import pypdf.generic
import pytest
import reportlab
import reportlab.pdfgen.canvas

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()
import flyer_rebrand.assembler  # noqa: E402
import flyer_rebrand.blocks  # noqa: E402


VERA_DIR = pathlib.Path(reportlab.__file__).parent / "fonts"


#============================================
def build_source_pdf(
	width: float = 600.0,
	height: float = 800.0,
	rotation: int = 0,
	pages: int = 1,
	rotate_value: object = None,
) -> bytes:
	"""
	Build a source PDF whose pages are filled solid black.

	Args:
		width: Raw page width.
		height: Raw page height.
		rotation: Rotation applied with pypdf.
		pages: Page count.
		rotate_value: Raw /Rotate value written as-is, overrides rotation.

	Returns:
		PDF bytes.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(width, height), invariant=1)
	for _ in range(pages):
		pdf.setFillColorRGB(0.0, 0.0, 0.0)
		pdf.rect(0, 0, width, height, stroke=0, fill=1)
		pdf.showPage()
	pdf.save()
	buffer.seek(0)
	writer = pypdf.PdfWriter()
	for page in pypdf.PdfReader(buffer).pages:
		writer.add_page(page)
		added = writer.pages[-1]
		if rotate_value is not None:
			added[pypdf.generic.NameObject("/Rotate")] = pypdf.generic.NumberObject(rotate_value)
		elif rotation:
			added.rotate(rotation)
	output = io.BytesIO()
	writer.write(output)
	return output.getvalue()


#============================================
def build_png(width: int = 40, height: int = 40, color: tuple = (200, 30, 30)) -> bytes:
	"""
	Build a small solid PNG image.
	"""
	buffer = io.BytesIO()
	PIL.Image.new("RGB", (width, height), color).save(buffer, format="PNG")
	return buffer.getvalue()


@pytest.fixture
def vera_fonts() -> flyer_rebrand.assembler.FontSet:
	return flyer_rebrand.assembler.FontSet(
		regular=(VERA_DIR / "Vera.ttf").read_bytes(),
		bold=(VERA_DIR / "VeraBd.ttf").read_bytes(),
	)


@pytest.fixture
def basic_profile() -> flyer_rebrand.blocks.ResolvedProfile:
	return flyer_rebrand.blocks.ResolvedProfile(
		company_name="Sakura Realty",
		address="1-2-3 Shibuya, Tokyo",
		phone="03-1234-5678",
		email="info@sakura.example",
		license_number="Tokyo (1) 012345",
	)


@pytest.fixture
def make_source_pdf():
	return build_source_pdf


@pytest.fixture
def make_png():
	return build_png
