import math

import pytest

import flyer_rebrand.errors
import flyer_rebrand.geometry
import flyer_rebrand.rotation


Rect = flyer_rebrand.geometry.Rect
PageSize = flyer_rebrand.geometry.PageSize
UnsupportedRotation = flyer_rebrand.errors.UnsupportedRotation

ROTATIONS = (0, 90, 180, 270)
PAGE_SIZES = ((600.0, 800.0), (595.28, 841.89), (1190.55, 841.89), (300.0, 300.0))
EPSILON = 1e-6


#============================================
def display_rect_for(raw_width: float, raw_height: float, rotation: int) -> Rect:
	size = flyer_rebrand.geometry.display_size_for(PageSize(raw_width, raw_height), rotation)
	return size.as_rect()


#============================================
def assert_rect_close(actual: Rect, expected: Rect) -> None:
	for got, want in zip(actual.as_tuple(), expected.as_tuple()):
		assert abs(got - want) < EPSILON, f"{actual} != {expected}"


#============================================
def bottom_band(raw_width: float, raw_height: float, rotation: int, band_height: float) -> Rect:
	display = display_rect_for(raw_width, raw_height, rotation)
	return Rect(0.0, display.height - band_height, display.width, band_height)


#============================================
@pytest.mark.parametrize("rotation", ROTATIONS)
@pytest.mark.parametrize("raw_width,raw_height", PAGE_SIZES)
def test_full_page_maps_to_full_page(rotation: int, raw_width: float, raw_height: float) -> None:
	"""
	The full display rectangle covers exactly the raw page.
	"""
	display = display_rect_for(raw_width, raw_height, rotation)
	result = flyer_rebrand.rotation.transform_rect(display, rotation, raw_width, raw_height)
	assert_rect_close(result, Rect(0.0, 0.0, raw_width, raw_height))


#============================================
def test_bottom_band_edges_per_rotation() -> None:
	"""
	The display bottom band lands on the documented raw edge.
	"""
	raw_width, raw_height, band = 600.0, 800.0, 100.0
	expected = {
		0: Rect(0.0, 0.0, raw_width, band),
		90: Rect(0.0, 0.0, band, raw_height),
		180: Rect(0.0, raw_height - band, raw_width, band),
		270: Rect(raw_width - band, 0.0, band, raw_height),
	}
	for rotation, want in expected.items():
		rect = bottom_band(raw_width, raw_height, rotation, band)
		result = flyer_rebrand.rotation.transform_rect(rect, rotation, raw_width, raw_height)
		assert_rect_close(result, want)


#============================================
def test_left_band_edges_per_rotation() -> None:
	"""
	A full-height display left band lands on a single raw edge.
	"""
	raw_width, raw_height, band = 600.0, 800.0, 50.0
	expected = {
		0: Rect(0.0, 0.0, band, raw_height),
		90: Rect(0.0, raw_height - band, raw_width, band),
		180: Rect(raw_width - band, 0.0, band, raw_height),
		270: Rect(0.0, 0.0, raw_width, band),
	}
	for rotation, want in expected.items():
		display = display_rect_for(raw_width, raw_height, rotation)
		rect = Rect(0.0, 0.0, band, display.height)
		result = flyer_rebrand.rotation.transform_rect(rect, rotation, raw_width, raw_height)
		assert_rect_close(result, want)


#============================================
@pytest.mark.parametrize("rotation", ROTATIONS)
def test_rect_agrees_with_point_mapping(rotation: int) -> None:
	"""
	transform_rect is the bounding box of the mapped corners.
	"""
	raw_width, raw_height = 612.0, 792.0
	rect = Rect(37.0, 91.5, 120.25, 44.0)
	corners = [
		flyer_rebrand.rotation.display_point_to_pdf(x, y, rotation, raw_width, raw_height)
		for x in (rect.x, rect.right)
		for y in (rect.y, rect.bottom)
	]
	xs = [corner[0] for corner in corners]
	ys = [corner[1] for corner in corners]
	expected = Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
	result = flyer_rebrand.rotation.transform_rect(rect, rotation, raw_width, raw_height)
	assert_rect_close(result, expected)


#============================================
@pytest.mark.parametrize("rotation", ROTATIONS)
def test_text_anchor_reads_upright(rotation: int) -> None:
	"""
	The glyph run direction follows display x and glyph up follows display up.
	"""
	raw_width, raw_height = 600.0, 800.0
	anchor = flyer_rebrand.rotation.transform_text_anchor(50.0, 120.0, rotation, raw_width, raw_height)
	assert (anchor.x, anchor.y) == flyer_rebrand.rotation.display_point_to_pdf(50.0, 120.0, rotation, raw_width, raw_height)

	radians = math.radians(anchor.rotation)
	direction = (round(math.cos(radians)), round(math.sin(radians)))
	up = (round(-math.sin(radians)), round(math.cos(radians)))
	start = flyer_rebrand.rotation.display_point_to_pdf(50.0, 120.0, rotation, raw_width, raw_height)
	right = flyer_rebrand.rotation.display_point_to_pdf(51.0, 120.0, rotation, raw_width, raw_height)
	above = flyer_rebrand.rotation.display_point_to_pdf(50.0, 119.0, rotation, raw_width, raw_height)
	assert direction == (round(right[0] - start[0]), round(right[1] - start[1]))
	assert up == (round(above[0] - start[0]), round(above[1] - start[1]))


#============================================
def test_text_anchor_rotations() -> None:
	rotations = {
		rotation: flyer_rebrand.rotation.transform_text_anchor(0.0, 0.0, rotation, 600.0, 800.0).rotation
		for rotation in ROTATIONS
	}
	assert rotations == {0: 0, 90: -90, 180: 180, 270: 90}


#============================================
@pytest.mark.parametrize("rotation", ROTATIONS)
def test_image_placement_covers_transformed_rect(rotation: int) -> None:
	"""
	The rotated image draw call paints exactly the PDF-space block rectangle.
	"""
	raw_width, raw_height = 600.0, 800.0
	rect = Rect(20.0, 700.0, 80.0, 60.0)
	placement = flyer_rebrand.rotation.transform_image_placement(rect, rotation, raw_width, raw_height)
	assert (placement.width, placement.height) == (rect.width, rect.height)

	radians = math.radians(placement.rotation)
	cos_value = round(math.cos(radians))
	sin_value = round(math.sin(radians))
	corners = []
	for local_x, local_y in ((0.0, 0.0), (rect.width, 0.0), (0.0, rect.height), (rect.width, rect.height)):
		corners.append((
			placement.x + local_x * cos_value - local_y * sin_value,
			placement.y + local_x * sin_value + local_y * cos_value,
		))
	xs = [corner[0] for corner in corners]
	ys = [corner[1] for corner in corners]
	drawn = Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
	expected = flyer_rebrand.rotation.transform_rect(rect, rotation, raw_width, raw_height)
	assert_rect_close(drawn, expected)


#============================================
@pytest.mark.parametrize("rotation", (45, -90, 360, 91, 1))
def test_unsupported_rotation_rejected(rotation: int) -> None:
	rect = Rect(0.0, 0.0, 10.0, 10.0)
	with pytest.raises(UnsupportedRotation):
		flyer_rebrand.rotation.transform_rect(rect, rotation, 100.0, 100.0)
	with pytest.raises(UnsupportedRotation):
		flyer_rebrand.rotation.transform_text_anchor(0.0, 0.0, rotation, 100.0, 100.0)
	with pytest.raises(UnsupportedRotation):
		flyer_rebrand.rotation.transform_image_placement(rect, rotation, 100.0, 100.0)


#============================================
def test_normalize_rotation() -> None:
	assert flyer_rebrand.geometry.normalize_rotation(0) == 0
	assert flyer_rebrand.geometry.normalize_rotation(-90) == 270
	assert flyer_rebrand.geometry.normalize_rotation(450) == 90
	assert flyer_rebrand.geometry.normalize_rotation(720) == 0
	assert flyer_rebrand.geometry.normalize_rotation(180.0) == 180
	for value in (45, 89.5, "sideways", None):
		with pytest.raises(UnsupportedRotation):
			flyer_rebrand.geometry.normalize_rotation(value)


#============================================
def test_display_size_swaps_for_quarter_turns() -> None:
	size = PageSize(600.0, 800.0)
	assert flyer_rebrand.geometry.display_size_for(size, 0).as_rect() == Rect(0.0, 0.0, 600.0, 800.0)
	assert flyer_rebrand.geometry.display_size_for(size, 90).as_rect() == Rect(0.0, 0.0, 800.0, 600.0)
	assert flyer_rebrand.geometry.display_size_for(size, 180).as_rect() == Rect(0.0, 0.0, 600.0, 800.0)
	assert flyer_rebrand.geometry.display_size_for(size, 270).as_rect() == Rect(0.0, 0.0, 800.0, 600.0)
