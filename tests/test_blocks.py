import pytest

import flyer_rebrand.blocks
import flyer_rebrand.errors
import flyer_rebrand.geometry


DisplaySize = flyer_rebrand.geometry.DisplaySize
TextBlock = flyer_rebrand.blocks.TextBlock
ImageBlock = flyer_rebrand.blocks.ImageBlock
TextField = flyer_rebrand.blocks.TextField
ImageField = flyer_rebrand.blocks.ImageField
ImageSource = flyer_rebrand.blocks.ImageSource
ResolvedProfile = flyer_rebrand.blocks.ResolvedProfile
BlockStore = flyer_rebrand.blocks.BlockStore
BlockValidationError = flyer_rebrand.errors.BlockValidationError


#============================================
def build_store() -> BlockStore:
	store = BlockStore(DisplaySize(600.0, 800.0))
	store.load([
		TextBlock(1, TextField.COMPANY_NAME, 10.0, 708.0, 280.0, 22.0, 16.0, "bold"),
		ImageBlock(2, ImageField.LOGO, 500.0, 710.0, 70.0, 70.0),
	])
	return store


#============================================
def test_every_field_has_a_resolver() -> None:
	assert set(flyer_rebrand.blocks.TEXT_RESOLVERS) == set(TextField)
	assert set(flyer_rebrand.blocks.IMAGE_RESOLVERS) == set(ImageField)


#============================================
def test_resolve_text_plain_fields() -> None:
	profile = ResolvedProfile(company_name="Sakura Realty", fax="", phone=None)
	assert flyer_rebrand.blocks.resolve_text(profile, TextField.COMPANY_NAME) == "Sakura Realty"
	assert flyer_rebrand.blocks.resolve_text(profile, "company_name") == "Sakura Realty"
	assert flyer_rebrand.blocks.resolve_text(profile, TextField.FAX) is None
	assert flyer_rebrand.blocks.resolve_text(profile, TextField.PHONE) is None


#============================================
def test_resolve_text_fee_fields() -> None:
	"""
	Fee fields render as "label: value%" and vanish when null.
	"""
	profile = ResolvedProfile(fee_ratio_landlord=50, fee_ratio_tenant=0, fee_distribution_motoduke=37.5)
	assert flyer_rebrand.blocks.resolve_text(profile, TextField.FEE_RATIO_LANDLORD) == "貸主負担: 50%"
	assert flyer_rebrand.blocks.resolve_text(profile, TextField.FEE_RATIO_TENANT) == "借主負担: 0%"
	assert flyer_rebrand.blocks.resolve_text(profile, TextField.FEE_DISTRIBUTION_MOTODUKE) == "元付配分: 37.5%"
	assert flyer_rebrand.blocks.resolve_text(profile, TextField.FEE_DISTRIBUTION_KYAKUZUKE) is None
	labels = {"fee_ratio_landlord": "Landlord"}
	assert flyer_rebrand.blocks.resolve_text(profile, TextField.FEE_RATIO_LANDLORD, labels) == "Landlord: 50%"
	assert flyer_rebrand.blocks.resolve_text(profile, TextField.FEE_RATIO_TENANT, labels) == "fee_ratio_tenant: 0%"


#============================================
def test_resolve_image() -> None:
	logo = ImageSource("https://cdn.example/logo.png", b"data")
	profile = ResolvedProfile(logo=logo)
	assert flyer_rebrand.blocks.resolve_image(profile, ImageField.LOGO) is logo
	assert flyer_rebrand.blocks.resolve_image(profile, ImageField.LINE_QR) is None


#============================================
def test_store_assigns_monotonic_ids() -> None:
	store = build_store()
	assert store.next_id() == 3
	assert store.next_id() == 4
	store.add(TextBlock(10, TextField.PHONE, 300.0, 720.0, 200.0, 16.0, 10.0))
	assert store.next_id() == 11
	assert [block.id for block in store] == [1, 2, 10]


#============================================
def test_store_move_clamps_inside_page() -> None:
	store = build_store()
	moved = store.move(1, 500.0, 900.0)
	assert moved.x == 600.0 - 280.0
	assert moved.y == 800.0 - 22.0
	moved = store.move(2, -40.0, -1.0)
	assert (moved.x, moved.y) == (0.0, 0.0)
	assert store.get(2) is moved


#============================================
def test_store_resize_and_font_size_minimums() -> None:
	store = build_store()
	resized = store.resize(1, 5.0, 2.0)
	assert (resized.width, resized.height) == (20.0, 10.0)
	resized = store.resize(1, 5000.0, 22.0)
	assert resized.x + resized.width == 600.0
	assert store.set_font_size(1, 3.0).font_size == 8.0
	with pytest.raises(BlockValidationError):
		store.set_font_size(2, 12.0)


#============================================
def test_store_delete_and_replace() -> None:
	store = build_store()
	store.delete(2)
	assert 2 not in store
	assert len(store) == 1
	with pytest.raises(KeyError):
		store.replace(ImageBlock(2, ImageField.LOGO, 0.0, 0.0, 10.0, 10.0))


#============================================
def test_store_rejects_invalid_blocks() -> None:
	store = build_store()
	with pytest.raises(BlockValidationError):
		store.add(TextBlock(1, TextField.PHONE, 0.0, 0.0, 50.0, 10.0, 10.0))
	with pytest.raises(BlockValidationError):
		store.add(TextBlock(5, TextField.PHONE, 590.0, 0.0, 50.0, 10.0, 10.0))
	with pytest.raises(BlockValidationError):
		store.add(TextBlock(6, TextField.PHONE, 0.0, 0.0, 50.0, 10.0, 10.0, "heavy"))
	with pytest.raises(BlockValidationError):
		store.add(TextBlock(7, TextField.PHONE, 0.0, 0.0, 50.0, 10.0, 10.0, "normal", "justify"))
	with pytest.raises(BlockValidationError):
		store.load([ImageBlock(1, ImageField.LOGO, 0.0, 0.0, 0.0, 10.0)])


#============================================
def test_block_json_form() -> None:
	block = TextBlock(3, TextField.EMAIL, 300.0, 744.0, 280.0, 16.0, 10.0, "normal", "right")
	data = flyer_rebrand.blocks.block_to_dict(block)
	assert data["type"] == "text"
	assert data["field"] == "email"
	assert flyer_rebrand.blocks.block_from_dict(data) == block
	image = flyer_rebrand.blocks.block_from_dict({"type": "image", "id": 4, "field": "line_qr", "x": 1, "y": 2, "width": 30, "height": 30})
	assert image == ImageBlock(4, ImageField.LINE_QR, 1.0, 2.0, 30.0, 30.0)
	with pytest.raises(BlockValidationError):
		flyer_rebrand.blocks.block_from_dict({"type": "image", "id": 4, "field": "banner", "x": 1, "y": 2, "width": 30, "height": 30})
	with pytest.raises(BlockValidationError):
		flyer_rebrand.blocks.block_from_dict({"type": "video", "id": 4})
