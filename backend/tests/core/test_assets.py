"""Render Assets — tests for font weight selection and image data URIs."""

from cardpreview.core.assets import FontAsset, FontSet, InlinedImage
from cardpreview.core.domain_types import FontWeight

REGULAR = FontAsset("Inter", FontWeight.REGULAR.value, b"r")
BOLD = FontAsset("Inter", FontWeight.BOLD.value, b"b")


def test_for_weight_picks_nearest_face():
    fonts = FontSet(regular=REGULAR, bold=BOLD)
    assert fonts.for_weight(400) is REGULAR
    assert fonts.for_weight(500) is REGULAR
    assert fonts.for_weight(600) is BOLD
    assert fonts.for_weight(800) is BOLD


def test_for_weight_tie_goes_to_bold():
    assert FontSet(regular=REGULAR, bold=BOLD).for_weight(550) is BOLD


def test_data_uri():
    image = InlinedImage("image/webp", "UklGRg==")
    assert image.data_uri == "data:image/webp;base64,UklGRg=="


def test_open_face_shapes_text(font_bytes):
    face = FontAsset("Inter", 400, font_bytes).open_face(20.4)
    assert face.size == 20
    assert face.getlength("Jane") > 0
