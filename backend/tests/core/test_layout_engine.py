"""Layout Engine — tests for flow placement, text shaping and purity.

Text tests shape with Pillow's bundled FreeType face (font_set fixture), so
widths are real glyph advances rather than estimates.
"""

import pytest

from cardpreview.core.card_snapshot import CardSnapshot, ResolvedCard
from cardpreview.core.layout_builder import build_layout
from cardpreview.core.layout_engine import ELLIPSIS, layout, resolve_length
from cardpreview.core.layout_tree import Edges, Offsets, box, text


def test_resolve_length():
    assert resolve_length(None, 100) is None
    assert resolve_length("auto", 100) is None
    assert resolve_length("50%", 200) == 100
    assert resolve_length("50%", None) is None
    assert resolve_length(42, None) == 42.0
    with pytest.raises(ValueError):
        resolve_length("10em", 100)


def test_root_fills_canvas_regardless_of_declared_size(font_set):
    placed = layout(box("root", width=10, height=10), font_set)
    assert (placed.x, placed.y, placed.width, placed.height) == (0, 0, 1200, 630)


def test_flex_child_takes_remaining_space(font_set):
    root = box("row", box("a", width=100), box("b", flex=1), gap=10)
    placed = layout(root, font_set, 600, 100)
    a, b = placed.children
    assert (a.x, a.width, a.height) == (0, 100, 100)
    assert b.x == pytest.approx(110)
    assert b.width == pytest.approx(490)


def test_padding_offsets_children(font_set):
    root = box("col", box("a", height=20), direction="column", padding=Edges.xy(10, 30))
    child = layout(root, font_set, 600, 100).children[0]
    assert (child.x, child.y) == (30, 10)
    assert child.width == pytest.approx(540)


def test_justify_and_align_center(font_set):
    root = box("row", box("a", width=100, height=20), justify="center", align="center")
    child = layout(root, font_set, 600, 100).children[0]
    assert child.x == pytest.approx(250)
    assert child.y == pytest.approx(40)


def test_space_between(font_set):
    root = box(
        "row", box("a", width=100), box("b", width=100), justify="space-between",
    )
    a, b = layout(root, font_set, 600, 50).children
    assert a.x == 0
    assert b.x + b.width == pytest.approx(600)


def test_overflow_shrinks_only_shrinkable_children(font_set):
    root = box("row", box("fixed", width=400, shrink=False), box("soft", width=400))
    fixed, soft = layout(root, font_set, 600, 50).children
    assert fixed.width == 400
    assert soft.width == pytest.approx(200)
    assert soft.x == pytest.approx(400)


def test_absolute_children_leave_flow_untouched(font_set):
    root = box(
        "root",
        box("corner", width=350, height=350, absolute=Offsets(top=-80, right=-80)),
        box("bar", width="100%", height=10, absolute=Offsets(top=0, left=0)),
        box("flow", flex=1),
    )
    corner, bar, flow = layout(root, font_set).children
    assert (corner.x, corner.y) == (930, -80)
    assert (bar.x, bar.y, bar.width, bar.height) == (0, 0, 1200, 10)
    assert (flow.x, flow.width) == (0, 1200)


def test_long_text_wraps_within_width(font_set):
    root = box(
        "col", text("body", "word " * 40, size=20, color="#fff"), direction="column",
    )
    body = layout(root, font_set, 200, 600).find("body")
    assert len(body.lines) > 1
    assert all(line.width <= 200 + 1e-6 for line in body.lines)


def test_max_lines_truncates_with_ellipsis(font_set):
    root = box(
        "col",
        text("slogan", "word " * 40, size=20, color="#fff", max_lines=2),
        direction="column",
    )
    slogan = layout(root, font_set, 200, 600).find("slogan")
    assert len(slogan.lines) == 2
    assert slogan.lines[-1].text.endswith(ELLIPSIS)
    assert slogan.lines[-1].width <= 200 + 1e-6


def test_text_baselines_fall_inside_box(font_set):
    root = box("col", text("t", "Hello", size=24, color="#fff"), direction="column")
    t = layout(root, font_set, 400, 200).find("t")
    (line,) = t.lines
    assert t.y < line.baseline <= t.y + t.height
    assert line.text == "Hello"


def test_standard_card_footer_pinned_to_bottom(font_set):
    resolved = ResolvedCard(CardSnapshot(card_id="1", full_name="Jane Doe", title="CEO"))
    root = build_layout(resolved, None)
    placed = layout(root, font_set)
    footer = placed.find("footer")
    assert footer.y + footer.height == pytest.approx(630)
    assert footer.width == pytest.approx(1200)
    name = placed.find("name")
    assert 0 <= name.x and name.x + name.width <= 1200


def test_layout_does_not_mutate_input(font_set):
    resolved = ResolvedCard(CardSnapshot(card_id="1", full_name="Jane Doe"))
    root = build_layout(resolved, None)
    before = root.to_dict()
    placed = layout(root, font_set)
    assert placed.node is root
    assert root.to_dict() == before


def test_shrink_stops_at_longest_word(font_set):
    root = box(
        "row",
        text("word", "Unbreakable", size=24, color="#fff"),
        box("wide", width=1000),
    )
    solo = box("solo", text("word", "Unbreakable", size=24, color="#fff"))
    natural = layout(solo, font_set, 600, 50).find("word").lines[0].width
    placed = layout(root, font_set, 300, 50)
    word = placed.find("word")
    assert word.width >= natural - 1e-6
    assert [line.text for line in word.lines] == ["Unbreakable"]
    assert placed.find("wide").width == pytest.approx(300 - word.width)


def test_truncatable_text_gives_way_to_fixed_sibling(font_set):
    root = box(
        "row",
        text("label", "word " * 30, size=20, color="#fff", max_lines=1),
        text("count", "99999 endorsements", size=20, color="#fff", shrink=False),
        gap=8,
    )
    placed = layout(root, font_set, 400, 40)
    assert [line.text for line in placed.find("count").lines] == ["99999 endorsements"]
    (label_line,) = placed.find("label").lines
    assert label_line.text.endswith(ELLIPSIS)


def test_long_location_keeps_endorsement_count_whole(font_set):
    snapshot = CardSnapshot(
        card_id="1", template_layout="civic-card", full_name="Maria Silva",
        city="Llanfairpwllgwyngyll " * 12, state="Gwynedd",
    )
    placed = layout(build_layout(ResolvedCard(snapshot, 99999), None), font_set)
    label = placed.find("endorsements-label")
    assert [line.text for line in label.lines] == ["99999 endorsements"]
    row = placed.find("meta-row")
    assert row.x + row.width <= 1200
    (location_line,) = placed.find("location-label").lines
    assert location_line.text.endswith(ELLIPSIS)


def test_long_tagline_keeps_wordmark_and_one_line(font_set):
    snapshot = CardSnapshot(
        card_id="1", template_layout="civic-card", full_name="Maria Silva",
        office_running_for="Member of the Regional Assembly " * 8,
    )
    placed = layout(build_layout(ResolvedCard(snapshot), None), font_set)
    wordmark_only = text(
        "wordmark", "tavvy", size=28, weight=700, color="#fff", letter_spacing=2.24,
    )
    solo = layout(box("solo", wordmark_only), font_set, 600, 60).find("wordmark").lines[0]
    wordmark = placed.find("wordmark")
    assert [line.text for line in wordmark.lines] == ["tavvy"]
    assert wordmark.width >= solo.width - 1e-6
    tagline = placed.find("tagline")
    assert len(tagline.lines) == 1
    assert tagline.lines[0].text.endswith(ELLIPSIS)


def test_lines_carry_per_character_offsets(font_set):
    root = box("col", text("t", "Hi there", size=24, color="#fff"), direction="column")
    (line,) = layout(root, font_set, 400, 100).find("t").lines
    assert len(line.offsets) == len(line.text)
    assert line.offsets[0] == 0
    assert list(line.offsets) == sorted(line.offsets)
    assert line.offsets[-1] < line.width
