import pytest

from core.catalog import ReferenceCatalog
from core.models.domain import AngleTag, ReferenceImage, ReferencePack
from core.retrieval import ADJACENT_ANGLES, RetrievalEngine, combined_score, tag_match


def _pack(pack_id, images):
    return ReferencePack(
        id=pack_id,
        name=pack_id,
        images=[ReferenceImage(id=image_id, pack_id=pack_id, data=data, tags=frozenset(tags)) for image_id, data, tags in images],
    )


# Tag matching


@pytest.mark.parametrize("angle", list(AngleTag))
def test_exact_tag_scores_one(angle):
    assert tag_match({angle.value, "eyes"}, angle) == 1.0


@pytest.mark.parametrize(
    "angle,neighbour",
    [
        (AngleTag.FRONT, AngleTag.GENERIC),
        (AngleTag.GENERIC, AngleTag.FRONT),
        (AngleTag.UPSHOT, AngleTag.DOWNSHOT),
        (AngleTag.DOWNSHOT, AngleTag.UPSHOT),
        (AngleTag.PROFILE, AngleTag.THREE_QUARTER),
        (AngleTag.THREE_QUARTER, AngleTag.PROFILE),
    ],
)
def test_adjacent_tag_scores_half(angle, neighbour):
    assert tag_match({neighbour.value}, angle) == 0.5


def test_adjacency_is_symmetric():
    for angle, neighbour in ADJACENT_ANGLES.items():
        assert ADJACENT_ANGLES[neighbour] is angle


def test_exact_match_wins_over_adjacent():
    assert tag_match({"Front", "Generic"}, AngleTag.FRONT) == 1.0


def test_unrelated_tags_score_zero():
    assert tag_match({"Upshot", "hands"}, AngleTag.FRONT) == 0.0
    assert tag_match(set(), AngleTag.PROFILE) == 0.0


def test_combined_score_weights():
    assert combined_score(1.0, 0.0) == pytest.approx(0.6)
    assert combined_score(0.5, 0.5) == pytest.approx(0.5)
    assert combined_score(0.0, 1.0) == pytest.approx(0.4)


# Ranking


def test_no_enabled_packs_yields_empty_sequence(gradient_png):
    engine = RetrievalEngine()
    for angle in AngleTag:
        assert engine.rank(gradient_png, [], angle) == []


def test_packs_without_images_yield_empty_sequence(gradient_png):
    assert RetrievalEngine().rank(gradient_png, [_pack("a", [])], AngleTag.FRONT) == []


def test_exact_tag_outranks_identical_untagged_image(gradient_png):
    pack = _pack("a", [("untagged", gradient_png, []), ("tagged", gradient_png, ["Profile"])])
    ranked = RetrievalEngine().rank(gradient_png, [pack], AngleTag.PROFILE)
    assert [image.id for image, _ in ranked] == ["tagged", "untagged"]
    assert ranked[0][1] == pytest.approx(1.0)
    assert ranked[1][1] == pytest.approx(0.4)


def test_content_similarity_orders_untagged_images(gradient_png, reversed_gradient_png):
    pack = _pack("a", [("mirrored", reversed_gradient_png, []), ("same", gradient_png, [])])
    ranked = RetrievalEngine().rank(gradient_png, [pack], AngleTag.FRONT)
    assert [image.id for image, _ in ranked] == ["same", "mirrored"]
    assert ranked[0][1] > ranked[1][1]


def test_ties_break_by_ascending_id(gradient_png):
    pack = _pack("a", [("c", gradient_png, ["Front"]), ("a", gradient_png, ["Front"]), ("b", gradient_png, ["Front"])])
    ranked = RetrievalEngine().rank(gradient_png, [pack], AngleTag.FRONT)
    assert [image.id for image, _ in ranked] == ["a", "b", "c"]


def test_rank_is_deterministic(gradient_png, reversed_gradient_png, checker_png):
    packs = [
        _pack("a", [("1", reversed_gradient_png, ["Generic"]), ("2", checker_png, [])]),
        _pack("b", [("3", gradient_png, ["Front"]), ("4", checker_png, ["Profile"])]),
    ]
    engine = RetrievalEngine()
    first = engine.rank(gradient_png, packs, AngleTag.FRONT)
    second = engine.rank(gradient_png, packs, AngleTag.FRONT)
    assert first == second
    assert [score for _, score in first] == [score for _, score in second]


def test_limit_truncates(gradient_png):
    pack = _pack("a", [(f"img{i:02d}", gradient_png, []) for i in range(12)])
    engine = RetrievalEngine()
    assert len(engine.rank(gradient_png, [pack], AngleTag.FRONT)) == 8
    assert len(engine.rank(gradient_png, [pack], AngleTag.FRONT, limit=3)) == 3
    assert engine.rank(gradient_png, [pack], AngleTag.FRONT, limit=0) == []


def test_returned_images_carry_similarity_without_touching_catalog(gradient_png):
    pack = _pack("a", [("x", gradient_png, ["Front"])])
    ranked = RetrievalEngine().rank(gradient_png, [pack], AngleTag.FRONT)
    image, score = ranked[0]
    assert image.similarity == score
    assert pack.images[0].similarity is None


def test_disabled_packs_are_excluded_entirely(gradient_png):
    catalog = ReferenceCatalog([_pack("on", [("1", gradient_png, [])]), _pack("off", [("2", gradient_png, ["Front"])])])
    catalog.disable("off")
    ranked = RetrievalEngine().rank(gradient_png, catalog.enabled_packs(), AngleTag.FRONT)
    assert [image.id for image, _ in ranked] == ["1"]


def test_undecodable_reference_still_scored_by_tags(gradient_png):
    pack = _pack("a", [("broken", b"not an image", ["Front"])])
    ranked = RetrievalEngine().rank(gradient_png, [pack], AngleTag.FRONT)
    assert ranked[0][1] == pytest.approx(0.6)


def test_data_uri_source_is_accepted(gradient_png):
    import base64

    uri = "data:image/png;base64," + base64.b64encode(gradient_png).decode("ascii")
    pack = _pack("a", [("x", gradient_png, [])])
    ranked = RetrievalEngine().rank(uri, [pack], AngleTag.FRONT)
    assert ranked[0][1] == pytest.approx(0.4)
