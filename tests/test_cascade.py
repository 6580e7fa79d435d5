import re

from gmaps_reviews.parsers.cascade import FieldCascade, Tier, pattern


RATING = FieldCascade(
    "rating",
    tiers=(
        pattern("json", r'"ratingValue"\s*:\s*"?([\d.]+)"?'),
        pattern("aria", r'aria-label="([\d.]+)\s+stars?"', re.IGNORECASE),
    ),
    convert=float,
    accept=lambda value: 1 <= value <= 5,
)


def test_first_tier_wins_when_accepted():
    html = '"ratingValue": "4.2" <span aria-label="3.9 stars"></span>'
    assert RATING.extract(html) == 4.2


def test_rejected_candidate_falls_through_to_next_tier():
    html = '"ratingValue": "7.5" <span aria-label="3.9 stars"></span>'
    assert RATING.extract(html) == 3.9


def test_conversion_error_means_no_candidate():
    html = '"ratingValue": "4..2" <span aria-label="4.8 Stars"></span>'
    assert RATING.extract(html) == 4.8


def test_no_match_leaves_field_absent():
    assert RATING.extract("<div>nothing here</div>") is None
    assert RATING.extract("") is None


def test_only_first_match_of_a_tier_is_considered():
    html = '"ratingValue": "9" "ratingValue": "4.0"'
    assert RATING.extract(html) is None


def test_candidates_are_decoded_before_acceptance():
    name = FieldCascade(
        "name",
        tiers=(pattern("title", r"<title>([^<]+)</title>"),),
        accept=lambda value: "'" in value,
    )
    assert name.extract("<title>Joe&#39;s Pizza</title>") == "Joe's Pizza"


def test_tuple_groups():
    coordinates = FieldCascade(
        "coordinates",
        tiers=(pattern("at", r"@([-\d.]+),([-\d.]+)", group=(1, 2)),),
        convert=lambda pair: (float(pair[0]), float(pair[1])),
    )
    assert coordinates.extract("maps/@40.5,-73.9,17z") == (40.5, -73.9)


def test_custom_tier_functions():
    calls = []

    def counting(document):
        calls.append(document)
        return None

    cascade = FieldCascade(
        "custom",
        tiers=(Tier("counting", counting), Tier("constant", lambda document: "value")),
        accept=bool,
    )
    assert cascade.extract("doc") == "value"
    assert calls == ["doc"]
