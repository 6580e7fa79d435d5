from gmaps_reviews.models import BusinessRecord, ReviewRecord
from gmaps_reviews.parsers import summary
from gmaps_reviews.parsers.summary import calculate_summary, extract_rating_distribution


def test_distribution_from_star_labels(place_html):
    assert extract_rating_distribution(place_html) == {
        "5": 1500, "4": 500, "3": 200, "2": 45, "1": 100,
    }


def test_second_tier_used_when_first_is_all_zero():
    html = (
        '<div aria-label="1 stars, 0 reviews"></div>'
        '<table><tr><td>5 stars</td><td>80</td></tr>'
        '<tr><td>4 stars</td><td>15</td></tr></table>'
    )
    assert extract_rating_distribution(html) == {"5": 80, "4": 15, "3": 0, "2": 0, "1": 0}


def test_partial_first_tier_is_not_merged_with_later_tiers():
    html = (
        '<div aria-label="5 stars, 10 reviews"></div>'
        '<table><tr><td>4 stars</td><td>15</td></tr></table>'
    )
    assert extract_rating_distribution(html) == {"5": 10, "4": 0, "3": 0, "2": 0, "1": 0}


def test_percentage_bars_scale_by_total_with_half_up_rounding():
    html = (
        "<div>1,001 reviews</div>"
        "<div>5 stars 50%</div><div>4 stars 30%</div><div>1 star 20%</div>"
    )
    assert summary._from_percentages(html) == {"5": 501, "4": 300, "3": 0, "2": 0, "1": 200}


def test_percentages_without_total_yield_nothing():
    assert summary._from_percentages("<div>5 stars 50%</div>") == {
        "5": 0, "4": 0, "3": 0, "2": 0, "1": 0,
    }


def test_no_distribution():
    empty = {"5": 0, "4": 0, "3": 0, "2": 0, "1": 0}
    assert extract_rating_distribution("") == empty
    assert extract_rating_distribution("<html></html>") == empty


def test_summary_statistics():
    business = BusinessRecord(name="Joe's Pizza", rating=4.5, review_count=2345)
    reviews = [
        ReviewRecord(author="a", rating=5, owner_response="Thanks!"),
        ReviewRecord(author="b", rating=5),
        ReviewRecord(author="c", rating=3),
        ReviewRecord(author="d", rating=1, owner_response="Sorry"),
    ]
    distribution = {"5": 2, "4": 0, "3": 1, "2": 0, "1": 1}

    result = calculate_summary(reviews, business, distribution)

    assert result.avg_rating == 4.5
    assert result.total_reviews == 2345
    assert result.rating_distribution == distribution
    assert result.response_rate == 50
    assert (result.sentiment.positive, result.sentiment.neutral, result.sentiment.negative) == (50, 25, 25)
    assert result.avg_response_time_days is None


def test_unrated_reviews_are_excluded_from_sentiment_only():
    reviews = [
        ReviewRecord(author="a", rating=4),
        ReviewRecord(author="b", rating=0, owner_response="Hi"),
    ]
    result = calculate_summary(reviews, BusinessRecord(), {})

    assert result.response_rate == 50
    assert result.sentiment.positive == 100
    assert result.sentiment.negative == 0


def test_summary_without_reviews():
    result = calculate_summary([], BusinessRecord(), {"5": 0, "4": 0, "3": 0, "2": 0, "1": 0})

    assert result.response_rate == 0
    assert (result.sentiment.positive, result.sentiment.neutral, result.sentiment.negative) == (0, 0, 0)
    assert result.avg_rating is None
    assert result.to_dict()["sentiment"] == {"positive": 0, "neutral": 0, "negative": 0}


def test_percentages_round_half_up():
    reviews = [ReviewRecord(author=str(i), rating=5 if i < 1 else 2) for i in range(8)]
    result = calculate_summary(reviews, BusinessRecord(), {})
    # 1/8 = 12.5% and 7/8 = 87.5%
    assert result.sentiment.positive == 13
    assert result.sentiment.negative == 88
