from gmaps_reviews.models import Coordinates
from gmaps_reviews.parsers.business import (
    extract_business_from_search,
    extract_business_info,
    extract_photo_urls,
)


PLACE_ID = "ChIJN1t_tDeuEmsRUsoyG83frY4"


def test_place_page_fields(place_html):
    info = extract_business_info(place_html, PLACE_ID)

    assert info.name == "Joe's Pizza"
    assert info.place_id == PLACE_ID
    assert info.rating == 4.5
    assert info.review_count == 2345
    assert info.address == "7 Carmine St, New York, NY 10014"
    assert info.phone == "+1 212-366-1182"
    assert info.website == "https://www.joespizzanyc.com/"
    assert info.category == "Restaurant"
    assert info.categories == ["Restaurant"]
    assert info.hours == {"Mo": "10:00-04:00", "Tu": "10:00-04:00"}
    assert info.coordinates == Coordinates(latitude=40.7306, longitude=-74.0021)
    assert info.price_level == "$"
    assert info.permanently_closed is False
    assert info.photos[:2] == [
        "https://lh5.googleusercontent.com/p/AF1QipA=w400",
        "https://lh3.googleusercontent.com/p/AF1QipB=w400",
    ]


def test_sparse_page_leaves_fields_absent(sparse_html):
    info = extract_business_info(sparse_html, PLACE_ID)

    assert info.name == ""
    assert info.place_id == PLACE_ID
    assert info.rating is None
    assert info.review_count is None
    assert info.category is None
    assert info.categories == []
    assert info.photos == []


def test_empty_document():
    info = extract_business_info("", "abc")
    assert info.name == ""
    assert info.place_id == "abc"


def test_out_of_range_rating_falls_through():
    html = '"ratingValue": "47" <span aria-label="4.7 stars"></span>'
    assert extract_business_info(html).rating == 4.7


def test_review_count_from_text_with_separators():
    html = '<button>12,345 reviews</button>'
    assert extract_business_info(html).review_count == 12345


def test_website_pointing_back_at_google_is_rejected():
    html = (
        '"url":"https://www.google.com/maps/place/joes" '
        '<a class="CsEnBe" data-item-id="authority" href="https://www.joes.example/">joes.example</a>'
    )
    assert extract_business_info(html).website == "https://www.joes.example/"


def test_structured_data_helper_type_is_not_a_category():
    html = '{"@type":"AggregateRating","ratingValue":"4.2"}'
    info = extract_business_info(html)
    assert info.rating == 4.2
    assert info.category is None


def test_hours_from_accessibility_label():
    html = (
        '<div aria-label="Monday, 9 AM to 5 PM; Tuesday, 9 AM to 5 PM; Sunday, Closed">'
        '</div>'
    )
    assert extract_business_info(html).hours == {
        "Monday": "9 AM to 5 PM",
        "Tuesday": "9 AM to 5 PM",
        "Sunday": "Closed",
    }


def test_malformed_hours_json_falls_back_to_label():
    html = (
        '"openingHours": [Mo 09:00-17:00] '
        '<div aria-label="Saturday, 10 AM to 2 PM"></div>'
    )
    assert extract_business_info(html).hours == {"Saturday": "10 AM to 2 PM"}


def test_hours_from_json_decode_entities():
    html = '"openingHours": ["Mo 09:00&ndash;17:00", "Sa 10:00&#8211;14:00"]'
    assert extract_business_info(html).hours == {
        "Mo": "09:00–17:00",
        "Sa": "10:00–14:00",
    }


def test_business_photos_are_capped_at_ten():
    html = "<title>Gallery Cafe - Google Maps</title>" + "".join(
        f'<img src="https://lh3.googleusercontent.com/p/shot{i}=w400">' for i in range(14)
    )
    photos = extract_business_info(html).photos
    assert len(photos) == 10
    assert photos[-1] == "https://lh3.googleusercontent.com/p/shot9=w400"


def test_coordinates_from_url_and_bounds():
    html = '<a href="https://www.google.com/maps/@40.7306,-74.0021,17z">map</a>'
    assert extract_business_info(html).coordinates == Coordinates(40.7306, -74.0021)

    out_of_range = '<a href="https://www.google.com/maps/@120.5,-74.0,17z">map</a>'
    assert extract_business_info(out_of_range).coordinates is None


def test_permanently_closed():
    html = '<title>Old Diner - Google Maps</title><span>Permanently closed</span>'
    info = extract_business_info(html)
    assert info.name == "Old Diner"
    assert info.permanently_closed is True


def test_photo_urls_are_unique_and_limited():
    html = "".join(
        f'<img src="https://lh5.googleusercontent.com/p/photo{i}=w400">' for i in range(5)
    )
    html += '<img src="https://lh5.googleusercontent.com/p/photo0=w400">'
    photos = extract_photo_urls(html, 3)
    assert photos == [
        "https://lh5.googleusercontent.com/p/photo0=w400",
        "https://lh5.googleusercontent.com/p/photo1=w400",
        "https://lh5.googleusercontent.com/p/photo2=w400",
    ]


def test_knowledge_panel(panel_html):
    info = extract_business_from_search(panel_html, PLACE_ID)

    assert info.name == "Joe's Pizza"
    assert info.place_id == PLACE_ID
    assert info.rating == 4.5
    assert info.review_count == 2345
    assert info.address == "7 Carmine St, New York, NY 10014"
    assert info.phone == "(212) 366-1182"
    assert info.category == "Pizza restaurant"
    assert info.website is None


def test_knowledge_panel_title_suffix_is_stripped():
    html = "<html><head><title>Katz's Delicatessen - Google Search</title></head></html>"
    assert extract_business_from_search(html).name == "Katz's Delicatessen"


def test_knowledge_panel_generic_title_is_rejected():
    html = "<html><head><title>Google Search</title></head></html>"
    assert extract_business_from_search(html).name == ""
