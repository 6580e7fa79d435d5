from datetime import datetime, timezone

import httpx
import pytest

from gmaps_reviews.extraction import fetch


REVIEW_BLOCKS = """\
<div class="jftiEf fontBodyMedium" data-review-id="r1">
<div class="d4r55">Alice Smith</div>
<span class="kvMYJc" role="img" aria-label="5 stars"></span>
<span class="rsqaWe">2 weeks ago</span>
<span class="wiI7pd">Best slice in the city &amp; friendly staff.</span>
<img src="https://lh5.googleusercontent.com/p/ReviewPhoto1=w100">
<span class="pkWtMe">3</span>
<div class="CDe7pd"><span class="rsqaWe">a week ago</span><div class="wiI7pd">Thanks Alice!</div></div>
</div>
<div class="jftiEf fontBodyMedium" data-review-id="r2">
<div class="d4r55">Bob</div>
<span class="kvMYJc" role="img" aria-label="3 stars"></span>
<span class="rsqaWe">a month ago</span>
<span class="wiI7pd">Decent but crowded.</span>
</div>
<div class="jftiEf fontBodyMedium" data-review-id="r3">
<div class="d4r55">Carol</div>
<span class="kvMYJc" role="img" aria-label="1 star"></span>
<span class="rsqaWe">3 months ago</span>
</div>
"""

PLACE_HTML = """\
<!DOCTYPE html>
<html><head>
<meta property="og:title" content="Joe&#39;s Pizza">
<title>Joe's Pizza - Google Maps</title>
<script type="application/ld+json">{"@context":"https://schema.org","@type":"Restaurant","name":"Joe's Pizza","telephone":"+1 212-366-1182","address":"7 Carmine St, New York, NY 10014","url":"https://www.joespizzanyc.com/","aggregateRating":{"@type":"AggregateRating","ratingValue":"4.5","reviewCount":"2345"},"geo":{"@type":"GeoCoordinates","latitude":40.7306,"longitude":-74.0021},"priceRange":"$","openingHours":["Mo 10:00-04:00","Tu 10:00-04:00"]}</script>
</head><body>
<img src="https://lh5.googleusercontent.com/p/AF1QipA=w400">
<img src="https://lh5.googleusercontent.com/p/AF1QipA=w400">
<img src="https://lh3.googleusercontent.com/p/AF1QipB=w400">
<table class="ChWB3d">
<tr aria-label="5 stars, 1,500 reviews"></tr>
<tr aria-label="4 stars, 500 reviews"></tr>
<tr aria-label="3 stars, 200 reviews"></tr>
<tr aria-label="2 stars, 45 reviews"></tr>
<tr aria-label="1 stars, 100 reviews"></tr>
</table>
<div class="m6QErb"><div>
""" + REVIEW_BLOCKS + """\
</div></div>
"""

SPARSE_HTML = """\
<html><head></head><body><div id="app"></div>
<script>window.APP_INITIALIZATION_STATE=[[[null]]]</script>
</body></html>
"""

PANEL_HTML = """\
<html><head><title>Joe's Pizza - Google Search</title></head><body>
<div class="PZPZlf" data-attrid="title">Joe&#39;s Pizza</div>
<div data-attrid="subtitle"><span class="YhemCb">Pizza restaurant</span></div>
<div><span class="Aq14fc">4.5</span> <span>2,345 Google reviews</span></div>
<div data-attrid="kc:/location/address"><span class="w8qArf">Address: </span><span class="LrzXr">7 Carmine St, New York, NY 10014</span></div>
<div data-attrid="kc:/collection/knowledge_panels/has_phone:phone"><span>Phone: </span><span class="LrzXr zdqRlf">(212) 366-1182</span></div>
</body></html>
"""

LISTINGS_HTML = """\
<div role="feed">
<div class="Nv2PK THOPZb" data-cid="1111"><div class="fontHeadlineSmall">Blue Bottle Coffee</div><span role="img" aria-label="4.6 stars 1,024 Reviews"></span><span class="UY7F9">(1,024)</span><div class="W4Efsd">Coffee shop · 123 Main St</div></div>
<div class="Nv2PK THOPZb" data-cid="2222"><div class="fontHeadlineSmall">Ritual Coffee Roasters</div><span role="img" aria-label="4.4 stars 512 Reviews"></span><span class="UY7F9">(512)</span><div class="W4Efsd">Cafe · 1026 Valencia St</div></div>
<div class="Nv2PK THOPZb" data-cid="3333"><div class="fontHeadlineSmall">Blue Bottle Coffee</div></div>
<div class="Nv2PK THOPZb" data-cid="4444"><div class="fontHeadlineSmall">ChIJN1t_tDeuEmsRUsoyG83frY4</div></div>
</div>
"""

LOCAL_HTML = """\
<html><body><div id="main">
<div class="X7NTVe"><a href="/url?q=x&amp;ludocid=123456789"><div class="ilUpNd XV43Ef aSRlid">Tartine Bakery</div></a><div><span class="oqSTJd">4.5</span><span>(3,210)</span> · $10–20<br>Bakery · 600 Guerrero St</div></div>
<div class="X7NTVe"><a href="/url?q=y&amp;ludocid=987654321"><div class="ilUpNd XV43Ef aSRlid">Arsicault Bakery</div></a><div><span class="oqSTJd">4.7</span><span>(1,876)</span><br>Bakery · 397 Arguello Blvd</div></div>
</div><footer>Footer</footer></body></html>
"""


@pytest.fixture
def place_html():
    return PLACE_HTML


@pytest.fixture
def review_blocks():
    return "<div><div>" + REVIEW_BLOCKS + "</div></div>"


@pytest.fixture
def sparse_html():
    return SPARSE_HTML


@pytest.fixture
def panel_html():
    return PANEL_HTML


@pytest.fixture
def listings_html():
    return LISTINGS_HTML


@pytest.fixture
def local_html():
    return LOCAL_HTML


@pytest.fixture
def fixed_now():
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def no_sleep(monkeypatch):
    """Record retry delays instead of sleeping."""
    delays = []
    monkeypatch.setattr(fetch.time, "sleep", delays.append)
    return delays


@pytest.fixture
def mock_client():
    """Factory for httpx clients backed by a request handler."""
    clients = []

    def factory(handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
