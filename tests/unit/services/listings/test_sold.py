from unittest.mock import patch

import pytest

from hemnet_search.services.listings.extractors import sold
from hemnet_search.services.listings.extractors.sold import extract_sold_summaries

SOLD_CARD = """
<a href="/salda/lagenhet-2rum-vasastan-stockholms-kommun-odengatan-5-1234567">
  <h2>Odengatan 5</h2>
  <p>Vasastan, Stockholm</p>
  <p>54 m²</p>
  <p>2 rum</p>
  <span>Slutpris 4 250 000 kr</span>
  <span>+6 %</span>
  <span>78 704 kr/m²</span>
  <span>3 100 kr/mån</span>
  <span>Såld 12 mars 2024</span>
  <img alt="Svensk Fastighetsförmedling" src="https://bilder.hemnet.se/logo.png">
</a>
"""


def test_extracts_every_field_from_a_sold_card():
    listings = extract_sold_summaries(SOLD_CARD, "Stockholm")

    assert len(listings) == 1
    sold = listings[0]
    assert sold.address == "Odengatan 5"
    assert sold.location == "Stockholm"
    assert sold.sold_price == "4 250 000 kr"
    assert sold.price_change_percent == "+6%"
    assert sold.sale_date == "12 mars 2024"
    assert sold.rooms == "2"
    assert sold.area == "54 m²"
    assert sold.price_per_sqm == "78 704 kr/m²"
    assert sold.monthly_fee == "3 100 kr/mån"
    assert sold.property_type == "lägenhet"
    assert sold.agency == "Svensk Fastighetsförmedling"
    assert sold.url == (
        "https://www.hemnet.se/salda/"
        "lagenhet-2rum-vasastan-stockholms-kommun-odengatan-5-1234567"
    )


@pytest.mark.parametrize(
    "segment, property_type",
    [
        ("lagenhet", "lägenhet"),
        ("villa", "villa"),
        ("radhus", "radhus"),
        ("fritidshus", "fritidshus"),
        ("tomt", "tomt"),
    ],
)
def test_property_type_comes_from_url(segment, property_type):
    html = f'<a href="/salda/{segment}-3rum-ort-99"><h2>Adress</h2></a>'

    assert extract_sold_summaries(html, "Sverige")[0].property_type == property_type


def test_price_requires_slutpris_label():
    html = '<a href="/salda/villa-1"><span>4 250 000 kr</span></a>'

    assert extract_sold_summaries(html, "Sverige")[0].sold_price == ""


def test_sale_date_requires_sold_label():
    html = '<a href="/salda/villa-1"><span>12 mars 2024</span></a>'

    assert extract_sold_summaries(html, "Sverige")[0].sale_date == ""


def test_negative_and_decimal_price_change():
    html = '<a href="/salda/villa-1"><span>- 3,5 %</span></a>'

    assert extract_sold_summaries(html, "Sverige")[0].price_change_percent == "-3,5%"


def test_area_falls_back_to_full_text():
    html = '<a href="/salda/radhus-1"><div>4 rum · 112+20 m²</div></a>'

    sold = extract_sold_summaries(html, "Sverige")[0]

    assert sold.area == "112+20 m²"
    assert sold.rooms == "4"


def test_area_directly_before_price_label_is_rejected():
    html = (
        '<a href="/salda/villa-1"><span>72 m²</span>'
        "<span>Slutpris 3 000 000 kr</span></a>"
    )

    sold = extract_sold_summaries(html, "Sverige")[0]

    assert sold.area == ""
    assert sold.sold_price == "3 000 000 kr"


def test_agency_missing_without_recognised_logo():
    html = '<a href="/salda/villa-1"><img alt="Bostadsbild" src="x.jpg"></a>'

    assert extract_sold_summaries(html, "Sverige")[0].agency == ""


def test_caps_at_25_and_ignores_other_links():
    cards = "".join(
        f'<a href="/salda/villa-5rum-ort-{i}"><h2>Villa {i}</h2></a>' for i in range(30)
    )
    html = '<a href="/salda/bostader?page=2">Nästa</a><a href="/bostad/villa-1">x</a>' + cards

    listings = extract_sold_summaries(html, "Sverige")

    assert len(listings) == 25
    assert listings[0].address == "Villa 0"
    assert listings[-1].address == "Villa 24"


def test_empty_markup_yields_no_listings():
    assert extract_sold_summaries("", "Sverige") == []
    assert extract_sold_summaries(None, "Sverige") == []


def test_malformed_sold_card_is_skipped_and_others_kept():
    html = "".join(
        f'<a href="/salda/villa-5rum-ort-{i}"><h2>Villa {i}</h2></a>' for i in range(3)
    )
    real_sold = sold._sold_from_anchor

    def flaky(anchor, location_name):
        if anchor["href"].endswith("ort-1"):
            raise AttributeError("unexpected markup")
        return real_sold(anchor, location_name)

    with patch.object(sold, "_sold_from_anchor", side_effect=flaky):
        listings = extract_sold_summaries(html, "Sverige")

    assert [listing.address for listing in listings] == ["Villa 0", "Villa 2"]


def test_digit_runs_collapse_to_single_spaces():
    html = (
        '<a href="/salda/villa-1"><span>Slutpris 4\n   250 000 kr</span>'
        "<span>3 100 kr/mån</span></a>"
    )

    listing = extract_sold_summaries(html, "Sverige")[0]

    assert listing.sold_price == "4 250 000 kr"
    assert listing.monthly_fee == "3 100 kr/mån"
