from unittest.mock import patch

from hemnet_search.services.listings.extractors import summaries
from hemnet_search.services.listings.extractors.summaries import extract_summaries

CARD = """
<a href="/bostad/lagenhet-2rum-sodermalm-stockholms-kommun-hornsgatan-1-21234567">
  <img src="data:image/gif;base64,R0lGODlhAQABAAAAACw="
       srcset="https://bilder.hemnet.se/images/itemgallery_cut/ab/cd/abcd.jpg 1x, https://bilder.hemnet.se/images/itemgallery_cut/ab/cd/abcd@2x.jpg 2x">
  <h2>Hornsgatan 1</h2>
  <p>Ljus tvåa med balkong mot innergård.</p>
  <span>3 495 000 kr</span>
  <span>2 rum</span>
  <span>54 m²</span>
  <span>3 200 kr/mån</span>
</a>
"""


def _card(index):
    return (
        f'<a href="/bostad/villa-5rum-gata-{index}"><h2>Gata {index}</h2>'
        f"<span>{index + 1} 000 000 kr</span></a>"
    )


def test_extracts_every_field_from_a_card():
    listings = extract_summaries(f"<html><body>{CARD}</body></html>", "Stockholm")

    assert len(listings) == 1
    listing = listings[0]
    assert listing.title == "Hornsgatan 1"
    assert listing.url == (
        "https://www.hemnet.se/bostad/"
        "lagenhet-2rum-sodermalm-stockholms-kommun-hornsgatan-1-21234567"
    )
    assert listing.price == "3 495 000 kr"
    assert listing.rooms == "2 rum"
    assert listing.area == "54 m²"
    assert listing.monthly_fee == "3 200 kr/mån"
    assert listing.description == "Ljus tvåa med balkong mot innergård."
    assert listing.location == "Stockholm"
    assert listing.image_url == (
        "https://bilder.hemnet.se/images/itemgallery_cut/ab/cd/abcd.jpg"
    )


def test_caps_results_at_25_in_document_order():
    html = "".join(_card(i) for i in range(30))

    listings = extract_summaries(html, "Sverige")

    assert len(listings) == 25
    assert [listing.title for listing in listings] == [f"Gata {i}" for i in range(25)]


def test_absolute_urls_are_kept():
    html = '<a href="https://www.hemnet.se/bostad/tomt-123"><h2>Tomt</h2></a>'

    assert extract_summaries(html, "Sverige")[0].url == "https://www.hemnet.se/bostad/tomt-123"


def test_missing_fields_are_empty_strings():
    html = '<a href="/bostad/lagenhet-1"></a>'

    listing = extract_summaries(html, "Sverige")[0]

    assert listing.title == ""
    assert listing.price == ""
    assert listing.rooms == ""
    assert listing.area == ""
    assert listing.monthly_fee == ""
    assert listing.description == ""
    assert listing.image_url == ""


def test_description_is_truncated_to_200_characters():
    text = "Rymlig " * 60
    html = f'<a href="/bostad/villa-1"><p>{text}</p></a>'

    listing = extract_summaries(html, "Sverige")[0]

    assert listing.description == text.strip()[:200]
    assert len(listing.description) == 200


def test_fee_split_across_text_nodes_is_not_merged():
    html = (
        '<a href="/bostad/lagenhet-1"><h2>Split</h2>'
        "<p>1 200<span>&nbsp;</span>kr/mån</p></a>"
    )

    assert extract_summaries(html, "Sverige")[0].monthly_fee == ""


def test_fee_ignores_digits_in_neighbouring_elements():
    html = (
        '<a href="/bostad/lagenhet-1"><span>4</span>'
        "<span>2 950 kr/mån</span></a>"
    )

    assert extract_summaries(html, "Sverige")[0].monthly_fee == "2 950 kr/mån"


def test_price_per_unit_is_not_taken_as_price():
    html = '<a href="/bostad/lagenhet-1"><span>65 000 kr/m²</span></a>'

    assert extract_summaries(html, "Sverige")[0].price == ""


def test_thumbnail_falls_back_to_data_src_and_ignores_foreign_hosts():
    html = (
        '<a href="/bostad/lagenhet-1">'
        '<img src="https://cdn.example.com/pixel.png" '
        'data-src="https://bilder.hemnet.se/images/lazy.jpg"></a>'
    )

    assert (
        extract_summaries(html, "Sverige")[0].image_url
        == "https://bilder.hemnet.se/images/lazy.jpg"
    )


def test_thumbnail_prefers_src():
    html = (
        '<a href="/bostad/lagenhet-1">'
        '<img src="https://bilder.hemnet.se/images/src.jpg" '
        'srcset="https://bilder.hemnet.se/images/srcset.jpg 1x" '
        'data-src="https://bilder.hemnet.se/images/lazy.jpg"></a>'
    )

    assert (
        extract_summaries(html, "Sverige")[0].image_url
        == "https://bilder.hemnet.se/images/src.jpg"
    )


def test_other_links_are_ignored():
    html = (
        '<a href="/salda/lagenhet-1">Sold</a>'
        '<a href="/maklare/anna">Agent</a>'
        '<a href="/bostad/villa-2"><h2>Villa</h2></a>'
    )

    assert [listing.title for listing in extract_summaries(html, "Sverige")] == ["Villa"]


def test_empty_and_malformed_markup_yield_no_listings():
    assert extract_summaries("", "Sverige") == []
    assert extract_summaries(None, "Sverige") == []
    assert extract_summaries("<<<div><a href=>", "Sverige") == []


def test_malformed_card_is_skipped_and_others_kept():
    html = "".join(_card(i) for i in range(3))
    real_summary = summaries._summary_from_anchor

    def flaky(anchor, location_name):
        if "gata-1" in anchor["href"]:
            raise AttributeError("unexpected markup")
        return real_summary(anchor, location_name)

    with patch.object(summaries, "_summary_from_anchor", side_effect=flaky):
        listings = extract_summaries(html, "Sverige")

    assert [listing.title for listing in listings] == ["Gata 0", "Gata 2"]


def test_protocol_relative_urls_are_resolved():
    html = '<a href="//www.hemnet.se/bostad/villa-1"><h2>Villa</h2></a>'

    assert extract_summaries(html, "Sverige")[0].url == "https://www.hemnet.se/bostad/villa-1"


def test_fee_inside_script_is_ignored():
    html = (
        '<a href="/bostad/lagenhet-1"><script>var fee = "999 kr/mån";</script>'
        "<span>2 950 kr/mån</span></a>"
    )

    assert extract_summaries(html, "Sverige")[0].monthly_fee == "2 950 kr/mån"
