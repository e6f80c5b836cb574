# tests/test_card_extractor.py
from bs4 import BeautifulSoup

from models.limits import ExtractionLimits
from services.extraction.card_extractor import extract_cards, find_card_root, iter_candidates
from services.extraction.section_locator import locate_section

ORIGIN = "https://example.org"


def _container(html: str):
    soup = BeautifulSoup(html, "html.parser")
    return locate_section(soup, "You might be interested in").container


# -------------------------------------------------------------------
# 1️⃣  End-to-end over a ten-card carousel
# -------------------------------------------------------------------
def test_ten_candidates_with_duplicate_yield_eight_unique(ten_card_page):
    cards = extract_cards(_container(ten_card_page), ORIGIN)

    assert len(cards) == 8
    urls = [c.url for c in cards]
    assert len(set(urls)) == 8
    assert all(u.startswith("https://example.org/articles/") for u in urls)
    # card 5 repeated card 2's href, so 0-4 then 6-8
    assert [c.title for c in cards] == [
        f"Article {i} title" for i in (0, 1, 2, 3, 4, 6, 7, 8)
    ]


def test_fields_are_filled_from_card_markup(make_page, make_card, ):
    cards = extract_cards(_container(make_page([make_card(1)])), ORIGIN)

    assert len(cards) == 1
    card = cards[0]
    assert card.title == "Article 1 title"
    assert card.url == "https://example.org/articles/1"
    assert card.category == "Heart Care"
    assert card.description.startswith("Learn how our cardiology team")
    assert card.image_url == "https://example.org/img/1.jpg"


def test_missing_optional_fields_are_empty_strings(make_page, make_card):
    html = make_page([make_card(1, category="", blurb="", image=None)])
    card = extract_cards(_container(html), ORIGIN)[0]

    assert card.category == ""
    assert card.description == ""
    assert card.image_url == ""


def test_candidate_without_title_is_skipped(make_page, make_card):
    html = make_page([make_card(1, title="   "), make_card(2)])
    cards = extract_cards(_container(html), ORIGIN)
    assert [c.title for c in cards] == ["Article 2 title"]


def test_hrefs_resolving_to_same_url_are_emitted_once(make_page, make_card):
    html = make_page(
        [make_card(1, href="/articles/1"), make_card(2, href="https://example.org/articles/1")]
    )
    cards = extract_cards(_container(html), ORIGIN)
    assert [c.title for c in cards] == ["Article 1 title"]


def test_cap_follows_limits(ten_card_page):
    cards = extract_cards(_container(ten_card_page), ORIGIN, ExtractionLimits(max_items=3))
    assert [c.title for c in cards] == [f"Article {i} title" for i in range(3)]


def test_no_container_means_no_cards():
    assert extract_cards(None, ORIGIN) == []


# -------------------------------------------------------------------
# 2️⃣  Candidate discovery & card root
# -------------------------------------------------------------------
def test_plain_links_are_not_candidates():
    soup = BeautifulSoup(
        '<div><a href="/a">Plain</a><a href="/b"><h3>Titled</h3></a>'
        '<h2><a href="/c">Wrapped</a></h2><a><h3>No href</h3></a></div>',
        "html.parser",
    )
    assert [c.href for c in iter_candidates(soup.div)] == ["/b", "/c"]


def test_card_root_prefers_article_over_nearer_div():
    soup = BeautifulSoup(
        '<article id="art"><div id="inner"><a href="/x"><h3>T</h3></a></div></article>',
        "html.parser",
    )
    assert find_card_root(soup.a)["id"] == "art"


def test_card_root_falls_back_to_parent():
    soup = BeautifulSoup('<section id="s"><a href="/x"><h3>T</h3></a></section>', "html.parser")
    assert find_card_root(soup.a)["id"] == "s"


def test_title_text_is_not_reused_as_category():
    html = (
        '<div class="heading-wrap"><h2>You might be interested in</h2></div>'
        '<ul><li><span>Short title</span><a href="/x"><h3>Short title</h3></a>'
        "<span>Cancer Care</span></li></ul>"
    )
    soup = BeautifulSoup(f"<section>{html}</section>", "html.parser")
    container = locate_section(soup, "You might be interested in").container
    card = extract_cards(container, ORIGIN)[0]
    assert card.category == "Cancer Care"
