"""
Unit tests for main-content extraction.
"""
import pytest

from core.exceptions import ErrorReason, ExtractionError
from services.ingestion.content_extractor import ContentExtractor, content_extractor

URL = "https://example.com/post"

ARTICLE_TEXT = (
    "Photosynthesis converts light energy into chemical energy. "
    "Plants capture sunlight with chlorophyll and store the energy as sugar. "
    "Oxygen is released as a by-product of splitting water molecules."
)


def page(body: str, title: str = "Plants 101") -> str:
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


class TestRegionSelection:
    """Test which part of the page is kept."""

    def test_main_region_preferred_over_noise(self):
        html = page(
            "<nav>Home About Contact Home About Contact Home About Contact</nav>"
            f"<main><h1>Plants</h1><p>{ARTICLE_TEXT}</p></main>"
            "<aside class='sidebar'>" + "Related links and promotions. " * 10 + "</aside>"
            "<footer>Copyright</footer>"
        )

        result = content_extractor.extract(html, URL)

        assert ARTICLE_TEXT in result.body_text
        assert "Related links" not in result.body_text
        assert "Contact" not in result.body_text
        assert "Copyright" not in result.body_text

    def test_long_main_beats_shorter_content_block(self):
        main_text = ("Glaciers carve valleys over thousands of years. " * 11).strip()
        assert len(main_text) >= 500
        html = page(
            "<div class='content'>" + "Subscribe to our newsletter for weekly updates. " * 3 + "</div>"
            f"<main><p>{main_text}</p></main>"
        )

        result = content_extractor.extract(html, URL)

        assert result.body_text == main_text

    def test_longest_selector_candidate_wins(self):
        html = page(
            f"<article><p>{ARTICLE_TEXT[:110]}</p></article>"
            f"<div class='post-content'><p>{ARTICLE_TEXT} {ARTICLE_TEXT}</p></div>"
        )

        result = content_extractor.extract(html, URL)

        assert result.body_text == f"{ARTICLE_TEXT} {ARTICLE_TEXT}"

    def test_paragraph_fallback(self):
        html = page(f"<div><p>{ARTICLE_TEXT[:80]}</p><span>skip me</span><p>{ARTICLE_TEXT[80:]}</p></div>")

        result = content_extractor.extract(html, URL)

        assert "skip me" not in result.body_text
        assert result.body_text.startswith("Photosynthesis converts")

    def test_whole_body_fallback(self):
        html = page(f"<div>{ARTICLE_TEXT}</div>")

        result = content_extractor.extract(html, URL)

        assert result.body_text == ARTICLE_TEXT

    def test_whitespace_collapsed(self):
        html = page(f"<main>{ARTICLE_TEXT.replace(' ', '   ')}\n\n\n</main>")

        assert content_extractor.extract(html, URL).body_text == ARTICLE_TEXT


class TestExtractionResult:

    def test_title_from_document(self):
        result = content_extractor.extract(page(f"<main>{ARTICLE_TEXT}</main>"), URL)
        assert result.title == "Plants 101"
        assert result.source_url == URL

    def test_title_defaults_to_url(self):
        result = content_extractor.extract(f"<html><body><main>{ARTICLE_TEXT}</main></body></html>", URL)
        assert result.title == URL

    def test_extraction_is_repeatable(self):
        html = page(f"<main>{ARTICLE_TEXT}</main>")
        assert content_extractor.extract(html, URL) == content_extractor.extract(html, URL)

    def test_to_dict_shape(self):
        result = content_extractor.extract(page(f"<main>{ARTICLE_TEXT}</main>"), URL)
        assert result.to_dict() == {"content": ARTICLE_TEXT, "title": "Plants 101", "url": URL}


class TestEmptyContent:
    """Pages with too little text are rejected."""

    def test_script_only_page(self):
        html = page("<div id='root'></div><script>window.app = render();</script>")

        with pytest.raises(ExtractionError) as exc_info:
            content_extractor.extract(html, URL)

        assert exc_info.value.status_code == 400
        assert exc_info.value.reason == ErrorReason.EMPTY_CONTENT
        assert exc_info.value.error == "No content found"

    def test_short_text(self):
        with pytest.raises(ExtractionError):
            content_extractor.extract(page("<p>Too short.</p>"), URL)

    def test_empty_html(self):
        with pytest.raises(ExtractionError):
            content_extractor.extract("", URL)

    def test_threshold_is_configurable(self):
        extractor = ContentExtractor(min_content_length=5)
        assert extractor.extract(page("<p>Tiny but fine.</p>"), URL).body_text == "Tiny but fine."
