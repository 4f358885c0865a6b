"""
Main-content extraction from raw HTML using BeautifulSoup.

Extraction is a heuristic: noise nodes are removed, then an ordered list of
region strategies is tried. Each strategy scores its candidates by text
length and the first strategy whose best candidate is long enough wins.
Script-rendered pages usually come back nearly empty.
"""
from typing import List, Optional
from bs4 import BeautifulSoup

from core.config import MIN_CONTENT_LENGTH, MIN_REGION_LENGTH
from core.exceptions import ErrorReason, ExtractionError
from models.content_models import ExtractedContent
from services.processing.utils import collapse_whitespace

NOISE_SELECTORS = [
    "script",
    "style",
    "nav",
    "header",
    "footer",
    "aside",
    ".advertisement",
    ".ads",
    ".sidebar",
    ".navigation",
]

CONTENT_SELECTORS = [
    "main",
    '[role="main"]',
    ".main-content",
    ".content",
    ".post-content",
    ".article-content",
    ".entry-content",
    "article",
    ".article-body",
]


def _element_text(element) -> str:
    return collapse_whitespace(element.get_text(separator=" "))


class RegionStrategy:
    """A way of proposing content region candidates from a parsed document."""

    name = "region"

    def candidates(self, soup: BeautifulSoup) -> List[str]:
        raise NotImplementedError

    def best(self, soup: BeautifulSoup) -> str:
        """Highest-scoring candidate; the score is text length."""
        return max(self.candidates(soup), key=len, default="")


class SelectorStrategy(RegionStrategy):
    """Every element matched by a known content-container selector."""

    name = "selectors"

    def __init__(self, selectors: Optional[List[str]] = None):
        self.selectors = selectors or CONTENT_SELECTORS

    def candidates(self, soup: BeautifulSoup) -> List[str]:
        texts = []
        for selector in self.selectors:
            texts.extend(_element_text(element) for element in soup.select(selector))
        return texts


class ParagraphStrategy(RegionStrategy):
    """All paragraph text in document order."""

    name = "paragraphs"

    def candidates(self, soup: BeautifulSoup) -> List[str]:
        paragraphs = [p.get_text(separator=" ").strip() for p in soup.find_all("p")]
        return [collapse_whitespace("\n\n".join(p for p in paragraphs if p))]


class DocumentStrategy(RegionStrategy):
    """The whole body, or the whole document when there is no body."""

    name = "document"

    def candidates(self, soup: BeautifulSoup) -> List[str]:
        root = soup.body or soup
        return [_element_text(root)]


DEFAULT_STRATEGIES = [SelectorStrategy(), ParagraphStrategy(), DocumentStrategy()]


class ContentExtractor:
    """Isolates the body text of an HTML page."""

    def __init__(
        self,
        strategies: Optional[List[RegionStrategy]] = None,
        min_region_length: int = MIN_REGION_LENGTH,
        min_content_length: int = MIN_CONTENT_LENGTH,
    ):
        self.strategies = strategies or DEFAULT_STRATEGIES
        self.min_region_length = min_region_length
        self.min_content_length = min_content_length

    @staticmethod
    def _remove_noise(soup: BeautifulSoup) -> None:
        for element in soup.select(", ".join(NOISE_SELECTORS)):
            element.decompose()

    def select_region(self, soup: BeautifulSoup) -> str:
        """Text of the first strategy reaching the minimum region length."""
        text = ""
        for strategy in self.strategies:
            text = strategy.best(soup)
            if len(text) >= self.min_region_length:
                break
        return text

    def extract(self, html: str, source_url: str) -> ExtractedContent:
        """
        Extract title and main text from HTML.

        Raises:
            ExtractionError: when less than the minimum amount of text remains
        """
        soup = BeautifulSoup(html or "", "html.parser")

        title = ""
        if soup.title:
            title = collapse_whitespace(soup.title.get_text())

        self._remove_noise(soup)
        content = collapse_whitespace(self.select_region(soup))

        if len(content) < self.min_content_length:
            raise ExtractionError(
                "Unable to extract meaningful content from the provided URL",
                reason=ErrorReason.EMPTY_CONTENT,
            )

        return ExtractedContent(source_url=source_url, title=title or source_url, body_text=content)


# Global content extractor instance
content_extractor = ContentExtractor()
