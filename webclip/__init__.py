"""webclip - pull the readable article out of a cluttered web page.

Quick single-URL usage::

    from webclip import fetch

    clip = fetch("https://example.com/blog/some-post")
    print(clip.title)
    print(clip.content_markdown)

The readability engine on its own::

    from webclip import Readability

    article = Readability(html, char_threshold=250).parse()
    if article is not None:
        print(article.title, article.length)

Plugin extension point::

    from webclip import register_extractor

    class DocsExtractor:
        name = "docs"
        priority = 10
        def can_extract(self, html, url):
            return "docs.example.com" in url
        def extract(self, html, url):
            ...

    register_extractor(DocsExtractor())
"""

from webclip.extractors.readability import Readability, extract_article
from webclip.items import ExtractionResult, WebClip
from webclip.plugins import register_extractor
from webclip.query import FetchError, extract, fetch, fetch_html
from webclip.settings import ReadabilityOptions

__version__ = "0.1.0"
__all__ = [
    "ExtractionResult",
    "FetchError",
    "Readability",
    "ReadabilityOptions",
    "WebClip",
    "extract",
    "extract_article",
    "fetch",
    "fetch_html",
    "register_extractor",
]
