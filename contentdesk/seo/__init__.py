"""SEO tooling: keywords, keyword links and the glossary."""

from contentdesk.seo.glossary import GlossaryService
from contentdesk.seo.keylinks import KeyLinkService, filter_links
from contentdesk.seo.keywords import KeywordPage, KeywordService, filter_keywords

__all__ = [
    "GlossaryService",
    "KeyLinkService",
    "KeywordPage",
    "KeywordService",
    "filter_keywords",
    "filter_links",
]
