"""Article scheduling and editing, plus guide creation."""

from contentdesk.articles.guides import GuideService, load_guide
from contentdesk.articles.service import ArticleService

__all__ = ["ArticleService", "GuideService", "load_guide"]
