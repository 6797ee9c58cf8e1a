"""ContentDesk: admin client for the crypto affiliate content API.

Drives the question/answer generation queue, the human review loop, and the
SEO, article and media admin endpoints of the remote content service.
"""

__version__ = "0.1.0"
