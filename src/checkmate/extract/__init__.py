from checkmate.extract.base import ContentExtractor
from checkmate.extract.tiktok import TikTokExtractor
from checkmate.extract.twitter import TwitterExtractor
from checkmate.extract.web import WebExtractor

__all__ = [
    "ContentExtractor",
    "TikTokExtractor",
    "TwitterExtractor",
    "WebExtractor",
]
