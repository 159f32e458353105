"""
Article body extraction: preprocessing, candidate selection and cleanup.
"""

from .cleaner import ContentCleaner, clean_article_content, clean_article_content_light, is_allowed_video
from .post_processor import ArticlePostProcessor, prep_article
from .preprocess import prep_document, replace_brs
from .readerable import is_probably_readerable
from .scoring import ScoreTable, get_class_weight, is_valid_byline
from .selector import CandidateSelector, RetryRung, Selection, grab_article

__all__ = [
    "ArticlePostProcessor",
    "CandidateSelector",
    "ContentCleaner",
    "RetryRung",
    "ScoreTable",
    "Selection",
    "clean_article_content",
    "clean_article_content_light",
    "get_class_weight",
    "grab_article",
    "is_allowed_video",
    "is_probably_readerable",
    "is_valid_byline",
    "prep_article",
    "prep_document",
    "replace_brs",
]
