"""
Extraction module for domlens.

Provides:
- Node tree extraction with depth limiting
- Image and link collection
- Region location (navigation, header, footer, sidebar, main content, articles)
- Head metadata extraction
"""

from domlens.extraction.tree_extractor import (
    TreeExtractor,
    compute_stats,
    link_info,
    parse_dimension,
)
from domlens.extraction.region_extractor import (
    RegionExtractor,
    RegionRule,
    REGION_RULES,
    MAIN_CONTENT_CHAINS,
    ARTICLE_CHAIN,
)

__all__ = [
    # Tree
    "TreeExtractor",
    "compute_stats",
    "link_info",
    "parse_dimension",
    # Regions
    "RegionExtractor",
    "RegionRule",
    "REGION_RULES",
    "MAIN_CONTENT_CHAINS",
    "ARTICLE_CHAIN",
]
