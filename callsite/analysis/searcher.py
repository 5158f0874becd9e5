"""
Caller Searcher

Ties discovery, reading and matching together for a configured run:
1. Discover source files under the given paths
2. Read and search every document for the target symbol
3. Return the documents with call-sites
"""

from pathlib import Path
from typing import Iterable, List, Tuple, Union

from loguru import logger

from .call_finder import as_symbol
from .definitions import Definition, collect_definitions
from .search import DocumentMatches, search_documents
from ..core.config import Config
from ..core.models import Symbol
from ..sources import discover_documents


class CallerSearcher:
    """
    Finds callers of a symbol across source trees.

    Document discovery can be replaced by passing documents directly to
    search_documents(); this class only supplies the filesystem default.
    """

    def __init__(self, config: Config = None):
        self.config = config or Config()

    def discover(self, paths: Iterable[Union[str, Path]]) -> List[Tuple[str, str]]:
        """Load every source document under paths"""
        return discover_documents(
            paths,
            extensions=self.config.extensions,
            exclude_dirs=set(self.config.exclude_dirs),
        )

    def search(
        self, symbol: Union[Symbol, str], paths: Iterable[Union[str, Path]]
    ) -> List[DocumentMatches]:
        """
        Search files under paths for call-sites of symbol.

        Returns:
            DocumentMatches for each file with at least one call-site
        """
        symbol = as_symbol(symbol)
        documents = self.discover(paths)
        if not documents:
            logger.warning("No source files found")
            return []

        return search_documents(
            documents,
            symbol,
            collapse_duplicates=self.config.collapse_duplicates,
            workers=self.config.workers,
        )

    def definitions(self, paths: Iterable[Union[str, Path]]) -> List[Definition]:
        """Top-level definitions found under paths"""
        return collect_definitions(self.discover(paths))
