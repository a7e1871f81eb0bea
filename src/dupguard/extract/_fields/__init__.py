"""Field extractors.

Each function reads one signal from a record and returns it cleaned, or
None when the record does not carry it.
"""

from .arxiv import arxiv_search_text, extract_arxiv_id
from .authors import extract_first_author, first_author_name
from .doi import clean_doi, extract_doi
from .isbn import extract_isbn, extract_issn
from .pubmed import extract_pmcid, extract_pmid
from .title import extract_title
from .url import extract_url
from .year import extract_year, parse_year

__all__ = [
    "arxiv_search_text",
    "clean_doi",
    "extract_arxiv_id",
    "extract_doi",
    "extract_first_author",
    "extract_isbn",
    "extract_issn",
    "extract_pmcid",
    "extract_pmid",
    "extract_title",
    "extract_url",
    "extract_year",
    "first_author_name",
    "parse_year",
]
