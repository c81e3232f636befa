#!/usr/bin/env python3
"""
wiktionary_metaphors.py — FastMCP tool for the French Wiktionary category
"Métaphores en russe"

FastMCP tools
────────────
    get_random_expression()
    get_expression(title)
    list_expressions(limit=50)

Returns
───────
    {
      "status": "success",
      "data": {...},
      "metadata": {...}
    }

Dependencies
────────────
    pip install requests beautifulsoup4 fastmcp

Setup
─────
    No API key required - the MediaWiki API of fr.wiktionary.org is open.
    The category listing is cached once under MCP_servers/cache and never
    refreshed; delete the cache directory to pick up new entries.
    Runs from a plain checkout too: Wiktionary/MetaphorDip is added to
    sys.path so the lucky-dip modules import without `pip install -e .`.
"""

import logging
import os
import sys
from typing import Any, Callable, Dict

_HERE = os.path.dirname(os.path.abspath(__file__))
sys.path.append(os.path.join(os.path.dirname(_HERE), "Wiktionary", "MetaphorDip"))

from fastmcp import FastMCP

from definition_cleaner import clean_definition_html
from metaphors_lucky_dip import (AppState, CATEGORY, FileStore, LuckyDipError, entry_url,
                                 fetch_expressions_list, fetch_full_page,
                                 pick_random_expression)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("wiktionary_metaphors")

mcp = FastMCP("wiktionary_metaphors")  # MCP route → /wiktionary_metaphors
_CACHE_DIR = os.path.join(_HERE, "cache")

_state = AppState(store=FileStore(_CACHE_DIR))


def _guarded(operation: str, call: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    """Turn lucky-dip failures into the error envelope."""
    try:
        return call()
    except (LuckyDipError, LookupError) as e:
        logger.error(f"{operation} failed: {e}")
        return {
            "status": "error",
            "message": str(e),
            "error_type": type(e).__name__
        }


def _expression_payload(title: str, raw_html: str) -> Dict[str, Any]:
    return {
        "status": "success",
        "data": {
            "title": title,
            "definition_html": clean_definition_html(raw_html),
            "url": entry_url(title)
        },
        "metadata": {"category": CATEGORY}
    }


def random_expression(state: AppState = _state) -> Dict[str, Any]:
    return _guarded("random_expression",
                    lambda: _expression_payload(*pick_random_expression(state)))


def expression(title: str, state: AppState = _state) -> Dict[str, Any]:
    if not title or not isinstance(title, str):
        return {
            "status": "error",
            "message": "title must be a non-empty string"
        }
    return _guarded("expression",
                    lambda: _expression_payload(title, fetch_full_page(title, state.http)))


def expressions(limit: int = 50, state: AppState = _state) -> Dict[str, Any]:
    if limit < 1:
        return {
            "status": "error",
            "message": "limit must be at least 1"
        }

    def _list() -> Dict[str, Any]:
        titles = fetch_expressions_list(state.store, state.http)
        return {
            "status": "success",
            "data": titles[:limit],
            "count": min(limit, len(titles)),
            "metadata": {"category": CATEGORY, "total": len(titles)}
        }

    return _guarded("expressions", _list)


@mcp.tool()
def get_random_expression() -> Dict[str, Any]:
    """
    Pick one random Russian metaphor and return its cleaned definition.

    Returns:
        Dict with the entry title, its definition as HTML and its Wiktionary URL
    """
    return random_expression()


@mcp.tool()
def get_expression(title: str) -> Dict[str, Any]:
    """
    Get the cleaned definition of one entry.

    Args:
        title: Exact Wiktionary page title (e.g., 'белая ворона')

    Returns:
        Dict with the entry title, its definition as HTML and its Wiktionary URL
    """
    return expression(title)


@mcp.tool()
def list_expressions(limit: int = 50) -> Dict[str, Any]:
    """
    List entry titles of the category (cached after the first call).

    Args:
        limit: Maximum number of titles to return (default: 50)

    Returns:
        Dict containing the titles and the total size of the category
    """
    return expressions(limit)


if __name__ == "__main__":
    mcp.run(transport="stdio")
