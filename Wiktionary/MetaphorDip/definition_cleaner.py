#!/usr/bin/env python3
"""
Strip Wiktionary page markup down to the readable definition.

The parse API returns the whole rendered page: edit links, tables of
inflections, citation markers and the "exemple d'utilisation manquant"
boilerplate that French Wiktionary adds to entries without examples.
clean_definition_html() removes all of it and returns the inner markup of
the content container.
"""

from __future__ import annotations
import logging, re, sys

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

logger = logging.getLogger("metaphor_dip.cleaner")

CONTENT_SELECTOR = ".mw-parser-output"
UNWANTED_SELECTORS = (".mw-editsection", "table", ".reference", "sup")

USAGE_EXAMPLE_PHRASE = "exemple d'utilisation"
MISSING_WORD = "manquant"

# leftovers once the wrapping markup is gone, applied in this order
BOILERPLATE_PATTERNS = [
    re.compile(r"exemple d[’']utilisation\s+manquant\.?\s*\(ajouter\)", re.IGNORECASE),
    re.compile(r"manquant\.?\s*\(ajouter\)", re.IGNORECASE),
    re.compile(r"manquant\.\s*\(\s*\)", re.IGNORECASE),
    re.compile(r"manquant\s*\(\s*\)", re.IGNORECASE),
]


class ParseError(ValueError):
    """Raised when the markup cannot be turned into a tree."""


def _parse(raw_html: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(raw_html, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ParseError(str(exc)) from exc


def _visible_text(tag) -> str:
    return tag.get_text().strip().lower().replace("’", "'")


def _remove(tag) -> None:
    # a match nested in an already removed node is gone with it
    if not tag.decomposed:
        tag.decompose()


def clean_definition_html(raw_html: str) -> str:
    """
    Return the cleaned inner markup of the page's content container.

    Fail-open: markup without a `.mw-parser-output` element, or markup the
    parser rejects, comes back exactly as given.
    """
    try:
        soup = _parse(raw_html)
    except ParseError as exc:
        logger.warning("Definition left as-is, parser rejected it: %s", exc)
        return raw_html

    content = soup.select_one(CONTENT_SELECTOR)
    if content is None:
        return raw_html

    for selector in UNWANTED_SELECTORS:
        for el in content.select(selector):
            _remove(el)

    for a in content.find_all("a"):
        if a.decomposed:
            continue
        href = a.get("href") or ""
        if USAGE_EXAMPLE_PHRASE in _visible_text(a) or "action=edit" in href:
            _remove(a)

    for el in content.find_all(["i", "em"]):
        if el.decomposed:
            continue
        if MISSING_WORD in _visible_text(el):
            _remove(el)

    cleaned = content.decode_contents()
    for pattern in BOILERPLATE_PATTERNS:
        cleaned = pattern.sub("", cleaned)
    return cleaned.strip()


if __name__ == "__main__":
    print(clean_definition_html(sys.stdin.read()))
