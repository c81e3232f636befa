#!/usr/bin/env python3
"""
🎲 Russian metaphors lucky-dip
Picks ONE random entry of the French Wiktionary category
"Métaphores en russe", cleans its definition and renders it.

Used by:
  • CLI        – run this file directly
  • Flask app  – imported by app.py
  • MCP server – imported by MCP_servers/wiktionary_metaphors.py
"""

from __future__ import annotations
import enum, json, logging, os, random, sys, argparse, threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from presenter import OutputSurface, RELOAD_CONTROL, render_error, render_expression

API_URL   = "https://fr.wiktionary.org/w/api.php"
ENTRY_URL = "https://fr.wiktionary.org/wiki/{title}"
CATEGORY  = "Catégorie:Métaphores_en_russe"

CATEGORY_LIMIT  = 500       # one page only, the rest of the category is unreachable
CACHE_KEY       = "expressionsAll"
REQUEST_TIMEOUT = 10
USER_AGENT      = "metaphor-dip/1.0 (https://fr.wiktionary.org/wiki/Catégorie:Métaphores_en_russe)"

_CACHE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "cache")

logger = logging.getLogger("metaphor_dip")

session = requests.Session()
session.headers.update({"Accept": "application/json", "User-Agent": USER_AGENT})


# ---------- errors ---------------------------------------------------------

class LuckyDipError(Exception):
    """Base class for failures of the lucky-dip pipeline."""


class NetworkError(LuckyDipError):
    """The request to the dictionary service could not complete."""


class MalformedResponseError(LuckyDipError):
    """The service answered without the fields we read."""


# ---------- persistent store -----------------------------------------------

class FileStore:
    """String values kept as `<directory>/<key>.json`, survive restarts."""

    def __init__(self, directory: str = _CACHE_DIR) -> None:
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        try:
            with open(self._path(key), "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(f"Cache read error: {exc}")
            return None

    def set(self, key: str, value: str) -> None:
        with open(self._path(key), "w", encoding="utf-8") as f:
            f.write(value)


class MemoryStore:
    """In-process store with the same get/set contract as FileStore."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


# ---------- remote service -------------------------------------------------

def _get_json(params: Dict[str, str], http: Optional[requests.Session] = None) -> dict:
    http = http or session
    params = {**params, "format": "json", "origin": "*"}
    try:
        r = http.get(API_URL, params=params, timeout=REQUEST_TIMEOUT)
        r.raise_for_status()
    except requests.RequestException as exc:
        raise NetworkError(f"{params['action']} request failed: {exc}") from exc
    try:
        data = r.json()
    except ValueError as exc:
        raise MalformedResponseError(f"{params['action']} response is not JSON") from exc
    if isinstance(data, dict) and "error" in data:
        info = data["error"].get("info") if isinstance(data["error"], dict) else data["error"]
        raise MalformedResponseError(f"{params['action']} rejected: {info}")
    return data


def fetch_all_expressions(http: Optional[requests.Session] = None) -> List[str]:
    """Titles of the category members, first page of CATEGORY_LIMIT only."""
    data = _get_json({
        "action": "query",
        "list": "categorymembers",
        "cmtitle": CATEGORY,
        "cmlimit": str(CATEGORY_LIMIT),
    }, http)
    try:
        titles = [entry["title"] for entry in data["query"]["categorymembers"]]
    except (KeyError, TypeError) as exc:
        raise MalformedResponseError(f"category listing lacks {exc}") from exc
    if not all(isinstance(t, str) for t in titles):
        raise MalformedResponseError("category listing has non-text titles")
    logger.info("Fetched %d expressions from %s", len(titles), CATEGORY)
    return titles


def fetch_expressions_list(store, http: Optional[requests.Session] = None) -> List[str]:
    """
    Cached category listing.

    A hit never touches the network. A miss fetches, then stores the list;
    a store that cannot be written is logged and the fetched list is still
    returned. An unreadable cached value counts as a miss.
    """
    cached = store.get(CACHE_KEY)
    if cached:
        try:
            expressions = json.loads(cached)
        except ValueError:
            expressions = None
        if isinstance(expressions, list) and all(isinstance(t, str) for t in expressions):
            return expressions
        logger.warning("Ignoring unreadable cache entry %r", CACHE_KEY)

    expressions = fetch_all_expressions(http)
    try:
        store.set(CACHE_KEY, json.dumps(expressions, ensure_ascii=False))
    except OSError as exc:
        logger.warning(f"Cache write error: {exc}")
    return expressions


def fetch_full_page(title: str, http: Optional[requests.Session] = None) -> str:
    """Rendered HTML of one entry."""
    data = _get_json({"action": "parse", "page": title, "prop": "text"}, http)
    try:
        html = data["parse"]["text"]["*"]
    except (KeyError, TypeError) as exc:
        raise MalformedResponseError(f"page {title!r} lacks {exc}") from exc
    if not isinstance(html, str):
        raise MalformedResponseError(f"page {title!r} has no HTML text")
    return html


def entry_url(title: str) -> str:
    return ENTRY_URL.format(title=quote(title.replace(" ", "_")))


# ---------- orchestration --------------------------------------------------

class Phase(enum.Enum):
    IDLE      = "idle"
    LOADING   = "loading"
    DISPLAYED = "displayed"
    ERRORED   = "errored"


@dataclass
class AppState:
    """Everything one lucky-dip session mutates, passed around explicitly."""
    surface: OutputSurface = field(default_factory=OutputSurface)
    store: object = field(default_factory=FileStore)
    http: requests.Session = field(default_factory=lambda: session)
    rng: random.Random = field(default_factory=random.Random)
    phase: Phase = Phase.IDLE
    generation: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def begin_selection(self) -> int:
        with self._lock:
            self.generation += 1
            self.phase = Phase.LOADING
            return self.generation

    def finish_selection(self, generation: int, phase: Phase,
                         paint: Callable[[], None]) -> bool:
        """
        Paint the surface and record the outcome, unless a newer selection
        has started meanwhile. Check and paint happen under one lock.
        """
        with self._lock:
            if generation != self.generation:
                return False
            paint()
            self.phase = phase
            return True


def pick_expression(expressions: List[str], rng: random.Random) -> str:
    if not expressions:
        raise LookupError("the expression list is empty")
    return expressions[rng.randrange(len(expressions))]


def pick_random_expression(state: AppState) -> Tuple[str, str]:
    """(title, raw page HTML) of one uniformly chosen expression."""
    expressions = fetch_expressions_list(state.store, state.http)
    title = pick_expression(expressions, state.rng)
    return title, fetch_full_page(title, state.http)


def show_random_expression(state: AppState) -> Phase:
    """
    Select, fetch and render one expression onto state.surface.

    Every failure ends up on the surface as the error layout. A selection
    overtaken by a newer one leaves the surface alone.
    """
    generation = state.begin_selection()
    try:
        title, raw_html = pick_random_expression(state)
        shown = state.finish_selection(generation, Phase.DISPLAYED, lambda: render_expression(
            state.surface, title, raw_html, on_reload=lambda: show_random_expression(state)))
        if not shown:
            logger.debug("Dropping stale selection #%d (%r)", generation, title)
    except Exception as exc:
        logger.error("Loading an expression failed: %s", exc)
        if not state.finish_selection(generation, Phase.ERRORED,
                                      lambda: render_error(state.surface, exc)):
            logger.debug("Dropping error of stale selection #%d", generation)
    return state.phase


# ---------- minimal CLI ----------------------------------------------------

def cli() -> None:
    ap = argparse.ArgumentParser(description="Random Russian metaphor from French Wiktionary")
    ap.add_argument("-v", "--verbose", action="store_true",
                    help="enable INFO-level logging")
    ap.add_argument("--cache-dir", default=_CACHE_DIR,
                    help="where the expression list is cached")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s: %(message)s")

    state = AppState(store=FileStore(args.cache_dir))
    print("🎲  Russian metaphors lucky-dip CLI\n")
    show_random_expression(state)
    while True:
        print(state.surface.text(), "\n")
        if state.phase is Phase.ERRORED:
            sys.exit(1)

        if input("⏎  roll again   |   q + ⏎  quit: ").strip().lower() == "q":
            break
        state.surface.click(RELOAD_CONTROL)


if __name__ == "__main__":
    cli()
