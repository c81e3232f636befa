#!/usr/bin/env python3
"""
Page rendering for the lucky-dip.

Everything visible goes through one OutputSurface: a render replaces its
markup and its control handlers together, so the reload handler of a
previous page can never fire once a new page is installed.
"""

from __future__ import annotations
import logging, re
from typing import Callable, Dict, Optional

from bs4 import BeautifulSoup
from markupsafe import escape

from definition_cleaner import clean_definition_html

logger = logging.getLogger("metaphor_dip.presenter")

RELOAD_CONTROL = "reload"

# Lucide geometry (24x24 stroke icons)
BOOK_OPEN = (
    '<path d="M2 3h6a4 4 0 0 1 4 4v14a3 3 0 0 0-3-3H2z"></path>'
    '<path d="M22 3h-6a4 4 0 0 0-4 4v14a3 3 0 0 1 3-3h7z"></path>'
)
REFRESH_CCW = (
    '<path d="M21 12a9 9 0 0 0-9-9 9.75 9.75 0 0 0-6.74 2.74L3 8"></path>'
    '<path d="M3 3v5h5"></path>'
    '<path d="M3 12a9 9 0 0 0 9 9 9.75 9.75 0 0 0 6.74-2.74L21 16"></path>'
    '<path d="M16 16h5v5"></path>'
)

TITLE_ICON_CLASS = "w-6 h-6 text-indigo-300 inline-block mr-2 -mt-1 drop-shadow-glow"
RELOAD_ICON_CLASS = "w-4 h-4 text-white inline-block mr-2 -mt-1"

PAGE_TEMPLATE = """
<div class="min-h-screen bg-gradient-to-br from-black via-gray-900 to-black flex items-center justify-center px-4 py-6 sm:px-6 sm:py-10">
  <div class="w-full max-w-3xl max-h-[90vh] overflow-y-auto scroll-smooth rounded-3xl border border-gray-700 shadow-[0_0_60px_rgba(99,102,241,0.3)] bg-gradient-to-tr from-gray-800/60 to-gray-900/60 backdrop-blur-md p-6 sm:p-8 md:p-10 animate-fadeIn flex flex-col">

    <h1 class="text-3xl sm:text-4xl md:text-5xl font-extrabold text-center text-white mb-4 drop-shadow-[0_0_10px_#6366f1] flex items-center justify-center gap-3">
      {title_icon}
      <span class="tracking-tight animate-pulse">Expression Russe</span>
    </h1>

    <h2 class="text-xl sm:text-2xl md:text-3xl font-semibold text-center text-indigo-300 mb-6 tracking-wide uppercase drop-shadow">
      {title}
    </h2>

    <div class="prose prose-invert max-w-none text-white/90 mb-8 text-justify leading-relaxed">
      {definition}
    </div>

    <form method="post" action="/reload" class="flex justify-center">
      <button id="{reload_id}" type="submit"
        class="px-6 py-3 rounded-full bg-indigo-600 hover:bg-indigo-500 text-white font-semibold shadow-xl ring-1 ring-indigo-400/30 transition-all duration-300 hover:scale-105 hover:shadow-[0_0_20px_#6366f1] flex items-center gap-2">
        {reload_icon} Voir une autre expression
      </button>
    </form>

    <footer class="mt-8 text-center text-sm text-gray-500 tracking-wider opacity-70 select-none">
      MARTIN. 2025
    </footer>
  </div>
</div>
"""

ERROR_TEMPLATE = """
<div class="min-h-screen flex items-center justify-center bg-red-900 text-red-400 font-semibold p-6 text-center">
  Erreur de chargement : {message}
</div>
"""


class OutputSurface:
    """The single mount point pages are installed into."""

    def __init__(self) -> None:
        self.html = ""
        self._handlers: Dict[str, Callable[[], object]] = {}

    def replace(self, html: str,
                handlers: Optional[Dict[str, Callable[[], object]]] = None) -> None:
        self.html = html
        self._handlers = dict(handlers or {})

    def click(self, control_id: str) -> bool:
        """Fire the handler bound to `control_id`; False if the page has none."""
        handler = self._handlers.get(control_id)
        if handler is None:
            return False
        handler()
        return True

    def text(self) -> str:
        lines = BeautifulSoup(self.html, "html.parser").get_text("\n").splitlines()
        text = "\n".join(line.strip() for line in lines)
        return re.sub(r"\n{3,}", "\n\n", text).strip()


def create_icon(icon: str, class_name: str) -> str:
    """Inline SVG for one of the icon constants above."""
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" '
        'viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" '
        f'stroke-linecap="round" stroke-linejoin="round" class="{escape(class_name)}">'
        f"{icon}</svg>"
    )


def render_expression(surface: OutputSurface, title: str, raw_html: str,
                      on_reload: Callable[[], object]) -> None:
    definition = clean_definition_html(raw_html)
    page = PAGE_TEMPLATE.format(
        title_icon=create_icon(BOOK_OPEN, TITLE_ICON_CLASS),
        title=escape(title),
        definition=definition,
        reload_id=RELOAD_CONTROL,
        reload_icon=create_icon(REFRESH_CCW, RELOAD_ICON_CLASS),
    )
    surface.replace(page, {RELOAD_CONTROL: on_reload})
    logger.info("Rendered %r", title)


def render_error(surface: OutputSurface, error: BaseException) -> None:
    surface.replace(ERROR_TEMPLATE.format(message=escape(str(error))))
