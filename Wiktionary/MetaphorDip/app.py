#!/usr/bin/env python3
"""
Flask wrapper for the metaphors lucky-dip.

Routes:
  • GET  /           – HTML page with a freshly picked expression
  • POST /reload     – the page's reload button
  • GET  /api/random – JSON -> {title, definition, url}
"""

from typing import Optional

from flask import Flask, jsonify, render_template
from markupsafe import Markup

from definition_cleaner import clean_definition_html
from metaphors_lucky_dip import (AppState, LuckyDipError, RELOAD_CONTROL, entry_url,
                                 pick_random_expression, show_random_expression)


def create_app(state: Optional[AppState] = None) -> Flask:
    app = Flask(__name__)
    app.config["DIP_STATE"] = state or AppState()

    def _page(status):
        st = app.config["DIP_STATE"]
        return render_template("index.html", content=Markup(st.surface.html)), status

    @app.get("/")
    def index():
        show_random_expression(app.config["DIP_STATE"])
        return _page(200)

    @app.post("/reload")
    def reload():
        st = app.config["DIP_STATE"]
        # the error layout has no reload button, start over in that case
        if not st.surface.click(RELOAD_CONTROL):
            show_random_expression(st)
        return _page(200)

    @app.get("/api/random")
    def api_random():
        try:
            title, raw_html = pick_random_expression(app.config["DIP_STATE"])
        except (LuckyDipError, LookupError) as exc:
            app.logger.error("api_random failed: %s", exc)
            return jsonify(error=str(exc)), 502
        return jsonify(
            title      = title,
            definition = clean_definition_html(raw_html),
            url        = entry_url(title),
        )

    return app


app = create_app()

if __name__ == "__main__":
    app.run(debug=True)   # turn off debug in production
