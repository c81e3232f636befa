from unittest.mock import MagicMock

from presenter import (BOOK_OPEN, REFRESH_CCW, RELOAD_CONTROL, OutputSurface,
                       create_icon, render_error, render_expression)


def test_create_icon_is_deterministic_and_carries_the_class():
    icon = create_icon(BOOK_OPEN, "w-6 h-6")

    assert icon == create_icon(BOOK_OPEN, "w-6 h-6")
    assert icon.startswith("<svg")
    assert 'class="w-6 h-6"' in icon
    assert BOOK_OPEN in icon
    assert icon != create_icon(REFRESH_CCW, "w-6 h-6")


def test_render_expression_installs_page_and_reload_handler():
    surface = OutputSurface()
    on_reload = MagicMock()

    render_expression(surface, "белая ворона",
                      '<div class="mw-parser-output"><sup>1</sup><p>Un original.</p></div>',
                      on_reload)

    assert "Expression Russe" in surface.html
    assert "белая ворона" in surface.html
    assert "<p>Un original.</p>" in surface.html
    assert "<sup>" not in surface.html
    assert 'id="reload"' in surface.html
    assert surface.html.count("<svg") == 2

    assert surface.click(RELOAD_CONTROL)
    on_reload.assert_called_once_with()


def test_title_is_escaped():
    surface = OutputSurface()
    render_expression(surface, "<script>x</script>", "<p>def</p>", MagicMock())

    assert "<script>" not in surface.html
    assert "&lt;script&gt;x&lt;/script&gt;" in surface.html


def test_new_render_replaces_previous_handler():
    surface = OutputSurface()
    first, second = MagicMock(), MagicMock()
    render_expression(surface, "A", "<p>a</p>", first)
    render_expression(surface, "B", "<p>b</p>", second)

    surface.click(RELOAD_CONTROL)

    first.assert_not_called()
    second.assert_called_once_with()
    assert "<p>a</p>" not in surface.html


def test_error_layout_replaces_page_and_drops_controls():
    surface = OutputSurface()
    on_reload = MagicMock()
    render_expression(surface, "A", "<p>a</p>", on_reload)

    render_error(surface, RuntimeError("réseau <indisponible>"))

    assert "Erreur de chargement : réseau &lt;indisponible&gt;" in surface.html
    assert "Expression Russe" not in surface.html
    assert not surface.click(RELOAD_CONTROL)
    on_reload.assert_not_called()


def test_surface_text_is_readable():
    surface = OutputSurface()
    render_expression(surface, "белая ворона", "<p>Un   original.</p>", MagicMock())

    text = surface.text()

    assert "Expression Russe" in text
    assert "белая ворона" in text
    assert "Voir une autre expression" in text
    assert "<" not in text
    assert "\n\n\n" not in text
