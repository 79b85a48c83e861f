"""Embeddable widget resource assembled from the built front-end bundle"""

from pathlib import Path

WIDGET_URI = "ui://widget/mortgagebroker-prequal.html"
WIDGET_MIME_TYPE = "text/html+skybridge"
WIDGET_JS = "mortgagebroker-widget.js"
WIDGET_CSS = "mortgagebroker-widget.css"


def load_widget_template(widget_dir: str | Path) -> str:
    """
    Inline the widget bundle into a single HTML fragment.

    Raises:
        FileNotFoundError: The JavaScript bundle has not been built
    """
    widget_dir = Path(widget_dir)
    js_path = widget_dir / WIDGET_JS
    css_path = widget_dir / WIDGET_CSS

    if not js_path.exists():
        raise FileNotFoundError(
            f"Missing widget bundle at {js_path}. Build the widget before serving it."
        )

    js = js_path.read_text(encoding="utf-8")
    css = css_path.read_text(encoding="utf-8") if css_path.exists() else ""

    parts = ['<div id="mortgagebroker-root"></div>']
    if css:
        parts.append(f"<style>{css}</style>")
    parts.append(f'<script type="module">\n{js}\n</script>')
    return "\n".join(parts)


def widget_meta(widget_domain: str, portal_origin: str) -> dict:
    """Host metadata advertised alongside the widget resource"""
    return {
        "openai/widgetPrefersBorder": True,
        "openai/widgetDomain": widget_domain,
        "openai/widgetCSP": {
            "connect_domains": [portal_origin],
            "resource_domains": [
                portal_origin,
                "https://fonts.googleapis.com",
                "https://fonts.gstatic.com",
            ],
        },
    }
