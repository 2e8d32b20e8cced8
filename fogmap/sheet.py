from __future__ import annotations

from html import escape

from PyQt6.QtCore import QUrl

from .catalog import POI

LINK_SCHEME = "fogmap"


def poi_link(poi_id: str) -> str:
    return f"{LINK_SCHEME}://poi/{poi_id}"


def parse_poi_link(link: str) -> str | None:
    """Return the POI id of a ``fogmap://poi/<id>`` link (or a bare ``#id``)."""
    if link.startswith("#"):
        return link[1:] or None
    url = QUrl(link)
    if url.scheme() != LINK_SCHEME or url.host() != "poi":
        return None
    pid = url.path().strip("/")
    return pid or None


def sheet_html(p: POI) -> str:
    sub = " • ".join(x for x in (p.type, p.level) if x)
    parts = [f"<h2>{escape(p.name)}</h2>"]
    if sub:
        parts.append(f'<div style="color:#888">{escape(sub)}</div>')
    if p.image:
        parts.append(f'<p><img src="{escape(QUrl.fromLocalFile(p.image).toString())}" width="260"></p>')
    parts.append(f"<p>{escape(p.summary)}</p>")
    if p.tags:
        parts.append("<p>" + " ".join(f"<b>#{escape(t)}</b>" for t in p.tags) + "</p>")
    return "\n".join(parts)
