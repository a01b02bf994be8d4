"""Index page rendering."""

import json
from html import escape

from ..models import TraceRecord

_PAGE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{name}</title>
<link rel="stylesheet" href="/.resources/style.css">
</head>
<body>
<header>
<h1>{name} <small>v{version}</small></h1>
<p>{count} trace(s) &middot; <a href="/logs.json">logs.json</a></p>
</header>
{body}
</body>
</html>
"""


def _row(record: TraceRecord) -> str:
    document = record.to_document()
    level = record.level or ""
    return (
        "<tr>"
        f'<td><a href="/logs/{escape(record.id)}.json">{escape(record.id)}</a></td>'
        f"<td>{escape(record.timestamp)}</td>"
        f"<td>{escape(record.host)}</td>"
        f'<td class="level-{escape(level)}">{escape(level)}</td>'
        f"<td><pre>{escape(json.dumps(document, indent=2, ensure_ascii=False))}</pre></td>"
        "</tr>"
    )


def render_index(name: str, version: str, logs: list[TraceRecord]) -> str:
    if logs:
        rows = "\n".join(_row(record) for record in logs)
        body = (
            "<table>\n<thead><tr><th>ID</th><th>Timestamp</th><th>Host</th>"
            f"<th>Level</th><th>Payload</th></tr></thead>\n<tbody>\n{rows}\n</tbody>\n</table>"
        )
    else:
        body = '<p class="empty">No traces recorded yet.</p>'

    return _PAGE.format(
        name=escape(name),
        version=escape(version),
        count=len(logs),
        body=body,
    )
