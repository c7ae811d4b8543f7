"""Root page: every stored file with links, plus an upload form."""

from html import escape
from urllib.parse import quote

from app.domain.entities.file_item import FileItem


def _file_row(item: FileItem, fs_prefix: str) -> str:
    href = f"/{fs_prefix}/{quote(item.path)}"
    return (
        "<tr>"
        f"<td>{item.id}</td>"
        f'<td><a href="{escape(href)}">{escape(item.path)}</a></td>'
        f"<td>{item.size_bytes}</td>"
        "</tr>"
    )


def render_file_listing(app_name: str, files: list[FileItem], fs_prefix: str) -> str:
    """Return HTML listing files (id, linked path, size) and a POST form for new uploads."""
    if files:
        rows = "\n".join(_file_row(item, fs_prefix) for item in files)
    else:
        rows = '<tr><td colspan="3" class="empty">No files stored yet.</td></tr>'
    title = escape(app_name)
    return f"""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        * {{ box-sizing: border-box; }}
        body {{
            font-family: system-ui, sans-serif;
            margin: 0;
            background: #000;
            color: #e0e0e0;
            padding: 2rem 1rem;
        }}
        .wrap {{ max-width: 720px; margin: 0 auto; }}
        h1 {{ font-weight: 600; color: #fff; margin: 0 0 1.5rem 0; }}
        table {{ width: 100%; border-collapse: collapse; margin-bottom: 2rem; }}
        th, td {{ text-align: left; padding: 0.5rem 0.75rem; border-bottom: 1px solid #1a1a1a; }}
        th {{ font-size: 0.75rem; text-transform: uppercase; letter-spacing: 0.08em; color: #666; }}
        td.empty {{ color: #666; }}
        a {{ color: #fff; }}
        form {{
            background: #0c0c0c;
            border: 1px solid #1a1a1a;
            padding: 1.25rem 1.5rem;
        }}
        label {{ display: block; color: #999; margin-bottom: 0.75rem; }}
        input[type=text] {{ width: 100%; padding: 0.4rem; background: #111; color: #e0e0e0; border: 1px solid #333; }}
    </style>
</head>
<body>
    <div class="wrap">
        <h1>{title}</h1>
        <table>
            <thead><tr><th>ID</th><th>Path</th><th>Bytes</th></tr></thead>
            <tbody>
{rows}
            </tbody>
        </table>
        <form id="upload" method="post" enctype="multipart/form-data">
            <label>Path <input type="text" id="upload-path" placeholder="docs/readme.txt" required></label>
            <label>File <input type="file" name="datafile" required></label>
            <button type="submit">Upload</button>
        </form>
    </div>
    <script>
        (function () {{
            var form = document.getElementById('upload');
            form.addEventListener('submit', function () {{
                var path = document.getElementById('upload-path').value.replace(/^\\/+/, '');
                form.action = '/{escape(fs_prefix)}/' + encodeURI(path);
            }});
        }})();
    </script>
</body>
</html>
""".strip()
