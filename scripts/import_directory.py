"""Load a local directory tree into the configured datastore.

Every regular file becomes one stored file whose path is its location
relative to the directory (forward slashes), optionally under a prefix.

Usage:
    uv run python -m scripts.import_directory <directory> [path_prefix]

Uses DATABASE_URL and the other settings from the environment / .env.
"""

import asyncio
import sys
from pathlib import Path

from app.application.use_cases.files import FileService
from app.core.config import get_settings
from app.infrastructure.adapters import AdapterFactory
from app.infrastructure.persistence.repositories import FILE_ITEM_MODEL, FileItemRepository


def iter_files(root: Path) -> list[tuple[str, Path]]:
    """Return (stored path, file) pairs for every regular file under root, sorted."""
    return sorted(
        (p.relative_to(root).as_posix(), p) for p in root.rglob("*") if p.is_file()
    )


async def main() -> None:
    """Upload each file under the directory given on the command line."""
    if len(sys.argv) < 2:
        print(
            "Usage: uv run python -m scripts.import_directory <directory> [path_prefix]",
            file=sys.stderr,
        )
        sys.exit(1)
    root = Path(sys.argv[1]).expanduser().resolve()
    prefix = sys.argv[2].strip("/") if len(sys.argv) > 2 else ""
    if not root.is_dir():
        print(f"Not a directory: {root}", file=sys.stderr)
        sys.exit(1)

    settings = get_settings()
    adapter = AdapterFactory.create_adapter(settings)
    try:
        await adapter.auto_migrate(FILE_ITEM_MODEL)
        service = FileService(FileItemRepository(adapter))
        count = 0
        for relative, file_path in iter_files(root):
            stored_path = f"{prefix}/{relative}" if prefix else relative
            item = await service.upload_file(stored_path, file_path.read_bytes())
            print(f"{item.id}\t{stored_path}")
            count += 1
        print(f"Imported {count} file(s) via {type(adapter).__name__}")
    finally:
        await adapter.close()


if __name__ == "__main__":
    asyncio.run(main())
