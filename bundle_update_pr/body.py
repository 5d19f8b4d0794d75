"""Pull request description for a bundle update."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

HEADER = "**Updated RubyGems:**"
FOOTER = "Powered by [bundle-update-pr](https://pypi.org/project/bundle-update-pr/)"


class Note:
    """Optional free-form note kept in the repository, appended to every PR body."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def read_if_exists(self) -> Optional[str]:
        return self.read() if self.exists() else None


def compose_body(compare_links: Iterable[str], note: Optional[str] = None) -> str:
    """Header, one comparison link per line, footer and the note section if any.

    Links are kept in the order given.
    """
    body = f"{HEADER}\n\n" + "\n".join(compare_links) + f"\n\n{FOOTER}\n"
    if note is not None:
        body += f"\n---\n\n{note}\n"
    return body
