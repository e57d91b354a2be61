# goal_scraper/storage/component_store.py
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import List, Union

from loguru import logger
from pydantic import BaseModel

QUOTED_LINE_RE = re.compile(r'"([^"]+)"')
INDENT_RE = re.compile(r'\n([ \t]*)"')
DEFAULT_INDENT = "  "


class MalformedArtifactError(Exception):
    """Exception raised when the component file has no goal array to update."""

    pass


class GoalBlockDocument(BaseModel):
    """A component file split around its goal array literal.

    Everything outside ``opener`` .. ``closer`` is kept byte for byte.
    """

    prefix: str
    opener: str  # e.g. "const rawData = ["
    body: str
    closer: str  # "];"
    suffix: str
    indent: str = DEFAULT_INDENT

    @property
    def lines(self) -> List[str]:
        return QUOTED_LINE_RE.findall(self.body)

    def render(self, lines: List[str]) -> str:
        if lines:
            body = "\n" + ",\n".join(f'{self.indent}"{line}"' for line in lines) + ",\n"
        else:
            body = "\n"
        return f"{self.prefix}{self.opener}{body}{self.closer}{self.suffix}"

    def original(self) -> str:
        return f"{self.prefix}{self.opener}{self.body}{self.closer}{self.suffix}"


class ComponentStore:
    """Reads and rewrites the goal lines kept in a site component file."""

    def __init__(self, path: Union[str, Path], array_name: str = "rawData"):
        self.path = Path(path)
        self.array_name = array_name
        self._block_re = re.compile(
            rf"(const\s+{re.escape(array_name)}\s*=\s*\[)(.*?)(\];)", re.DOTALL
        )

    def load(self) -> GoalBlockDocument:
        try:
            # newline="" keeps CRLF files intact on rewrite
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                content = f.read()
        except FileNotFoundError as e:
            raise MalformedArtifactError(f"Component file not found: {self.path}") from e

        match = self._block_re.search(content)
        if not match:
            raise MalformedArtifactError(
                f"Could not find {self.array_name} array in {self.path}"
            )

        indent_match = INDENT_RE.search(match.group(2))
        return GoalBlockDocument(
            prefix=content[: match.start()],
            opener=match.group(1),
            body=match.group(2),
            closer=match.group(3),
            suffix=content[match.end() :],
            indent=indent_match.group(1) if indent_match else DEFAULT_INDENT,
        )

    def read_existing_goals(self) -> List[str]:
        goals = self.load().lines
        logger.debug(f"Read {len(goals)} goal lines from {self.path}")
        return goals

    def update(self, all_goals: List[str]) -> bool:
        """Writes the goal lines into the file.

        Returns:
            True if the file changed, False if it already held these lines.
        """
        document = self.load()
        current = document.original()
        new_content = document.render(all_goals)
        if new_content == current:
            logger.info(f"{self.path} already up to date")
            return False

        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(new_content)
            shutil.copymode(self.path, tmp_path)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.success(f"Updated {self.path}")
        return True
