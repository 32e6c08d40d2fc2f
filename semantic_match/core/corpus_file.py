"""
Durable record of the trained sentence corpus.

Only the sentences are stored, as a JSON array of strings. Vectors are
recomputed from the sentences when the corpus is rehydrated.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from .exceptions import CorpusFileError


class SentenceListStore:
    """Reads and writes the persisted sentence list."""

    def __init__(self, path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, sentences: Sequence[str]) -> None:
        """Overwrite the persisted list with ``sentences``.

        The list is written to a temporary file in the same directory and moved
        into place, so readers never observe a partially written file.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".training-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(list(sentences), f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def load(self) -> Optional[List[str]]:
        """Read the persisted list.

        Returns:
            The sentences, or None if nothing has been persisted

        Raises:
            CorpusFileError: the file is not a JSON array of strings
        """
        if not self.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CorpusFileError(f"Cannot read training file {self.path}: {e}") from e

        if not isinstance(data, list) or not all(isinstance(s, str) for s in data):
            raise CorpusFileError(f"Training file {self.path} is not a JSON array of strings")

        return data

    def delete(self) -> None:
        """Remove the persisted list if present."""
        if self.exists():
            self.path.unlink()
