from __future__ import annotations

from typing import List


class RequestBuffer:
    """Mutable text buffer shared by one request's rendering.

    Writes are appended cheaply and joined on demand; substitutions operate
    on the joined text.
    """

    def __init__(self, initial: str = "") -> None:
        self._parts: List[str] = [initial] if initial else []

    def write(self, *chunks: str) -> None:
        for chunk in chunks:
            if chunk:
                self._parts.append(str(chunk))

    def getvalue(self) -> str:
        if len(self._parts) > 1:
            self._parts = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""

    def set(self, text: str) -> None:
        self._parts = [text] if text else []

    def replace_first(self, old: str, new: str) -> bool:
        """Replace the first literal occurrence of ``old``.

        Returns:
            True if ``old`` was found, False if the buffer was left unchanged
        """
        text = self.getvalue()
        pos = text.find(old)
        if not old or pos < 0:
            return False
        self.set(text[:pos] + new + text[pos + len(old):])
        return True

    def __contains__(self, text: str) -> bool:
        return text in self.getvalue()

    def clear(self) -> None:
        self._parts = []

    def __len__(self) -> int:
        return sum(len(p) for p in self._parts)

    def __str__(self) -> str:
        return self.getvalue()

    def __repr__(self) -> str:
        return f"RequestBuffer({self.getvalue()!r})"


__all__ = ["RequestBuffer"]
