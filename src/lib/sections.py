"""
Section accumulator

Named, append-only output buffers plus the unnamed main buffer. Exactly
one buffer is current at any time and all emitted text goes there.
"""

from typing import Dict, List, Optional


class SectionStore:
    """
    Output buffers for one documentation run

    Example:
        >>> store = SectionStore()
        >>> store.section_switch("api")
        >>> store.write("foo")
        >>> store.section_switch(None)
        >>> store.write("bar")
        >>> store.section_get("api"), store.main
        ('foo', 'bar')
    """

    def __init__(self) -> None:
        self._main: List[str] = []
        self._named: Dict[str, List[str]] = {}
        self.current: Optional[str] = None

    def section_switch(self, name: Optional[str]) -> None:
        """Make name current; None or "" selects the main buffer"""
        self.current = name or None

    def main_select(self) -> None:
        """Make the main buffer current"""
        self.current = None

    def write(self, text: str) -> None:
        """Append text to the current buffer"""
        if not text:
            return
        if self.current is None:
            self._main.append(text)
        else:
            self._named.setdefault(self.current, []).append(text)

    def section_exists(self, name: str) -> bool:
        """Whether anything was ever routed to section name"""
        return name in self._named

    def section_get(self, name: str) -> Optional[str]:
        """Accumulated text of a named section, or None if it never existed"""
        if name not in self._named:
            return None
        return ''.join(self._named[name])

    @property
    def main(self) -> str:
        """Accumulated text of the main buffer"""
        return ''.join(self._main)

    @property
    def names(self) -> List[str]:
        """Names of all named sections, in creation order"""
        return list(self._named)
