from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional


class Selectable:
    """Exclusive selection over a fixed set of option ids.

    At most one option is active; with a non-empty set the first option
    starts active.
    """

    def __init__(
        self,
        options: Iterable[str],
        on_change: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._options: List[str] = list(dict.fromkeys(options))
        self.on_change = on_change
        self._active: Optional[str] = self._options[0] if self._options else None

    @property
    def options(self) -> List[str]:
        return list(self._options)

    @property
    def active(self) -> Optional[str]:
        return self._active

    def state(self) -> Dict[str, bool]:
        return {o: o == self._active for o in self._options}

    def select(self, option: str) -> None:
        if option not in self._options:
            raise KeyError(option)
        self._active = option
        if self.on_change is not None:
            self.on_change(option)


__all__ = ["Selectable"]
