"""Font repository: resolves short font names to TrueType files.

Resolution order for ``get_font_file(name)``:

1. fonts registered on the instance with :meth:`FontRepository.register`;
2. aliases from settings (``mono`` -> ``DejaVuSansMono.ttf``); an alias value
   that is an existing path is used as-is, otherwise it is searched for;
3. ``<name>.ttf`` (case-insensitive) inside each configured search dir.

Unresolvable names raise :class:`UnknownFontError`; there is no silent
fallback to a default face.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pencanvas.core.errors import UnknownFontError
from pencanvas.settings.schema import Settings
from pencanvas.settings.store import SettingsStore

logger = logging.getLogger(__name__)

TTF_SUFFIX = ".ttf"


def is_font_file(value: str) -> bool:
    """True when *value* already names a TrueType file."""
    return str(value).lower().endswith(TTF_SUFFIX)


class FontRepository:
    def __init__(
        self,
        search_dirs: Optional[Iterable[str | Path]] = None,
        aliases: Optional[Dict[str, str]] = None,
    ) -> None:
        self._dirs: List[Path] = [Path(d).expanduser() for d in (search_dirs or [])]
        self._aliases: Dict[str, str] = dict(aliases or {})
        self._fonts: Dict[str, str] = {}

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "FontRepository":
        s = settings if settings is not None else SettingsStore.load()
        return cls(search_dirs=s.font_dirs, aliases=s.font_aliases)

    @property
    def search_dirs(self) -> List[Path]:
        return list(self._dirs)

    def add_search_dir(self, path: str | Path) -> "FontRepository":
        self._dirs.append(Path(path).expanduser())
        return self

    def register(self, name: str, path: str | Path) -> "FontRepository":
        """Bind *name* to a font file; the file must exist."""
        p = Path(path).expanduser()
        if not p.is_file():
            raise UnknownFontError(f"Font file {str(p)!r} does not exist")
        self._fonts[name] = str(p)
        return self

    def names(self) -> List[str]:
        """Registered and aliased names (search dirs are not enumerated)."""
        return sorted(set(self._fonts) | set(self._aliases))

    def get_font_file(self, name: str) -> str:
        registered = self._fonts.get(name)
        if registered is not None:
            return registered

        target = self._aliases.get(name)
        if target is not None:
            direct = Path(target).expanduser()
            if direct.is_absolute() and direct.is_file():
                return str(direct)
            found = self._search(target)
        else:
            found = self._search(name + TTF_SUFFIX)

        if found is None:
            raise UnknownFontError(f"Font {name!r} is not available")
        logger.debug("resolved font %s -> %s", name, found)
        return found

    def _search(self, filename: str) -> str | None:
        wanted = filename.lower()
        for d in self._dirs:
            if not d.is_dir():
                continue
            exact = d / filename
            if exact.is_file():
                return str(exact)
            for candidate in d.iterdir():
                if candidate.name.lower() == wanted and candidate.is_file():
                    return str(candidate)
        return None
