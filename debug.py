# debug.py
from __future__ import annotations
import logging
from typing import Dict

COMPONENTS = (
    "alphabet",
    "permutation",
    "rotor",
    "stepping",
    "signal",
    "setup",
    "config",
)


class Debug:
    _root_configured: bool = False          # class-level guard

    def __init__(self) -> None:
        self.logger = logging.getLogger("ENIGMA")
        self.enabled = True        # global switch

        # default component map
        self.components: Dict[str, bool] = {c: False for c in COMPONENTS}

    @classmethod
    def configure(cls, *, log_to: str | None = None) -> None:
        """
        Install the stderr handler (and a file handler when `log_to` is
        given).  Only the first call has any effect.
        """
        if cls._root_configured:
            return
        handlers: list[logging.Handler] = [logging.StreamHandler()]
        if log_to:
            handlers.append(logging.FileHandler(log_to, encoding="utf-8"))

        logging.basicConfig(
            level=logging.DEBUG,
            format="[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=handlers,
        )
        cls._root_configured = True

    # ── logging API ──────────────────────────────────────────────
    def active(self, component: str) -> bool:
        return self.enabled and self.components.get(component, False)

    def log(self, component: str, message: str) -> None:
        if self.active(component):
            self.logger.debug("[%s] %s", component.upper(), message)

    # ── component toggles ────────────────────────────────────────
    def enable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            self.components[c] = True

    def disable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            self.components[c] = False

    def toggle(self, component: str) -> None:
        self._require(component)
        self.components[component] = not self.components[component]

    def toggle_global(self, state: bool) -> None:
        """Switch every component on/off at once."""
        self.enabled = state

    def status(self) -> Dict[str, bool]:
        """Return a *copy* of the current component map."""
        return self.components.copy()

    # ── helpers ──────────────────────────────────────────────────
    def _require(self, component: str) -> None:
        if component not in self.components:
            raise ValueError(f"No such component: {component!r}")

    # nicety for `print(dbg)`
    def __repr__(self) -> str:
        active = [k for k, v in self.components.items() if v]
        return f"<Debug enabled={self.enabled} active={active}>"


# shared by every module so toggles made by the CLI reach all of them
debug = Debug()
