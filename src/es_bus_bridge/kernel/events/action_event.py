"""Kernel events – ActionEvent, the mutable context passed to hook listeners."""
from __future__ import annotations

from typing import Any


class ActionEvent:
    """Per-emission bag of named parameters.

    Listeners read and overwrite parameters in turn; whatever is left after
    the last listener returns is what the emitting host observes.
    """

    def __init__(self, name: str, target: Any = None, params: dict[str, Any] | None = None) -> None:
        self._name = name
        self._target = target
        self._params: dict[str, Any] = dict(params or {})
        self._stop_propagation = False

    @property
    def name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        self._name = name

    @property
    def target(self) -> Any:
        return self._target

    def set_target(self, target: Any) -> None:
        self._target = target

    def params(self) -> dict[str, Any]:
        return dict(self._params)

    def param(self, name: str, default: Any = None) -> Any:
        return self._params.get(name, default)

    def set_param(self, name: str, value: Any) -> None:
        self._params[name] = value

    def set_params(self, params: dict[str, Any]) -> None:
        self._params = dict(params)

    def stop_propagation(self, flag: bool = True) -> None:
        self._stop_propagation = flag

    def propagation_is_stopped(self) -> bool:
        return self._stop_propagation

    def __repr__(self) -> str:
        return f"ActionEvent(name={self._name!r}, params={sorted(self._params)!r})"


__all__ = ["ActionEvent"]
