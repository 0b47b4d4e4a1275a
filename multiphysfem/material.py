"""Materials with constant or temperature-dependent properties."""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Union


class MaterialError(RuntimeError):
    """A material property is missing or cannot be evaluated."""


class Material:
    """Named set of properties, each a constant or a model's parameters."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._properties: Dict[str, Union[float, Dict[str, float]]] = {}

    def set_property(self, name: str, value: float) -> None:
        self._properties[name] = float(value)

    def set_temperature_dependent(self, name: str, params: Mapping[str, float]) -> None:
        self._properties[name] = dict(params)

    def get(self, name: str, temperature: Optional[float] = None) -> float:
        """Value of a property, evaluated at ``temperature`` if it has a model."""
        try:
            prop = self._properties[name]
        except KeyError:
            raise MaterialError(f"Material property '{name}' not found.") from None

        if not isinstance(prop, dict):
            return prop
        if temperature is None:
            raise MaterialError(f"Property '{name}' is not a constant value.")

        if name == "electrical_conductivity":
            try:
                sigma_ref = prop["sigma_ref"]
                alpha = prop["alpha"]
                t_ref = prop["T_ref"]
            except KeyError:
                raise MaterialError(
                    f"Missing parameter in model for property '{name}'."
                ) from None
            return sigma_ref * (1 + alpha * (temperature - t_ref))

        raise MaterialError(f"Unknown temperature-dependent model for property: {name}")