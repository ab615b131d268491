"""Human-readable formatting of chip features."""

from __future__ import annotations

from collections.abc import Sequence

from sensorsctl.core.model import Feature

KNOWN_KINDS = ("in", "fan", "temp", "curr", "power", "energy", "humidity", "intrusion")

_LIMITS: dict[str, tuple[tuple[str, str], ...]] = {
    "in": (("min", "min"), ("max", "max"), ("lcrit", "crit min"), ("crit", "crit max")),
    "fan": (("min", "min"), ("max", "max")),
    "temp": (
        ("min", "low"),
        ("max", "high"),
        ("max_hyst", "hyst"),
        ("crit", "crit"),
        ("crit_hyst", "crit hyst"),
        ("emergency", "emerg"),
    ),
    "curr": (("min", "min"), ("max", "max"), ("lcrit", "crit min"), ("crit", "crit max")),
    "power": (("max", "max"), ("crit", "crit"), ("cap", "cap")),
    "humidity": (("min", "min"), ("max", "max")),
}


def _to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def _format_value(kind: str, value: float, degree: str) -> str:
    if kind == "temp":
        return f"{value:+.1f}{degree}"
    if kind == "in":
        return f"{value:+.2f} V"
    if kind == "fan":
        return f"{value:4.0f} RPM"
    if kind == "curr":
        return f"{value:+.2f} A"
    if kind == "power":
        return f"{value:.2f} W"
    if kind == "energy":
        return f"{value:.2f} J"
    if kind == "humidity":
        return f"{value:.1f} %RH"
    return f"{value:.2f}"


def is_known_chip(features: Sequence[Feature]) -> bool:
    """A chip is known when the generic printer understands at least one of its features."""
    return any(feature.kind in KNOWN_KINDS for feature in features)


def _reading(feature: Feature) -> float | None:
    if feature.kind == "power" and feature.input is None:
        return feature.values.get("average")
    return feature.input


def generic_lines(features: Sequence[Feature], degree: str, fahrenheit: bool = False) -> list[str]:
    """Format known features as aligned ``label: value (limits)`` lines."""
    shown = [f for f in features if f.kind in KNOWN_KINDS]
    if not shown:
        return []
    width = max(len(f.label) for f in shown) + 1

    lines: list[str] = []
    for feature in shown:
        head = f"{feature.label + ':':<{width}}"
        if feature.kind == "intrusion":
            state = "ALARM" if feature.values.get("alarm") else "OK"
            lines.append(f"{head}  {state}")
            continue

        value = _reading(feature)
        convert = _to_fahrenheit if fahrenheit and feature.kind == "temp" else None
        if value is None:
            text = "N/A"
        else:
            text = _format_value(feature.kind, convert(value) if convert else value, degree)

        limits = []
        for sub, title in _LIMITS.get(feature.kind, ()):
            limit = feature.values.get(sub)
            if limit is None:
                continue
            if convert:
                limit = convert(limit)
            limits.append(f"{title} = {_format_value(feature.kind, limit, degree)}")

        line = f"{head}  {text}"
        if limits:
            line += f"  ({', '.join(limits)})"
        if feature.values.get("alarm"):
            line += "  ALARM"
        lines.append(line)
    return lines


def unknown_lines(features: Sequence[Feature]) -> list[str]:
    """Dump every sub-feature value, without interpretation."""
    lines: list[str] = []
    for feature in features:
        lines.append(f"{feature.name}:")
        for sub, value in sorted(feature.values.items()):
            lines.append(f"  {feature.name}_{sub}: {value:.3f}")
    return lines
