# Engine settings loader
# Reads an optional YAML file and overlays it on the defaults in utils/parameters.py.
#
# Example:
#   nse_divisor: failed_tests
#   road_salt:
#     flag_chloride_without_ratio: true
#   coliform:
#     ignore_negated_detection: true
#   roles:
#     minimum_guideline:
#       contains: ["dissolved oxygen", "oxygen"]
#
# A role entry is merged key by key into the default role: the example above
# replaces the "contains" list and keeps the default "do" token.

from pathlib import Path

import yaml

from utils.parameters import (
    FACTOR_NORMALIZER,
    NSE_DIVISOR_SINGLE_SAMPLE,
    PARAMETER_ROLES,
    ROAD_SALT_CHLORIDE_THRESHOLD,
    ROAD_SALT_RATIO_THRESHOLD,
    EngineSettings,
    build_roles,
)


def load_settings(path=None) -> EngineSettings:
    """Loads settings from YAML. No path means the defaults."""
    if path is None:
        return EngineSettings()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Settings file must hold a mapping: {path}")

    return settings_from_dict(raw)


def settings_from_dict(raw: dict) -> EngineSettings:
    road_salt = raw.get("road_salt", {}) or {}
    coliform = raw.get("coliform", {}) or {}

    roles_table = {k: dict(v) for k, v in PARAMETER_ROLES.items()}
    for role, entry in (raw.get("roles", {}) or {}).items():
        if not isinstance(entry, dict):
            raise ValueError(f"Role '{role}' must be a mapping")
        merged = dict(roles_table.get(role, {}))
        merged.update(entry)
        roles_table[role] = merged

    return EngineSettings(
        nse_divisor=raw.get("nse_divisor", NSE_DIVISOR_SINGLE_SAMPLE),
        flag_chloride_without_ratio=bool(road_salt.get("flag_chloride_without_ratio", False)),
        ignore_negated_detection=bool(coliform.get("ignore_negated_detection", False)),
        factor_normalizer=float(raw.get("factor_normalizer", FACTOR_NORMALIZER)),
        road_salt_chloride_threshold=float(road_salt.get("chloride_threshold", ROAD_SALT_CHLORIDE_THRESHOLD)),
        road_salt_ratio_threshold=float(road_salt.get("ratio_threshold", ROAD_SALT_RATIO_THRESHOLD)),
        roles=build_roles(roles_table),
    )
