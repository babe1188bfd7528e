"""
parameters.py
Defines the parameter roles, status strings, rating bands and formula
constants for the CCME Water Quality Index (CWQI) engine.
"""

from dataclasses import dataclass, field

# Row-level parameter types assigned by the lab data store
PARAMETER_TYPE_MAC = "MAC"
PARAMETER_TYPE_AO = "AO"
PARAMETER_TYPE_GENERAL = "GENERAL"
PARAMETER_TYPE_HYBRID = "Hybrid"

CATEGORY_HEALTH = "health"
CATEGORY_AO = "ao"

# Status strings produced by the upstream compliance view
EXCEEDS_MAC = "EXCEEDS_MAC"
MEETS_MAC = "MEETS_MAC"
EXCEEDS_AO = "EXCEEDS_AO"
MEETS_AO = "MEETS_AO"
AO_RANGE_VALUE = "AO_RANGE_VALUE"
WARNING = "WARNING"

# Name heuristics, one entry per role.
#   contains: case-insensitive substrings, any one matches
#   tokens:   whole words, any one matches
#   excludes: substrings that veto a match
PARAMETER_ROLES = {
    "bacteriological": {"contains": ["coliform", "bacteria", "e. coli", "e.coli"]},
    "coliform": {"contains": ["coliform", "e. coli", "e.coli"]},
    "minimum_guideline": {"contains": ["dissolved oxygen"], "tokens": ["do"]},
    "chloride": {"contains": ["chloride"], "excludes": ["bromide"]},
    "bromide": {"contains": ["bromide"]},
}

DETECTED_MARKER = "Detected"
NOT_DETECTED_MARKERS = ("not detected", "non-detected", "non detected")

# F3 normalized sum of excursions divisor
NSE_DIVISOR_SINGLE_SAMPLE = "single_sample"  # divide by 1, one sample per report
NSE_DIVISOR_FAILED_TESTS = "failed_tests"  # divide by the number of failed rows
NSE_DIVISORS = (NSE_DIVISOR_SINGLE_SAMPLE, NSE_DIVISOR_FAILED_TESTS)

FACTOR_NORMALIZER = 1.732  # sqrt(3), keeps the three-factor vector on a 0-100 scale
CWQI_SCALE = 100

ROAD_SALT_CHLORIDE_THRESHOLD = 100.0  # mg/L
ROAD_SALT_RATIO_THRESHOLD = 1000
ROAD_SALT_DETECTED = "Road Salt Impact Detected"
ROAD_SALT_NOT_DETECTED = "No Road Salt Impact"

# (lower bound, name, colour class, description), evaluated top-down
RATING_BANDS = [
    (95, "Excellent", "text-green-600", "Excellent water quality with virtually no concerns"),
    (89, "Very Good", "text-teal-600", "Very good water quality with minimal issues"),
    (80, "Good", "text-blue-600", "Good water quality with minor concerns"),
    (65, "Fair", "text-yellow-600", "Fair water quality - some parameters exceed guidelines"),
    (45, "Marginal", "text-orange-600", "Marginal water quality - treatment may be needed"),
]
LOWEST_RATING = ("Poor", "text-red-600", "Poor water quality - immediate action recommended")


@dataclass(frozen=True)
class ParameterRole:
    """Substring/token matcher for one parameter role."""
    name: str
    contains: tuple = ()
    tokens: tuple = ()
    excludes: tuple = ()

    def matches(self, parameter_name) -> bool:
        if not isinstance(parameter_name, str):
            return False
        low = parameter_name.lower()
        if any(ex in low for ex in self.excludes):
            return False
        if any(sub in low for sub in self.contains):
            return True
        if self.tokens:
            words = set(low.replace("(", " ").replace(")", " ").replace(",", " ").split())
            return any(tok in words for tok in self.tokens)
        return False


def build_roles(table: dict) -> dict:
    """Turns a {role: {contains, tokens, excludes}} table into ParameterRole objects."""
    roles = {}
    for role, entry in table.items():
        if not isinstance(entry, dict):
            raise ValueError(f"Role '{role}' must be a mapping, got {type(entry).__name__}")
        roles[role] = ParameterRole(
            name=role,
            contains=tuple(s.lower() for s in entry.get("contains", [])),
            tokens=tuple(s.lower() for s in entry.get("tokens", [])),
            excludes=tuple(s.lower() for s in entry.get("excludes", [])),
        )
    return roles


@dataclass(frozen=True)
class EngineSettings:
    """Tunable knobs of the CWQI engine. Defaults reproduce the dashboard numbers."""
    nse_divisor: str = NSE_DIVISOR_SINGLE_SAMPLE
    flag_chloride_without_ratio: bool = False
    # off: any display containing "Detected" triggers, "Not Detected" included
    ignore_negated_detection: bool = False
    factor_normalizer: float = FACTOR_NORMALIZER
    road_salt_chloride_threshold: float = ROAD_SALT_CHLORIDE_THRESHOLD
    road_salt_ratio_threshold: float = ROAD_SALT_RATIO_THRESHOLD
    roles: dict = field(default_factory=lambda: build_roles(PARAMETER_ROLES))

    def __post_init__(self):
        if self.nse_divisor not in NSE_DIVISORS:
            raise ValueError(
                f"Unknown nse_divisor '{self.nse_divisor}', expected one of {NSE_DIVISORS}"
            )
        missing = set(PARAMETER_ROLES) - set(self.roles)
        if missing:
            raise ValueError(f"Role table is missing: {sorted(missing)}")

    def role(self, name: str) -> ParameterRole:
        return self.roles[name]


DEFAULT_SETTINGS = EngineSettings()
