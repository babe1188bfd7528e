"""
recommendations.py
Sanity warnings on the inputs of a CWQI calculation and follow-up
recommendations drawn from its result.
"""

from utils.parameters import CATEGORY_HEALTH

MIN_PARAMETERS = 4
MAX_PARAMETERS = 20
MIN_TESTS = 4


def validate_parameters(parameters, min_parameters=MIN_PARAMETERS,
                        max_parameters=MAX_PARAMETERS, min_tests=MIN_TESTS) -> list:
    """CCME guidance on how many parameters and tests make a meaningful index."""
    parameters = list(parameters)
    unique = len({p.parameter_name for p in parameters})
    warnings = []

    if unique < min_parameters:
        warnings.append(
            f"Only {unique} unique parameters found. CCME recommends minimum {min_parameters} parameters."
        )
    if unique > max_parameters:
        warnings.append(
            f"{unique} parameters found. CCME recommends maximum {max_parameters} parameters to avoid diluting results."
        )
    if len(parameters) < min_tests:
        warnings.append(
            f"Only {len(parameters)} samples found. CCME recommends minimum {min_tests} samples."
        )
    return warnings


def generate_recommendations(result, warnings=None) -> list:
    recommendations = []

    if warnings:
        recommendations.append({
            "type": "methodology",
            "message": "Consider addressing data collection limitations for more reliable CWQI scores.",
            "details": list(warnings),
        })

    if result.score < 65:
        recommendations.append({
            "type": "action",
            "message": "Water quality issues detected. Consider immediate assessment and remediation.",
            "priority": "high",
        })
    elif result.score < 80:
        recommendations.append({
            "type": "monitoring",
            "message": "Consider increased monitoring frequency and targeted parameter analysis.",
            "priority": "medium",
        })

    if result.failed_parameters > 0:
        recommendations.append({
            "type": "investigation",
            "message": f"Focus investigation on: {', '.join(result.failed_parameter_names)}",
            "priority": "high",
        })

    return recommendations


def category_summary(result, category: str) -> str:
    is_health = category == CATEGORY_HEALTH
    if result.failed_tests == 0:
        kind = "health-related" if is_health else "aesthetic and operational"
        return f"All {kind} parameters are within acceptable limits."
    if is_health:
        return ("Some health-related parameters exceed safe limits. "
                "We strongly recommend consulting with a water treatment professional.")
    return ("Some parameters exceed recommended limits. "
            "These may affect taste, odor, or water system performance.")
