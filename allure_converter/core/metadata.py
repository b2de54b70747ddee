import platform
from typing import Any, Dict, List

from allure_converter.core.models import EnvironmentContext

# Defect classification rules shown on the Allure "Categories" tab
CATEGORIES = [
    {
        "name": "Product Defects",
        "matchedStatuses": ["failed"],
        "messageRegex": ".*Expected.*",
    },
    {
        "name": "Test Defects",
        "matchedStatuses": ["broken"],
        "messageRegex": ".*",
    },
    {
        "name": "Skipped Tests",
        "matchedStatuses": ["skipped"],
    },
]


def build_environment(context: EnvironmentContext) -> Dict[str, str]:
    """Key/value pairs for environment.properties, in display order."""
    return {
        "Browser": context.browser,
        "Environment": context.environment_name,
        "Base_URL": context.base_url,
        "Python": platform.python_version(),
    }


def render_properties(environment: Dict[str, str]) -> str:
    return "\n".join(f"{key}={value}" for key, value in environment.items())


def build_categories() -> List[Dict[str, Any]]:
    # Copies, so CATEGORIES itself is never mutated
    return [dict(category, matchedStatuses=list(category["matchedStatuses"])) for category in CATEGORIES]
