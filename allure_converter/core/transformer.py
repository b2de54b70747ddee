import hashlib
import logging
import math
import time
import uuid
from typing import Any, Callable, Dict, List, Optional

from allure_converter.config import CRITICAL_TAGS, FRAMEWORK, HOOK_KEYWORDS, LANGUAGE
from allure_converter.core.metadata import build_categories, build_environment
from allure_converter.core.models import ConversionResult, EnvironmentContext


def ms_now() -> int:
    return int(time.time() * 1000)


def ns_to_ms(duration: Any) -> int:
    """Cucumber durations are nanoseconds. Rounds half up."""
    if not duration:
        return 0
    return int(math.floor(duration / 1e6 + 0.5))


def history_id(feature_name: str, scenario_name: str) -> str:
    return hashlib.md5(f"{feature_name}:{scenario_name}".encode("utf-8")).hexdigest()


def _result(step: Dict[str, Any]) -> Dict[str, Any]:
    return step.get('result') or {}


def _first_line(message: str) -> str:
    return message.split("\n", 1)[0]


class ScenarioTransformer:
    """
    Transforms Cucumber scenarios into Allure result payloads.
    """
    def __init__(
        self,
        language: str = LANGUAGE,
        clock: Callable[[], int] = ms_now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self.language = language
        self.clock = clock
        self.id_factory = id_factory
        self.logger = logging.getLogger("allure_converter.transformer")

    @staticmethod
    def tag_names(scenario: Dict[str, Any]) -> List[str]:
        """Tags may be plain strings or Cucumber's {"name": "@tag", "line": n} objects."""
        names = []
        for tag in scenario.get('tags') or []:
            name = tag.get('name') if isinstance(tag, dict) else tag
            if name:
                names.append(name)
        return names

    @staticmethod
    def derive_status(steps: List[Dict[str, Any]]) -> str:
        statuses = [_result(step).get('status') for step in steps]
        if "failed" in statuses:
            return "failed"
        if "undefined" in statuses:
            return "broken"
        if "skipped" in statuses or "pending" in statuses:
            return "skipped"
        return "passed"

    @staticmethod
    def status_details(steps: List[Dict[str, Any]]) -> Dict[str, str]:
        failed_step = next((s for s in steps if _result(s).get('status') == "failed"), None)
        if failed_step is None:
            return {}
        message = _result(failed_step).get('error_message')
        if not message:
            return {}
        return {"message": _first_line(message), "trace": message}

    @staticmethod
    def total_duration(steps: List[Dict[str, Any]]) -> int:
        # Each step is rounded before summing
        return sum(ns_to_ms(_result(step).get('duration')) for step in steps)

    @staticmethod
    def severity(tags: List[str]) -> str:
        if any(tag in CRITICAL_TAGS for tag in tags):
            return "critical"
        return "normal"

    def labels(self, feature_name: str, scenario_name: str, tags: List[str]) -> List[Dict[str, str]]:
        labels = [
            {"name": "suite", "value": feature_name},
            {"name": "feature", "value": feature_name},
            {"name": "story", "value": scenario_name},
            {"name": "severity", "value": self.severity(tags)},
            {"name": "framework", "value": FRAMEWORK},
            {"name": "language", "value": self.language},
        ]
        for tag in tags:
            labels.append({"name": "tag", "value": tag[1:] if tag.startswith("@") else tag})
        return labels

    @staticmethod
    def parse_steps(steps: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Builds Allure step records. Hook steps (Before/After) are dropped and
        statuses other than passed/failed collapse to skipped, since Allure
        steps have no broken status.
        """
        step_records = []
        for step in steps:
            keyword = step.get('keyword') or ""
            if keyword.strip() in HOOK_KEYWORDS:
                continue

            result = _result(step)
            status = result.get('status')
            if status not in ("passed", "failed"):
                status = "skipped"

            message = result.get('error_message')
            step_records.append({
                "name": f"{keyword}{step.get('name') or ''}",
                "status": status,
                "stage": "finished",
                "start": 0,
                "stop": ns_to_ms(result.get('duration')),
                "statusDetails": {"message": _first_line(message)} if message else {},
            })
        return step_records

    def transform(self, feature: Dict[str, Any], scenario: Dict[str, Any]) -> Dict[str, Any]:
        """
        Constructs the Allure result payload for one scenario.
        """
        feature_name = feature.get('name') or ""
        scenario_name = scenario.get('name') or ""
        steps = scenario.get('steps') or []
        tags = self.tag_names(scenario)

        stop = self.clock()
        start = stop - self.total_duration(steps)

        return {
            "uuid": self.id_factory(),
            "historyId": history_id(feature_name, scenario_name),
            "name": scenario_name,
            "fullName": f"{feature_name} > {scenario_name}",
            "status": self.derive_status(steps),
            "statusDetails": self.status_details(steps),
            "stage": "finished",
            "start": start,
            "stop": stop,
            "labels": self.labels(feature_name, scenario_name, tags),
            "steps": self.parse_steps(steps),
        }


def convert(
    document: Optional[List[Dict[str, Any]]],
    environment: EnvironmentContext,
    transformer: Optional[ScenarioTransformer] = None,
) -> ConversionResult:
    """
    Converts a parsed Cucumber report into Allure records and run metadata.
    An absent or empty document yields no records and no metadata.
    """
    if not document:
        return ConversionResult()

    transformer = transformer or ScenarioTransformer()
    records = []
    for feature in document:
        for scenario in feature.get('elements') or []:
            if scenario.get('type') == "background":
                continue
            records.append(transformer.transform(feature, scenario))
            transformer.logger.debug(
                f"Converted '{records[-1]['fullName']}' -> {records[-1]['status']}"
            )

    return ConversionResult(
        records=records,
        environment=build_environment(environment),
        categories=build_categories(),
    )
