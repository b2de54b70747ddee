import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from allure_converter.core.errors import (
    EmptyReportError,
    MalformedReportError,
    MissingInputError,
)


class CucumberReportReader:
    """
    Handles loading of Cucumber JSON reports with structural validation.
    """
    def __init__(self, file_path: str):
        self.file_path = Path(file_path)
        self.logger = logging.getLogger("allure_converter.reader")

    def validate(self) -> None:
        """Validates that the report exists and is a file."""
        if not self.file_path.exists():
            raise MissingInputError("Cucumber report not found", str(self.file_path))
        if not self.file_path.is_file():
            raise MalformedReportError("Report path is not a file", str(self.file_path))
        self.logger.debug(f"File validated: {self.file_path}")

    def read(self) -> List[Dict[str, Any]]:
        """
        Returns the list of features in the report.
        Raises EmptyReportError when the report holds no features.
        """
        self.validate()
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedReportError(f"Failed to parse report: {e}", str(self.file_path)) from e

        self.check_structure(document)
        if not document:
            raise EmptyReportError("No features found in report", str(self.file_path))

        self.logger.debug(f"Loaded {len(document)} feature(s) from {self.file_path}")
        return document

    def check_structure(self, document: Any) -> None:
        """Checks the feature/scenario/step nesting and the types of tags and step results."""
        path = str(self.file_path)
        if not isinstance(document, list):
            raise MalformedReportError(
                f"Expected a list of features, got {type(document).__name__}", path
            )

        for i, feature in enumerate(document):
            if not isinstance(feature, dict):
                raise MalformedReportError(f"Feature {i} is not an object", path)
            elements = feature.get('elements') or []
            if not isinstance(elements, list):
                raise MalformedReportError(f"Feature {i} 'elements' is not a list", path)

            for j, scenario in enumerate(elements):
                if not isinstance(scenario, dict):
                    raise MalformedReportError(f"Scenario {i}.{j} is not an object", path)
                tags = scenario.get('tags') or []
                if not isinstance(tags, list) or not all(
                    isinstance(t, str) or (isinstance(t, dict) and isinstance(t.get('name') or "", str))
                    for t in tags
                ):
                    raise MalformedReportError(f"Scenario {i}.{j} has invalid tags", path)

                steps = scenario.get('steps') or []
                if not isinstance(steps, list) or not all(isinstance(s, dict) for s in steps):
                    raise MalformedReportError(f"Scenario {i}.{j} has invalid steps", path)
                for k, step in enumerate(steps):
                    if not isinstance(step.get('keyword') or "", str):
                        raise MalformedReportError(f"Step {i}.{j}.{k} keyword is not a string", path)
                    self.check_result(step.get('result'), f"Step {i}.{j}.{k}")

    def check_result(self, result: Any, where: str) -> None:
        path = str(self.file_path)
        if result is None:
            return
        if not isinstance(result, dict):
            raise MalformedReportError(f"{where} result is not an object", path)

        duration = result.get('duration')
        if duration is not None and (isinstance(duration, bool) or not isinstance(duration, (int, float))):
            raise MalformedReportError(f"{where} duration is not a number", path)
        message = result.get('error_message')
        if message is not None and not isinstance(message, str):
            raise MalformedReportError(f"{where} error_message is not a string", path)
