import json
import unittest
import tempfile
from pathlib import Path
from allure_converter.core.reader import CucumberReportReader
from allure_converter.core.errors import EmptyReportError, MalformedReportError, MissingInputError

class TestCucumberReportReader(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.TemporaryDirectory()
        self.report_path = Path(self.test_dir.name) / "cucumber-report.json"

    def tearDown(self):
        self.test_dir.cleanup()

    def write(self, content):
        with open(self.report_path, "w", encoding="utf-8") as f:
            f.write(content)

    def test_read_features(self):
        self.write(json.dumps([{"name": "Cart", "elements": [{"name": "Add", "steps": []}]}]))
        features = CucumberReportReader(str(self.report_path)).read()
        self.assertEqual(len(features), 1)
        self.assertEqual(features[0]['name'], "Cart")

    def test_missing_file(self):
        with self.assertRaises(MissingInputError):
            CucumberReportReader(str(self.report_path)).read()

    def test_directory_is_malformed(self):
        with self.assertRaises(MalformedReportError):
            CucumberReportReader(self.test_dir.name).read()

    def test_invalid_json(self):
        self.write("[{not json")
        with self.assertRaises(MalformedReportError):
            CucumberReportReader(str(self.report_path)).read()

    def test_top_level_object_is_malformed(self):
        self.write(json.dumps({"name": "Cart"}))
        with self.assertRaises(MalformedReportError):
            CucumberReportReader(str(self.report_path)).read()

    def test_invalid_steps_are_malformed(self):
        self.write(json.dumps([{"name": "Cart", "elements": [{"name": "Add", "steps": ["Given x"]}]}]))
        with self.assertRaises(MalformedReportError):
            CucumberReportReader(str(self.report_path)).read()

    def test_empty_report(self):
        self.write("[]")
        with self.assertRaises(EmptyReportError):
            CucumberReportReader(str(self.report_path)).read()

    def test_missing_elements_allowed(self):
        self.write(json.dumps([{"name": "Cart"}]))
        self.assertEqual(len(CucumberReportReader(str(self.report_path)).read()), 1)

    def report_with_step(self, step):
        return json.dumps([{"name": "Cart", "elements": [{"name": "Add", "steps": [step]}]}])

    def test_non_object_result_is_malformed(self):
        self.write(self.report_with_step({"keyword": "Given ", "name": "a cart", "result": "passed"}))
        with self.assertRaises(MalformedReportError):
            CucumberReportReader(str(self.report_path)).read()

    def test_non_numeric_duration_is_malformed(self):
        self.write(self.report_with_step(
            {"keyword": "Given ", "name": "a cart", "result": {"status": "passed", "duration": "1s"}}
        ))
        with self.assertRaises(MalformedReportError):
            CucumberReportReader(str(self.report_path)).read()

    def test_non_list_tags_are_malformed(self):
        self.write(json.dumps([{"name": "Cart", "elements": [{"name": "Add", "tags": "@smoke"}]}]))
        with self.assertRaises(MalformedReportError):
            CucumberReportReader(str(self.report_path)).read()

    def test_non_string_tag_is_malformed(self):
        self.write(json.dumps([{"name": "Cart", "elements": [{"name": "Add", "tags": [7]}]}]))
        with self.assertRaises(MalformedReportError):
            CucumberReportReader(str(self.report_path)).read()

    def test_valid_results_and_tags(self):
        self.write(json.dumps([{"name": "Cart", "elements": [{
            "name": "Add",
            "tags": ["@cart", {"name": "@smoke", "line": 2}],
            "steps": [
                {"keyword": "Before", "name": ""},
                {"keyword": "Given ", "name": "a cart",
                 "result": {"status": "failed", "duration": 1500000, "error_message": "boom"}},
            ],
        }]}]))
        self.assertEqual(len(CucumberReportReader(str(self.report_path)).read()), 1)

if __name__ == '__main__':
    unittest.main()
