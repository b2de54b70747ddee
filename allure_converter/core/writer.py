import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from allure_converter.core.errors import WriteFailure
from allure_converter.core.metadata import render_properties
from allure_converter.core.models import ConversionResult

ENVIRONMENT_FILE = "environment.properties"
CATEGORIES_FILE = "categories.json"
RESULT_SUFFIX = "-result.json"


class AllureResultsWriter:
    """
    Writes conversion results into an Allure results directory.
    """
    def __init__(self, output_dir: str, batch_size: int = 10):
        self.output_dir = Path(output_dir)
        self.batch_size = max(1, batch_size)
        self.logger = logging.getLogger("allure_converter.writer")

    def prepare(self, clean: bool = False) -> None:
        """Creates the output directory. With clean, removes files from earlier runs."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        if not clean:
            return

        removed = 0
        for path in self.output_dir.iterdir():
            if path.is_file() and (
                path.name.endswith(RESULT_SUFFIX) or path.name in (ENVIRONMENT_FILE, CATEGORIES_FILE)
            ):
                path.unlink()
                removed += 1
        self.logger.info(f"Cleaned {removed} file(s) from {self.output_dir}")

    def write_file(self, name: str, content: str) -> Path:
        path = self.output_dir / name
        try:
            path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise WriteFailure(f"Could not write file: {e}", str(path)) from e
        self.logger.debug(f"Wrote {path}")
        return path

    def files_for(self, result: ConversionResult) -> List[Tuple[str, str]]:
        """Serializes every output file as (file name, content) pairs."""
        files = [
            (f"{record['uuid']}{RESULT_SUFFIX}", json.dumps(record, indent=2))
            for record in result.records
        ]
        # Metadata accompanies every successfully parsed, non-empty report
        if result.environment:
            files.append((ENVIRONMENT_FILE, render_properties(result.environment)))
            files.append((CATEGORIES_FILE, json.dumps(result.categories, indent=2)))
        return files

    async def _write_one(self, name: str, content: str) -> bool:
        try:
            await asyncio.to_thread(self.write_file, name, content)
            return True
        except WriteFailure as e:
            self.logger.error(f"FAILURE: {e}")
            return False

    async def write_all(self, result: ConversionResult) -> Dict[str, Any]:
        """
        Writes all files in concurrent batches. A failed file is logged and
        counted without stopping the others.
        """
        written = 0
        failed = 0
        tasks = []

        for name, content in self.files_for(result):
            tasks.append(asyncio.create_task(self._write_one(name, content)))

            # Process in batches to control concurrency
            if len(tasks) >= self.batch_size:
                outcomes = await asyncio.gather(*tasks)
                written += outcomes.count(True)
                failed += outcomes.count(False)
                tasks = []

        if tasks:
            outcomes = await asyncio.gather(*tasks)
            written += outcomes.count(True)
            failed += outcomes.count(False)

        return {"written": written, "failed": failed}
