import asyncio
import json
import sys

import click

from allure_converter.config import (
    ALLURE_RESULTS_DIR as DEFAULT_OUTPUT_DIR,
    BASE_URL as DEFAULT_BASE_URL,
    BROWSER as DEFAULT_BROWSER,
    CUCUMBER_REPORT_PATH as DEFAULT_REPORT_PATH,
    DEFAULT_TIMEOUT,
    ENVIRONMENT as DEFAULT_ENVIRONMENT,
    LOG_FILE as DEFAULT_LOG_FILE,
)
from allure_converter.utils.logger import setup_logger
from allure_converter.core.errors import EmptyReportError, MalformedReportError, MissingInputError
from allure_converter.core.models import EnvironmentContext
from allure_converter.core.reader import CucumberReportReader
from allure_converter.core.transformer import convert
from allure_converter.core.writer import AllureResultsWriter

# Constants
BATCH_SIZE = 10


async def process_conversion(
    report_file: str,
    output_dir: str,
    context: EnvironmentContext,
    clean: bool,
    dry_run: bool,
    batch_size: int,
    logger
) -> bool:
    """
    Orchestrates the conversion. Returns False only when the report is
    malformed or some output file could not be written.
    """
    reader = CucumberReportReader(report_file)
    writer = AllureResultsWriter(output_dir, batch_size=batch_size)

    logger.info("Starting Cucumber -> Allure conversion...")
    logger.info(f"Environment: {context.environment_name}")
    logger.info(f"Base URL: {context.base_url}")
    logger.info(f"Browser: {context.browser}")
    logger.debug(f"Default timeout: {context.timeout_ms}ms")

    try:
        document = reader.read()
    except MissingInputError as e:
        logger.warning(f"{e} - skipping.")
        return True
    except EmptyReportError as e:
        logger.warning(f"{e} - skipping.")
        return True
    except MalformedReportError as e:
        logger.critical(str(e))
        return False

    try:
        result = convert(document, context)
        logger.info(f"Converted {result.count} scenario(s) from {len(document)} feature(s)")

        if dry_run:
            for record in result.records:
                logger.info(f"[DRY RUN] Would write: {record['uuid']}-result.json ({record['fullName']}: {record['status']})")
                logger.debug(f"Payload structure:\n{json.dumps(record, indent=2)}")
            return True

        writer.prepare(clean=clean)
        stats = await writer.write_all(result)

        # Summary
        logger.info("="*50)
        logger.info("Conversion Summary")
        logger.info("="*50)
        logger.info(f"Scenarios converted: {result.count}")
        logger.info(f"Files written: {stats['written']}")
        if stats['failed'] > 0:
            logger.info(f"Failed writes: {stats['failed']}")
        logger.info(f"Output directory: {output_dir}")
        logger.info("="*50)

        return stats['failed'] == 0

    except Exception as e:
        logger.critical(f"Fatal error during conversion: {e}")
        return False


@click.command()
@click.option('--report', '-r', default=DEFAULT_REPORT_PATH, help='Path to Cucumber JSON report')
@click.option('--output-dir', '-o', default=DEFAULT_OUTPUT_DIR, help='Allure results directory')
@click.option('--clean', '-c', is_flag=True, help='Remove results of earlier runs first')
@click.option('--dry-run', '-d', is_flag=True, help='Dry run mode')
@click.option('--verbose', '-v', is_flag=True, help='Verbose logging')
@click.option('--batch-size', '-b', default=BATCH_SIZE, type=int, help='Concurrent write batch size')
@click.option('--log-file', default=DEFAULT_LOG_FILE, help='Also log to this file')
@click.option('--browser', default=DEFAULT_BROWSER, help='Browser recorded in environment.properties')
@click.option('--env', 'environment_name', default=DEFAULT_ENVIRONMENT, help='Environment name')
@click.option('--base-url', default=DEFAULT_BASE_URL, help='Application base URL')
def main(report, output_dir, clean, dry_run, verbose, batch_size, log_file, browser, environment_name, base_url):
    """
    Convert a Cucumber JSON report into Allure result files.
    """
    logger = setup_logger(verbose=verbose, log_file=log_file)

    context = EnvironmentContext(
        browser=browser,
        environment_name=environment_name,
        base_url=base_url,
        timeout_ms=DEFAULT_TIMEOUT,
    )

    success = asyncio.run(process_conversion(
        report, output_dir, context, clean, dry_run, batch_size, logger
    ))

    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
