import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# --- Test Run Configuration ---
# Browser the suite ran against: chromium | firefox | webkit
BROWSER = os.getenv("BROWSER", "chromium")

# Current environment (QA, DEV, STAGING)
ENVIRONMENT = os.getenv("ENV", "QA")

# Application base URL
BASE_URL = os.getenv("BASE_URL", "https://automationexercise.com")

# Default element timeout in milliseconds
DEFAULT_TIMEOUT = int(os.getenv("DEFAULT_TIMEOUT", "30000"))

# --- File Configuration ---
CUCUMBER_REPORT_PATH = os.getenv("CUCUMBER_REPORT_PATH", "reports/cucumber-report.json")
ALLURE_RESULTS_DIR = os.getenv("ALLURE_RESULTS_DIR", "reports/allure-results")
LOG_FILE = os.getenv("LOG_FILE")

# --- Allure Label Configuration ---
FRAMEWORK = "cucumber"
# Language of the suite that produced the Cucumber report
LANGUAGE = os.getenv("ALLURE_LANGUAGE", "typescript")

# Tags that promote a scenario to critical severity
CRITICAL_TAGS = ("@critical", "@smoke")

# Step keywords emitted for hooks, never reported as steps
HOOK_KEYWORDS = ("Before", "After")
