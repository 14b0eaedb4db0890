"""
WebDriver session management for the plog browser suite.

Opens a session on the Selenium server (or a local browser when no server
is configured), probes server availability and writes screenshots.
"""

import logging
import os
from typing import Optional, Tuple

import requests
from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.firefox.service import Service as FirefoxService
from tenacity import RetryError, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)


class BrowserError(Exception):
    """Raised when a browser operation outside a page interaction fails."""
    pass


class BrowserSetupError(BrowserError):
    """Raised when no browser session can be established."""
    pass


def build_options(browser: str = 'chrome', headless: bool = True,
                  window_size: Tuple[int, int] = (1920, 1080)):
    """Build Chrome or Firefox options for the suite."""
    if browser == 'firefox':
        options = FirefoxOptions()
        if headless:
            options.add_argument('--headless')
        options.add_argument(f'--width={window_size[0]}')
        options.add_argument(f'--height={window_size[1]}')
        # Disable animations that make DOM transitions slower to settle
        options.set_preference('toolkit.cosmeticAnimations.enabled', False)
        options.set_preference('app.update.enabled', False)
        return options

    options = ChromeOptions()
    if headless:
        options.add_argument('--headless')
    options.add_argument('--no-sandbox')
    options.add_argument('--disable-dev-shm-usage')
    options.add_argument('--disable-gpu')
    options.add_argument('--disable-extensions')
    # plog runs behind a self-signed certificate in test deployments
    options.add_argument('--ignore-certificate-errors')
    options.add_argument(f'--window-size={window_size[0]},{window_size[1]}')
    return options


def _local_driver(browser: str, options):
    """Start a local driver, trying the system driver before webdriver-manager."""
    from webdriver_manager.core.driver_cache import DriverCacheManager

    cache_manager = DriverCacheManager(valid_range=30)
    if browser == 'firefox':
        try:
            return webdriver.Firefox(service=FirefoxService(), options=options)
        except WebDriverException as system_error:
            logger.info(f"System geckodriver not usable, using webdriver-manager: {system_error}")
            from webdriver_manager.firefox import GeckoDriverManager
            service = FirefoxService(GeckoDriverManager(cache_manager=cache_manager).install())
            return webdriver.Firefox(service=service, options=options)

    try:
        return webdriver.Chrome(service=ChromeService(), options=options)
    except WebDriverException as system_error:
        logger.info(f"System chromedriver not usable, using webdriver-manager: {system_error}")
        from webdriver_manager.chrome import ChromeDriverManager
        service = ChromeService(ChromeDriverManager(cache_manager=cache_manager).install())
        return webdriver.Chrome(service=service, options=options)


def create_driver(remote_url: Optional[str], browser: str = 'chrome', headless: bool = True,
                  window_size: Tuple[int, int] = (1920, 1080), attempts: int = 3,
                  page_load_timeout: int = 15):
    """
    Open a browser session.

    Args:
        remote_url: Selenium server URL, or empty for a local browser
        browser: 'chrome' or 'firefox'
        headless: Run without a visible window
        window_size: Browser window dimensions
        attempts: Connection attempts before giving up
        page_load_timeout: Seconds allowed for a navigation

    Returns:
        WebDriver: Connected session

    Raises:
        BrowserSetupError: If no session could be created
    """
    options = build_options(browser, headless, window_size)

    # An unreachable server surfaces as urllib3 or socket errors, not WebDriverException
    @retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type(Exception)
    )
    def _connect():
        if remote_url:
            logger.info(f"Connecting to Selenium server {remote_url} ({browser})")
            return webdriver.Remote(command_executor=remote_url, options=options)
        logger.info(f"Starting local {browser} browser")
        return _local_driver(browser, options)

    try:
        driver = _connect()
    except RetryError as e:
        cause = e.last_attempt.exception()
        raise BrowserSetupError(f"Cannot connect to selenium server {remote_url or '(local)'}: {cause}") from cause

    driver.set_page_load_timeout(page_load_timeout)
    logger.info(f"{browser.title()} session {driver.session_id} ready")
    return driver


def remote_is_available(remote_url: str, timeout: float = 3) -> bool:
    """Check whether the Selenium server answers its status endpoint."""
    status_url = f"{remote_url.rstrip('/')}/status"
    try:
        response = requests.get(status_url, timeout=timeout)
    except requests.RequestException as e:
        logger.info(f"Selenium server not reachable at {status_url}: {e}")
        return False

    if response.status_code != 200:
        logger.info(f"Selenium server at {status_url} answered {response.status_code}")
        return False

    try:
        return bool(response.json().get('value', {}).get('ready', True))
    except ValueError:
        return True


def screenshot_to_file(driver, filename: str) -> str:
    """
    Take a screenshot and write it to filename.

    Raises:
        BrowserError: If the screenshot cannot be taken or written
    """
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)

    try:
        png = driver.get_screenshot_as_png()
    except WebDriverException as e:
        raise BrowserError(f"Error during screenshot_to_file using filename {filename}: {e}")

    try:
        with open(filename, 'wb') as f:
            f.write(png)
    except OSError as e:
        raise BrowserError(f"Could not write screenshot {filename}: {e}")

    logger.info(f"Saved screenshot to {filename}")
    return filename


def quit_driver(driver) -> None:
    """End the browser session, logging rather than raising on failure."""
    if driver is None:
        return
    try:
        driver.quit()
        logger.info("Browser session closed")
    except WebDriverException as e:
        logger.warning(f"Error closing browser session: {e}")
