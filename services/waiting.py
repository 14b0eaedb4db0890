"""
Condition polling for browser tests.

A single page application updates its DOM some time after a navigation or a
click. ``wait_for`` blocks until a predicate reports the page has caught up,
or a time budget runs out, and hands the outcome back as a ``WaitResult``
instead of leaving it in shared state.
"""

import logging
import time
from typing import Any, Callable, Optional

from selenium.common.exceptions import NoSuchElementException, WebDriverException
from selenium.webdriver.common.by import By

logger = logging.getLogger(__name__)

INITIAL_WAIT = 0.5  # seconds slept before the first check
ITERATIONS = 10


class WaitTimeoutError(Exception):
    """Raised when a caller insists on a condition that never became true."""
    pass


class LookupFailure(Exception):
    """An element lookup failed for a reason other than the element being absent."""

    def __init__(self, selector: str, cause: Exception):
        super().__init__(f"Lookup of {selector} failed: {cause}")
        self.selector = selector
        self.cause = cause


class WaitResult:
    """Outcome of one ``wait_for`` call. Truthy when the condition was met."""

    def __init__(self, timed_out: bool, attempts: int, elapsed: float,
                 last_error: Optional[Exception] = None):
        self.timed_out = timed_out
        self.attempts = attempts
        self.elapsed = elapsed
        self.last_error = last_error

    def __bool__(self):
        return not self.timed_out

    def __repr__(self):
        return (f"WaitResult(timed_out={self.timed_out}, attempts={self.attempts}, "
                f"elapsed={self.elapsed:.2f}, last_error={self.last_error!r})")

    def raise_for_timeout(self, description: str) -> 'WaitResult':
        """Raise ``WaitTimeoutError`` if the wait timed out, else return self."""
        if self.timed_out:
            detail = f" (last error: {self.last_error})" if self.last_error else ""
            raise WaitTimeoutError(f"Timed out waiting for {description}{detail}")
        return self


def wait_for(timeout: float, is_ready: Callable[..., bool], *args: Any,
             initial_wait: float = INITIAL_WAIT, iterations: int = ITERATIONS,
             sleep: Callable[[float], None] = time.sleep) -> WaitResult:
    """
    Sleep until ``is_ready(*args)`` returns True or ``timeout`` seconds pass.

    Args:
        timeout: Total time budget in seconds
        is_ready: Predicate polled at evenly spaced intervals
        *args: Passed through to the predicate
        initial_wait: Fixed delay before the first check
        iterations: Number of intervals the remaining budget is split into
        sleep: Sleep function, replaceable in tests

    Returns:
        WaitResult: timed_out is False as soon as the predicate is True

    A ``LookupFailure`` raised by the predicate counts as "not yet" and is
    kept in ``last_error`` so callers can tell it apart from a plain timeout.

    Raises:
        ValueError: If iterations is less than 1
    """
    if iterations < 1:
        raise ValueError(f"iterations must be at least 1, got {iterations}")

    started = time.monotonic()
    sleep(initial_wait)

    if initial_wait >= timeout:
        logger.debug(f"Initial wait {initial_wait}s covers timeout {timeout}s, not polling")
        return WaitResult(True, 0, time.monotonic() - started)

    interval = (timeout - initial_wait) / iterations
    last_error = None
    attempts = 0

    for _ in range(iterations + 1):
        attempts += 1
        try:
            if is_ready(*args):
                return WaitResult(False, attempts, time.monotonic() - started, last_error)
        except LookupFailure as e:
            logger.debug(f"Predicate {getattr(is_ready, '__name__', is_ready)} lookup error: {e}")
            last_error = e
        sleep(interval)

    logger.warning(f"Timed out after {timeout}s waiting for "
                   f"{getattr(is_ready, '__name__', 'condition')}{args[1:]}")
    return WaitResult(True, attempts, time.monotonic() - started, last_error)


# Predicates. Each takes the driver first so it can be passed straight to wait_for.

def element_to_vanish(driver, selector: str) -> bool:
    """True once no element matches the CSS selector."""
    try:
        driver.find_element(By.CSS_SELECTOR, selector)
    except NoSuchElementException:
        return True
    except WebDriverException as e:
        raise LookupFailure(selector, e)
    return False


def element_to_appear(driver, selector: str) -> bool:
    """True once an element matches the CSS selector."""
    try:
        driver.find_element(By.CSS_SELECTOR, selector)
        return True
    except NoSuchElementException:
        return False
    except WebDriverException as e:
        raise LookupFailure(selector, e)


def url_is_current(driver, *urls: str) -> bool:
    """True when the browser is at any one of ``urls``."""
    try:
        current = driver.current_url
    except WebDriverException as e:
        raise LookupFailure('current_url', e)
    return current in urls


def document_is_ready(driver) -> bool:
    try:
        return driver.execute_script("return document.readyState") == "complete"
    except WebDriverException as e:
        raise LookupFailure('document.readyState', e)
