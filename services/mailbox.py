"""
Reader for the mailbot test mailboxes.

The plog test deployment delivers outgoing mail to mailbot, which writes the
latest message for each recipient to a single file named after the
lower-cased local part of the address. Scenario scripts read that file to
pick up verification and password reset links.
"""

import email
import logging
import os
import re
from typing import NamedTuple
from urllib.parse import unquote

from bs4 import BeautifulSoup
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_fixed

logger = logging.getLogger(__name__)

# Links in notification emails look like
#   https://plog.org:8004/#/verify/<email>/token/<token>
#   https://plog.org:8004/#/reset/<email>/token/<token>
LINK_PATTERN = re.compile(
    r'(?P<url>https?://[^\s"\'<>#]*#/(?P<kind>verify|reset)/(?P<email>[^/\s"\'<>]+)/token/(?P<token>[^/\s"\'<>]+))'
)


class MailboxError(Exception):
    """Raised when a mailbox file cannot be read or removed."""
    pass


class EmailLinkError(Exception):
    """Raised when an email does not carry the expected link."""
    pass


class EmailLink(NamedTuple):
    kind: str
    email_addr: str
    token: str
    url: str


class Mailbox:
    """File-per-recipient mailbox written by mailbot."""

    def __init__(self, directory: str, attempts: int = 5, delay: float = 1.0):
        self.directory = directory
        self.attempts = attempts
        self.delay = delay

    def path_for(self, address: str) -> str:
        """Mailbox file for an address: its lower-cased local part."""
        local_part, sep, _ = address.strip().partition('@')
        if not sep or not local_part:
            raise MailboxError(f"Not an email address: {address!r}")
        return os.path.join(self.directory, local_part.lower())

    def _read(self, path: str) -> str:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            return f.read()

    def slurp(self, address: str) -> str:
        """
        Read the email waiting for address and delete the mailbox file.

        Delivery is asynchronous, so reading is retried a fixed number of
        times before giving up.

        Raises:
            MailboxError: If nothing arrives or the file cannot be removed
        """
        path = self.path_for(address)
        retrying = Retrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception_type(OSError),
            before_sleep=before_sleep_log(logger, logging.INFO),
            reraise=True
        )

        try:
            content = retrying(self._read, path)
        except OSError as e:
            raise MailboxError(f"Unable to read the email for {address} in {path}: {e}")

        try:
            os.remove(path)
        except OSError as e:
            raise MailboxError(f"Error attempting to remove {path}: {e}")

        logger.info(f"Read {len(content)} bytes of email for {address} from {path}")
        return content

    def discard(self, address: str) -> bool:
        """Remove a stale mailbox file. Returns True if one was removed."""
        path = self.path_for(address)
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        logger.info(f"Discarded stale email in {path}")
        return True


def message_text(raw: str) -> str:
    """
    Extract readable text from a raw email.

    Plain text parts are preferred; HTML parts are flattened with BeautifulSoup.
    Content without MIME headers is returned unchanged.
    """
    message = email.message_from_string(raw)
    if not message.keys():
        return raw

    plain, html = [], []
    for part in message.walk():
        if part.get_content_maintype() != 'text':
            continue
        payload = part.get_payload(decode=True)
        if payload is None:
            continue
        text = payload.decode(part.get_content_charset() or 'utf-8', errors='replace')
        if part.get_content_type() == 'text/html':
            html.append(BeautifulSoup(text, 'html.parser').get_text('\n'))
        else:
            plain.append(text)

    return '\n'.join(plain or html)


def parse_email_link(raw: str, kind: str) -> EmailLink:
    """
    Find the first ``kind`` link ('verify' or 'reset') in an email.

    The decoded body is searched first so quoted-printable soft line breaks
    and HTML markup do not split the link, then the raw text.

    Raises:
        EmailLinkError: If no such link is present
    """
    for text in (message_text(raw), raw):
        for match in LINK_PATTERN.finditer(text):
            if match.group('kind') != kind:
                continue
            return EmailLink(
                kind=kind,
                email_addr=unquote(match.group('email')),
                token=unquote(match.group('token')),
                url=match.group('url')
            )

    raise EmailLinkError(f"No {kind} link found in email")


def parse_verification_link(raw: str) -> EmailLink:
    return parse_email_link(raw, 'verify')


def parse_reset_link(raw: str) -> EmailLink:
    return parse_email_link(raw, 'reset')
