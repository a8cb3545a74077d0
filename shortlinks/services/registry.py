"""Short link registry for the URL shortener application.

This module contains the Registry class which implements the business logic
for creating, resolving and reporting on short codes.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional, Protocol

from pydantic import AnyUrl, TypeAdapter, ValidationError

from shortlinks.core.remote_log import LogLevel
from shortlinks.models.entry import DIRECT, UNKNOWN, AccessEvent, Entry
from shortlinks.models.report import Report
from shortlinks.repositories.access_log import AccessLog
from shortlinks.repositories.base import DuplicateEntityError, EntityNotFoundError, normalize_code
from shortlinks.repositories.entry_store import EntryStore
from shortlinks.services.codes import CodeGenerator
from shortlinks.services.exceptions import (
    CodeCollisionError,
    InvalidURLError,
    InvalidValidityError,
    ShortCodeGenerationError,
    URLExpiredError,
    URLNotFoundError,
)

logger = logging.getLogger(__name__)

_url_adapter = TypeAdapter(AnyUrl)

# Marks an omitted validity, as opposed to an explicit None
_DEFAULT = object()


class Emitter(Protocol):
    def emit(self, stack: str, level: LogLevel, package: str, message: str) -> None: ...


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _or_default(value: Optional[str], default: str) -> str:
    if value is None or not value.strip():
        return default
    return value


class Registry:
    """
    Composition root for the short link core.

    Owns the entry store, the access log and the code generator. One instance
    is created per process and shared by every request handler.
    """

    PACKAGE = "controller"

    def __init__(
        self,
        log_emitter: Emitter,
        entry_store: Optional[EntryStore] = None,
        access_log: Optional[AccessLog] = None,
        code_generator: Optional[CodeGenerator] = None,
        clock: Callable[[], datetime] = utcnow,
        default_validity_minutes: int = 30,
        max_generation_attempts: int = 10,
        stack: str = "backend",
    ):
        """
        Initialize the registry.

        Args:
            log_emitter: Fire-and-forget sink for operational events
            entry_store: Store for entries, a fresh one if omitted
            access_log: Store for access events, a fresh one if omitted
            code_generator: Generator for short codes
            clock: Returns the current time as an aware UTC datetime
            default_validity_minutes: Validity used when the caller gives none
            max_generation_attempts: Cap on random code retries
            stack: Stack name reported with every emitted event
        """
        self.entry_store = entry_store if entry_store is not None else EntryStore()
        self.access_log = access_log if access_log is not None else AccessLog()
        self.code_generator = code_generator or CodeGenerator()
        self.log_emitter = log_emitter
        self.clock = clock
        self.default_validity_minutes = default_validity_minutes
        self.max_generation_attempts = max_generation_attempts
        self.stack = stack

    async def create(
        self,
        target_url: str,
        validity_minutes: Any = _DEFAULT,
        custom_code: Optional[str] = None,
    ) -> Entry:
        """
        Register a target URL under a custom or generated short code.

        Args:
            target_url: Absolute URL to redirect to, surrounding whitespace is trimmed
            validity_minutes: Minutes until the code stops resolving. The
                registry default applies only when omitted, None is invalid
            custom_code: Optional caller-chosen code, matched case-insensitively

        Returns:
            Entry: The stored entry, carrying the code and its expiry

        Raises:
            InvalidURLError: If the URL is empty or not absolute
            InvalidValidityError: If validity is not a positive integer
            CodeCollisionError: If the custom code is already taken
            ShortCodeGenerationError: If no free random code was found
        """
        if isinstance(target_url, str):
            target_url = target_url.strip()
        if not self._is_valid_url(target_url):
            self._emit(LogLevel.ERROR, "Invalid URL format provided")
            raise InvalidURLError(f"Invalid URL format: {target_url!r}")

        if validity_minutes is _DEFAULT:
            validity_minutes = self.default_validity_minutes
        if not self._is_valid_validity(validity_minutes):
            self._emit(LogLevel.ERROR, "Invalid validity period")
            raise InvalidValidityError(
                "Validity must be a positive integer representing minutes"
            )

        if custom_code and custom_code.strip():
            entry = self._insert_custom(target_url, validity_minutes, custom_code)
        else:
            entry = self._insert_generated(target_url, validity_minutes)

        self._emit(LogLevel.INFO, f"Short URL created: {entry.code}")
        return entry

    async def resolve(
        self,
        code: str,
        user_agent: Optional[str] = None,
        referer: Optional[str] = None,
        client_identifier: Optional[str] = None,
    ) -> str:
        """
        Resolve a short code to its target URL and record the access.

        Missing request context is replaced here, once, by "Unknown" for the
        user agent and client and "Direct" for the referer.

        Raises:
            URLNotFoundError: If the code was never created
            URLExpiredError: If the code's validity has lapsed
        """
        entry = self._get_entry(code, f"Short URL not found: {code}")
        now = self.clock()
        if entry.is_expired(now):
            self._emit(LogLevel.WARN, f"Expired URL accessed: {code}")
            raise URLExpiredError(f"Short URL '{code}' has expired")

        event = AccessEvent(
            timestamp=now,
            user_agent=_or_default(user_agent, UNKNOWN),
            referer=_or_default(referer, DIRECT),
            client_identifier=_or_default(client_identifier, UNKNOWN),
        )
        self.access_log.append(entry.code, event)

        self._emit(LogLevel.INFO, f"URL redirected: {code}")
        return entry.target_url

    async def stats(self, code: str) -> Report:
        """
        Report on a code, expired or not.

        Raises:
            URLNotFoundError: If the code was never created
        """
        entry = self._get_entry(code, f"Statistics requested for non-existent URL: {code}")
        report = Report.from_entry(entry, self.access_log.events(entry.code))
        self._emit(LogLevel.INFO, f"Statistics retrieved for: {code}")
        return report

    async def list_all(self) -> List[Report]:
        """Report on every entry in creation order."""
        reports = [
            Report.from_entry(entry, self.access_log.events(entry.code))
            for entry in self.entry_store.all_entries()
        ]
        self._emit(LogLevel.INFO, "All URLs statistics retrieved")
        return reports

    def __len__(self) -> int:
        return len(self.entry_store)

    def _insert_custom(self, target_url: str, validity_minutes: int, custom_code: str) -> Entry:
        code = self.code_generator.generate(custom_code)
        if self.entry_store.exists(code):
            self._emit(LogLevel.ERROR, "Shortcode collision detected")
            raise CodeCollisionError(f"Shortcode '{code}' already exists")
        try:
            return self._store(code, target_url, validity_minutes)
        except DuplicateEntityError:
            # Lost a race with a concurrent create for the same code
            self._emit(LogLevel.ERROR, "Shortcode collision detected")
            raise CodeCollisionError(f"Shortcode '{code}' already exists")

    def _insert_generated(self, target_url: str, validity_minutes: int) -> Entry:
        for _ in range(self.max_generation_attempts):
            code = self.code_generator.generate()
            if self.entry_store.exists(code):
                continue
            try:
                return self._store(code, target_url, validity_minutes)
            except DuplicateEntityError:
                continue

        logger.error(f"No free short code after {self.max_generation_attempts} attempts")
        raise ShortCodeGenerationError(
            "Failed to generate a unique short code. Try again or use a custom code."
        )

    def _store(self, code: str, target_url: str, validity_minutes: int) -> Entry:
        entry = Entry.build(code, target_url, validity_minutes, self.clock())
        self.entry_store.insert(entry)
        self.access_log.open(code)
        return entry

    def _get_entry(self, code: str, missing_message: str) -> Entry:
        try:
            return self.entry_store.get(normalize_code(code))
        except EntityNotFoundError:
            self._emit(LogLevel.WARN, missing_message)
            raise URLNotFoundError(f"Short URL '{code}' not found")

    def _emit(self, level: LogLevel, message: str) -> None:
        try:
            self.log_emitter.emit(self.stack, level, self.PACKAGE, message)
        except Exception as e:
            logger.warning(f"Log emitter failed: {e!r}")

    @staticmethod
    def _is_valid_url(url) -> bool:
        """Accept only non-empty strings that parse as absolute URLs."""
        if not isinstance(url, str) or not url.strip():
            return False
        try:
            _url_adapter.validate_python(url)
        except ValidationError:
            return False
        return True

    def _is_valid_validity(self, value) -> bool:
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            return False
        try:
            self.clock() + timedelta(minutes=value)
        except OverflowError:
            return False
        return True
