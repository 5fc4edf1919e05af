"""Error hierarchy for device discovery and config synthesis."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import StrEnum

from zeep.exceptions import Fault  # type: ignore[import-untyped]

DEFAULT_TIME_CHECK_PHRASES: tuple[str, ...] = ("time check failed",)


class DeviceErrorKind(StrEnum):
    """Stable error categories the retry controller branches on."""

    MALFORMED_ENDPOINT = "MALFORMED_ENDPOINT"
    AUTH_TIMING = "AUTH_TIMING"
    PROTOCOL_FAULT = "PROTOCOL_FAULT"
    TRANSPORT = "TRANSPORT"


class DeviceError(RuntimeError):
    """Base exception for all device discovery errors.

    The ``kind`` attribute is the only thing callers should branch on; the
    message is for humans and may contain device-supplied text.
    """

    kind: DeviceErrorKind = DeviceErrorKind.TRANSPORT

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class MalformedEndpointError(DeviceError):
    """Host/port string could not be parsed."""

    kind = DeviceErrorKind.MALFORMED_ENDPOINT

    def __init__(self, endpoint: str, reason: str) -> None:
        super().__init__(f"Malformed endpoint {endpoint!r}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class ProtocolFaultError(DeviceError):
    """Device answered with a SOAP fault."""

    kind = DeviceErrorKind.PROTOCOL_FAULT

    def __init__(self, reason: str, *, cause: BaseException | None = None) -> None:
        super().__init__(f"Error: {reason}", cause=cause)
        self.reason = reason


class AuthenticationTimingError(ProtocolFaultError):
    """Device rejected the WS-Security timestamp as outside its clock window."""

    kind = DeviceErrorKind.AUTH_TIMING


class IncompleteProfileError(ProtocolFaultError):
    """Device returned a profile or URI that cannot be used for a proxy config."""

    def __init__(self, profile_token: str, detail: str) -> None:
        super().__init__(f"profile {profile_token}: {detail}")
        self.profile_token = profile_token


class TransportFailureError(DeviceError):
    """Connection or transport failure with no SOAP fault body."""

    kind = DeviceErrorKind.TRANSPORT

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(f"Error: {message}", cause=cause)
        self.raw_message = message


def classify_device_error(
    exc: BaseException,
    *,
    time_check_phrases: Iterable[str] = DEFAULT_TIME_CHECK_PHRASES,
) -> DeviceError:
    """Translate a raw transport/ONVIF exception into a typed ``DeviceError``.

    onvif-zeep-async wraps every service failure in ``ONVIFError``, so the
    zeep ``Fault`` (if any) is found by walking the exception chain. Free-text
    matching of the fault reason happens here and nowhere else.
    """
    if isinstance(exc, DeviceError):
        return exc

    fault = _find_fault(exc)
    if fault is None:
        return TransportFailureError(_describe(exc), cause=exc)

    reason = _fault_reason(fault)
    lowered = reason.lower()
    if any(phrase.lower() in lowered for phrase in time_check_phrases):
        return AuthenticationTimingError(reason, cause=exc)
    return ProtocolFaultError(reason, cause=exc)


def _find_fault(exc: BaseException) -> BaseException | None:
    for candidate in _exception_chain(exc):
        if isinstance(candidate, Fault):
            return candidate
    return None


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    pending: list[BaseException] = [exc]
    while pending:
        current = pending.pop(0)
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        for linked in (current.__cause__, current.__context__):
            if linked is not None:
                pending.append(linked)
        # ONVIFError(err) keeps the wrapped exception as its first argument.
        if current.args and isinstance(current.args[0], BaseException):
            pending.append(current.args[0])


def _fault_reason(fault: BaseException) -> str:
    message = getattr(fault, "message", None)
    if isinstance(message, str) and message:
        return message
    return _describe(fault)


def _describe(exc: BaseException) -> str:
    text = str(exc)
    return text if text else type(exc).__name__


__all__ = [
    "AuthenticationTimingError",
    "DEFAULT_TIME_CHECK_PHRASES",
    "DeviceError",
    "DeviceErrorKind",
    "IncompleteProfileError",
    "MalformedEndpointError",
    "ProtocolFaultError",
    "TransportFailureError",
    "classify_device_error",
]
