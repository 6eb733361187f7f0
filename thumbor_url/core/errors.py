import traceback
from typing import Dict, Any, Optional


class ThumborUrlError(Exception):
    """Base exception class for thumbor-url.

    Every failure raised while building a URL carries a stable error code
    and a context dictionary describing the offending input.
    """
    def __init__(self,
                 message: str,
                 error_code: str = "internal_error",
                 context: Optional[Dict[str, Any]] = None,
                 original_exception: Optional[Exception] = None):
        self.message = message
        self.error_code = error_code
        self.context = dict(context or {})
        self.original_exception = original_exception
        self.traceback = traceback.format_exc() if original_exception else None

        # Add original exception details to context if available
        if original_exception:
            self.context.update({
                "original_error_type": type(original_exception).__name__,
                "original_error": str(original_exception)
            })

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary suitable for reporting."""
        result = {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
        }

        # Never leak the signing key
        safe_context = {}
        for key, value in self.context.items():
            if key not in ["key", "secret", "security_key"] and value is not None:
                safe_context[key] = value

        if safe_context:
            result["details"] = safe_context

        return result


# Validation and input errors
class InvalidArgumentError(ThumborUrlError):
    """Error for blank or non-sensical request options."""
    def __init__(self, message: str, field: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None,
                 original_exception: Optional[Exception] = None,
                 error_code: str = "invalid_argument"):
        if field:
            context = dict(context or {})
            context["field"] = field

        super().__init__(
            message=message,
            error_code=error_code,
            context=context,
            original_exception=original_exception
        )
        self.field = field


class RangeError(InvalidArgumentError):
    """Error for a numeric option outside of its inclusive bounds."""
    def __init__(self, message: str, field: Optional[str] = None, value: Any = None,
                 minimum: Any = None, maximum: Any = None,
                 context: Optional[Dict[str, Any]] = None):
        context = dict(context or {})
        context.update({"value": value, "minimum": minimum, "maximum": maximum})
        super().__init__(
            message=message,
            field=field,
            context=context,
            error_code="out_of_range"
        )


# Signing errors
class SigningEnvironmentError(ThumborUrlError):
    """Error when the keyed-hash primitive is unavailable or rejects the key."""
    def __init__(self, message: str = "Unable to compute the URL signature",
                 context: Optional[Dict[str, Any]] = None,
                 original_exception: Optional[Exception] = None):
        if original_exception:
            message = f"{message}. Reason: {str(original_exception)}"

        super().__init__(
            message=message,
            error_code="signing_unavailable",
            context=context,
            original_exception=original_exception
        )
