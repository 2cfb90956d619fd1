"""Exception classes for the BGMI stat extractor.

Parsing and reconciliation never raise on malformed OCR text; everything here
is raised at the request boundary (config, image decoding, empty output).
"""


class ConfigError(Exception):
    """Raised when a profile or environment override holds an invalid value.

    Args:
        key: The configuration key that failed validation.
        reason: Human-readable explanation of why the value is invalid.
    """

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


class OCRError(Exception):
    """Raised when an uploaded file cannot be decoded as an image.

    Args:
        filename: Name of the offending upload, if known.
        reason: Underlying decoder message.
    """

    def __init__(self, filename: str, reason: str) -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"Could not read image '{filename}': {reason}")


class NoSlotsDetectedError(Exception):
    """Raised when the lobby text yields no slot numbers at all.

    This is the only condition fatal to a reconciliation request. The raw
    texts are kept so the caller can correct them and re-parse.
    """

    message = "Could not detect any slot numbers. Check raw OCR text and re-parse manually."

    def __init__(self, lobby_text: str = "", result_text: str = "") -> None:
        self.lobby_text = lobby_text
        self.result_text = result_text
        super().__init__(self.message)
