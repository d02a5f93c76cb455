class OtpError(Exception):
    """
    Base class for errors raised by otpkit.
    """


class InvalidConfiguration(OtpError, ValueError):
    """
    Raised when an OTP object is constructed with out-of-range parameters
    (digits, interval, window bounds) or without a usable key.
    """


class UnsupportedHashMode(InvalidConfiguration):
    """
    Raised when a hash mode is not one of SHA1, SHA256 or SHA512.
    """


class InvalidUri(OtpError, ValueError):
    """
    Raised when an otpauth:// provisioning URI cannot be parsed.
    """
