import datetime
import unicodedata
from hmac import compare_digest
from typing import Dict, Optional, Union
from urllib.parse import quote, urlencode, urlparse

EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)

Timestamp = Union[datetime.datetime, int, float]


def build_uri(
    otp_type: str,
    secret: str,
    name: str,
    algorithm: str,
    digits: int,
    issuer: Optional[str] = None,
    period: Optional[int] = None,
    counter: Optional[int] = None,
    image: Optional[str] = None,
) -> str:
    """
    Returns the provisioning URI for the OTP; works for either TOTP or HOTP.

    For module-internal use.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param otp_type: "totp" or "hotp"
    :param secret: the Base32 secret, padding is stripped
    :param name: name of the account
    :param algorithm: the algorithm used in the OTP generation
    :param digits: the length of the OTP generated code
    :param issuer: the name of the OTP issuer; this will be the
        organization title of the OTP entry in Authenticator
    :param period: seconds per time step, TOTP only
    :param counter: starting counter value, HOTP only
    :param image: https URL of a logo shown by some authenticator apps
    :returns: provisioning uri
    """
    url_args: Dict[str, Union[int, str]] = {"secret": secret.rstrip("=")}

    label = quote(name, safe="")
    if issuer:
        label = quote(issuer, safe="") + ":" + label
        url_args["issuer"] = issuer

    url_args["algorithm"] = algorithm.upper()
    url_args["digits"] = digits
    if otp_type == "totp":
        url_args["period"] = period if period is not None else 30
    else:
        url_args["counter"] = counter if counter is not None else 0

    if image is not None:
        if not is_https_url(image):
            raise ValueError("{} is not a valid url".format(image))
        url_args["image"] = image

    return "otpauth://{0}/{1}?{2}".format(otp_type, label, urlencode(url_args).replace("+", "%20"))


def is_https_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme == "https" and bool(parsed.netloc) and bool(parsed.path)


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def to_datetime(for_time: Timestamp) -> datetime.datetime:
    """
    Normalizes a datetime or a Unix timestamp to an aware UTC datetime.
    Naive datetimes are taken to be UTC already.
    """
    if isinstance(for_time, datetime.datetime):
        if for_time.tzinfo is None:
            return for_time.replace(tzinfo=datetime.timezone.utc)
        return for_time.astimezone(datetime.timezone.utc)
    return EPOCH + datetime.timedelta(seconds=for_time)


def unix_seconds(for_time: datetime.datetime) -> int:
    """Whole seconds since the Unix epoch, rounded down."""
    return (for_time - EPOCH) // datetime.timedelta(seconds=1)
