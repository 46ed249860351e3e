import hashlib
import json
import time

from flask import after_this_request, current_app, request

from singulars.services.voting.validation import fingerprint_problem

FINGERPRINT_PREFIX = "fp_"

HIGH_ENTROPY_SIGNALS = ("canvas", "webgl", "audio", "fonts", "platform", "touch_points")
COARSE_SIGNALS = (
    "user_agent",
    "language",
    "screen_width",
    "screen_height",
    "color_depth",
    "timezone_offset",
    "hardware_concurrency",
)


class FingerprintUnavailable(Exception):
    pass


class FingerprintStore:
    name = "store"

    def read(self):
        raise NotImplementedError

    def write(self, value):
        raise NotImplementedError


class CookieStore(FingerprintStore):
    name = "cookie"

    def read(self):
        return request.cookies.get(current_app.config["FINGERPRINT_COOKIE_NAME"])

    def write(self, value):
        @after_this_request
        def set_cookie(response):
            response.set_cookie(
                current_app.config["FINGERPRINT_COOKIE_NAME"],
                value,
                max_age=current_app.config["FINGERPRINT_COOKIE_MAX_AGE"],
                path="/",
                samesite="Lax",
            )
            return response


class ClientStorageStore(FingerprintStore):
    # Browser local storage, exchanged through a request/response header.

    name = "client_storage"

    def read(self):
        return request.headers.get(current_app.config["FINGERPRINT_HEADER"])

    def write(self, value):
        @after_this_request
        def set_header(response):
            response.headers[current_app.config["FINGERPRINT_HEADER"]] = value
            return response


def _rolling_hash(raw):
    # 32-bit signed ``hash * 31 + char``.
    value = 0
    for char in raw:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def to_base36(number):
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number == 0:
        return "0"
    result = ""
    while number:
        number, remainder = divmod(number, 36)
        result = digits[remainder] + result
    return result


def high_entropy_fingerprint(signals):
    visitor_id = signals.get("visitor_id")
    if visitor_id:
        if not isinstance(visitor_id, str) or fingerprint_problem(visitor_id):
            raise FingerprintUnavailable("visitor_id is not a usable fingerprint")
        return visitor_id

    present = {name: signals[name] for name in HIGH_ENTROPY_SIGNALS if signals.get(name)}
    if "canvas" not in present and "webgl" not in present:
        raise FingerprintUnavailable("no canvas or webgl signal")
    try:
        payload = json.dumps(present, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise FingerprintUnavailable("signals are not serializable") from exc
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:32]


def coarse_fingerprint(signals, now=None):
    raw = "|".join(
        "" if signals.get(name) is None else str(signals.get(name)) for name in COARSE_SIGNALS
    )
    timestamp_ms = int((time.time() if now is None else now) * 1000)
    return f"{FINGERPRINT_PREFIX}{to_base36(abs(_rolling_hash(raw)))}_{to_base36(timestamp_ms)}"


def generate_fingerprint(signals=None):
    signals = dict(signals or {})
    try:
        return high_entropy_fingerprint(signals)
    except FingerprintUnavailable as exc:
        current_app.logger.debug("Falling back to coarse fingerprint: %s", exc)
    return coarse_fingerprint(signals)


def request_signals(signals=None):
    signals = dict(signals or {})
    signals.setdefault("user_agent", request.headers.get("User-Agent", ""))
    if not signals.get("language"):
        accept_language = request.headers.get("Accept-Language", "")
        signals["language"] = accept_language.split(",")[0].split(";")[0].strip()
    return signals


class VoterIdentityProvider:
    def __init__(self, stores, generator=generate_fingerprint):
        self.stores = list(stores)
        self.generator = generator

    def _stored(self):
        for store in self.stores:
            value = store.read()
            if value and not fingerprint_problem(value):
                return value
        return None

    def _persist(self, value):
        for store in self.stores:
            if store.read() != value:
                store.write(value)

    def get_identifier_sync(self):
        """Return the stored fingerprint, repairing cleared replicas, or None."""
        existing = self._stored()
        if existing:
            self._persist(existing)
        return existing

    def get_identifier(self, signals=None):
        existing = self.get_identifier_sync()
        if existing:
            return existing

        value = self.generator(signals)
        self._persist(value)
        return value


def request_identity_provider():
    return VoterIdentityProvider([ClientStorageStore(), CookieStore()])
