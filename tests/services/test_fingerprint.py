import re

import pytest

from singulars.services.fingerprint import (
    FingerprintStore,
    FingerprintUnavailable,
    VoterIdentityProvider,
    coarse_fingerprint,
    generate_fingerprint,
    high_entropy_fingerprint,
    to_base36,
)


class DictStore(FingerprintStore):
    def __init__(self, value=None):
        self.value = value
        self.writes = []

    def read(self):
        return self.value

    def write(self, value):
        self.value = value
        self.writes.append(value)


def failing_generator(signals):
    raise AssertionError("generation should not be needed")


def test_existing_value_is_mirrored_to_the_cleared_store(app):
    local, cookie = DictStore(), DictStore("fp_saved")
    provider = VoterIdentityProvider([local, cookie], generator=failing_generator)

    assert provider.get_identifier() == "fp_saved"
    assert local.value == "fp_saved"
    assert cookie.writes == []


def test_first_store_wins_when_both_hold_values(app):
    local, cookie = DictStore("fp_local"), DictStore("fp_cookie")
    provider = VoterIdentityProvider([local, cookie], generator=failing_generator)

    assert provider.get_identifier() == "fp_local"
    assert cookie.value == "fp_local"


def test_invalid_stored_value_is_ignored(app):
    local, cookie = DictStore("<img src=x>"), DictStore("fp_cookie")
    provider = VoterIdentityProvider([local, cookie], generator=failing_generator)

    assert provider.get_identifier() == "fp_cookie"
    assert local.value == "fp_cookie"


def test_new_identifier_is_persisted_everywhere(app):
    stores = [DictStore(), DictStore(), DictStore()]
    provider = VoterIdentityProvider(stores, generator=lambda signals: "fp_generated")

    assert provider.get_identifier() == "fp_generated"
    assert [store.value for store in stores] == ["fp_generated"] * 3


def test_sync_variant_never_generates(app):
    stores = [DictStore(), DictStore()]
    provider = VoterIdentityProvider(stores, generator=failing_generator)

    assert provider.get_identifier_sync() is None
    assert all(store.value is None for store in stores)


def test_high_entropy_digest_is_stable():
    signals = {"canvas": "data:image/png;base64,AAAA", "fonts": ["Arial", "Menlo"], "platform": "MacIntel"}

    first = high_entropy_fingerprint(signals)

    assert re.fullmatch(r"[0-9a-f]{32}", first)
    assert high_entropy_fingerprint(dict(signals)) == first
    assert high_entropy_fingerprint({**signals, "canvas": "other"}) != first


def test_high_entropy_adopts_client_visitor_id(app):
    assert high_entropy_fingerprint({"visitor_id": "a1b2c3d4e5"}) == "a1b2c3d4e5"
    with pytest.raises(FingerprintUnavailable):
        high_entropy_fingerprint({"visitor_id": "<svg>"})


def test_high_entropy_needs_canvas_or_webgl():
    with pytest.raises(FingerprintUnavailable):
        high_entropy_fingerprint({"fonts": ["Arial"], "platform": "Linux"})


def test_coarse_fallback_shape():
    signals = {
        "user_agent": "Mozilla/5.0",
        "language": "en-US",
        "screen_width": 1440,
        "screen_height": 900,
        "color_depth": 24,
        "timezone_offset": -120,
        "hardware_concurrency": 8,
    }

    value = coarse_fingerprint(signals, now=1700000000.0)

    assert re.fullmatch(r"fp_[0-9a-z]+_[0-9a-z]+", value)
    assert value.endswith("_" + to_base36(1700000000000))
    assert coarse_fingerprint(signals, now=1700000000.0) == value


def test_generation_falls_back_when_signals_are_blocked(app):
    value = generate_fingerprint({"user_agent": "Mozilla/5.0"})

    assert value.startswith("fp_")


def test_generation_always_produces_a_value(app):
    assert generate_fingerprint(None).startswith("fp_")


def test_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
