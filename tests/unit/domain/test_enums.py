"""Unit tests for shared enumerations."""

import pytest

from xaman_sdk.domain.enums import (
    KycStatus,
    XrplPaymentFlags,
    XrplTrustSetFlags,
)


class TestKycStatus:
    @pytest.mark.parametrize("name", ["SUCCESSFUL", "IN_PROGRESS", "REJECTED", "NONE"])
    def test_from_api_name(self, name: str) -> None:
        assert KycStatus.from_name(name).value == name

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="KycStatus"):
            KycStatus.from_name("APPROVED")


def test_flags_combine_into_ledger_integers() -> None:
    flags = XrplPaymentFlags.TF_PARTIAL_PAYMENT | XrplPaymentFlags.TF_NO_DIRECT_RIPPLE
    assert int(flags) == 196608
    assert int(XrplTrustSetFlags.TF_SET_NO_RIPPLE) == 131072
