import pytest

from ckpoolkit.difficulty import (
    TRUEDIFFONE,
    ShareError,
    be256todouble,
    diff_from_betarget,
    diff_from_nbits,
    diff_from_target,
    fulltest,
    gen_hash,
    le256todouble,
    share_error_text,
    suffix_string,
    target_from_diff,
)


def test_share_error_codes_and_text():
    assert ShareError.NONE == 0
    assert ShareError.INVALID_NONCE2 == -9
    assert ShareError.INVALID_VERSION_MASK == 6
    assert share_error_text(ShareError.NONE) == "Valid"
    assert share_error_text(-9) == "Invalid nonce2 length"
    assert share_error_text(ShareError.STALE) == "Stale"
    assert share_error_text(ShareError.HIGH_DIFF) == "Above target"


def test_share_error_text_rejects_unknown_code():
    with pytest.raises(ValueError):
        share_error_text(7)
    with pytest.raises(ValueError):
        share_error_text(-10)


def test_le_and_be_agree_on_reversed_bytes():
    data = bytes(range(32))
    assert le256todouble(data) == be256todouble(data[::-1])


def test_le256todouble_low_byte():
    assert le256todouble(b"\x01" + b"\x00" * 31) == 1.0
    assert be256todouble(b"\x00" * 31 + b"\x01") == 1.0


def test_wrong_length_rejected():
    with pytest.raises(ValueError):
        le256todouble(b"\x00" * 31)
    with pytest.raises(ValueError):
        fulltest(b"\x00" * 32, b"\x00" * 33)


def test_target_for_difficulty_one_matches_truediffone():
    target = target_from_diff(1.0)
    assert len(target) == 32
    assert int.from_bytes(target, "little") == 0xFFFF << 208
    assert le256todouble(target) == TRUEDIFFONE


def test_zero_difficulty_gives_all_ones():
    assert target_from_diff(0.0) == b"\xff" * 32


def test_zero_target_is_treated_as_one():
    assert diff_from_target(b"\x00" * 32) == TRUEDIFFONE
    assert diff_from_betarget(b"\x00" * 32) == TRUEDIFFONE


@pytest.mark.parametrize("diff", [1.0, 2.0, 1000.0, 65536.0, 123456.789])
def test_difficulty_round_trip(diff):
    target = target_from_diff(diff)
    assert diff_from_target(target) == pytest.approx(diff, rel=1e-9)
    assert diff_from_betarget(target[::-1]) == pytest.approx(diff, rel=1e-9)


def test_higher_difficulty_gives_lower_target():
    low = int.from_bytes(target_from_diff(10.0), "little")
    high = int.from_bytes(target_from_diff(100.0), "little")
    assert high < low


def test_diff_from_nbits_difficulty_one():
    assert diff_from_nbits(bytes([0x1D, 0x00, 0xFF, 0xFF])) == 1.0


def test_diff_from_nbits_clamps_shift():
    body = bytes([0x00, 0xFF, 0xFF])
    assert diff_from_nbits(bytes([0]) + body) == diff_from_nbits(bytes([3]) + body)
    assert diff_from_nbits(bytes([40]) + body) == diff_from_nbits(bytes([32]) + body)


def test_diff_from_nbits_needs_four_bytes():
    with pytest.raises(ValueError):
        diff_from_nbits(b"\x1d\x00")


def test_fulltest_ordering():
    target = target_from_diff(1.0)
    assert fulltest(target, target) is True
    assert fulltest(b"\x00" * 32, target) is True
    above = bytearray(target)
    above[31] = 1
    assert fulltest(bytes(above), target) is False
    below = bytearray(target)
    below[26] = 0xFE
    assert fulltest(bytes(below), target) is True


def test_gen_hash_of_empty_input():
    assert gen_hash(b"").hex() == (
        "5df6e0e2761359d30a8275058e299fcc0381534545f55cf43e41983f5d4c9456"
    )


def test_gen_hash_length_and_sensitivity():
    first = gen_hash(b"header")
    assert len(first) == 32
    assert gen_hash(b"header") == first
    assert gen_hash(b"heades") != first


def test_suffix_string_plain_values():
    assert suffix_string(999) == "999"
    assert suffix_string(1500) == "1.5K"


def test_suffix_string_picks_suffix():
    assert suffix_string(2.5e9).endswith("G")
    assert suffix_string(3e12).endswith("T")
    assert suffix_string(7e18).endswith("E")
    assert suffix_string(5e6).endswith("M")


def test_suffix_string_fixed_width():
    text = suffix_string(1234, 3)
    assert text.endswith("K")
    assert len(text[:-1]) == 4
    assert float(text[:-1]) == pytest.approx(1.234, abs=0.01)