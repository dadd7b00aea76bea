"""
NXT Reed-Solomon account addresses.

An account ID (unsigned 64-bit) is written as 13 base-32 data symbols
plus 4 parity symbols over GF(32), e.g. `NXT-XXXX-XXXX-XXXX-XXXXX`.
"""

from __future__ import annotations

from typing import List

PREFIX = "NXT-"

ALPHABET = "23456789ABCDEFGHJKLMNPQRSTUVWXYZ"

_GEXP = [
    1, 2, 4, 8, 16, 5, 10, 20, 13, 26, 17, 7, 14, 28, 29, 31,
    27, 19, 3, 6, 12, 24, 21, 15, 30, 25, 23, 11, 22, 9, 18, 1,
]
_GLOG = [0] * 32
for _power, _value in enumerate(_GEXP[:31]):
    _GLOG[_value] = _power

_CODEWORD_MAP = [3, 2, 1, 0, 7, 6, 5, 4, 13, 14, 15, 16, 12, 8, 9, 10, 11]
_CODEWORD_LENGTH = 17
_BASE_32_LENGTH = 13


class AddressError(ValueError):
    """Raised for strings that are not valid Reed-Solomon addresses."""


def _gmult(a: int, b: int) -> int:
    if a == 0 or b == 0:
        return 0
    return _GEXP[(_GLOG[a] + _GLOG[b]) % 31]


def _is_codeword_valid(codeword: List[int]) -> bool:
    checksum = 0
    for i in range(1, 5):
        t = 0
        for j in range(31):
            if 12 < j < 27:
                continue
            pos = j - 14 if j > 26 else j
            t ^= _gmult(codeword[pos], _GEXP[(i * j) % 31])
        checksum |= t
    return checksum == 0


def encode(account_id: int) -> str:
    """Return the `NXT-` address of a numeric account ID."""

    if account_id < 0 or account_id >= 2 ** 64:
        raise AddressError(f"Account ID out of range: {account_id}")

    digits = [int(c) for c in str(account_id)]
    length = len(digits)
    codeword = [0] * _CODEWORD_LENGTH
    codeword_length = 0

    # Repeated long division of the decimal digits by 32.
    while True:
        new_length = 0
        digit_32 = 0
        for i in range(length):
            digit_32 = digit_32 * 10 + digits[i]
            if digit_32 >= 32:
                digits[new_length] = digit_32 >> 5
                digit_32 &= 31
                new_length += 1
            elif new_length > 0:
                digits[new_length] = 0
                new_length += 1
        length = new_length
        codeword[codeword_length] = digit_32
        codeword_length += 1
        if length <= 0:
            break

    p = [0, 0, 0, 0]
    for i in range(_BASE_32_LENGTH - 1, -1, -1):
        fb = codeword[i] ^ p[3]
        p[3] = p[2] ^ _gmult(30, fb)
        p[2] = p[1] ^ _gmult(6, fb)
        p[1] = p[0] ^ _gmult(9, fb)
        p[0] = _gmult(17, fb)
    codeword[_BASE_32_LENGTH:] = p

    out = []
    for i in range(_CODEWORD_LENGTH):
        out.append(ALPHABET[codeword[_CODEWORD_MAP[i]]])
        if (i & 3) == 3 and i < 13:
            out.append("-")
    return PREFIX + "".join(out)


def decode(address: str) -> int:
    """Return the numeric account ID of an `NXT-` address."""

    if not address.upper().startswith(PREFIX):
        raise AddressError(f"Missing {PREFIX} prefix: {address}")

    codeword = [0] * _CODEWORD_LENGTH
    codeword_length = 0
    for char in address[len(PREFIX):].upper():
        if char == "-":
            continue
        position = ALPHABET.find(char)
        if position < 0 or codeword_length >= _CODEWORD_LENGTH:
            raise AddressError(f"Malformed address: {address}")
        codeword[_CODEWORD_MAP[codeword_length]] = position
        codeword_length += 1

    if codeword_length != _CODEWORD_LENGTH or not _is_codeword_valid(codeword):
        raise AddressError(f"Checksum mismatch: {address}")

    length = _BASE_32_LENGTH
    digits_32 = [codeword[length - i - 1] for i in range(length)]
    decimal_digits = []

    while True:
        new_length = 0
        digit_10 = 0
        for i in range(length):
            digit_10 = digit_10 * 32 + digits_32[i]
            if digit_10 >= 10:
                digits_32[new_length] = digit_10 // 10
                digit_10 %= 10
                new_length += 1
            elif new_length > 0:
                digits_32[new_length] = 0
                new_length += 1
        length = new_length
        decimal_digits.append(str(digit_10))
        if length <= 0:
            break

    account_id = int("".join(reversed(decimal_digits)))
    if account_id >= 2 ** 64:
        raise AddressError(f"Account ID out of range: {address}")
    return account_id


def is_valid(address: str) -> bool:
    try:
        decode(address)
    except AddressError:
        return False
    return True
