"""Roman numeral conversion for canto labels and headers."""

_VALUES = {
    "I": 1,
    "V": 5,
    "X": 10,
    "L": 50,
    "C": 100,
    "D": 500,
    "M": 1000,
}

_NUMERALS = [
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
]


def to_roman(number: int) -> str:
    """Convert a positive integer to its subtractive roman form (14 -> "XIV")."""
    result = []
    n = number
    for value, numeral in _NUMERALS:
        while n >= value:
            result.append(numeral)
            n -= value
    return "".join(result)


def from_roman(roman: str) -> int:
    """
    Convert a roman numeral to an integer.

    Reads right to left, subtracting a digit smaller than the one after it.
    Characters that are not roman digits count as zero.
    """
    result = 0
    prev_value = 0
    for ch in reversed(roman.upper()):
        value = _VALUES.get(ch, 0)
        if value < prev_value:
            result -= value
        else:
            result += value
        prev_value = value
    return result
