"""
UTF-16 offset conversion.

LanguageTool counts offsets in UTF-16 code units (Java ``String``
indices), Python slices by code point. The two only differ once the text
contains characters outside the Basic Multilingual Plane (emoji, some CJK),
each of which takes two UTF-16 units but a single Python index.
"""


def _utf16_units(ch: str) -> int:
    return 2 if ord(ch) > 0xFFFF else 1


def is_bmp_only(text: str) -> bool:
    return all(ord(ch) <= 0xFFFF for ch in text)


def utf16_offset_to_index(text: str, offset: int) -> int:
    """
    Map a UTF-16 code unit offset in *text* to a Python string index.

    Raises:
        ValueError: if *offset* is negative, past the end of *text*, or
            points between the two halves of a surrogate pair.
    """
    if offset < 0:
        raise ValueError(f"negative UTF-16 offset {offset}")

    if is_bmp_only(text):
        if offset > len(text):
            raise ValueError(f"UTF-16 offset {offset} past end of text (length {len(text)})")
        return offset

    units = 0
    for index, ch in enumerate(text):
        if units == offset:
            return index
        units += _utf16_units(ch)
        if units > offset:
            raise ValueError(f"UTF-16 offset {offset} splits a surrogate pair")
    if units == offset:
        return len(text)
    raise ValueError(f"UTF-16 offset {offset} past end of text ({units} units)")
