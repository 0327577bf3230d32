"""
Field and record reading for the semicolon-delimited country dataset.

Quoted fields may contain `;`, newlines and brackets; a doubled quote inside
a quoted field stands for one literal quote character.
"""

from typing import Iterator, List, Tuple

FIELD_DELIMITER = ';'
RECORD_DELIMITER = '\n'
QUOTE = '"'


def read_field(data: str, start: int) -> Tuple[str, int, bool]:
    """Reads one field beginning at `start`.

    Returns the field text, the position just past the field's trailing
    delimiter, and whether the field ended its record (newline or end of input).
    """
    size = len(data)
    pos = start
    chars = []

    if pos < size and data[pos] == QUOTE:
        pos += 1
        while pos < size:
            c = data[pos]
            if c == QUOTE:
                if pos + 1 < size and data[pos + 1] == QUOTE:
                    chars.append(QUOTE)
                    pos += 2
                    continue
                pos += 1
                break
            chars.append(c)
            pos += 1
        # Anything between the closing quote and the delimiter is dropped
        while pos < size and data[pos] not in (FIELD_DELIMITER, RECORD_DELIMITER):
            pos += 1
    else:
        end = pos
        while end < size and data[end] not in (FIELD_DELIMITER, RECORD_DELIMITER):
            end += 1
        chars.append(data[pos:end])
        pos = end

    if pos >= size:
        return ''.join(chars), size, True
    ends_record = data[pos] == RECORD_DELIMITER
    return ''.join(chars), pos + 1, ends_record


class RecordReader:
    """Cursor over a whole dataset, yielding one list of fields per record."""

    def __init__(self, data: str):
        self.data = data
        self.pos = 0

    @property
    def exhausted(self) -> bool:
        return self.pos >= len(self.data)

    def read_field(self) -> Tuple[str, bool]:
        text, self.pos, ends_record = read_field(self.data, self.pos)
        return text, ends_record

    def read_record(self) -> List[str]:
        fields = []
        while True:
            text, ends_record = self.read_field()
            fields.append(text)
            if ends_record:
                return fields

    def __iter__(self) -> Iterator[List[str]]:
        while not self.exhausted:
            yield self.read_record()
