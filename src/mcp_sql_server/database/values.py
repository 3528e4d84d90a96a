"""Row value classification and JSON encoding.

The ODBC driver returns column values as native Python objects whose type
follows the server-reported column type. Every value falls into one of the
kinds in ``ValueKind``; the kind decides how the value is rendered as JSON.
"""

import json
import struct
import uuid
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

# ODBC type code of SQL Server datetimeoffset columns, unknown to pyodbc
SQL_SS_TIMESTAMPOFFSET = -155


class ValueKind(str, Enum):
    """Kind of a single column value."""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    NULL = "null"
    BINARY = "binary"


def classify_value(value: Any) -> ValueKind:
    """Classify a driver value into a ``ValueKind``."""
    if value is None:
        return ValueKind.NULL
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, (float, Decimal)):
        return ValueKind.FLOAT
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ValueKind.BINARY
    return ValueKind.STRING


def _encode_string(value: Any) -> str:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value).upper()
    return str(value)


def _encode_float(value: Any) -> Any:
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    return value


def _encode_binary(value: Any) -> str:
    return "0x" + bytes(value).hex().upper()


_ENCODERS = {
    ValueKind.STRING: _encode_string,
    ValueKind.FLOAT: _encode_float,
    ValueKind.BINARY: _encode_binary,
}


def encode_value(value: Any) -> Any:
    """Convert a driver value into a JSON-compatible value."""
    encoder = _ENCODERS.get(classify_value(value))
    return encoder(value) if encoder else value


def encode_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Encode every value of a result row, keeping column order."""
    return {column: encode_value(value) for column, value in row.items()}


def serialize_rows(rows: List[Dict[str, Any]]) -> str:
    """Serialize result rows as pretty-printed JSON text."""
    return json.dumps([encode_row(row) for row in rows], indent=2, ensure_ascii=False)


def decode_datetimeoffset(raw: Optional[bytes]) -> Optional[str]:
    """Output converter for datetimeoffset columns.

    The driver hands over the SQL_SS_TIMESTAMPOFFSET_STRUCT bytes: year,
    month, day, hour, minute, second, fraction (nanoseconds) and the offset
    hour and minute.
    """
    if raw is None:
        return None
    year, month, day, hour, minute, second, nanoseconds, offset_hour, offset_minute = struct.unpack(
        "<6hI2h", raw
    )
    offset = timezone(timedelta(hours=offset_hour, minutes=offset_minute))
    value = datetime(year, month, day, hour, minute, second, nanoseconds // 1000, tzinfo=offset)
    return value.isoformat()
