"""
資料列數值編碼單元測試
"""

import json
import struct
import uuid
from datetime import date, datetime, time
from decimal import Decimal

import pytest

from mcp_sql_server.database.values import (
    ValueKind,
    classify_value,
    decode_datetimeoffset,
    encode_value,
    serialize_rows,
)


class TestClassifyValue:
    """數值分類測試"""

    @pytest.mark.parametrize("value, kind", [
        (None, ValueKind.NULL),
        (True, ValueKind.BOOLEAN),
        (False, ValueKind.BOOLEAN),
        (0, ValueKind.INTEGER),
        (2 ** 40, ValueKind.INTEGER),
        (1.5, ValueKind.FLOAT),
        (Decimal("3.14"), ValueKind.FLOAT),
        ("text", ValueKind.STRING),
        (datetime(2024, 1, 1), ValueKind.STRING),
        (uuid.uuid4(), ValueKind.STRING),
        (b"\x00", ValueKind.BINARY),
        (bytearray(b"ab"), ValueKind.BINARY),
    ])
    def test_classify(self, value, kind):
        """✅ 依 Python 型別分類"""
        assert classify_value(value) is kind


class TestEncodeValue:
    """JSON 編碼測試"""

    def test_plain_values_unchanged(self):
        """✅ JSON 原生型別保持不變"""
        for value in (None, True, 7, 2.5, "abc"):
            assert encode_value(value) == value

    def test_bool_not_converted_to_int(self):
        """✅ bit 欄位保持布林值"""
        assert encode_value(True) is True

    def test_decimal(self):
        """✅ Decimal 轉為數字"""
        assert encode_value(Decimal("10.25")) == 10.25
        assert encode_value(Decimal("10.00")) == 10
        assert isinstance(encode_value(Decimal("10.00")), int)

    def test_temporal_values(self):
        """✅ 日期時間轉為 ISO 8601 字串"""
        assert encode_value(datetime(2024, 2, 29, 13, 5, 7)) == "2024-02-29T13:05:07"
        assert encode_value(date(2024, 2, 29)) == "2024-02-29"
        assert encode_value(time(23, 59)) == "23:59:00"

    def test_uuid_upper_case(self):
        """✅ uniqueidentifier 轉為大寫字串"""
        value = uuid.UUID("6f9619ff-8b86-d011-b42d-00c04fc964ff")
        assert encode_value(value) == "6F9619FF-8B86-D011-B42D-00C04FC964FF"

    def test_binary_hex(self):
        """✅ 二進位值轉為 0x 十六進位字串"""
        assert encode_value(b"\xde\xad\xbe\xef") == "0xDEADBEEF"
        assert encode_value(b"") == "0x"


class TestSerializeRows:
    """資料列序列化測試"""

    def test_pretty_printed_array(self):
        """✅ 輸出縮排兩格的 JSON 陣列並保留欄位順序"""
        rows = [{"b": 1, "a": "x"}, {"b": 2, "a": None}]

        text = serialize_rows(rows)

        assert text == '[\n  {\n    "b": 1,\n    "a": "x"\n  },\n  {\n    "b": 2,\n    "a": null\n  }\n]'

    def test_non_ascii_kept(self):
        """✅ 非 ASCII 字元不跳脫"""
        text = serialize_rows([{"名稱": "咖啡"}])

        assert "咖啡" in text
        assert json.loads(text) == [{"名稱": "咖啡"}]

    def test_empty(self):
        """✅ 空結果輸出 []"""
        assert serialize_rows([]) == "[]"


class TestDecodeDatetimeoffset:
    """datetimeoffset output converter 測試"""

    def test_negative_offset_with_fraction(self):
        """✅ 解析日期、微秒與負時區"""
        raw = struct.pack("<6hI2h", 2024, 5, 1, 8, 30, 15, 123456000, -5, -30)
        assert decode_datetimeoffset(raw) == "2024-05-01T08:30:15.123456-05:30"

    def test_utc(self):
        """✅ 零時差輸出 +00:00"""
        raw = struct.pack("<6hI2h", 1999, 12, 31, 23, 59, 59, 0, 0, 0)
        assert decode_datetimeoffset(raw) == "1999-12-31T23:59:59+00:00"

    def test_null(self):
        """✅ NULL 維持 None"""
        assert decode_datetimeoffset(None) is None
