"""Unit tests for app.services.csv_parser: header rows, blank lines, quoting and malformed input."""

import unittest

from app.services.csv_parser import CsvParseError, decode_csv_bytes, parse_csv


class TestParseCsv(unittest.TestCase):
    """parse_csv uses the first record as header and returns rows in order."""

    def test_rows_keyed_by_header(self) -> None:
        text = "IP Address,CVE,Severity\n10.0.0.1,CVE-2024-0001,High\n10.0.0.2,,Low\n"
        rows = parse_csv(text)
        self.assertEqual(
            rows,
            [
                {"IP Address": "10.0.0.1", "CVE": "CVE-2024-0001", "Severity": "High"},
                {"IP Address": "10.0.0.2", "CVE": "", "Severity": "Low"},
            ],
        )

    def test_skips_empty_lines(self) -> None:
        text = "a,b\n\n1,2\n\n\n3,4\n"
        rows = parse_csv(text)
        self.assertEqual(rows, [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}])

    def test_blank_lines_before_header_are_skipped(self) -> None:
        rows = parse_csv("\n\na,b\n1,2\n")
        self.assertEqual(rows, [{"a": "1", "b": "2"}])

    def test_quoted_fields_keep_commas_and_newlines(self) -> None:
        text = 'Plugin Name,Description\n"SSL, weak","line one\nline two"\n'
        rows = parse_csv(text)
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["Plugin Name"], "SSL, weak")
        self.assertEqual(rows[0]["Description"], "line one\nline two")

    def test_crlf_line_endings(self) -> None:
        rows = parse_csv("a,b\r\n1,2\r\n")
        self.assertEqual(rows, [{"a": "1", "b": "2"}])

    def test_values_are_not_trimmed(self) -> None:
        rows = parse_csv("a,b\n 1 , 2\n")
        self.assertEqual(rows, [{"a": " 1 ", "b": " 2"}])

    def test_empty_input_returns_no_rows(self) -> None:
        self.assertEqual(parse_csv(""), [])

    def test_header_only_returns_no_rows(self) -> None:
        self.assertEqual(parse_csv("a,b,c\n"), [])

    def test_field_larger_than_128k(self) -> None:
        description = "x" * 200_000
        rows = parse_csv(f'IP Address,Description\n10.0.0.1,"{description}"\n')
        self.assertEqual(len(rows[0]["Description"]), 200_000)


class TestParseCsvErrors(unittest.TestCase):
    """Malformed CSV raises CsvParseError."""

    def test_unterminated_quoted_field(self) -> None:
        with self.assertRaises(CsvParseError):
            parse_csv('a,b\n"1,2\n')

    def test_record_with_too_many_fields(self) -> None:
        with self.assertRaises(CsvParseError) as ctx:
            parse_csv("a,b\n1,2,3\n")
        self.assertEqual(ctx.exception.line, 2)

    def test_record_with_too_few_fields(self) -> None:
        with self.assertRaises(CsvParseError):
            parse_csv("a,b,c\n1,2\n")


class TestDecodeCsvBytes(unittest.TestCase):
    def test_strips_byte_order_mark(self) -> None:
        text = decode_csv_bytes("\ufeffIP Address,CVE\n".encode("utf-8"))
        self.assertTrue(text.startswith("IP Address"))

    def test_invalid_utf8_is_replaced(self) -> None:
        self.assertEqual(decode_csv_bytes(b"\xff\xfe\xfa"), "\ufffd\ufffd\ufffd")

    def test_latin1_bytes_keep_surrounding_text(self) -> None:
        text = decode_csv_bytes("Plugin Name\nCaf\u00e9 server\n".encode("latin-1"))
        self.assertEqual(text, "Plugin Name\nCaf\ufffd server\n")


if __name__ == "__main__":
    unittest.main()
