# ========================
# tests/test_decoding.py
# ========================

import unittest
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.etl.decoding import decode_order, decode_line_item, parse_status, parse_origin
from src.etl.errors import DecodeError
from src.etl.models import LineItem, Order, Origin, Status


class TestTokenParsing(unittest.TestCase):

    def test_parse_status_tokens(self):
        self.assertEqual(parse_status("Pending"), Status.PENDING)
        self.assertEqual(parse_status("Complete"), Status.COMPLETE)
        self.assertEqual(parse_status("Cancelled"), Status.CANCELLED)

    def test_parse_status_is_case_sensitive(self):
        for token in ["pending", "COMPLETE", "Complete ", "", "Invalid"]:
            with self.assertRaises(DecodeError, msg=f"Accepted status: {token!r}"):
                parse_status(token)

    def test_parse_origin_tokens(self):
        self.assertEqual(parse_origin("O"), Origin.ONLINE)
        self.assertEqual(parse_origin("P"), Origin.PHONE)

    def test_parse_origin_rejects_unknown(self):
        for token in ["o", "p", "Online", "Invalid"]:
            with self.assertRaises(DecodeError):
                parse_origin(token)


class TestDecodeOrder(unittest.TestCase):

    def test_valid_order(self):
        order = decode_order(["1", "2", "2023-01-01", "Pending", "O"])
        self.assertEqual(order, Order(1, 2, "2023-01-01", Status.PENDING, Origin.ONLINE))

    def test_wrong_arity(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_order(["1", "2", "2023-01-01", "Pending"])
        self.assertEqual(ctx.exception.fields, ["1", "2", "2023-01-01", "Pending"])
        self.assertIsNone(ctx.exception.field)

        with self.assertRaises(DecodeError):
            decode_order(["1", "2", "2023-01-01", "Pending", "O", "extra"])

    def test_invalid_integer_names_field(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_order(["1", "abc", "2023-01-01", "Pending", "O"])
        self.assertEqual(ctx.exception.field, "client_id")

    def test_padded_id_is_rejected(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_order([" 1", "2", "2023-01-01", "Pending", "O"])
        self.assertEqual(ctx.exception.field, "id")

    def test_unknown_status_names_field_and_row(self):
        row = ["1", "2", "2023-01-01", "Shipped", "O"]
        with self.assertRaises(DecodeError) as ctx:
            decode_order(row)
        self.assertEqual(ctx.exception.field, "status")
        self.assertEqual(ctx.exception.fields, row)

    def test_unknown_origin(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_order(["1", "2", "2023-01-01", "Complete", "X"])
        self.assertEqual(ctx.exception.field, "origin")

    def test_fields_format_back_to_input(self):
        row = ["7", "105", "2024-10-02T08:35:11", "Cancelled", "P"]
        order = decode_order(row)
        formatted = [str(order.id), str(order.client_id), order.placed_at,
                     order.status.value, order.origin.value]
        self.assertEqual(formatted, row)


class TestDecodeLineItem(unittest.TestCase):

    def test_valid_line_item(self):
        item = decode_line_item(["1", "2", "3", "10.5", "2.0"])
        self.assertEqual(item, LineItem(1, 2, 3, 10.5, 2.0))

    def test_wrong_arity(self):
        with self.assertRaises(DecodeError):
            decode_line_item(["1", "2", "3", "10.5"])

    def test_invalid_quantity(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_line_item(["1", "2", "three", "10.5", "2.0"])
        self.assertEqual(ctx.exception.field, "quantity")

    def test_invalid_price(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_line_item(["1", "2", "3", "ten", "2.0"])
        self.assertEqual(ctx.exception.field, "unit_price")

    def test_integer_field_rejects_decimal(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_line_item(["1.5", "2", "3", "10.5", "2.0"])
        self.assertEqual(ctx.exception.field, "order_id")

    def test_numbers_with_surrounding_whitespace_are_rejected(self):
        cases = [
            (["1", " 224", "8", "139.43", "12.99"], "product_id"),
            (["1", "224", "100 ", "139.43", "12.99"], "quantity"),
            (["1", "224", "8", " 139.43", "12.99"], "unit_price"),
            (["1", "224", "8", "139.43", "2.0\r"], "tax"),
        ]
        for row, field in cases:
            with self.assertRaises(DecodeError, msg=f"Accepted row: {row!r}") as ctx:
                decode_line_item(row)
            self.assertEqual(ctx.exception.field, field)

    def test_non_ascii_digits_are_rejected(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_line_item(["\u0661", "224", "8", "139.43", "12.99"])
        self.assertEqual(ctx.exception.field, "order_id")

        with self.assertRaises(DecodeError) as ctx:
            decode_line_item(["1", "224", "8", "\u0661\u0662.5", "12.99"])
        self.assertEqual(ctx.exception.field, "unit_price")

    def test_decimal_forms_accepted(self):
        item = decode_line_item(["1", "+2", "-3", ".5", "1e2"])
        self.assertEqual(item, LineItem(1, 2, -3, 0.5, 100.0))

    def test_fields_format_back_to_input(self):
        row = ["1", "224", "8", "139.43", "12.99"]
        item = decode_line_item(row)
        formatted = [str(item.order_id), str(item.product_id), str(item.quantity),
                     str(item.unit_price), str(item.tax)]
        self.assertEqual(formatted, row)

    def test_error_message_mentions_row(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_line_item(["1", "2", "3", "ten", "2.0"])
        self.assertIn("unit_price", str(ctx.exception))
        self.assertIn("'ten'", str(ctx.exception))


if __name__ == '__main__':
    unittest.main()
