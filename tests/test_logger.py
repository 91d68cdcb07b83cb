import logging
import os
import sys
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from utils.logger import CenteredFormatter, get_logger  # noqa: E402


def make_record(name: str) -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, "hello", None, None)


class CenteredFormatterTests(unittest.TestCase):
    def test_width_grows_and_is_kept_per_instance(self):
        formatter = CenteredFormatter("[%(name)s] %(message)s", min_width=4)
        formatter.format(make_record("shop.checkout"))

        # a new formatter starts from its own minimum and leaves the first alone
        CenteredFormatter("[%(name)s] %(message)s", min_width=4)
        self.assertEqual(formatter.width, len("shop.checkout"))
        self.assertEqual(formatter.format(make_record("db")), f"[{'db'.center(13)}] hello")

    def test_record_name_is_not_modified(self):
        formatter = CenteredFormatter("[%(name)s] %(message)s", min_width=10)
        record = make_record("db")
        formatter.format(record)
        self.assertEqual(record.name, "db")


class GetLoggerTests(unittest.TestCase):
    def test_loggers_share_one_formatter(self):
        first = get_logger("storefront.test.a")
        second = get_logger("storefront.test.b")

        self.assertIs(first.handlers[0].formatter, second.handlers[0].formatter)
        self.assertFalse(first.propagate)

    def test_handler_added_once(self):
        get_logger("storefront.test.c")
        self.assertEqual(len(get_logger("storefront.test.c").handlers), 1)


if __name__ == "__main__":
    unittest.main()
