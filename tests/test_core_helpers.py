import os
import unittest
from unittest.mock import patch

from core import settings
from core.pagination import MAX_PAGE_SIZE, Page, make_page, page_info, total_pages
from core.slugs import slugify


class PaginationTests(unittest.TestCase):
    def test_make_page_clamps_and_defaults(self):
        self.assertEqual(make_page(None, None), Page(page=1, page_size=20))
        self.assertEqual(make_page(0, None, default_size=10), Page(page=1, page_size=10))
        self.assertEqual(make_page(1, 0).page_size, 1)
        self.assertEqual(make_page(1, -5).page_size, 1)
        self.assertEqual(make_page(3, 10_000).page_size, MAX_PAGE_SIZE)

    def test_offset(self):
        self.assertEqual(Page(page=3, page_size=25).offset, 50)

    def test_total_pages_rounds_up(self):
        self.assertEqual(total_pages(0, 10), 0)
        self.assertEqual(total_pages(10, 10), 1)
        self.assertEqual(total_pages(11, 10), 2)

    def test_page_info(self):
        info = page_info(Page(page=2, page_size=10), 25)
        self.assertEqual(
            info,
            {
                "page": 2,
                "pageSize": 10,
                "totalItems": 25,
                "totalPages": 3,
                "hasNextPage": True,
                "hasPreviousPage": True,
            },
        )

    def test_page_info_last_page(self):
        info = page_info(Page(page=1, page_size=10), 4)
        self.assertFalse(info["hasNextPage"])
        self.assertFalse(info["hasPreviousPage"])


class SlugifyTests(unittest.TestCase):
    def test_ascii_folding_and_separators(self):
        self.assertEqual(slugify("Café & Bar / Downtown"), "cafe-bar-downtown")

    def test_strips_edge_separators(self):
        self.assertEqual(slugify("  --Hello World!--  "), "hello-world")

    def test_empty_input(self):
        self.assertEqual(slugify(""), "")
        self.assertEqual(slugify("!!!"), "")


class SettingsTests(unittest.TestCase):
    def test_env_bool_values(self):
        with patch.dict(os.environ, {"FLAG_ON": "yes", "FLAG_OFF": "0", "FLAG_BAD": "maybe"}):
            self.assertTrue(settings.env_bool("FLAG_ON", False))
            self.assertFalse(settings.env_bool("FLAG_OFF", True))
            self.assertTrue(settings.env_bool("FLAG_BAD", True))

    def test_env_int_falls_back_on_garbage(self):
        with patch.dict(os.environ, {"SOME_INT": "abc"}):
            self.assertEqual(settings.env_int("SOME_INT", 7), 7)

    def test_cors_origins_from_env(self):
        with patch.dict(os.environ, {"CORS_ALLOWED_ORIGINS": "https://a.test, https://b.test,"}):
            self.assertEqual(settings.cors_allowed_origins(), ["https://a.test", "https://b.test"])

    def test_cors_origins_default(self):
        with patch.dict(os.environ, {"CORS_ALLOWED_ORIGINS": ""}):
            self.assertIn("http://localhost:5173", settings.cors_allowed_origins())


if __name__ == "__main__":
    unittest.main()
