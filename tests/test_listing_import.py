import json
import unittest

from listings import importer
from listings import repository as listings_repository


class ListingQueryBuilderTests(unittest.TestCase):
    def test_admin_sql_without_search(self):
        columns = {"id", "google_place_id", "name", "rating", "unknown_column"}
        count_sql, page_sql = listings_repository.build_admin_list_sql(columns, with_search=False)

        self.assertEqual(count_sql, "SELECT COUNT(*) FROM listings")
        self.assertIn("SELECT id, google_place_id, name, rating FROM listings", page_sql)
        self.assertIn("ORDER BY name ASC LIMIT $1 OFFSET $2", page_sql)
        self.assertNotIn("unknown_column", page_sql)

    def test_admin_sql_with_search_shifts_placeholders(self):
        columns = {"id", "google_place_id", "name", "vicinity"}
        count_sql, page_sql = listings_repository.build_admin_list_sql(columns, with_search=True)

        self.assertIn("google_place_id ILIKE $1 OR name ILIKE $1 OR vicinity ILIKE $1", count_sql)
        self.assertIn("LIMIT $2 OFFSET $3", page_sql)

    def test_admin_sql_search_without_searchable_columns(self):
        count_sql, page_sql = listings_repository.build_admin_list_sql({"id", "rating"}, with_search=True)
        self.assertNotIn("$1", count_sql)
        self.assertIn("ORDER BY id ASC LIMIT $1 OFFSET $2", page_sql)

    def test_order_by_fallbacks(self):
        self.assertEqual(listings_repository.order_by_column({"google_place_id"}, ["google_place_id"]), "google_place_id")
        self.assertEqual(listings_repository.order_by_column({"rating"}, ["rating"]), "rating")
        self.assertEqual(listings_repository.order_by_column(set(), []), "id")

    def test_by_type_where_prefers_types_array(self):
        where = listings_repository.build_by_type_where({"main_type", "types", "is_approved"})
        self.assertEqual(where, "(main_type = $1 OR $1 = ANY(types)) AND is_approved = TRUE")

    def test_by_type_where_main_type_only(self):
        self.assertEqual(listings_repository.build_by_type_where({"main_type"}), "main_type = $1")


class PlaceParsingTests(unittest.TestCase):
    def test_parse_place_flattens_details(self):
        place = importer.parse_place(
            {
                "place_id": "abc123",
                "name": "  Corner Bakery ",
                "geometry": {"location": {"lat": "40.7", "lng": -73.9}},
                "types": ["bakery", "food", "store"],
                "editorial_summary": {"overview": "Fresh bread daily."},
                "formatted_phone_number": "(555) 010-0100",
                "rating": 4.6,
                "user_ratings_total": "120",
            }
        )

        self.assertEqual(place["google_place_id"], "abc123")
        self.assertEqual(place["name"], "Corner Bakery")
        self.assertEqual(place["latitude"], 40.7)
        self.assertEqual(place["longitude"], -73.9)
        self.assertEqual(place["main_type"], "bakery")
        self.assertEqual(place["types"], ["bakery", "food", "store"])
        self.assertEqual(place["editorial_summary"], "Fresh bread daily.")
        self.assertEqual(place["phone_number"], "(555) 010-0100")
        self.assertEqual(place["user_ratings_total"], 120)

    def test_parse_place_requires_id_and_name(self):
        with self.assertRaises(importer.ImportPayloadError):
            importer.parse_place({"name": "No Id"})
        with self.assertRaises(importer.ImportPayloadError):
            importer.parse_place({"google_place_id": "x"})

    def test_parse_periods(self):
        periods = importer.parse_periods(
            {"opening_hours": {"periods": [{"open": {"day": 1, "time": "0900"}, "close": {"day": 1, "time": "1700"}}]}}
        )
        self.assertEqual(
            periods,
            [{"open_day": 1, "open_time": "0900", "close_day": 1, "close_time": "1700"}],
        )
        self.assertIsNone(importer.parse_periods({"opening_hours": {"open_now": True}}))


class UploadDecodingTests(unittest.TestCase):
    def test_accepts_bare_array(self):
        data = json.dumps([{"place_id": "a", "name": "A"}]).encode("utf-8")
        self.assertEqual(len(importer.decode_upload(data)), 1)

    def test_accepts_places_search_response(self):
        data = json.dumps({"results": [{"place_id": "a", "name": "A"}, {"place_id": "b", "name": "B"}]}).encode()
        self.assertEqual(len(importer.decode_upload(data)), 2)

    def test_rejects_invalid_json(self):
        with self.assertRaises(importer.ImportPayloadError):
            importer.decode_upload(b"{not json")

    def test_rejects_empty_batch(self):
        with self.assertRaises(importer.ImportPayloadError):
            importer.validate_batch([])
        with self.assertRaises(importer.ImportPayloadError):
            importer.validate_batch({"name": "x"})

    def test_rejects_oversized_upload(self):
        with self.assertRaises(importer.ImportPayloadError):
            importer.decode_upload(b" " * (importer.MAX_UPLOAD_BYTES + 1))


class ImportStatsTests(unittest.TestCase):
    def test_response_shape(self):
        stats = importer.ImportStats(processed=3, inserted=1, updated=1)
        stats.errors.append({"google_place_id": "bad", "error": "name is required."})

        response = stats.as_response()
        self.assertEqual(response["message"], "Listings import process completed.")
        self.assertEqual(response["failed"], 1)
        self.assertEqual(response["processed"], 3)


if __name__ == "__main__":
    unittest.main()
