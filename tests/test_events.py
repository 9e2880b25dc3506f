import json
import os
import shutil
import tempfile
import unittest
from datetime import datetime, timezone
from salesdash.events.model import (
    event_from_dict, normalize_label, line_of_work_label, parse_timestamp,
)
from salesdash.events.store import InMemoryEventStore, JsonFileEventStore, EventStoreError


class TestEventModel(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp)

    def test_from_camel_case(self):
        e = event_from_dict({
            "id": "abc", "eventType": "order", "date": "2025-04-02T09:30:00",
            "quoteSent": False, "poReceived": True, "status": "Active",
            "price": "1500.5", "salesRepresentative": "Clare", "lineOfWork": "SSC",
            "customerName": "Acme", "poNumber": "PO-1",
        })
        self.assertEqual(e.event_type, "ORDER")
        self.assertEqual(e.date, datetime(2025, 4, 2, 9, 30))
        self.assertTrue(e.po_received)
        self.assertAlmostEqual(e.price, 1500.5)
        self.assertEqual(e.sales_representative, "Clare")
        self.assertEqual(e.line_of_work, "SSC")
        self.assertEqual(e.po_number, "PO-1")

    def test_malformed_fields_degrade(self):
        e = event_from_dict({"id": 7, "eventType": None, "date": "not a date", "price": "n/a", "status": None, "quoteSent": "Yes"})
        self.assertEqual(e.id, "7")
        self.assertEqual(e.event_type, "")
        self.assertIsNone(e.date)
        self.assertIsNone(e.price)
        self.assertEqual(e.amount, 0.0)
        self.assertEqual(e.status, "")
        self.assertTrue(e.quote_sent)

    def test_non_finite_price_dropped(self):
        for raw in ("Infinity", "-inf", float("inf"), "nan"):
            e = event_from_dict({"id": "1", "eventType": "QUOTE", "price": raw})
            self.assertIsNone(e.price, raw)
            self.assertEqual(e.amount, 0.0)

    def test_zero_id_kept(self):
        self.assertEqual(event_from_dict({"id": 0}).id, "0")
        self.assertEqual(event_from_dict({}).id, "")

    def test_json_infinity_in_store(self):
        path = os.path.join(self.tmp, "inf.json")
        with open(path, "w") as f:
            f.write('[{"id": "1", "eventType": "QUOTE", "quoteSent": true, "price": Infinity}]')
        events = JsonFileEventStore(path).list_events()
        self.assertIsNone(events[0].price)

    def test_snake_case_and_yes_no(self):
        e = event_from_dict({"event_type": "QUOTE", "quote_sent": "No", "po_received": 1})
        self.assertFalse(e.quote_sent)
        self.assertTrue(e.po_received)

    def test_aware_timestamp_becomes_local_naive(self):
        dt = parse_timestamp("2025-04-02T08:00:00.000Z")
        self.assertIsNone(dt.tzinfo)
        expected = datetime(2025, 4, 2, 8, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        self.assertEqual(dt, expected)

    def test_labels(self):
        self.assertEqual(normalize_label(None), "Unknown")
        self.assertEqual(normalize_label("  "), "Unknown")
        self.assertEqual(normalize_label(" Shaun "), "Shaun")
        self.assertEqual(line_of_work_label("EC"), "Electro Motors")
        self.assertEqual(line_of_work_label(None), "Other")
        self.assertEqual(line_of_work_label("XYZ"), "XYZ")


class TestStores(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp)

    def test_in_memory_snapshot(self):
        store = InMemoryEventStore([event_from_dict({"id": "1"})])
        snap = store.list_events()
        store.add(event_from_dict({"id": "2"}))
        self.assertEqual(len(snap), 1)
        self.assertEqual(len(store.list_events()), 2)

    def test_json_file(self):
        path = os.path.join(self.tmp, "events.json")
        with open(path, "w") as f:
            json.dump([{"id": "1", "eventType": "QUOTE", "quoteSent": True}, "junk"], f)
        events = JsonFileEventStore(path).list_events()
        self.assertEqual(len(events), 1)
        self.assertTrue(events[0].quote_sent)

    def test_missing_file_is_empty(self):
        self.assertEqual(JsonFileEventStore(os.path.join(self.tmp, "nope.json")).list_events(), [])

    def test_bad_json_raises(self):
        path = os.path.join(self.tmp, "bad.json")
        with open(path, "w") as f:
            f.write("{not json")
        with self.assertRaises(EventStoreError):
            JsonFileEventStore(path).list_events()
        with open(path, "w") as f:
            json.dump({"id": "1"}, f)
        with self.assertRaises(EventStoreError):
            JsonFileEventStore(path).list_events()


if __name__ == "__main__":
    unittest.main()
