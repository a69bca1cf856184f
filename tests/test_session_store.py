import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.session_store import (  # noqa: E402
    JOB_LISTINGS_KEY,
    RESUME_KEY,
    InMemoryKeyValueStore,
    SqliteKeyValueStore,
)


class SqliteKeyValueStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = str(Path(self._tmp.name) / "nested" / "session.db")

    def tearDown(self):
        self._tmp.cleanup()

    def test_values_survive_reopen(self):
        store = SqliteKeyValueStore(self.db_path)
        store.set(RESUME_KEY, {"rawText": "Python developer", "spokenLanguages": ["en"]})
        store.set(JOB_LISTINGS_KEY, [{"id": "1", "title": "Backend"}])
        store.set(JOB_LISTINGS_KEY, [{"id": "2", "title": "Frontend"}])
        store.close()

        reopened = SqliteKeyValueStore(self.db_path)
        try:
            self.assertEqual(reopened.get(RESUME_KEY)["rawText"], "Python developer")
            self.assertEqual(reopened.get(JOB_LISTINGS_KEY), [{"id": "2", "title": "Frontend"}])
        finally:
            reopened.close()

    def test_missing_and_deleted_keys_return_default(self):
        store = SqliteKeyValueStore(self.db_path)
        try:
            self.assertIsNone(store.get(RESUME_KEY))
            self.assertEqual(store.get(JOB_LISTINGS_KEY, []), [])
            store.set(RESUME_KEY, {"rawText": "x"})
            store.delete(RESUME_KEY)
            self.assertEqual(store.get(RESUME_KEY, "gone"), "gone")
        finally:
            store.close()


class InMemoryKeyValueStoreTests(unittest.TestCase):
    def test_values_are_copied_on_write(self):
        store = InMemoryKeyValueStore()
        jobs = [{"id": "1", "title": "Backend"}]
        store.set(JOB_LISTINGS_KEY, jobs)
        jobs.append({"id": "2", "title": "Frontend"})
        self.assertEqual(store.get(JOB_LISTINGS_KEY), [{"id": "1", "title": "Backend"}])

        store.delete(JOB_LISTINGS_KEY)
        store.delete(JOB_LISTINGS_KEY)
        self.assertIsNone(store.get(JOB_LISTINGS_KEY))


if __name__ == "__main__":
    unittest.main()
