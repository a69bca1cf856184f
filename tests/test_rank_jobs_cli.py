import importlib.util
import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

_SCRIPT = PROJECT_ROOT / "scripts" / "rank_jobs.py"
_spec = importlib.util.spec_from_file_location("rank_jobs", _SCRIPT)
rank_jobs = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(rank_jobs)


class RankJobsCliTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.jobs = self.root / "jobs.json"
        self.jobs.write_text(json.dumps([{"id": "1", "title": "Backend Engineer"}]), encoding="utf-8")

    def tearDown(self):
        self._tmp.cleanup()

    def _run(self, resume_path, jobs_path=None):
        argv = ["rank_jobs.py", "--resume", str(resume_path), "--jobs", str(jobs_path or self.jobs)]
        with patch.object(sys, "argv", argv), patch.object(rank_jobs, "get_ai_client") as factory:
            with self.assertRaises(SystemExit) as ctx:
                rank_jobs.main()
        factory.assert_not_called()
        return str(ctx.exception)

    def test_resume_without_usable_terms_exits_with_message(self):
        resume = self.root / "resume.txt"
        resume.write_text("the and of to in", encoding="utf-8")
        self.assertIn("Resume not usable", self._run(resume))

    def test_unreadable_pdf_exits_with_message(self):
        resume = self.root / "resume.pdf"
        resume.write_bytes(b"not really a pdf")
        self.assertIn("Failed to parse PDF", self._run(resume))

    def test_missing_resume_and_bad_jobs_file(self):
        self.assertIn("Cannot read resume", self._run(self.root / "absent.txt"))

        resume = self.root / "resume.txt"
        resume.write_text("Python engineer building FastAPI services", encoding="utf-8")
        broken = self.root / "broken.json"
        broken.write_text("[{", encoding="utf-8")
        self.assertIn("Cannot load job postings", self._run(resume, broken))


if __name__ == "__main__":
    unittest.main()
