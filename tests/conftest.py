import os
import tempfile

# Must run before any project module creates its logger.
os.environ.setdefault("TIA_LOG_DIR", tempfile.mkdtemp(prefix="tia-logs-"))
os.environ["FORCE_MOCK_LLM"] = "true"
os.environ.setdefault("QUESTION_BANK_PATH", os.path.join(tempfile.mkdtemp(prefix="tia-qbank-"), "questions.json"))
