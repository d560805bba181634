import argparse
import os
import sys

# Add project root to sys.path
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.append(BASE_DIR)

from packages.tia_core.config import TIAConfig
from packages.tia_core.logging import get_logger
from packages.tia_qbank.repository import JsonFileQuestionRepository
from packages.tia_qbank.seed import build_seed_questions

logger = get_logger("tia.scripts.seed_questions")


def main(argv=None):
    config = TIAConfig.load()
    parser = argparse.ArgumentParser(description="Seed the JSON question bank with the starter question set.")
    parser.add_argument("--path", default=config.QUESTION_BANK_PATH, help="question bank file")
    parser.add_argument("--append", action="store_true", help="upsert into the existing bank instead of replacing it")
    args = parser.parse_args(argv)

    path = args.path if os.path.isabs(args.path) else os.path.join(BASE_DIR, args.path)
    repo = JsonFileQuestionRepository(file_path=path)
    questions = build_seed_questions()

    if args.append:
        for question in questions:
            repo.save(question)
    else:
        repo.replace_all(questions)

    logger.info(f"Seeded {len(questions)} questions into {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
