import os
import random
from datetime import datetime, timedelta, timezone

from flask import Flask

from diary.config import load_config
from diary.repository import build_repository
from diary.service.catalog import BREATHING_PATTERNS


MORNING_ANSWERS = [
    ("Coffee with a friend", "The morning light", "My sister with her move"),
    ("A quiet house", "A good book", "A new colleague"),
    ("My health", "Music on the way to work", "Whoever asks in standup"),
]
EVENING_ANSWERS = [
    ("Finished the report", "Small steps add up", "Start earlier"),
    ("Long walk after dinner", "Saying no is fine", "Plan the day tonight"),
    ("Good call with the team", "Ask questions sooner", "Fewer meetings"),
]
TODOS = [
    ("Review quarterly goals", "high", "Work", 4),
    ("Book dentist appointment", "medium", "Personal", 1),
    ("Read two chapters", "low", "Personal", 2),
    ("Draft release notes", "high", "Work", 3),
    ("Clean up inbox", "medium", "My Tasks", 1),
]


def _stamp(value):
    return value.isoformat(timespec="microseconds")


def _clear_user(repository, user_id):
    # Remove existing journal data for the seed user.
    for answer in repository.fetch_answers(user_id):
        repository.delete_answer(user_id, answer["id"])
    for practice in repository.fetch_practices(user_id):
        repository.delete_practice(user_id, practice["id"])
    for todo in repository.fetch_todos(user_id):
        repository.delete_todo(user_id, todo["id"])


def seed_db(days=30):
    config = load_config()
    seed_user_id = os.getenv("SEED_USER_ID", "dev-user")
    seed_user_email = os.getenv("SEED_USER_EMAIL", "seed@diary.local")

    random.seed(42)
    app = Flask(__name__)
    repository = build_repository(config)

    with app.app_context():
        repository.init_db()
        now = datetime.now(timezone.utc)
        repository.ensure_user(seed_user_id, seed_user_email, "Seed User", _stamp(now))
        _clear_user(repository, seed_user_id)
        repository.create_default_settings(seed_user_id, _stamp(now))

        start_day = (now - timedelta(days=days)).replace(hour=0, minute=0, second=0, microsecond=0)
        practice_types = list(BREATHING_PATTERNS)
        for day_offset in range(days):
            day_start = start_day + timedelta(days=day_offset)
            morning = day_start + timedelta(hours=7, minutes=random.randint(0, 59))
            evening = day_start + timedelta(hours=21, minutes=random.randint(0, 59))
            repository.create_answer(
                seed_user_id, "morning", *random.choice(MORNING_ANSWERS), _stamp(morning)
            )
            if random.random() < 0.8:
                repository.create_answer(
                    seed_user_id, "evening", *random.choice(EVENING_ANSWERS), _stamp(evening)
                )
            if random.random() < 0.5:
                practiced_at = day_start + timedelta(hours=random.randint(9, 18))
                repository.create_practice(
                    seed_user_id,
                    random.choice(practice_types),
                    random.randint(60, 600),
                    _stamp(practiced_at),
                )

        for title, priority, list_name, estimate in TODOS:
            todo = repository.create_todo(
                seed_user_id,
                {
                    "title": title,
                    "priority": priority,
                    "list_name": list_name,
                    "estimated_pomodoros": estimate,
                },
                _stamp(now),
            )
            for _ in range(random.randint(0, estimate)):
                completed_at = now - timedelta(hours=random.randint(1, 72))
                repository.create_pomodoro_session(
                    seed_user_id, "work", 25, todo["id"], _stamp(completed_at)
                )
                repository.increment_todo_pomodoros(seed_user_id, todo["id"], _stamp(now))


if __name__ == "__main__":
    seed_db()
    print("Seeded demo journal data.")
