# Columns a partial update may touch, per table. updated_at is always stamped.
ANSWER_UPDATE_COLUMNS = ("question_1", "question_2", "question_3")
SETTINGS_UPDATE_COLUMNS = (
    "morning_notification_time",
    "evening_notification_time",
    "theme",
)
TODO_UPDATE_COLUMNS = (
    "title",
    "description",
    "is_completed",
    "priority",
    "due_date",
    "notes",
    "list_name",
    "reminder_date",
    "estimated_pomodoros",
    "completed_pomodoros",
)
TODO_CREATE_COLUMNS = (
    "title",
    "description",
    "priority",
    "due_date",
    "notes",
    "list_name",
    "reminder_date",
    "estimated_pomodoros",
)
