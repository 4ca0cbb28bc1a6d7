"""Terminal Pomodoro timer that records finished sessions through the API."""

import argparse
import os
import time

from dotenv import load_dotenv

from diary.config import configure_logging
from diary.timer.pomodoro import PomodoroTimer, SessionType, TimerState
from diary.timer.recorders import HttpRecorder
from diary.timer.ticker import Ticker


def create_parser():
    parser = argparse.ArgumentParser(
        prog="pomodoro",
        description="Run Pomodoro sessions and record them in the diary.",
    )
    parser.add_argument(
        "--base-url",
        default=os.getenv("DIARY_BASE_URL", "http://localhost:5000"),
        help="Diary server URL",
    )
    parser.add_argument(
        "--token",
        default=os.getenv("DIARY_ACCESS_TOKEN"),
        help="Session token (or set DIARY_ACCESS_TOKEN)",
    )
    parser.add_argument("--task-id", type=int, help="Todo to credit work sessions to")
    parser.add_argument("--work", type=int, default=25, help="Work minutes")
    parser.add_argument("--short-break", type=int, default=5, help="Short break minutes")
    parser.add_argument("--long-break", type=int, default=15, help="Long break minutes")
    parser.add_argument("--sessions", type=int, default=4, help="Work sessions to run")
    return parser


def run(timer, work_sessions):
    """Run sessions back to back until ``work_sessions`` work sessions are recorded."""
    with Ticker(timer):
        while timer.completed_today < work_sessions:
            current_type = timer.session_type
            timer.start()
            while timer.state in (TimerState.RUNNING, TimerState.COMPLETED):
                print(f"\r{current_type.value:<12} {timer.display}", end="", flush=True)
                time.sleep(0.5)
            print()
            if timer.last_error is not None:
                print(f"Not recorded: {timer.last_error.message}")
                return False
    return True


def main():
    load_dotenv()
    args = create_parser().parse_args()
    if not args.token:
        raise SystemExit("A session token is required (--token or DIARY_ACCESS_TOKEN).")
    configure_logging("WARNING")

    timer = PomodoroTimer(
        HttpRecorder(args.base_url, args.token),
        durations={
            SessionType.WORK: args.work,
            SessionType.SHORT_BREAK: args.short_break,
            SessionType.LONG_BREAK: args.long_break,
        },
    )
    timer.select_task(args.task_id)
    try:
        finished = run(timer, args.sessions)
    except KeyboardInterrupt:
        timer.reset()
        print("\nStopped.")
        return
    print(f"Completed {timer.completed_today} work session(s).")
    if not finished:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
