"""cronkit Quick Start Example."""

import threading
import time
from datetime import datetime

from cronkit import ExpressionError, SearchState, new_job_stream, parse


def show_next_times(expression: str, count: int = 3) -> None:
    """Print the next fire times of an expression."""
    schedule = parse(expression)
    current = datetime.now()

    print(f"   {expression}")
    for _ in range(count):
        current, state = schedule.next(current)
        if state is not SearchState.FOUND:
            print(f"     -> {state}")
            return
        print(f"     -> {current:%Y-%m-%d %H:%M:%S (%a)}")


def main():
    """Main function to demonstrate cronkit usage."""
    print("=== cronkit Quick Start ===\n")

    # 1. Next fire times
    print("1. Computing next fire times...")
    show_next_times("0 30 9 ? * MON-FRI *")  # Weekdays at 09:30
    show_next_times("0 0 18 LW * ? *")  # Last weekday of the month, 18:00
    show_next_times("0 0 12 ? * FRI#3 *")  # Third Friday, noon
    show_next_times("0 0 0 29 2 ? *")  # Leap days only
    show_next_times("*/15 * * * *")  # Classic 5-field cron
    show_next_times("@weekly")
    print()

    # 2. Parse errors
    print("2. Invalid expressions...")
    for expression in ("* * *", "0 0 0 ? * ? *", "@fortnightly", "0 0 25 * * ? *"):
        try:
            parse(expression)
        except ExpressionError as e:
            print(f"   ✗ {expression!r}: {e}")
    print()

    # 3. Notification stream
    print("3. Streaming notifications for 3 seconds...")
    stop = threading.Event()
    threading.Timer(3.5, stop.set).start()
    for notification in new_job_stream("* * * * * * *", stop, timezone="Asia/Seoul"):
        print(f"   ✓ {notification.state}: {notification.time}")
    print()

    # 4. Run a command on every fire
    print("4. Running 'date' every 2 seconds for 5 seconds...")
    stop = threading.Event()
    schedule = parse("*/2 * * * * ? *", verbose=True).bind("date +%T", max_retries=1)
    thread = schedule.run(stop)

    try:
        time.sleep(5)
    finally:
        stop.set()
        thread.join(timeout=5)

    print("\n=== Done ===")


if __name__ == "__main__":
    main()
