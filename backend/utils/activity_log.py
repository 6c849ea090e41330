# backend/utils/activity_log.py
from datetime import datetime, timedelta
from typing import Optional

from utils.storage import ShareDirectory, CUSTOMER_LOGS_SHARE

LOGS_DIRECTORY = "logs"
SEPARATOR = "-" * 48


def log_file_name(customer_email: str) -> str:
    return f"{customer_email}_log.txt"


def format_entry(action: str, timestamp: datetime, duration: Optional[timedelta] = None) -> str:
    lines = [
        f"Action: {action}",
        f"Timestamp: {timestamp:%Y-%m-%d %H:%M:%S}",
    ]
    if duration is not None:
        minutes = f"{duration.total_seconds() / 60:.2f}".rstrip("0").rstrip(".")
        lines.append(f"Session Duration: {minutes} minutes")
    lines.append(SEPARATOR)
    return "\n".join(lines) + "\n"


def log_activity(customer_email: str, action: str, timestamp: datetime,
                 duration: Optional[timedelta] = None) -> str:
    """Append one entry to the customer's log file and return the full log.

    The file is read and rewritten whole; a customer has at most one
    active session, so there is a single writer. Raises StorageFailure.
    """
    directory = ShareDirectory(CUSTOMER_LOGS_SHARE, LOGS_DIRECTORY)
    directory.create_if_not_exists()

    name = log_file_name(customer_email)
    existing = directory.read_text(name) if directory.exists(name) else ""
    content = existing + format_entry(action, timestamp, duration)
    directory.write_text(name, content)
    return content


def read_activity_log(customer_email: str) -> Optional[str]:
    directory = ShareDirectory(CUSTOMER_LOGS_SHARE, LOGS_DIRECTORY)
    name = log_file_name(customer_email)
    if not directory.exists(name):
        return None
    return directory.read_text(name)
