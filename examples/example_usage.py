"""Example: use the service layer directly (no Flask).

Controllers are thin; the attendance rules live in the services and the engine.
"""

import importlib
import sys

from config import get_settings_module

from src.staff_attendance.staff_attendance.attendance.service import status_to_dict
from src.staff_attendance.staff_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    user_id = int(sys.argv[1]) if len(sys.argv) > 1 else 2
    today = container.attendance_service.get_today_status(user_id)
    print(status_to_dict(today))

    for day in container.attendance_service.get_month(user_id):
        print(day.record.work_date, day.status.value, day.working_hours, day.net_working_hours)


if __name__ == "__main__":
    main()
