"""Contoh: memakai service layer langsung (tanpa Flask).

Controllers hanya lapisan tipis; aturan bisnis ada di services.
"""

import importlib
import sys

from config import get_settings_module

from src.intern_attendance.intern_attendance.container import build_container
from src.intern_attendance.intern_attendance.core.enums import Role


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, options=vars(settings))

    month, year = int(sys.argv[1]), int(sys.argv[2])
    days = container.working_day_service.working_days(month, year)
    print(f"{len(days)} hari kerja pada {month:02d}/{year}")

    for evaluation in container.performance_service.ranking(current_role=Role.ADMIN, month=month, year=year):
        print(f"{evaluation.user_name or evaluation.user_id}: {evaluation.hasil:.2f}")


if __name__ == "__main__":
    main()
