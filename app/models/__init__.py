# app/models/__init__.py
from .patient import Patient
from .daily_log import DailyLog
from .weekly_log import WeeklyLog
from .share_token import ShareToken
