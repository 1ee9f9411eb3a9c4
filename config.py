import os
from dotenv import load_dotenv
load_dotenv()


def _float(name, default):
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return float(raw.replace(",", "."))


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///fitscore.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # mail: "console" only logs the message, "sendgrid" delivers it
    MAIL_BACKEND = os.getenv("MAIL_BACKEND", "console")
    SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
    MAIL_FROM = os.getenv("MAIL_FROM", "noreply@example.com")
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "LEGAL FitScore")
    COMPANY_NAME = os.getenv("COMPANY_NAME", "LEGAL")
    ADMIN_REPORT_EMAIL = os.getenv("ADMIN_REPORT_EMAIL", "admin@legal.com")

    APPROVED_REPORT_WINDOW_HOURS = int(os.getenv("APPROVED_REPORT_WINDOW_HOURS", "12"))
    APPROVED_REPORT_MIN_SCORE = int(os.getenv("APPROVED_REPORT_MIN_SCORE", "80"))

    # simulated processing time of the background jobs, in seconds
    ASYNC_EVALUATION_DELAY_SEC = _float("ASYNC_EVALUATION_DELAY_SEC", 2.0)
    SCHEDULED_REPORT_DELAY_SEC = _float("SCHEDULED_REPORT_DELAY_SEC", 3.0)
    REALTIME_ANALYTICS_DELAY_SEC = _float("REALTIME_ANALYTICS_DELAY_SEC", 1.5)
    BATCH_ANALYTICS_DELAY_SEC = _float("BATCH_ANALYTICS_DELAY_SEC", 5.0)

    EVALUATIONS_PER_PAGE = int(os.getenv("EVALUATIONS_PER_PAGE", "20"))
