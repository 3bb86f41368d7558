"""
Date resolution for recurring card deadlines.

Days that do not exist in a month (a due day of 31 in April, an annual
fee on 02-29 in a common year) are clamped to the month's last day,
which is what relativedelta does with an absolute `day`.
"""

from datetime import date

from dateutil.relativedelta import relativedelta


def next_payment_date(payment_due_day: int, today: date) -> date:
    """
    Next occurrence of a day-of-month due date, on or after today.

    This month's date if it has not passed yet, otherwise next month's.
    """
    candidate = today + relativedelta(day=payment_due_day)
    if candidate >= today:
        return candidate
    return today + relativedelta(months=1, day=payment_due_day)


def parse_month_day(mm_dd: str) -> tuple[int, int]:
    month, day = mm_dd.split("-")
    return int(month), int(day)


def next_annual_fee_date(mm_dd: str, today: date) -> date:
    """Next occurrence of an MM-DD date, on or after today."""
    month, day = parse_month_day(mm_dd)
    candidate = today + relativedelta(month=month, day=day)
    if candidate >= today:
        return candidate
    return today + relativedelta(years=1, month=month, day=day)


def first_day_of_next_month(today: date) -> date:
    return today + relativedelta(months=1, day=1)


def days_until(target: date, today: date) -> int:
    """Whole calendar days from today to target (negative if past)."""
    return (target - today).days
