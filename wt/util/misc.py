from datetime import date, datetime, timedelta


# Formats elapsed seconds as HH:MM:SS. Negative values clamp to zero.
def format_time(seconds):
    seconds = max(0, int(seconds))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


# Formats an epoch-millisecond timestamp as a local HH:MM wall-clock string.
def format_clock(timestamp_ms):
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%H:%M")


# Rounded whole minutes between two epoch-millisecond timestamps.
def duration_minutes(start_ms, end_ms):
    return round((end_ms - start_ms) / 60000)


# Signed "+HH:MM" / "-HH:MM" rendering of a net adjustment in seconds. Zero counts as positive.
def format_signed_hm(seconds):
    sign = "+" if seconds >= 0 else "-"
    magnitude = abs(int(seconds))
    h, rem = divmod(magnitude, 3600)
    return f"{sign}{h:02d}:{rem // 60:02d}"


# Epoch milliseconds of local midnight starting the given "YYYY-MM-DD" day.
def day_start_ms(day_key):
    return int(datetime.fromisoformat(day_key).timestamp() * 1000)


def next_day(day_key):
    return (date.fromisoformat(day_key) + timedelta(days=1)).isoformat()
