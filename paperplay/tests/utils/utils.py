import random
import string
from datetime import timedelta

from paperplay.utils.dates import utcnow


def random_lower_string(length: int = 32) -> str:
    return "".join(random.choices(string.ascii_lowercase, k=length))


def random_code() -> str:
    return f"test-{random_lower_string(12)}"


def random_batch_prefix() -> str:
    return "".join(random.choices(string.digits, k=9))


def random_video_url() -> str:
    return f"https://cdn.test/{random_lower_string(16)}.mp4"


def tomorrow():
    return utcnow() + timedelta(days=1)


def yesterday():
    return utcnow() - timedelta(days=1)
