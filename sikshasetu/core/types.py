from enum import Enum


class PageType(str, Enum):
    # EXACTLY 4 pages, feed is the default
    feed = "feed"
    profile = "profile"
    privacy = "privacy"
    verification = "verification"
