import random
from collections import namedtuple

Quote = namedtuple("Quote", ["text", "author"])

QUOTES = [
    Quote("Time is what we want most, but what we use worst.", "William Penn"),
    Quote("The future depends on what you do today.", "Mahatma Gandhi"),
    Quote("Lost time is never found again.", "Benjamin Franklin"),
    Quote("Your time is limited, so don't waste it living someone else's life.", "Steve Jobs"),
    Quote("Time is created. Saying 'I don't have time' is like saying 'I don't want to'.", "Lao Tzu"),
    Quote("Time is finite. Focus on the present and treasure every minute.", "Time Compass"),
    Quote("An inch of time is an inch of gold, but an inch of gold cannot buy an inch of time.", "Chinese proverb"),
]


def random_quote(rng=random):
    return rng.choice(QUOTES)
