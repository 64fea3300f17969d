"""
Configuration settings for the duplicate finder.
All score and threshold values are on a scale of 0-100.
"""

import os

from dotenv import load_dotenv

load_dotenv()

###################
# Similarity Weights
###################

# Weight of each field in the overall similarity score.
# Only fields with a nonzero score take part in the weighted mean.
EMAIL_WEIGHT: float = 2
PHONE_WEIGHT: float = 2
NAME_WEIGHT: float = 1.5
COMPANY_WEIGHT: float = 1

# Phone numbers without a country code are compared on their last digits
PHONE_SIGNIFICANT_DIGITS: int = 10

# Honorifics and generational suffixes dropped before comparing names
NAME_HONORIFICS = ("mr", "mrs", "ms", "dr", "prof", "jr", "sr", "ii", "iii", "iv")

###################
# Match Tiers
###################

# Each tier is (threshold, score reported for the pair)
SAME_NAME_COMPANY_THRESHOLD: int = 90
SAME_NAME_COMPANY_SCORE: int = 95

PHONE_SIMILAR_NAME_THRESHOLD: int = 85
PHONE_SIMILAR_NAME_SCORE: int = 92

EMAIL_DOMAIN_NAME_THRESHOLD: int = 85
EMAIL_DOMAIN_NAME_SCORE: int = 88

SIMILAR_NAME_THRESHOLD: int = 75
SIMILAR_NAME_COMPANY_THRESHOLD: int = 80
SIMILAR_NAME_COMPANY_SCORE: int = 75

VERY_SIMILAR_NAME_THRESHOLD: int = 80
LOOSE_COMPANY_THRESHOLD: int = 60
VERY_SIMILAR_NAME_COMPANY_SCORE: int = 72

# Names this short (after normalization) are treated as initials
INITIALS_MAX_LENGTH: int = 3
INITIALS_NAME_THRESHOLD: int = 60
INITIALS_COMPANY_THRESHOLD: int = 85
INITIALS_SCORE: int = 68

NAME_ONLY_THRESHOLD: int = 85
NAME_ONLY_SCORE: int = 60

EXACT_MATCH_SCORE: int = 100

###################
# Validation Limits
###################

NAME_MIN_LENGTH: int = 2
NAME_MAX_LENGTH: int = 100
EMAIL_MAX_LENGTH: int = 254
PHONE_MIN_DIGITS: int = 7
PHONE_MAX_DIGITS: int = 15
COMPANY_MAX_LENGTH: int = 150
TITLE_MAX_LENGTH: int = 100
NOTES_MAX_LENGTH: int = 5000

# Fragments that usually mean a mistyped email address
EMAIL_TYPOS = (".con", ".cm", ".om", "@gmial", "@gmai", "@yahooo")

###################
# Merging
###################

# Separator placed between the context notes of merged contacts
NOTES_SEPARATOR: str = "\n\n---\n\n"

###################
# Runtime Options
###################

OUTPUT_DIR: str = os.getenv("DUPEFINDER_OUTPUT_DIR", "output")
DISMISSED_FILE: str = os.getenv("DUPEFINDER_DISMISSED_FILE", "dismissed_pairs.json")
LOG_LEVEL: str = os.getenv("DUPEFINDER_LOG_LEVEL", "INFO")

# Default encoding for reading and writing files
DEFAULT_ENCODING: str = "utf-8"
