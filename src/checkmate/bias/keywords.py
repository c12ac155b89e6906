"""Keyword lists for political-bias classification.

Generic lists drive the left/right fallback. The Malaysia lists drive
region detection and the government-framing fallback score. Everything is
matched lower-case on word boundaries.
"""

import re
from functools import cache

# ============================================================
# Generic left/right
# ============================================================

LEFT_KEYWORDS = (
    "social justice",
    "systemic racism",
    "climate change",
    "progressive",
    "medicare for all",
    "wealth inequality",
    "corporate greed",
    "fascist",
    "far-right",
    "extremist",
    "diversity",
    "inclusion",
    "lgbtq",
    "reproductive rights",
    "gun control",
    "minimum wage",
)

RIGHT_KEYWORDS = (
    "mainstream media",
    "fake news",
    "deep state",
    "socialist",
    "communist",
    "radical left",
    "freedom",
    "patriot",
    "constitution",
    "second amendment",
    "traditional values",
    "law and order",
    "border security",
    "america first",
    "liberal bias",
    "woke",
)

POLITICAL_TOPICS = (
    "election",
    "trump",
    "biden",
    "democrat",
    "republican",
    "politics",
    "government",
    "congress",
    "senate",
    "supreme court",
    "immigration",
    "healthcare",
    "economy",
    "foreign policy",
)

# ============================================================
# Malaysia
# ============================================================

REGION_CONTEXT = (
    "malaysia",
    "malaysian",
    "kuala lumpur",
    "putrajaya",
    "dewan rakyat",
    "parlimen",
    "rakyat",
    "ringgit",
    "sabah",
    "sarawak",
    "selangor",
    "johor",
    "kedah",
    "kelantan",
    "terengganu",
    "penang",
)

GOVERNMENT_PARTIES = (
    "pakatan harapan",
    "barisan nasional",
    "kerajaan perpaduan",
    "unity government",
    "kerajaan madani",
    "umno",
    "pkr",
    "dap",
    "amanah",
    "gps",
)

OPPOSITION_PARTIES = (
    "perikatan nasional",
    "pas",
    "bersatu",
    "pembangkang",
    "muafakat nasional",
)

GOVERNMENT_FIGURES = (
    "anwar",
    "anwar ibrahim",
    "pmx",
    "zahid",
    "ahmad zahid hamidi",
    "fahmi fadzil",
    "rafizi",
    "anthony loke",
)

OPPOSITION_FIGURES = (
    "muhyiddin",
    "hadi awang",
    "sanusi",
    "hamzah zainudin",
    "azmin",
    "takiyuddin",
)

SLANG = (
    "macai",
    "dedak",
    "cybertrooper",
    "bossku",
    "katak",
    "lompat parti",
    "ubah",
    "reformasi",
)

SARCASM_MARKERS = (
    "konon",
    "kononnya",
    "hebat sangat",
    "pandai sangat",
    "terbaik la",
    "so-called",
    "yeah right",
    "🤡",
)

RHETORICAL_MARKERS = (
    "betul tak",
    "kan?",
    "mana janji",
    "apa jadi",
    "how come",
    "isn't it",
    "who benefits",
)

CRITICISM_PHRASES = (
    "gagal",
    "failed",
    "corrupt",
    "rasuah",
    "incompetent",
    "tipu",
    "lies",
    "u-turn",
    "khianat",
    "betrayed",
    "janji palsu",
    "broken promise",
    "hipokrit",
    "hypocrite",
)

PRO_GOVERNMENT = (
    "madani",
    "kestabilan",
    "stability",
    "pelaburan",
    "investment",
    "berjaya",
    "achievement",
    "rahmah",
    "subsidi bersasar",
    "economic growth",
)

PRO_OPPOSITION = (
    "tukar kerajaan",
    "change government",
    "undi pn",
    "letak jawatan",
    "resign",
    "kos sara hidup",
    "cost of living",
    "harga naik",
    "gelombang hijau",
    "green wave",
)

# Party names that double as everyday words. They count only next to region
# context or an unambiguous party or figure.
AMBIGUOUS_PARTIES = ("dap", "gps", "pas", "amanah")

GOVERNMENT_ENTITIES = GOVERNMENT_PARTIES + GOVERNMENT_FIGURES + ("kerajaan", "government")
OPPOSITION_ENTITIES = OPPOSITION_PARTIES + OPPOSITION_FIGURES


@cache
def _pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)")


def find_keywords(text: str, keywords: tuple[str, ...]) -> list[str]:
    """Keywords that occur in already lower-cased ``text``, in list order."""
    return [k for k in keywords if _pattern(k).search(text)]
