"""
Halal keyword lists — single source of truth for both halal policies.
Matching is plain lower-case substring search, so short entries like "bar"
also hit unrelated words ("Bar Ber Shop"). Keep that in mind before adding
anything shorter than a full word.
"""

# ── Inclusion policy (classifying freshly scraped places) ───────────────────

EXPLICIT_HALAL = ["halal", "حلال", "muslim", "islamic"]

MALAY_CUISINE = [
    "nasi", "mee", "mi ", "mie", "laksa", "satay", "sate", "rendang",
    "lemak", "goreng", "ayam", "ikan", "sambal", "roti canai", "canai",
    "mamak", "kampung", "warung", "gerai", "kedai makan",
    "tomyam", "tom yam", "nasi kandar", "kandar", "briyani", "bryani",
    "biryani", "murtabak", "martabak", "rojak", "cendol", "teh tarik",
    "air bandung", "sirap", "kari", "curry puff", "karipap",
    "sup", "soto", "bakso", "lontong", "ketupat", "kuih", "pisang goreng",
    "keropok", "kerepek", "ais kacang", "abc", "cakoi", "popiah",
    "apam", "roti john", "ramly", "burger ramly",
]

MALAY_NAME_PATTERNS = [
    "restoran", "kedai", "warung", "gerai", "dapur", "selera",
    "cik", "mak", "pak", "abang", "kakak", "haji", "hajjah",
    "ustaz", "ustazah", "syed", "syarifah", "tengku", "wan",
    "ahmad", "ali", "muhammad", "mohd", "mohamed", "fatimah",
    "aminah", "zainab", "khadijah", "aisyah", "nur ", "noor",
    "abdul", "abu", "bin ", "binti", "kampung", "kg ",
]

INDONESIAN_HALAL = [
    "padang", "minang", "jawa", "javanese", "aceh", "acehnese",
    "masakan melayu", "masakan kampung", "makanan melayu",
]

MIDDLE_EASTERN_SOUTH_ASIAN = [
    "arab", "arabian", "lebanese", "turkish", "turkish kebab",
    "kebab", "shawarma", "falafel", "hummus", "pakistani",
    "indian muslim", "mogul", "moghul", "mughal", "biryani house",
    "tandoori", "naan", "chapati", "yemeni", "egyptian",
    "persian", "afghan", "bangladeshi",
]

INCLUSION_ALLOW = (
    EXPLICIT_HALAL
    + MALAY_CUISINE
    + MALAY_NAME_PATTERNS
    + INDONESIAN_HALAL
    + MIDDLE_EASTERN_SOUTH_ASIAN
)

INCLUSION_DENY = [
    "pork", "babi", "bacon", "ham", "lard", "beer", "wine",
    "bar", "pub", "brewery", "cocktail", "sake", "soju",
    "chinese", "bak kut teh", "char siu", "roast pork",
    "non-halal", "non halal", "非清真",
]

# ── Exclusion policy (filtering search results) ──────────────────────────────

PORK_TERMS = [
    "pork", "babi", "bacon", "lard", "char siu", "char siew", "siew yoke",
    "siu yuk", "bak kut teh", "lap cheong", "chorizo", "prosciutto",
    "pepperoni", "salami",
]

ALCOHOL_TERMS = [
    "beer", "wine", "bar", "pub", "brewery", "cocktail", "sake", "soju",
    "whisky", "tavern", "liquor",
]

EXPLICIT_NON_HALAL = ["non-halal", "non halal", "not halal", "非清真"]

NON_HALAL_CUISINES = [
    "chinese", "dim sum", "cantonese", "hokkien", "teochew", "hakka",
    "yong tau foo", "japanese", "izakaya", "yakitori", "korean bbq",
]

EXCLUSION_DENY = PORK_TERMS + ALCOHOL_TERMS + EXPLICIT_NON_HALAL + NON_HALAL_CUISINES

# CJK Unified Ideographs, Hiragana, Katakana
NON_HALAL_SCRIPT_RANGES = [
    ("\u4e00", "\u9fff"),
    ("\u3040", "\u309f"),
    ("\u30a0", "\u30ff"),
]
