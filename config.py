"""
Global configuration constants for the Site Analyzer.
All tunable thresholds, client profiles and rule tables live here.
"""

# ── Fetch defaults ────────────────────────────────────────────────────────────
REQUEST_TIMEOUT = 30            # seconds
MAX_REDIRECTS = 10
FETCH_WORKERS = 4               # concurrent page downloads
FETCH_CHUNK_SIZE = 8192         # bytes per body read

DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
DEFAULT_ACCEPT_ENCODING = "gzip, deflate, br"

# Identity profiles: name → User-Agent
IDENTITY_PROFILES = {
    "audit-desktop": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) SiteAnalyzer/1.0 Desktop",
    "audit-mobile": "Mozilla/5.0 (iPhone; CPU iPhone OS 15_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) SiteAnalyzer/1.0 Mobile",
    "chrome-windows": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "chrome-android": "Mozilla/5.0 (Linux; Android 13; SM-G991B) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36",
    "safari-macos": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15",
    "edge-windows": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.0.0",
    "googlebot": "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)",
    "googlebot-mobile": "Mozilla/5.0 (Linux; Android 6.0.1; Nexus 5X Build/MMB29P) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)",
    "bingbot": "Mozilla/5.0 (compatible; bingbot/2.0; +http://www.bing.com/bingbot.htm)",
    "mediapartners": "Mediapartners-Google",
}
DEFAULT_IDENTITY_PROFILE = "audit-desktop"

# Locale profiles: name → extra request headers
LOCALE_PROFILES = {
    "france-paris": {
        "Accept-Language": "fr-FR,fr;q=0.9,en;q=0.8",
        "X-Forwarded-For": "185.24.184.1",
    },
    "france-nice": {
        "Accept-Language": "fr-FR,fr;q=0.9,en;q=0.8",
        "X-Forwarded-For": "89.158.128.1",
    },
    "usa-washington": {
        "Accept-Language": "en-US,en;q=0.9",
        "X-Forwarded-For": "23.239.5.1",
    },
}
DEFAULT_LOCALE_PROFILE = "france-paris"

LOCALE_LABELS = {
    "france-paris": "France (Paris)",
    "france-nice": "France (Nice)",
    "usa-washington": "USA (Washington D.C.)",
}

# ── Languages ─────────────────────────────────────────────────────────────────
LANGUAGES = {
    "auto": "Automatic detection",
    "fr": "French",
    "en": "English",
    "es": "Spanish",
    "it": "Italian",
    "pt": "Portuguese",
    "de": "German",
    "nl": "Dutch",
}

# Stop words used by the fallback language vote
LANGUAGE_STOP_WORDS = {
    "fr": ["le", "la", "les", "de", "et", "à", "un", "une", "du", "des"],
    "en": ["the", "and", "to", "of", "a", "in", "is", "it", "you", "that"],
    "es": ["el", "la", "de", "que", "y", "a", "en", "un", "es", "se"],
}
DEFAULT_LANGUAGE = "en"

# ── Envelope limits ───────────────────────────────────────────────────────────
MAX_INTERNAL_LINKS_LISTED = 50
MAX_EXTERNAL_LINKS_LISTED = 20

# Technology detection: CSS selector → label
TECHNOLOGY_RULES = [
    ('script[src*="jquery"]', "jQuery"),
    ('script[src*="bootstrap"], link[href*="bootstrap"]', "Bootstrap"),
    ('script[src*="react"]', "React"),
    ('script[src*="vue"]', "Vue.js"),
    ('script[src*="angular"]', "Angular"),
]

# ── SEO thresholds ────────────────────────────────────────────────────────────
TITLE_MIN_CHARS = 30
TITLE_MAX_CHARS = 60
DESCRIPTION_MIN_CHARS = 120
DESCRIPTION_MAX_CHARS = 160

# ── Accessibility ─────────────────────────────────────────────────────────────
# Inline colour values considered low contrast on a light background
LOW_CONTRAST_COLORS = [
    "gray",
    "grey",
    "#999",
    "#999999",
    "#ccc",
    "#cccccc",
]

# Input types that never need a visible label
UNLABELED_INPUT_TYPES = {"hidden", "submit", "button", "reset", "image"}

# ── Performance thresholds ────────────────────────────────────────────────────
SLOW_RESPONSE_TIME_MS = 1000
VERY_SLOW_RESPONSE_TIME_MS = 3000
MAX_IMAGES = 50
MAX_SCRIPTS = 20
MAX_THIRD_PARTY_SCRIPTS = 10

# ── Security ──────────────────────────────────────────────────────────────────
# Expected security headers: header → what it provides
SECURITY_HEADERS = {
    "strict-transport-security": "HSTS (forces HTTPS)",
    "content-security-policy": "CSP (prevents XSS attacks)",
    "x-content-type-options": "X-Content-Type-Options (prevents MIME sniffing)",
    "x-frame-options": "X-Frame-Options (prevents clickjacking)",
    "x-xss-protection": "X-XSS-Protection (basic XSS filter)",
    "referrer-policy": "Referrer-Policy (controls referrer information)",
}
SECURITY_THIRD_PARTY_SCRIPT_LIMIT = 5
SECURITY_THIRD_PARTY_SCRIPT_MAX_PENALTY = 20

# ── Suspicious-site heuristics ────────────────────────────────────────────────
SUSPICIOUS_TLDS = [".tk", ".ml", ".ga", ".cf", ".bit", ".pw", ".top"]
SHORT_DOMAIN_LENGTH = 5
MAX_REDIRECTS_BEFORE_SUSPICIOUS = 5
SUSPICIOUS_THIRD_PARTY_SCRIPTS = 15
MIN_PARAGRAPHS = 5
SUSPICIOUS_MISSING_HEADERS = {
    "strict-transport-security": "HSTS",
    "content-security-policy": "CSP",
    "x-content-type-options": "X-Content-Type-Options",
}

# ── Level thresholds (min score, label), checked top-down ─────────────────────
LEVEL_THRESHOLDS: dict[str, list[tuple[int, str]]] = {
    "seo":           [(80, "Excellent"), (60, "Good"), (40, "Medium"), (0, "Low")],
    "accessibility": [(90, "Excellent"), (70, "Good"), (50, "Medium"), (0, "Low")],
    "performance":   [(80, "Excellent"), (60, "Good"), (40, "Medium"), (0, "Low")],
    "security":      [(90, "Excellent"), (70, "Good"), (50, "Medium"), (0, "Critical")],
}

# Suspicious levels use strict "greater than" comparisons
SUSPICIOUS_LEVELS = [(70, "Very suspicious"), (50, "Suspicious"), (25, "Caution")]
SUSPICIOUS_DEFAULT_LEVEL = "Normal"
SUSPICIOUS_FLAG_THRESHOLD = 50

# ── Result cache ──────────────────────────────────────────────────────────────
CACHE_FRESHNESS_SECONDS = 300       # 5 minutes
CACHE_MAX_AGE_SECONDS = 3600        # periodic sweep removes older entries
CACHE_SWEEP_INTERVAL_SECONDS = 3600
CACHE_MAX_ENTRIES = 200
CACHE_EVICT_COUNT = 50
