"""
Utility functions for text processing, price parsing, and logging.
"""
import html
import logging
import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from bs4 import BeautifulSoup

# Per-request INFO lines from the HTTP client drown out per-listing progress
NOISY_LOGGERS = ("httpx", "httpcore")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def init_logger(
    name: str = "listing_scraper",
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_file: Optional[str] = "listing_scraper.log"
) -> logging.Logger:
    """
    Attach console and optional file handlers to the package logger.

    Handlers are replaced on every call so repeated CLI runs in one process
    pick up new levels. HTTP client loggers are held at WARNING.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fmt = logging.Formatter(LOG_FORMAT)
    ch = logging.StreamHandler()
    ch.setLevel(getattr(logging, console_level.upper(), logging.INFO))
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(getattr(logging, file_level.upper(), logging.DEBUG))
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
    return logger


def now_iso() -> str:
    """UTC timestamp stamped on exported rows and run logs."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def clean_text(s: Optional[str]) -> str:
    """Decode HTML entities and collapse whitespace."""
    if not s:
        return ""
    s = html.unescape(s).replace("\xa0", " ")
    s = re.sub(r"\s+", " ", s)
    return s.strip()


NON_TEXT_TAGS = ["script", "style", "noscript", "template"]
BLOCK_TAGS = ["p", "div", "li", "tr", "table", "ul", "ol", "section", "article",
              "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "pre"]


def _soup(markup: str) -> BeautifulSoup:
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(NON_TEXT_TAGS):
        tag.decompose()
    return soup


def strip_markup(fragment: Optional[str]) -> str:
    """Reduce an HTML fragment to a single line of plain text."""
    if not fragment:
        return ""
    text = _soup(fragment).get_text(" ")
    return re.sub(r"\s+", " ", text.replace("\xa0", " ")).strip()


def markup_to_lines(document: Optional[str]) -> str:
    """Reduce an HTML document to plain text, one non-blank line per block."""
    if not document:
        return ""
    soup = _soup(document)
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(BLOCK_TAGS):
        block.append("\n")

    text = soup.get_text().replace("\xa0", " ")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = (re.sub(r"[ \t\f\v]+", " ", line).strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def parse_price(price_text: str, low: Decimal = Decimal("0"), high: Decimal = Decimal("50000")) -> Optional[str]:
    """
    Normalize a US-style price candidate such as "1,299.99".

    Thousands separators are removed. Returns None unless low < value < high.
    """
    if not price_text:
        return None
    s = price_text.replace(",", "").replace("\xa0", "").strip()
    m = re.fullmatch(r"\$?\s?(\d+(?:\.\d+)?)", s)
    if not m:
        return None
    try:
        value = Decimal(m.group(1))
    except InvalidOperation:
        return None
    if not (low < value < high):
        return None
    return m.group(1)


def truncate(text: str, limit: int) -> Tuple[str, bool]:
    """Cut text to limit characters, reporting whether anything was dropped."""
    if len(text) <= limit:
        return text, False
    return text[:limit], True
