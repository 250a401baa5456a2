"""
Prose recovery from framework state blobs (__NEXT_DATA__, __NUXT_DATA__).

Client-rendered sites often ship their copy as JSON for hydration. The strings that
look like prose are collected and injected back into the document as a hidden node.
"""
import html as html_lib
import json
import re
from typing import Any, List, Optional

from bs4 import BeautifulSoup

from .utils import logger

STATE_SCRIPT_IDS = ("__NEXT_DATA__", "__NUXT_DATA__")
MIN_PROSE = 40
MAX_PROSE = 8000
MAX_TOTAL = 50000
MIN_INJECT = 100
INJECTED_ID = "scout-state-text"

URL_RE = re.compile(r"^https?://", re.I)
NUMERIC_RE = re.compile(r"^[\d\s\-.,:;]+$")
SCRIPT_LIKE_RE = re.compile(r"<script|function\s*\(|=>\s*\{")


def looks_like_prose(value: str) -> bool:
    return (
        MIN_PROSE <= len(value) <= MAX_PROSE
        and not URL_RE.match(value)
        and not NUMERIC_RE.match(value)
        and not SCRIPT_LIKE_RE.search(value)
    )


def collect_prose(data: Any, out: List[str], budget: int = MAX_TOTAL) -> List[str]:
    """Depth-first walk appending prose-like strings until the character budget is spent."""
    if sum(len(s) for s in out) >= budget:
        return out
    if isinstance(data, str):
        value = data.strip()
        if looks_like_prose(value):
            out.append(value)
    elif isinstance(data, list):
        for item in data:
            collect_prose(item, out, budget)
    elif isinstance(data, dict):
        for item in data.values():
            collect_prose(item, out, budget)
    return out


def extract_state_text(html: str) -> Optional[str]:
    """Joined prose from every state blob on the page, or None when there is none."""
    if not html or not any(script_id in html for script_id in STATE_SCRIPT_IDS):
        return None
    soup = BeautifulSoup(html, "lxml")
    chunks: List[str] = []
    for script_id in STATE_SCRIPT_IDS:
        for script in soup.find_all("script", id=script_id):
            try:
                collect_prose(json.loads(script.string or ""), chunks)
            except ValueError as e:
                logger.warning(f"Malformed {script_id} state blob: {e}")
    if not chunks:
        return None
    return "\n\n".join(dict.fromkeys(chunks))[:MAX_TOTAL]


def inject_hidden_text(html: str, text: str) -> str:
    """Append the text as an escaped, display:none div just before </body>."""
    node = f'<div id="{INJECTED_ID}" style="display:none" aria-hidden="true">{html_lib.escape(text, quote=False)}</div>'
    match = re.search(r"</body>", html, re.I)
    if not match:
        return f"{html}{node}"
    return f"{html[:match.start()]}{node}\n{html[match.start():]}"


def augment_with_state_text(html: str) -> Optional[str]:
    """HTML with state-blob prose injected, or None if there is not enough prose to matter."""
    text = extract_state_text(html)
    if not text or len(text) <= MIN_INJECT:
        return None
    return inject_hidden_text(html, text)
