"""
Industry and business-model inference from page title plus main-body text.

Both are ordered keyword maps: the first pattern that matches wins.
"""
import re
from typing import Optional

from .content_cleaner import clean_text, is_legal_boilerplate

INDUSTRY_MAP = [
    (re.compile(r"tax|accounting|cpa|bookkeeping|audit", re.I), "Tax & Accounting"),
    (re.compile(r"consulting|advisory|professional services", re.I), "Consulting & Professional Services"),
    (re.compile(r"legal|law firm|attorney|lawyer", re.I), "Legal Services"),
    (re.compile(r"healthcare|medical|dental|clinic|hospital", re.I), "Healthcare"),
    (re.compile(r"insurance\b", re.I), "Insurance"),
    (re.compile(r"real estate|realtor|property management", re.I), "Real Estate"),
    (re.compile(r"marketing|agency|advertising", re.I), "Marketing & Advertising"),
    (re.compile(r"software|saas|technology|it services|web development", re.I), "Technology & Software"),
    (re.compile(r"financial (?:planning|services)|wealth|investment", re.I), "Financial Services"),
    (re.compile(r"construction|contractor|remodeling", re.I), "Construction"),
    (re.compile(r"plumb|well (?:drill|water|pump)|drilling", re.I), "Plumbing & Water"),
    (re.compile(r"landscap|lawn|garden|tree service", re.I), "Landscaping & Outdoor"),
    (re.compile(r"restaurant|catering|food service", re.I), "Food & Hospitality"),
    (re.compile(r"retail|store|shop\b|e-?commerce", re.I), "Retail"),
    (re.compile(r"education|training|tutoring|school", re.I), "Education"),
    (re.compile(r"automotive|auto repair|car (?:service|dealership)", re.I), "Automotive"),
    (re.compile(r"cleaning|janitorial|maid", re.I), "Cleaning Services"),
    (re.compile(r"photography|photo (?:studio|graphy)", re.I), "Photography"),
    (re.compile(r"design\b|interior design|graphic design", re.I), "Design"),
]

BUSINESS_MODEL_MAP = [
    (re.compile(r"consulting|advisory|professional services|we help|we work with clients", re.I),
     "Professional services / Consulting"),
    (re.compile(r"subscription|monthly plan|retainer", re.I), "Subscription / Retainer"),
    (re.compile(r"product|e-?commerce|shop|buy", re.I), "Product sales / E-commerce"),
    (re.compile(r"b2b|business.?to.?business|enterprise", re.I), "B2B"),
    (re.compile(r"b2c|consumer|individuals|families", re.I), "B2C / Consumer"),
    (re.compile(r"tax|accounting|preparation|filing", re.I), "Tax & accounting services"),
]
NOT_SELLING_RE = re.compile(r"we (?:don't|do not) (?:sell|offer)", re.I)

# "We provide ...", "Our team helps ..." style self-descriptions
SELF_DESCRIPTION_RE = re.compile(
    r"\b(?:We|Our (?:company|firm|team)|Our services include)\s[^.!?]{10,180}[.!?]"
)

INDUSTRY_TEXT_LIMIT = 3000
BUSINESS_TEXT_LIMIT = 6000


def infer_industry(title: str, main_text: str) -> Optional[str]:
    combined = f"{title or ''} {main_text[:INDUSTRY_TEXT_LIMIT]}"
    for pattern, label in INDUSTRY_MAP:
        if pattern.search(combined):
            return label
    return None


def infer_business_model(main_text: str) -> Optional[str]:
    """A literal self-description sentence when one exists, else a keyword label."""
    text = main_text[:BUSINESS_TEXT_LIMIT]
    match = SELF_DESCRIPTION_RE.search(text)
    if match:
        sentence = clean_text(match.group(0))[:250]
        if len(sentence) > 30 and not is_legal_boilerplate(sentence):
            return sentence
    for pattern, label in BUSINESS_MODEL_MAP:
        if pattern.search(text):
            if label.startswith("Product") and NOT_SELLING_RE.search(text):
                continue
            return label
    return None
