"""
Branding & style: colors, fonts, logos and prose descriptions of tone and visual style.
"""
import re
from typing import List, Optional
from urllib.parse import unquote, urljoin

from ..page import Page, text_of
from .base import unique

HEX_RE = re.compile(r"#[0-9a-fA-F]{3,8}\b")
CSS_VAR_RE = re.compile(r"--[a-z-]+\s*:\s*(#[0-9a-fA-F]{3,8})\b")
FONT_DECL_RE = re.compile(r"""font-family\s*:\s*([^;}"']+)|font-family\s*=\s*["']([^"']+)["']""", re.I)
GENERIC_FONT_RE = re.compile(r"^(?:inherit|initial|unset|serif|sans-serif|monospace)$", re.I)
GOOGLE_FAMILY_RE = re.compile(r"family=([^&:]+)")
BACKGROUND_URL_RE = re.compile(r"""background(?:-image)?\s*:\s*url\s*\(\s*["']?([^"')]+)""", re.I)

LOGO_SELECTOR = 'img[src*="logo"], [class*="logo"] img, header img, nav img, .header img, .nav img'
BRAND_SECTION_SELECTOR = "[class*='brand'], [class*='style'], [class*='design'], [class*='aesthetic'], [class*='visual']"

MAX_COLORS = 10
MAX_FONTS = 8
MAX_LOGOS = 5

YEARS_RE = re.compile(
    r"(?:over|more than|nearly)\s+\d+\s+years|\d+\+?\s+years\s+of\s+(?:experience|service)"
    r"|since\s+(?:19|20)\d{2}|established\s+(?:in\s+)?(?:19|20)\d{2}",
    re.I,
)


def _style_text(tag) -> str:
    return "".join(str(child) for child in tag.contents)


def _first_family(value: str) -> str:
    return value.strip(" \"'").split(",")[0].strip(" \"'")


class BrandingExtractor:

    def extract(self, page: Page, logo: Optional[str] = None, ctas: List[str] = None,
                has_faq: bool = False, has_testimonials: bool = False) -> dict:
        logos = self.logos(page)
        if logo and logo not in logos:
            logos.insert(0, logo)
        return {
            "writing_style": self.writing_style(page, ctas or [], has_faq, has_testimonials),
            "art_style": self.art_style(page),
            "fonts": self.fonts(page),
            "colors": self.colors(page),
            "logos": logos[:MAX_LOGOS],
        }

    def colors(self, page: Page) -> List[str]:
        style_text = " ".join(_style_text(tag) for tag in page.select("style"))
        colors = HEX_RE.findall(style_text)
        for el in page.select("[style]"):
            colors.extend(HEX_RE.findall(el.get("style", "")))
        theme = page.meta("theme-color")
        if re.fullmatch(r"#[0-9a-fA-F]{3,8}", theme):
            colors.append(theme)
        colors.extend(CSS_VAR_RE.findall(style_text))
        return unique(colors, MAX_COLORS)

    def fonts(self, page: Page) -> List[str]:
        fonts = []
        for tag in page.select("style"):
            for match in FONT_DECL_RE.finditer(_style_text(tag)):
                family = _first_family(match.group(1) or match.group(2) or "")
                if family and not GENERIC_FONT_RE.match(family):
                    fonts.append(family)
        for el in page.select("[style]"):
            match = re.search(r"font-family\s*:\s*([^;]+)", el.get("style", ""), re.I)
            if match:
                fonts.append(_first_family(match.group(1)))
        for link in page.select('link[href*="fonts.googleapis.com"]'):
            for family in GOOGLE_FAMILY_RE.findall(link.get("href", "")):
                name = unquote(family).split(":")[0].replace("+", " ").strip()
                if name and len(name) < 50:
                    fonts.append(name)
        return unique(fonts, MAX_FONTS, key=lambda v: v)

    def logos(self, page: Page) -> List[str]:
        urls = [urljoin(page.url, img["src"]) for img in page.select(LOGO_SELECTOR) if img.get("src")]
        for el in page.select("[class*='logo']"):
            match = BACKGROUND_URL_RE.search(el.get("style", ""))
            if match:
                urls.append(urljoin(page.url, match.group(1).strip()))
        return unique(urls, MAX_LOGOS, key=lambda v: v)

    def writing_style(self, page: Page, ctas: List[str], has_faq: bool, has_testimonials: bool) -> Optional[str]:
        """Narrative description of tone, language, audience and structure."""
        text = page.main_text[:4500]
        if len(text) < 120:
            summary = " ".join(v for v in (page.title, page.meta("description") or page.meta("og:description")) if v)
            return f"Professional, informative tone. {summary[:350]}." if summary else None

        sentences = [s for s in re.split(r"[.!?]+", text) if len(s.split()) >= 4]
        avg_len = sum(len(s.split()) for s in sentences) / len(sentences) if sentences else 0

        parts = []
        tone = []
        if re.search(r"inform|educate|guide|explain|learn|understand", text, re.I) or (avg_len > 14 and len(text) > 500):
            tone.append("informative")
        if re.search(r"\byou\b|\byour\b|client|customer|we (?:serve|help|provide)", text, re.I):
            tone.append("customer-centric")
        if tone or re.search(r"professional|expert|quality|trust|ensure|provide|experience", text, re.I):
            parts.append(f"Professional, {', '.join(tone)}." if tone else "Professional and informative.")

        trust = []
        if re.search(r"confident|reassuring|trust|experience|expertise|values", text, re.I):
            trust.append("aiming to build trust")
        if YEARS_RE.search(text):
            trust.append("highlighting experience and longevity")
        if re.search(r"family[- ]owned|family\s+run|locally owned", text, re.I):
            trust.append("family-owned or local values")
        if trust:
            parts.append(f"The tone is confident and reassuring, {' and '.join(trust[:2])}.")

        if ctas:
            examples = " and ".join(f'"{c}"' for c in ctas[:2])
            parts.append(f"The language is clear and direct, with strong calls to action like {examples}.")
        else:
            parts.append("The language is clear and direct.")

        technical = re.search(r"technical|specialist|certified|compliance|industry|solution|implementation", text, re.I)
        accessible = re.search(r"simple|easy|understand|explain|guide|help you", text, re.I)
        if technical and accessible:
            parts.append("It balances technical or industry terms with accessible explanations.")
        audience = []
        if re.search(r"homeowner|residential|household", text, re.I):
            audience.append("homeowners")
        if re.search(r"commercial|business|contractor|enterprise|B2B", text, re.I):
            audience.append("commercial clients or businesses")
        if len(audience) == 2:
            parts.append(f"Content caters to both {' and '.join(audience)}.")
        elif audience:
            parts.append(f"Content is geared toward {audience[0]}.")

        headings = [text_of(h) for h in page.select("h1, h2, h3")]
        structure = []
        if has_faq:
            structure.append("FAQs")
        if has_testimonials:
            structure.append("testimonials")
        if re.search(r"service|offering|package|plan", text, re.I) and \
                any(re.search(r"service|offer|what we|package|plan", h, re.I) for h in headings):
            structure.append("clear service descriptions")
        if structure:
            parts.append(f"The content is well-structured with {', '.join(structure)} to educate and guide potential clients.")
        return " ".join(parts)

    def art_style(self, page: Page) -> str:
        for section in page.select(BRAND_SECTION_SELECTOR):
            if page.noise.is_inside_noise(section):
                continue
            text = text_of(section)
            if 30 < len(text) < 500:
                return text[:300]
        has_hero = bool(page.select("[class*='hero'], [class*='banner']"))
        has_cards = len(page.select("[class*='card'], [class*='grid']")) > 2
        image_count = len(page.select("img"))
        if has_hero and has_cards:
            return "Clean, modern web design with hero sections and card-based layout."
        if has_hero:
            return "Modern layout with prominent hero or banner section."
        if image_count > 10:
            return "Image-rich layout with extensive photography."
        return "Professional web presence."


branding_extractor = BrandingExtractor()
