from __future__ import annotations

import re
from typing import Any, Callable, Iterable, List, Pattern, Tuple

# Sigle dei 27 stati brasiliani (feed regionali Globo)
BR_STATES = {
    "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO", "MA", "MT", "MS", "MG", "PA",
    "PB", "PR", "PE", "PI", "RJ", "RN", "RS", "RO", "RR", "SC", "SP", "SE", "TO",
}

REGIONAL_BRAND = "Globo"
_REGIONAL_BRAND_RE = re.compile(r"\bglobo\b", re.IGNORECASE)
_REGION_CODE_RE = re.compile(r"\b([A-Za-z]{2})\b")
_WORD_RE = re.compile(r"[^\W\d_]+")

PAY_TV_BRAND = "Premiere"
_NUMBERED_FEED_RE = re.compile(rf"^{PAY_TV_BRAND}\s+\d+$")

_PPV_RE = re.compile(r"nosso\s*futebol", re.IGNORECASE)


def _literal(canonical: str) -> Callable[[re.Match], str]:
    return lambda m: canonical


def _numbered(brand: str) -> Callable[[re.Match], str]:
    def build(m: re.Match) -> str:
        feed = m.group(1)
        return f"{brand} {feed}" if feed else brand

    return build


# Ordine significativo: vince la prima regola che combacia
REWRITE_RULES: List[Tuple[Pattern[str], Callable[[re.Match], str]]] = [
    (re.compile(r"^premiere\s+fc$", re.IGNORECASE), _literal("Premiere")),
    (re.compile(r"^premiere(?:\s*(\d+))?$", re.IGNORECASE), _numbered("Premiere")),
    (re.compile(r"^(?:tv\s+)?globo$", re.IGNORECASE), _literal("Globo")),
    (re.compile(r"^disney\+\s*premium$", re.IGNORECASE), _literal("Disney+")),
    (re.compile(r"^sportv(?:\s*(\d+))?$", re.IGNORECASE), _numbered("SporTV")),
    (re.compile(r"^caz[eé]\s*tv$", re.IGNORECASE), _literal("CazéTV")),
]


def _clean(entry: str) -> str:
    return re.sub(r"\s+", " ", entry).strip()


def _expand_regional(entry: str) -> List[str]:
    """'GLOBO SP, MS, BA' -> ['Globo SP', 'Globo MS', 'Globo BA'] (vuota se non applicabile)."""
    brand = _REGIONAL_BRAND_RE.search(entry)
    if not brand:
        return []
    rest = entry[: brand.start()] + " " + entry[brand.end():]
    words = _WORD_RE.findall(rest)
    # Sigle minuscole valgono solo se il resto è fatto di sole sigle ("Globo sp, rj")
    only_codes = bool(words) and all(w.upper() in BR_STATES for w in words)
    regions: List[str] = []
    for token in _REGION_CODE_RE.findall(rest):
        if not (only_codes or token.isupper()):
            continue
        code = token.upper()
        if code in BR_STATES and code not in regions:
            regions.append(code)
    return [f"{REGIONAL_BRAND} {code}" for code in regions]


def _rewrite(entry: str) -> str:
    for pattern, build in REWRITE_RULES:
        m = pattern.match(entry)
        if m:
            return build(m)
    ppv = _PPV_RE.search(entry)
    if ppv:
        # Il qualificatore dopo il marchio resta invariato
        return "Nosso Futebol" + entry[ppv.end():]
    return entry


def normalize_channel(entry: Any) -> List[str]:
    """Canonicalizza un singolo nome di canale grezzo in zero o più nomi canonici."""
    if not isinstance(entry, str):
        return []
    cleaned = _clean(entry)
    if not cleaned:
        return []
    regional = _expand_regional(cleaned)
    if regional:
        return regional
    return [_rewrite(cleaned)]


def normalize_channels(raw: Iterable[Any]) -> List[str]:
    """
    Normalizza una lista di canali grezzi.

    Deduplica per uguaglianza esatta mantenendo l'ordine di prima apparizione.
    Voci vuote o non stringa vengono ignorate.
    """
    out: List[str] = []
    for entry in raw or ():
        for name in normalize_channel(entry):
            if name not in out:
                out.append(name)
    return out


def apply_channel_precedence(channels: Iterable[str]) -> List[str]:
    """
    Se è noto almeno un feed numerato ('Premiere 3') il feed generico
    'Premiere' è ridondante e viene rimosso. Gli altri canali restano invariati.
    """
    items = list(channels)
    if not any(_NUMBERED_FEED_RE.match(c) for c in items):
        return items
    return [c for c in items if c != PAY_TV_BRAND]


__all__ = [
    "BR_STATES",
    "REWRITE_RULES",
    "normalize_channel",
    "normalize_channels",
    "apply_channel_precedence",
]
