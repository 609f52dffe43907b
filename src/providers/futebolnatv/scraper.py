from __future__ import annotations

import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from core.config import get_settings
from core.dates import today_dia
from core.logging import get_logger
from core.models import BroadcastSourceMatch
from providers.base import BroadcastSource
from providers.exceptions import ScraperError

log = get_logger(__name__)

_DT_TIME_RE = re.compile(r"(\d{2}):(\d{2})")      # data-dt="2025-11-19 14:45:00-03:00"
_TEXT_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})")
_WS_RE = re.compile(r"\s+")

GAMECARD_SELECTOR = ".gamecard"
COMPETITION_SELECTOR = ".all-scores-widget-competition-header-container-hora .col-sm-8"


def _clean(text: str) -> str:
    return _WS_RE.sub(" ", text or "").strip()


def _extract_hora(card: Tag) -> Optional[str]:
    box = card.select_one(".box_time")
    if box is None:
        return None
    data_dt = box.get("data-dt")
    if data_dt:
        m = _DT_TIME_RE.search(data_dt)
        if m:
            return f"{m.group(1)}h{m.group(2)}"
    m = _TEXT_TIME_RE.search(box.get_text())
    if m:
        return f"{m.group(1)}h{m.group(2)}"
    return None


def _extract_campeonato(card: Tag) -> str:
    header = card.select_one(COMPETITION_SELECTOR)
    if header is None:
        return ""
    bold = header.find("b")
    if bold is not None:
        return _clean(bold.get_text())
    # "Copa X - League Stage - 4" -> "Copa X"
    return _clean(header.get_text()).split(" - ")[0].strip()


def _extract_times(card: Tag) -> List[str]:
    names = [_clean(span.get_text()) for span in card.select(".p-3.win span")]
    return [n for n in names if n]


def _extract_canais(card: Tag) -> List[str]:
    canais: List[str] = []
    for el in card.select(".bcmact"):
        span = el.find("span")
        text = _clean(span.get_text()) if span is not None else ""
        if not text:
            text = _clean(el.get_text())
        if text and text not in canais:
            canais.append(text)
    return canais


def parse_gamecard(card: Tag) -> Optional[BroadcastSourceMatch]:
    if card.select_one("ins.adsbygoogle") is not None:
        return None
    hora = _extract_hora(card)
    if not hora:
        return None
    times = _extract_times(card)
    if len(times) < 2:
        return None
    # Con tre span il secondo è il separatore ("x"): la trasferta è il terzo
    home = times[0]
    away = times[2] if len(times) > 2 else times[1]
    canais = _extract_canais(card)
    if not canais:
        return None
    return BroadcastSourceMatch(
        nome_times=(home, away),
        hora=hora,
        canais=tuple(canais),
        campeonato=_extract_campeonato(card),
        fonte="futebolnatv",
    )


def parse_gamecards(html: str) -> List[BroadcastSourceMatch]:
    soup = BeautifulSoup(html, "html.parser")
    out: List[BroadcastSourceMatch] = []
    for card in soup.select(GAMECARD_SELECTOR):
        match = parse_gamecard(card)
        if match is not None:
            out.append(match)
    return out


class FutebolNaTvBroadcastSource(BroadcastSource):
    """
    La pagina è un componente Livewire: i gamecard esistono solo dopo il
    rendering JavaScript, quindi serve un browser headless.
    """

    name = "futebolnatv"

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None) -> None:
        settings = get_settings()
        self.url = url or settings.futebolnatv_url
        self._timeout_ms = int((timeout if timeout is not None else settings.scraper_timeout) * 1000)
        self._user_agent = settings.scraper_user_agent

    async def _render(self) -> str:
        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=True,
                args=["--no-sandbox", "--disable-setuid-sandbox"],
            )
            try:
                context = await browser.new_context(
                    user_agent=self._user_agent,
                    viewport={"width": 1920, "height": 1080},
                    locale="pt-BR",
                )
                page = await context.new_page()
                await page.goto(self.url, wait_until="domcontentloaded", timeout=self._timeout_ms)
                try:
                    await page.wait_for_selector(GAMECARD_SELECTOR, timeout=self._timeout_ms // 2)
                except PlaywrightTimeoutError:
                    log.info("Nessun gamecard visibile entro il timeout, proseguo con l'HTML corrente")
                return await page.content()
            finally:
                await browser.close()

    async def fetch_matches(self, dia: str) -> List[BroadcastSourceMatch]:
        # La pagina elenca solo i giochi di oggi
        if dia != today_dia():
            log.info("Futebol na TV copre solo la data odierna, pool vuoto per %s", dia, extra={"dia": dia})
            return []
        try:
            html = await self._render()
        except PlaywrightError as e:
            raise ScraperError(f"Errore nel rendering di Futebol na TV: {e}") from e
        matches = parse_gamecards(html)
        log.info("Futebol na TV: %s partite con trasmissione per %s", len(matches), dia)
        return matches


__all__ = ["FutebolNaTvBroadcastSource", "parse_gamecard", "parse_gamecards"]
