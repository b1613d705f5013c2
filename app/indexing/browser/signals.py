"""
Page-signal extraction and classification for search result pages.

All coupling to a search engine's markup lives here: selectors, phrases and
the snapshot script. The classifier itself works on a plain snapshot so it
can be exercised without a browser.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote_plus

from app.indexing.types import CheckEngine


class PageSignal:
    DEFENSE = "defense"
    ZERO_RESULTS = "zero_results"
    POSITIVE = "positive"
    AMBIGUOUS = "ambiguous"


DEFAULT_CHALLENGE_PHRASES = ("unusual traffic", "not a robot", "captcha")

_ZERO_STATS = re.compile(r"About\s+0\s+results", re.IGNORECASE)
_POSITIVE_STATS = re.compile(r"About\s+[1-9]", re.IGNORECASE)


@dataclass(frozen=True)
class EngineProfile:
    """
    Markup contract for one search engine results page.
    """

    name: str
    engine: str
    search_url_template: str
    engine_domain: str
    ready_selector: str
    results_selector: str
    zero_result_regions: tuple[str, ...]
    zero_result_phrases: tuple[str, ...]
    stats_selector: str | None = None
    challenge_selector: str | None = None
    challenge_phrases: tuple[str, ...] = DEFAULT_CHALLENGE_PHRASES

    def search_url(self, site_query: str) -> str:
        return self.search_url_template.format(query=quote_plus(f"site:{site_query}"))


GOOGLE_PROFILE = EngineProfile(
    name="google",
    engine=CheckEngine.AUTOMATION_PRIMARY,
    search_url_template="https://www.google.com/search?q={query}&hl=en&gl=us&num=5",
    engine_domain="google.com",
    ready_selector="#search, #topstuff, #main, #rcnt, #captcha-form",
    results_selector="#search",
    zero_result_regions=("#topstuff", "#main", "#rcnt"),
    zero_result_phrases=(
        "did not match any documents",
        "did not match any results",
        "No results found for",
    ),
    stats_selector="#result-stats, #resultStats",
    challenge_selector="#captcha-form",
)

BING_PROFILE = EngineProfile(
    name="bing",
    engine=CheckEngine.AUTOMATION_SECONDARY,
    search_url_template="https://www.bing.com/search?q={query}",
    engine_domain="bing.com",
    ready_selector="#b_results, #b_content, #b_captcha",
    results_selector="#b_results",
    zero_result_regions=("#b_results", "#b_content"),
    zero_result_phrases=(
        "did not match any documents",
        "There are no results for",
        "We did not find any results",
    ),
    stats_selector=".sb_count",
    challenge_selector="#b_captcha",
)


_SNAPSHOT_SCRIPT = """
(cfg) => {
    const text = (el) => (el && el.innerText) || '';
    const regions = cfg.regions.map((sel) => text(document.querySelector(sel)));
    const container = document.querySelector(cfg.results);
    const links = container
        ? Array.from(container.querySelectorAll('a[href]')).map((a) => a.href || '')
        : [];
    return {
        body_text: text(document.body),
        region_texts: regions,
        stats_text: cfg.stats ? text(document.querySelector(cfg.stats)) : '',
        result_links: links,
        has_results_container: container !== null,
        has_challenge_marker: cfg.challenge ? document.querySelector(cfg.challenge) !== null : false,
    };
}
"""


@dataclass(frozen=True)
class PageSnapshot:
    """
    Plain-data view of the DOM fields the classifier reads.
    """

    body_text: str = ""
    region_texts: tuple[str, ...] = field(default_factory=tuple)
    stats_text: str = ""
    result_links: tuple[str, ...] = field(default_factory=tuple)
    has_results_container: bool = False
    has_challenge_marker: bool = False

    @classmethod
    def from_mapping(cls, raw: Any) -> "PageSnapshot":
        if not isinstance(raw, dict):
            return cls()
        return cls(
            body_text=str(raw.get("body_text") or ""),
            region_texts=tuple(str(item or "") for item in raw.get("region_texts") or ()),
            stats_text=str(raw.get("stats_text") or ""),
            result_links=tuple(str(item or "") for item in raw.get("result_links") or ()),
            has_results_container=bool(raw.get("has_results_container")),
            has_challenge_marker=bool(raw.get("has_challenge_marker")),
        )


async def capture_snapshot(page: Any, profile: EngineProfile) -> PageSnapshot:
    """
    Read the classifier inputs from a loaded results page in one round trip.
    """

    raw = await page.evaluate(
        _SNAPSHOT_SCRIPT,
        {
            "regions": list(profile.zero_result_regions),
            "results": profile.results_selector,
            "stats": profile.stats_selector,
            "challenge": profile.challenge_selector,
        },
    )
    return PageSnapshot.from_mapping(raw)


class PageSignalClassifier:
    """
    Decide defense/zero/positive/ambiguous from a page snapshot.

    Precedence: defense challenge, then explicit zero-result signals, then
    positive signals.
    """

    def classify(self, profile: EngineProfile, snapshot: PageSnapshot) -> str:
        if self.is_defense_challenge(profile, snapshot):
            return PageSignal.DEFENSE
        if self.is_zero_results(profile, snapshot):
            return PageSignal.ZERO_RESULTS
        if self.has_positive_signal(profile, snapshot):
            return PageSignal.POSITIVE
        return PageSignal.AMBIGUOUS

    @staticmethod
    def is_defense_challenge(profile: EngineProfile, snapshot: PageSnapshot) -> bool:
        if snapshot.has_challenge_marker:
            return True
        # A rendered results list is never a challenge page, whatever the snippets say.
        if snapshot.has_results_container:
            return False
        return any(phrase in snapshot.body_text for phrase in profile.challenge_phrases)

    @staticmethod
    def is_zero_results(profile: EngineProfile, snapshot: PageSnapshot) -> bool:
        texts = (*snapshot.region_texts, snapshot.body_text)
        for text in texts:
            if any(phrase in text for phrase in profile.zero_result_phrases):
                return True
        return bool(_ZERO_STATS.search(snapshot.stats_text))

    @staticmethod
    def has_positive_signal(profile: EngineProfile, snapshot: PageSnapshot) -> bool:
        if snapshot.has_results_container:
            for href in snapshot.result_links:
                if href.startswith("http") and profile.engine_domain not in href:
                    return True
        return bool(_POSITIVE_STATS.search(snapshot.stats_text))
