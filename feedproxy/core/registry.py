"""
Extractor Registry
=================

Immutable mapping from feed identifier to the binding that serves it. The
registry is built once at startup and injected into the pipeline.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import ClassVar, Iterator, Mapping, Tuple, Union

from ..extractors import (
    CommitstripFeed,
    ComicDetailExtractor,
    DirectTextExtractor,
    GeneratorExtractor,
    LittleBobbyGenerator,
    ModifyExtractor,
    NichtlustigGenerator,
    RawFeedExtractor,
    RutheGenerator,
    WebtoonsExtractor,
)
from ..utils.exceptions import UnknownFeedError


@dataclass(frozen=True)
class ModifyBinding:
    """Upstream feed whose items are each rewritten by ``extractor``."""
    feed_url: str
    extractor: ModifyExtractor
    kind: ClassVar[str] = "modify"

    @property
    def source(self) -> str:
        return self.feed_url


@dataclass(frozen=True)
class FilterBinding:
    """Upstream feed whose items are kept or dropped by link path.

    With ``include`` the whitelist is an allow-list, otherwise a block-list.
    """
    feed_url: str
    include: bool
    whitelist: Tuple[str, ...]
    kind: ClassVar[str] = "filter"

    @property
    def source(self) -> str:
        return self.feed_url


@dataclass(frozen=True)
class GeneratorBinding:
    """Feed synthesized entirely by ``generator``."""
    generator: GeneratorExtractor
    kind: ClassVar[str] = "generator"

    @property
    def source(self) -> str:
        return self.generator.source_url


@dataclass(frozen=True)
class RawFeedBinding:
    """Upstream text served without passing through the item model."""
    generator: RawFeedExtractor
    kind: ClassVar[str] = "raw"

    @property
    def source(self) -> str:
        return self.generator.source_url


ExtractorBinding = Union[ModifyBinding, FilterBinding, GeneratorBinding, RawFeedBinding]


class ExtractorRegistry:
    """Read-only feed identifier lookup."""

    def __init__(self, bindings: Mapping[str, ExtractorBinding]):
        self._bindings = MappingProxyType(dict(bindings))

    def get(self, feed_id: str) -> ExtractorBinding:
        """Exact, case-sensitive lookup.

        Raises:
            UnknownFeedError: If ``feed_id`` is not registered
        """
        try:
            return self._bindings[feed_id]
        except KeyError:
            raise UnknownFeedError(feed_id) from None

    def __contains__(self, feed_id: object) -> bool:
        return feed_id in self._bindings

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def feed_ids(self) -> Tuple[str, ...]:
        return tuple(self._bindings)

    @property
    def bindings(self) -> Mapping[str, ExtractorBinding]:
        return self._bindings


def default_bindings() -> dict:
    """The feeds served by a stock FeedProxy instance."""
    webtoons = WebtoonsExtractor()
    return {
        "dilbert": ModifyBinding("http://dilbert.com/feed", ComicDetailExtractor()),
        "gamercat": ModifyBinding("http://www.thegamercat.com/feed/", DirectTextExtractor()),
        "dinosandcomics": ModifyBinding(
            "https://www.webtoons.com/en/challenge/dinos-and-comics/rss?title_no=657052",
            webtoons,
        ),
        "tortoiseanddino": ModifyBinding(
            "https://www.webtoons.com/en/challenge/tortoise-and-dino/rss?title_no=656753",
            webtoons,
        ),
        "ruthe": GeneratorBinding(RutheGenerator()),
        "commitstrip": RawFeedBinding(CommitstripFeed()),
        "nichtlustig": GeneratorBinding(NichtlustigGenerator()),
        "littlebobby": GeneratorBinding(LittleBobbyGenerator()),
        "heiseonline": FilterBinding(
            "https://www.heise.de/rss/heise-atom.xml",
            include=False,
            whitelist=("security", "developer", "select/ix"),
        ),
        "heisesecurity": FilterBinding(
            "https://www.heise.de/security/rss/news-atom.xml",
            include=True,
            whitelist=("security",),
        ),
        "heisedeveloper": FilterBinding(
            "https://www.heise.de/developer/rss/news-atom.xml",
            include=True,
            whitelist=("developer",),
        ),
        "heiseix": FilterBinding(
            "https://www.heise.de/ix/rss/news-atom.xml",
            include=True,
            whitelist=("select/ix",),
        ),
    }


def build_registry() -> ExtractorRegistry:
    """Build the process-wide registry."""
    return ExtractorRegistry(default_bindings())
