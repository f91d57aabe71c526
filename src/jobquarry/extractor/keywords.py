"""
Keyword configuration for the relevance filter.

The lists are tuned for LinkedIn job pages in Brazilian Portuguese and English.
Other boards or languages need their own preset; nothing in the extraction
logic hard-codes a phrase.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Sequence, Tuple


def _normalize(phrases: Iterable[str]) -> FrozenSet[str]:
    return frozenset(p.strip().lower() for p in phrases if p and p.strip())


@dataclass(frozen=True)
class KeywordSets:
    """Named phrase sets consumed by the relevance filter and fallback strategies.

    Attributes:
        negative: any match rejects a text block (brand, auth prompts, legal
            boilerplate, job metadata labels)
        positive: fallback strategies that need positive confirmation require
            at least one of these
        metadata: phrases that mark a fragment or line as job metadata
        retry_markers: phrases that make an accepted result look incomplete
        boilerplate: literal substrings removed by the boilerplate-strip strategy
    """

    negative: FrozenSet[str]
    positive: FrozenSet[str]
    metadata: FrozenSet[str]
    retry_markers: FrozenSet[str]
    boilerplate: Tuple[str, ...]

    @classmethod
    def create(
        cls,
        *,
        negative: Iterable[str] = (),
        positive: Iterable[str] = (),
        metadata: Iterable[str] = (),
        retry_markers: Iterable[str] = (),
        boilerplate: Iterable[str] = (),
    ) -> KeywordSets:
        # Longest first so "Sobre a LinkedIn" goes before "LinkedIn".
        strip_list = sorted({b for b in boilerplate if b}, key=lambda b: (-len(b), b))
        return cls(
            negative=_normalize(negative),
            positive=_normalize(positive),
            metadata=_normalize(metadata),
            retry_markers=_normalize(retry_markers),
            boilerplate=tuple(strip_list),
        )

    def merge(self, other: KeywordSets) -> KeywordSets:
        return KeywordSets.create(
            negative=self.negative | other.negative,
            positive=self.positive | other.positive,
            metadata=self.metadata | other.metadata,
            retry_markers=self.retry_markers | other.retry_markers,
            boilerplate=self.boilerplate + other.boilerplate,
        )


PORTUGUESE = KeywordSets.create(
    negative=[
        "linkedin",
        "entrar",
        "cadastre-se",
        "política de privacidade",
        "cookie",
        "nível de experiência",
        "tipo de emprego",
        "função",
        "setores",
        "assistente",
        "tempo integral",
        "tecnologia da informação",
        "desenvolvimento de software",
    ],
    positive=[
        "responsabilidade",
        "requisito",
        "experiência",
        "habilidade",
        "trabalho",
        "equipe",
        "desenvolvimento",
        "projeto",
        "tecnologia",
        "atribuição",
        "desejável",
        "diferencial",
        "benefício",
        "salário",
        "remoto",
        "presencial",
    ],
    metadata=[
        "nível de experiência",
        "tipo de emprego",
        "função",
        "setores",
        "assistente",
        "tempo integral",
    ],
    retry_markers=["nível de experiência", "tipo de emprego"],
    boilerplate=["LinkedIn", "Entrar", "Cadastre-se", "Política", "Cookie", "Sobre a LinkedIn"],
)

ENGLISH = KeywordSets.create(
    negative=[
        "linkedin",
        "sign in",
        "join now",
        "register",
        "privacy policy",
        "cookie",
        "experience level",
        "seniority level",
        "employment type",
        "job function",
        "industries",
        "full-time",
    ],
    positive=[
        "responsibilities",
        "requirements",
        "qualifications",
        "experience",
        "skills",
        "team",
        "development",
        "desirable",
        "benefits",
        "salary",
        "remote",
        "on-site",
    ],
    metadata=[
        "experience level",
        "seniority level",
        "employment type",
        "job function",
        "industries",
        "full-time",
    ],
    retry_markers=["experience level", "employment type"],
    boilerplate=["LinkedIn", "Sign in", "Join now", "Register", "Privacy Policy", "Cookie Policy", "Cookie"],
)

PRESETS: Dict[str, KeywordSets] = {"pt": PORTUGUESE, "en": ENGLISH}


def keywords_for_locales(
    locales: Sequence[str],
    *,
    extra_negative: Iterable[str] = (),
    extra_positive: Iterable[str] = (),
    extra_metadata: Iterable[str] = (),
) -> KeywordSets:
    """Merge the presets for ``locales`` and any extra phrases into one KeywordSets."""
    if not locales:
        raise ValueError("at least one keyword locale is required")
    unknown = [loc for loc in locales if loc not in PRESETS]
    if unknown:
        raise ValueError(f"Unknown keyword locale(s) {unknown}. Available locales: {sorted(PRESETS)}")

    merged = PRESETS[locales[0]]
    for locale in locales[1:]:
        merged = merged.merge(PRESETS[locale])

    extra_metadata = list(extra_metadata)
    extras = KeywordSets.create(
        negative=list(extra_negative) + extra_metadata,
        positive=extra_positive,
        metadata=extra_metadata,
    )
    return merged.merge(extras)


DEFAULT_KEYWORDS = keywords_for_locales(["pt", "en"])
