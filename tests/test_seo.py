"""Tests for keyword, keyword link and glossary services."""

import asyncio

import pytest

from contentdesk.errors import ValidationError
from contentdesk.models import Competition, Keyword, KeyLink
from contentdesk.seo import (
    GlossaryService,
    KeyLinkService,
    KeywordService,
    filter_keywords,
    filter_links,
)
from contentdesk.seo.glossary import slugify


def test_keyword_pages_followed_until_exhausted(client, service):
    service.on("GET", "/admin/seo",
               {"keywords": [{"keyword": "bitcoin", "searchVolume": 9000,
                              "competition": "High"}], "nextPageKey": "k1"},
               {"keywords": [{"keyword": "defi", "searchVolume": "1200",
                              "competition": "very high"}]})
    found = asyncio.run(KeywordService(client).list_all())

    assert [k.text for k in found] == ["bitcoin", "defi"]
    assert found[1].search_volume == 1200
    assert found[1].competition is Competition.VERY_HIGH
    calls = service.calls("GET", "/admin/seo")
    assert "lastKey" not in calls[0].url.params
    assert calls[1].url.params["lastKey"] == "k1"


def test_approved_keywords(client, service):
    service.on("GET", "/admin/seo/approved/list", {"keywords": [{"keyword": "staking"}]})
    found = asyncio.run(KeywordService(client).list_approved())
    assert found == [Keyword(text="staking", approved=True)]


def test_filter_keywords():
    keywords = [
        Keyword("Bitcoin ETF", competition=Competition.HIGH),
        Keyword("cold wallet", competition=Competition.LOW),
    ]
    assert [k.text for k in filter_keywords(keywords, "etf")] == ["Bitcoin ETF"]
    assert [k.text for k in filter_keywords(keywords, "low")] == ["cold wallet"]
    assert filter_keywords(keywords, "  ") == keywords


def test_keylinks_list_is_public(client, service):
    service.on("GET", "/keywords/list", {"linkTerms": [
        {"keyword": "Ledger", "url": "https://ledger.com", "caseSensitive": True},
    ]})
    links = asyncio.run(KeyLinkService(client).list())
    assert links == [KeyLink("Ledger", "https://ledger.com", True)]
    assert "Authorization" not in service.calls("GET", "/keywords/list")[0].headers


def test_keylink_create(client, service):
    service.on("POST", "/admin/seo/keylink/create", None)
    link = asyncio.run(KeyLinkService(client).create(" Ledger ", "https://ledger.com"))
    assert link.keyword == "Ledger"
    assert service.bodies("POST", "/admin/seo/keylink/create") == [
        {"keyword": "Ledger", "url": "https://ledger.com", "caseSensitive": False}
    ]


def test_keylink_create_validates_url(client, service):
    with pytest.raises(ValidationError):
        asyncio.run(KeyLinkService(client).create("Ledger", "ledger.com"))
    with pytest.raises(ValidationError):
        asyncio.run(KeyLinkService(client).create("", "https://ledger.com"))
    assert service.requests == []


def test_keylink_delete(client, service):
    service.on("POST", "/admin/seo/keylink/delete", None)
    links = KeyLinkService(client)
    assert asyncio.run(links.delete([])) == 0
    assert service.requests == []
    assert asyncio.run(links.delete(["Ledger", "Trezor"])) == 2
    assert service.bodies("POST", "/admin/seo/keylink/delete") == [
        {"keywords": ["Ledger", "Trezor"]}
    ]


def test_filter_links():
    links = [KeyLink("Ledger", "https://ledger.com"), KeyLink("Kraken", "https://kraken.com")]
    assert filter_links(links, "KRAK") == [links[1]]
    assert filter_links(links, "ledger.com") == [links[0]]


def test_glossary_roundtrip(client, service):
    service.on("GET", "/admin/seo/glossary/list", {"terms": [
        {"term": "Staking", "definition": "Locking tokens."},
        {"term": "airdrop", "definition": "Free tokens."},
    ]})
    service.on("POST", "/admin/seo/glossary/create", None)
    service.on("POST", "/admin/seo/glossary/delete", None)
    glossary = GlossaryService(client)

    terms = asyncio.run(glossary.list())
    assert [t.term for t in terms] == ["airdrop", "Staking"]

    entry = asyncio.run(glossary.create("Proof of Stake", "Consensus by stake."))
    assert entry.slug == "proof-of-stake"
    asyncio.run(glossary.delete("Proof of Stake"))
    assert service.bodies("POST", "/admin/seo/glossary/delete") == [{"term": "Proof of Stake"}]


def test_glossary_create_requires_definition(client, service):
    with pytest.raises(ValidationError):
        asyncio.run(GlossaryService(client).create("HODL", ""))
    assert service.requests == []


def test_slugify():
    assert slugify("Layer-2 (L2) Rollups") == "layer-2-l2-rollups"
