import pytest

from visioncare.cache.offline_cache import CacheStorage, OfflineCache


@pytest.mark.asyncio
async def test_install_caches_every_asset():
    cache = OfflineCache("site-v2", assets=["styles.css", "app.js"])

    async def loader(asset):
        return f"content of {asset}"

    assert await cache.install(loader) == 2
    assert cache.match("app.js") == "content of app.js"


def test_activate_deletes_other_cache_names():
    storage = CacheStorage()
    storage.open("site-v1")["styles.css"] = "old"
    cache = OfflineCache("site-v2", storage=storage)
    cache.put("styles.css", "new")

    assert cache.activate() == ["site-v1"]
    assert storage.keys() == ["site-v2"]
    assert cache.match("styles.css") == "new"


@pytest.mark.asyncio
async def test_network_first_prefers_network_and_stores_response():
    cache = OfflineCache("site-v2")
    cache.put("sheet", "stale")

    async def fetch():
        return "fresh"

    assert await cache.network_first("sheet", fetch) == "fresh"
    assert cache.match("sheet") == "fresh"


@pytest.mark.asyncio
async def test_network_first_falls_back_only_for_listed_errors():
    cache = OfflineCache("site-v2")
    cache.put("sheet", "stale")

    async def offline():
        raise ConnectionError("offline")

    async def broken():
        raise KeyError("bad")

    assert await cache.network_first("sheet", offline, fallback_on=(ConnectionError,)) == "stale"
    with pytest.raises(KeyError):
        await cache.network_first("sheet", broken, fallback_on=(ConnectionError,))


@pytest.mark.asyncio
async def test_network_first_reraises_when_nothing_cached():
    cache = OfflineCache("site-v2")

    async def offline():
        raise ConnectionError("offline")

    with pytest.raises(ConnectionError):
        await cache.network_first("sheet", offline)


@pytest.mark.asyncio
async def test_cache_first_fetches_once():
    cache = OfflineCache("site-v2")
    calls = []

    async def fetch():
        calls.append(1)
        return b"body"

    assert await cache.cache_first("app.js", fetch) == b"body"
    assert await cache.cache_first("app.js", fetch) == b"body"
    assert len(calls) == 1
