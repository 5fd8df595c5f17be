from vitrine.cache import SalesDataCache

from conftest import make_record


def test_new_cache_is_empty_and_stale():
    cache = SalesDataCache()
    assert cache.is_empty
    assert cache.records == ()
    assert not cache.is_fresh(300)


def test_replace_swaps_whole_snapshot():
    cache = SalesDataCache()
    first = cache.replace([make_record("2024-01-01")], source="a")
    second = cache.replace([make_record("2024-01-02"), make_record("2024-01-03")], source="b")

    assert first.records != second.records
    assert len(cache.records) == 2
    assert cache.snapshot.source == "b"
    assert second.version == first.version + 1
    # Earlier snapshot objects are left untouched
    assert len(first.records) == 1


def test_replace_copies_input():
    cache = SalesDataCache()
    records = [make_record("2024-01-01")]
    cache.replace(records)
    records.append(make_record("2024-01-02"))
    assert len(cache.records) == 1


def test_invalidate_keeps_records_but_marks_stale():
    cache = SalesDataCache()
    cache.replace([make_record("2024-01-01")])
    assert cache.is_fresh(300)

    cache.invalidate()

    assert not cache.is_fresh(300)
    assert len(cache.records) == 1


def test_clear_drops_records():
    cache = SalesDataCache()
    cache.replace([make_record("2024-01-01")])
    cache.clear()
    assert cache.is_empty


def test_zero_max_age_is_never_fresh():
    cache = SalesDataCache()
    cache.replace([])
    assert not cache.is_fresh(0)
