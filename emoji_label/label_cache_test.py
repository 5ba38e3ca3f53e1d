from emoji_label import label_cache
from emoji_label.label_cache import FrameMemory, LabelState, SegmentCache, label_key
from emoji_label.segmentation import PictogramSegment, TextSegment
from emoji_label.text_processing import StyledRun


def test_load_on_miss_computes_without_storing():
    cache = SegmentCache()
    run = StyledRun("Hello😤world")
    key = label_key(run)

    state = cache.load(key, run)

    assert not state.is_saved
    assert state.segments[1] == PictogramSegment("😤")
    assert key not in cache.memory


def test_fetch_saves_fresh_state_once():
    cache = SegmentCache()
    run = StyledRun("hi 🐦")

    first = cache.fetch(run)
    second = cache.fetch(run)

    assert first.is_saved
    assert second is first
    assert len(cache.memory) == 1


def test_fetch_segments_each_text_once(monkeypatch):
    calls = []
    original = label_cache.segment_text

    def counting(run):
        calls.append(run.text)
        return original(run)

    monkeypatch.setattr(label_cache, "segment_text", counting)
    cache = SegmentCache()
    for _ in range(5):
        cache.fetch(StyledRun("redraw ⭐"))

    assert calls == ["redraw ⭐"]


def test_same_text_hits_same_entry_across_unrelated_activity():
    cache = SegmentCache()
    first = cache.fetch(StyledRun("same ✨"))
    cache.fetch(StyledRun("other"))
    cache.fetch(StyledRun("another 🐦"))
    again = cache.load(label_key(StyledRun("same ✨", strong=True)), StyledRun("same ✨"))

    assert again.segments == first.segments
    assert again.is_saved


def test_store_persists_explicit_state():
    cache = SegmentCache()
    state = LabelState([TextSegment(StyledRun("x"))], is_saved=True)
    cache.store("k", state)
    assert cache.load("k", StyledRun("ignored")) is state


def test_label_key_depends_only_on_text():
    assert label_key(StyledRun("a", color="red")) == label_key(StyledRun("a"))
    assert label_key(StyledRun("a")) != label_key(StyledRun("b"))


def test_frame_memory_drops_untouched_keys_when_collecting():
    memory = FrameMemory(gc_unused=True)
    cache = SegmentCache(memory)

    memory.begin_frame()
    cache.fetch(StyledRun("kept"))
    cache.fetch(StyledRun("dropped"))
    memory.end_frame()

    memory.begin_frame()
    cache.fetch(StyledRun("kept"))
    assert memory.end_frame() == 1

    assert label_key(StyledRun("kept")) in memory
    assert label_key(StyledRun("dropped")) not in memory


def test_cache_miss_after_eviction_recomputes():
    memory = FrameMemory(gc_unused=True)
    cache = SegmentCache(memory)
    memory.begin_frame()
    before = cache.fetch(StyledRun("again 🐦"))
    memory.end_frame()
    memory.begin_frame()
    memory.end_frame()

    after = cache.fetch(StyledRun("again 🐦"))
    assert after is not before
    assert after.segments == before.segments


def test_frame_memory_without_gc_keeps_everything():
    memory = FrameMemory()
    memory.set("a", 1)
    memory.begin_frame()
    assert memory.end_frame() == 0
    assert memory.get("a") == 1
