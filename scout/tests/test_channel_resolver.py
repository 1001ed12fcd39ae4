import pytest

from scout.services import channel_resolver

CHANNEL_ID = "UC" + "A" * 22


def test_extract_channel_id_passes_through_raw_id() -> None:
    assert channel_resolver.extract_channel_id(f"  {CHANNEL_ID} ") == CHANNEL_ID


def test_extract_channel_id_from_feed_url() -> None:
    url = f"https://www.youtube.com/feeds/videos.xml?channel_id={CHANNEL_ID}"
    assert channel_resolver.extract_channel_id(url) == CHANNEL_ID


def test_extract_channel_id_from_channel_url() -> None:
    assert channel_resolver.extract_channel_id(f"https://www.youtube.com/channel/{CHANNEL_ID}") == CHANNEL_ID


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("", "Empty"),
        ("@demo", "handles are not supported"),
        ("https://www.youtube.com/watch?v=abc", "Unsupported YouTube URL"),
        ("not-a-channel", "Unsupported channel identifier"),
    ],
)
def test_extract_channel_id_rejects_bad_input(raw: str, message: str) -> None:
    with pytest.raises(channel_resolver.ChannelResolutionError, match=message):
        channel_resolver.extract_channel_id(raw)
