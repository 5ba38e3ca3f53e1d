"""
Emoji handling utilities for emoji labels.
Provides pictogram detection and the Twemoji image asset stores.
"""

import enum
import logging
import os
import urllib.error
import urllib.request
from dataclasses import dataclass

import emoji
import grapheme

_LOGGER = logging.getLogger(__name__)

TWEMOJI_VERSION = "14.0.2"
TWEMOJI_BASE_URL = f"https://cdn.jsdelivr.net/gh/twitter/twemoji@{TWEMOJI_VERSION}/assets"
# Newest Unicode emoji version with images in the pinned Twemoji release
TWEMOJI_EMOJI_VERSION = 14

# Cache directory for emoji images
EMOJI_CACHE_DIR = None  # Will be set dynamically

_VARIATION_SELECTOR_16 = 0xFE0F


class AssetBackend(enum.Enum):
    """Image representation served by an asset store."""

    SVG = "svg"
    PNG = "png"


@dataclass(frozen=True)
class PictogramAsset:
    """Image bytes for one pictogram, ready to hand to a painter."""

    uri: str
    data: bytes
    backend: AssetBackend


def _strip_variation_selectors(s):
    """
    Return a string with U+FE0F (variation selector-16) characters removed.
    Twemoji filenames often omit the FE0F codepoint (variation selector),
    so trying the filename without it can avoid 404 errors for characters
    like '❤️' (U+2764 U+FE0F).
    """
    return "".join(ch for ch in s if ord(ch) != _VARIATION_SELECTOR_16)


def codepoint_name(sequence):
    """
    Twemoji file stem for a codepoint sequence, e.g. '😀' -> '1f600'.

    :param sequence: Pictogram codepoint sequence
    :return: Lowercase hex codepoints joined by '-'
    """
    return "-".join(f"{ord(c):x}" for c in sequence)


def _has_twemoji_image(sequence):
    data = emoji.EMOJI_DATA.get(sequence)
    return data is not None and data.get("E", 0) <= TWEMOJI_EMOJI_VERSION


def is_pictogram(grapheme_cluster):
    """
    Check whether a single grapheme cluster is a known pictogram.

    Lookups go through the ``emoji`` package's table, so this runs in
    constant time for every grapheme of a label. Emoji newer than the
    Twemoji release have no image and stay plain text.

    :param grapheme_cluster: Exactly one user-perceived character
    :return: True if the grapheme maps to an emoji image
    """
    if not grapheme_cluster:
        return False
    if _has_twemoji_image(grapheme_cluster):
        return True
    stripped = _strip_variation_selectors(grapheme_cluster)
    return bool(stripped) and stripped != grapheme_cluster and _has_twemoji_image(stripped)


def set_emoji_cache_dir(cache_dir):
    """
    Set the directory where emoji images will be cached.

    :param cache_dir: Path to cache directory
    """
    global EMOJI_CACHE_DIR
    EMOJI_CACHE_DIR = cache_dir
    if cache_dir and not os.path.exists(cache_dir):
        os.makedirs(cache_dir, exist_ok=True)


class PictogramAssetStore:
    """
    In-memory table of pictogram images for a single backend.

    ``contains`` answers the classifier question and ``lookup`` serves the
    bytes. ``lookup`` never touches the disk or the network.
    """

    def __init__(self, backend):
        if not isinstance(backend, AssetBackend):
            raise ValueError(f"Unsupported asset backend: {backend!r}")
        self.backend = backend
        self._assets = {}

    def contains(self, sequence):
        return is_pictogram(sequence)

    def register(self, sequence, data):
        """Store image bytes for a pictogram sequence."""
        asset = PictogramAsset(
            uri=f"{codepoint_name(sequence)}.{self.backend.value}",
            data=data,
            backend=self.backend,
        )
        self._assets[sequence] = asset
        return asset

    def lookup(self, sequence):
        """
        Return the loaded asset for a pictogram sequence.

        :param sequence: Pictogram codepoint sequence
        :return: PictogramAsset or None if it has not been loaded
        """
        asset = self._assets.get(sequence)
        if asset is None:
            stripped = _strip_variation_selectors(sequence)
            if stripped != sequence:
                asset = self._assets.get(stripped)
        return asset

    def __len__(self):
        return len(self._assets)


class TwemojiAssetStore(PictogramAssetStore):
    """
    Asset store filled from Twemoji images (disk cache first, then the CDN).
    """

    def __init__(self, backend=AssetBackend.PNG, cache_dir=None):
        super().__init__(backend)
        self.cache_dir = cache_dir
        # Pictograms that previously failed to download
        self._failed = set()

    def _resolve_cache_dir(self):
        cache_dir = self.cache_dir or EMOJI_CACHE_DIR or os.path.join(
            os.path.dirname(__file__), ".emoji_cache"
        )
        cache_dir = os.path.join(cache_dir, self.backend.value)
        if not os.path.exists(cache_dir):
            os.makedirs(cache_dir, exist_ok=True)
        return cache_dir

    def _asset_url(self, codepoint):
        if self.backend is AssetBackend.PNG:
            return f"{TWEMOJI_BASE_URL}/72x72/{codepoint}.png"
        return f"{TWEMOJI_BASE_URL}/svg/{codepoint}.svg"

    def fetch(self, sequence):
        """
        Load the image for a pictogram into memory, downloading it if necessary.

        :param sequence: Pictogram codepoint sequence
        :return: PictogramAsset or None if it could not be loaded
        """
        asset = self.lookup(sequence)
        if asset is not None:
            return asset

        # Avoid retrying downloads for pictograms we've already seen fail
        if sequence in self._failed:
            return None

        cache_dir = self._resolve_cache_dir()

        # The first candidate is the original sequence; the second drops FE0F,
        # which Twemoji filenames commonly omit (e.g. U+2764 U+FE0F -> 2764).
        candidates = [sequence]
        stripped = _strip_variation_selectors(sequence)
        if stripped and stripped != sequence:
            candidates.append(stripped)

        last_error = None
        for candidate in candidates:
            codepoint = codepoint_name(candidate)
            cache_path = os.path.join(cache_dir, f"{codepoint}.{self.backend.value}")

            if not os.path.exists(cache_path):
                url = self._asset_url(codepoint)
                try:
                    urllib.request.urlretrieve(url, cache_path)
                except urllib.error.HTTPError as e:
                    last_error = e
                    if e.code == 404:
                        _LOGGER.debug(
                            "Twemoji 404 for %s (candidate %s), trying next candidate",
                            sequence,
                            codepoint,
                        )
                        continue
                    _LOGGER.warning("HTTP error while downloading emoji %s: %s", sequence, e)
                    break
                except (urllib.error.URLError, OSError) as e:
                    # Network or permission errors - stop trying further candidates
                    last_error = e
                    break

            with open(cache_path, "rb") as f:
                return self.register(sequence, f.read())

        self._failed.add(sequence)
        _LOGGER.warning(
            "Could not load emoji image for %s: %s",
            sequence,
            last_error if last_error is not None else "unknown error",
        )
        return None

    def precache(self, text):
        """
        Pre-load all pictogram images found in text before it is laid out.

        :param text: Text to scan for pictograms
        :return: Number of pictograms available afterwards
        """
        loaded = 0
        for cluster in grapheme.graphemes(text):
            if self.contains(cluster) and self.fetch(cluster) is not None:
                loaded += 1
        return loaded


def create_asset_store(backend=AssetBackend.SVG, cache_dir=None):
    """
    Build the Twemoji store for exactly one backend.

    :param backend: AssetBackend member or its name ('svg' / 'png')
    :param cache_dir: Optional directory for downloaded images
    :return: TwemojiAssetStore
    """
    if isinstance(backend, (set, frozenset, list, tuple)):
        raise ValueError(
            "Asset backends 'svg' and 'png' are mutually exclusive; select exactly one"
        )
    if isinstance(backend, str):
        try:
            backend = AssetBackend(backend.lower())
        except ValueError:
            raise ValueError(f"Unsupported asset backend: {backend!r}") from None
    return TwemojiAssetStore(backend, cache_dir=cache_dir)
