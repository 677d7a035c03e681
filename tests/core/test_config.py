from __future__ import annotations

import logging

from pdfcollate.core.config import DEFAULT_OUTPUT_NAME, MergeSettings
from pdfcollate.core.utils import configure_logging, version_tuple


def test_default_settings() -> None:
    settings = MergeSettings()
    assert settings.output_name == DEFAULT_OUTPUT_NAME == "merged.pdf"
    assert settings.bookmark_prefix == "Page_"
    assert settings.bookmark_color == (0.0, 0.0, 1.0)
    assert settings.min_version == "1.5"
    assert settings.annotate is False


def test_from_mapping_ignores_unknown_and_none_values() -> None:
    settings = MergeSettings.from_mapping(
        {"annotate": True, "compress": None, "inputs": ["a.pdf"], "bookmark_color": [1, 0, 0]}
    )
    assert settings.annotate is True
    assert settings.compress is True
    assert settings.bookmark_color == (1.0, 0.0, 0.0)
    assert MergeSettings.from_mapping(None) == MergeSettings()


def test_version_tuple_orders_versions() -> None:
    assert version_tuple("1.7") > version_tuple("1.5")
    assert version_tuple("2.0") > version_tuple("1.7")
    assert version_tuple("1.x") == (1, 0)


def test_configure_logging_sets_level() -> None:
    logger = configure_logging(debug=True)
    assert logger.name == "pdfcollate"
    assert logger.level == logging.DEBUG
    configure_logging(debug=False)
    assert logger.level == logging.WARNING
