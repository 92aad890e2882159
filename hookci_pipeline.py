# hookci_pipeline.py
# Pipeline for this repository: unit tests on push / pull_request / exec,
# GitHub commit status once the build ends.
from __future__ import annotations

from hookci.pipeline import default_registry


def pipeline():
    return default_registry()
