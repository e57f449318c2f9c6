"""Shared pytest fixtures."""

from __future__ import annotations

import os

import pytest

from matchlines.editor.document_model import DocumentMetadata, DocumentState, EndOfLine
from matchlines.hosts.memory import InMemoryEditorHost

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def sample_document() -> DocumentState:
    return DocumentState(
        text="foo\nbar\nfoobar\nbaz",
        metadata=DocumentMetadata(title="sample.txt"),
        eol=EndOfLine.LF,
    )


@pytest.fixture
def host(sample_document: DocumentState) -> InMemoryEditorHost:
    return InMemoryEditorHost([sample_document])
