import pytest

from message_extractor.transform import extract_messages


@pytest.fixture
def extract():
    """Messages found in a snippet of JSX source."""
    def run(code, path="src/app.jsx"):
        return extract_messages(path, code)
    return run


@pytest.fixture
def extract_one(extract):
    def run(code, path="src/app.jsx"):
        result = extract(code, path)
        assert len(result.messages) == 1, result
        return result.messages[0]
    return run
